"""Text output for forecast review.

This module creates a plain-text report showing:
- Per-team backlog summary (effort, months left, completion date)
- Per-item start and end dates in scheduling order
- Items that could not be scheduled or assigned
"""

from pathlib import Path
from typing import Union

from capacityplanner.domain.calendar_month import CalendarMonth
from capacityplanner.domain.capacity import capacity_for
from capacityplanner.domain.models import PlanningForecast, TeamForecast
from capacityplanner.output.formatting import format_date, format_months


class ForecastReportGenerator:
    """Generates text reports for planning forecasts.

    Args:
        capacity_months: Number of months of capacity to list per team,
            starting with the planning start month.
    """

    def __init__(self, capacity_months: int = 6):
        self.capacity_months = capacity_months

    def generate(
        self,
        forecast: PlanningForecast,
        output_path: Union[str, Path],
    ) -> str:
        """Generate the report and save it to a file.

        Returns:
            The generated text content.
        """
        content = self.generate_to_string(forecast)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(self, forecast: PlanningForecast) -> str:
        lines = []

        lines.append("=" * 80)
        lines.append(f"CAPACITY FORECAST - starting {format_date(forecast.start_date)}")
        lines.append("=" * 80)
        lines.append("")

        for team_forecast in forecast.team_forecasts.values():
            lines.extend(self._team_section(team_forecast, forecast))
            lines.append("")

        if forecast.unassigned:
            lines.append("-" * 80)
            lines.append(f"UNASSIGNED ITEMS ({len(forecast.unassigned)})")
            lines.append("-" * 80)
            for item in forecast.unassigned:
                lines.append(f"  {item.id:<12} {item.title[:40]:<40} {item.remaining_effort:>8.2f}")
            lines.append("")

        latest = forecast.latest_completion_date
        lines.append("=" * 80)
        lines.append(f"All teams complete by: {format_date(latest)}")
        lines.append("=" * 80)

        return "\n".join(lines)

    def _team_section(
        self,
        team_forecast: TeamForecast,
        forecast: PlanningForecast,
    ) -> list[str]:
        team = team_forecast.team
        metrics = team_forecast.metrics
        lines = []

        lines.append("-" * 80)
        lines.append(f"TEAM {team.name} ({team.id})")
        lines.append("-" * 80)
        lines.append(f"Total effort:      {metrics.total_effort:.2f}")
        lines.append(f"Remaining effort:  {metrics.remaining_effort:.2f}")
        lines.append(f"Time to complete:  {format_months(metrics.months_to_complete)}")
        lines.append(f"Completes on:      {format_date(metrics.completion_date)}")

        start_month = CalendarMonth.from_date(forecast.start_date)
        capacities = [
            f"{month.format()}={capacity_for(team.capacity, month):g}"
            for month in start_month.next(self.capacity_months)
        ]
        lines.append(f"Capacity:          {', '.join(capacities)}")
        lines.append("")

        if team_forecast.schedule:
            lines.append(f"{'#':>3} {'Item':<12} {'Title':<30} {'Effort':>8} {'Start':>13} {'End':>13}")
            for i, entry in enumerate(team_forecast.schedule, 1):
                lines.append(
                    f"{i:>3} {entry.item.id:<12} {entry.item.title[:30]:<30} "
                    f"{entry.item.remaining_effort:>8.2f} "
                    f"{format_date(entry.start_date):>13} {format_date(entry.end_date):>13}"
                )
        else:
            lines.append("No scheduled items")

        for item in team_forecast.unscheduled:
            lines.append(f"  ! {item.id} cannot be scheduled within the planning horizon")

        return lines
