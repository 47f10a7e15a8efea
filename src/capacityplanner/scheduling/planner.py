"""Main planner interface.

This module provides the high-level CapacityPlanner class that groups work
items by team and produces backlog metrics and schedules for every team.
"""

import logging
from datetime import date
from typing import Optional

from capacityplanner.domain.models import (
    PlanningForecast,
    PlanningRequest,
    Team,
    TeamForecast,
    WorkItem,
    group_work_items_by_team,
)
from capacityplanner.scheduling.backlog import compute_backlog_metrics, compute_schedule
from capacityplanner.scheduling.cursor import ForecastConfig

logger = logging.getLogger(__name__)


class CapacityPlanner:
    """High-level planner for forecasting team backlogs.

    Each team is forecast with its own cursors; nothing is shared between
    teams or between calls.

    Example:
        >>> planner = CapacityPlanner()
        >>> request = PlanningRequest(
        ...     start_date=date(2025, 1, 1),
        ...     teams=[team_a, team_b],
        ...     work_items=[item1, item2, ...],
        ... )
        >>> forecast = planner.forecast(request)
    """

    def __init__(self, config: Optional[ForecastConfig] = None):
        self.config = config or ForecastConfig()

    def forecast_team(
        self,
        team: Team,
        work_items: list[WorkItem],
        start_date: date,
    ) -> TeamForecast:
        """Forecast one team's backlog.

        Args:
            team: The team to forecast.
            work_items: Items assigned to this team.
            start_date: Reference date scheduling starts from.

        Returns:
            TeamForecast with metrics, schedule and any items that could not
            be scheduled within the month cap.
        """
        metrics = compute_backlog_metrics(team.capacity, work_items, start_date, self.config)
        schedule = compute_schedule(team.capacity, work_items, start_date, self.config)

        scheduled_ids = {s.item.id for s in schedule}
        unscheduled = [
            item
            for item in work_items
            if item.remaining_effort > 0 and item.id not in scheduled_ids
        ]

        if metrics.never_completes:
            logger.warning(
                "Team %s cannot finish %.2f remaining effort within %d months",
                team.id,
                metrics.remaining_effort,
                self.config.max_months,
            )

        return TeamForecast(
            team=team,
            metrics=metrics,
            schedule=schedule,
            unscheduled=unscheduled,
        )

    def forecast(self, request: PlanningRequest) -> PlanningForecast:
        """Forecast every team in the request.

        Items without a team, or assigned to a team not in the request, are
        returned as unassigned.
        """
        by_team, unassigned = group_work_items_by_team(request.work_items)

        known_ids = {team.id for team in request.teams}
        for team_id, items in by_team.items():
            if team_id not in known_ids:
                logger.debug("%d items reference unknown team %s", len(items), team_id)
                unassigned.extend(items)

        result = PlanningForecast(start_date=request.start_date, unassigned=unassigned)
        for team in request.teams:
            result.team_forecasts[team.id] = self.forecast_team(
                team, by_team.get(team.id, []), request.start_date
            )

        logger.info(
            "Forecast %d teams from %s (%d unassigned items)",
            len(request.teams),
            request.start_date,
            len(unassigned),
        )
        return result

    def forecast_with_stats(
        self,
        request: PlanningRequest,
    ) -> tuple[PlanningForecast, dict]:
        """Forecast and return statistics.

        Returns:
            Tuple of (forecast, stats_dict).
        """
        forecast = self.forecast(request)
        stats = self._calculate_stats(forecast, request)
        return forecast, stats

    def _calculate_stats(
        self,
        forecast: PlanningForecast,
        request: PlanningRequest,
    ) -> dict:
        """Calculate forecast statistics."""
        team_forecasts = list(forecast.team_forecasts.values())

        total_items = len(request.work_items)
        scheduled_items = sum(len(f.schedule) for f in team_forecasts)
        unscheduled_items = sum(len(f.unscheduled) for f in team_forecasts)

        return {
            "total_teams": len(request.teams),
            "total_items": total_items,
            "scheduled_items": scheduled_items,
            "unscheduled_items": unscheduled_items,
            "unassigned_items": len(forecast.unassigned),
            "total_effort": sum(f.metrics.total_effort for f in team_forecasts),
            "remaining_effort": sum(f.metrics.remaining_effort for f in team_forecasts),
            "latest_completion_date": forecast.latest_completion_date,
            "teams_never_completing": [
                f.team.id for f in team_forecasts if f.metrics.never_completes
            ],
        }
