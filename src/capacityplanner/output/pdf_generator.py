"""PDF generation for forecast output.

This module creates printable PDF forecasts showing:
- One summary page per team with backlog metrics and monthly capacity
- The team's item schedule as a start/end table
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from capacityplanner.domain.calendar_month import CalendarMonth
from capacityplanner.domain.capacity import capacity_for
from capacityplanner.domain.models import PlanningForecast, TeamForecast
from capacityplanner.output.formatting import format_date, format_months

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    "capacity": (0.4, 0.6, 0.8),  # Blue
    "override": (0.8, 0.6, 0.2),  # Orange
    "header_row": (0.9, 0.9, 0.9),  # Light gray
    "warning": (0.8, 0.2, 0.2),  # Red
}


class PDFGenerator:
    """Generates printable PDF forecasts.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(forecast, "forecast.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        capacity_months: int = 12,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.capacity_months = capacity_months

    def generate(
        self,
        forecast: PlanningForecast,
        output_path: Union[str, Path],
    ) -> None:
        """Generate PDF forecast and save to file."""
        canvas = self._canvas_module()
        c = canvas.Canvas(str(output_path), pagesize=(self.page_width, self.page_height))
        self._draw_forecast(c, forecast)
        c.save()

    def generate_to_buffer(self, forecast: PlanningForecast) -> BytesIO:
        """Generate PDF and return as bytes buffer."""
        canvas = self._canvas_module()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=(self.page_width, self.page_height))
        self._draw_forecast(c, forecast)
        c.save()
        buffer.seek(0)
        return buffer

    @staticmethod
    def _canvas_module():
        try:
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )
        return canvas

    def _draw_forecast(self, c, forecast: PlanningForecast) -> None:
        if not forecast.team_forecasts:
            self._draw_header(c, "Capacity Forecast", forecast)
            c.setFont("Helvetica", 10)
            c.drawString(self.margin, self.page_height - self.margin - 60, "No teams")
            c.showPage()
            return

        for team_forecast in forecast.team_forecasts.values():
            self._draw_team_pages(c, team_forecast, forecast)

    def _draw_header(self, c, title: str, forecast: PlanningForecast) -> None:
        """Draw page header with title and planning start."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, title)

        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"Planning from {format_date(forecast.start_date)}",
        )

    def _draw_team_pages(
        self,
        c,
        team_forecast: TeamForecast,
        forecast: PlanningForecast,
    ) -> None:
        """Draw a team's summary, capacity chart and schedule table."""
        team = team_forecast.team
        metrics = team_forecast.metrics

        self._draw_header(c, f"Team {team.name}", forecast)
        y = self.page_height - self.margin - 65

        c.setFont("Helvetica", 10)
        for line in [
            f"Total effort: {metrics.total_effort:.2f}",
            f"Remaining effort: {metrics.remaining_effort:.2f}",
            f"Time to complete: {format_months(metrics.months_to_complete)}",
            f"Completes on: {format_date(metrics.completion_date)}",
        ]:
            c.drawString(self.margin + 20, y, line)
            y -= 15

        if metrics.never_completes:
            c.setFillColorRGB(*COLORS["warning"])
            c.drawString(self.margin + 20, y, "Backlog does not complete within the planning horizon")
            c.setFillColorRGB(0, 0, 0)
            y -= 15

        y -= 20
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Monthly Capacity")
        start_month = CalendarMonth.from_date(forecast.start_date)
        self._draw_capacity_chart(c, team_forecast, start_month, self.margin + 20, y - 120, 480, 100)
        y -= 160

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Schedule")
        y -= 20
        self._draw_schedule_table(c, team_forecast, forecast, y)

    def _draw_capacity_chart(
        self,
        c,
        team_forecast: TeamForecast,
        start_month: CalendarMonth,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw a bar chart of capacity per month."""
        profile = team_forecast.team.capacity
        months = start_month.next(self.capacity_months)
        values = [capacity_for(profile, m) for m in months]
        max_value = max(values) or 1
        bar_width = width / len(months)

        c.setStrokeColorRGB(0, 0, 0)
        c.setLineWidth(1)
        c.line(x, y, x, y + height)  # Y axis
        c.line(x, y, x + width, y)  # X axis

        c.setFont("Helvetica", 7)
        for i, (month, value) in enumerate(zip(months, values)):
            key = "override" if profile.override_for(month) is not None else "capacity"
            c.setFillColorRGB(*COLORS[key])
            bar_height = (value / max_value) * height
            c.rect(x + i * bar_width, y, bar_width - 2, bar_height, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.drawCentredString(x + (i + 0.5) * bar_width, y - 10, month.format())

        c.drawRightString(x - 5, y, "0")
        c.drawRightString(x - 5, y + height - 5, f"{max_value:g}")

    def _draw_schedule_table(
        self,
        c,
        team_forecast: TeamForecast,
        forecast: PlanningForecast,
        y: float,
    ) -> None:
        """Draw the schedule as a table, continuing onto new pages as needed."""
        columns = [
            ("#", 25),
            ("Item", 90),
            ("Title", 260),
            ("Effort", 70),
            ("Start", 100),
            ("End", 100),
        ]
        row_height = 16

        def draw_row(values, y_pos, bold=False):
            c.setFont("Helvetica-Bold" if bold else "Helvetica", 9)
            x_pos = self.margin
            for (_, width), value in zip(columns, values):
                c.drawString(x_pos + 2, y_pos + 4, str(value))
                x_pos += width

        def draw_column_headers(y_pos):
            c.setFillColorRGB(*COLORS["header_row"])
            c.rect(self.margin, y_pos, sum(w for _, w in columns), row_height, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            draw_row([label for label, _ in columns], y_pos, bold=True)

        draw_column_headers(y)
        y -= row_height

        for i, entry in enumerate(team_forecast.schedule, 1):
            if y < self.margin + row_height:
                c.showPage()
                self._draw_header(c, f"Team {team_forecast.team.name} (continued)", forecast)
                y = self.page_height - self.margin - 65
                draw_column_headers(y)
                y -= row_height

            draw_row(
                [
                    i,
                    entry.item.id[:14],
                    entry.item.title[:45],
                    f"{entry.item.remaining_effort:.2f}",
                    format_date(entry.start_date),
                    format_date(entry.end_date),
                ],
                y,
            )
            y -= row_height

        if team_forecast.unscheduled:
            c.setFillColorRGB(*COLORS["warning"])
            c.setFont("Helvetica", 9)
            ids = ", ".join(item.id for item in team_forecast.unscheduled)
            c.drawString(self.margin, max(y - 5, self.margin), f"Not schedulable: {ids}"[:140])
            c.setFillColorRGB(0, 0, 0)

        c.showPage()
