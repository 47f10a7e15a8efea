"""Validation module for verifying forecast correctness.

This module checks produced schedules against the sequencing rules: items
run finish-to-start in order, never overlap, and the team's completion date
agrees with the end of its last scheduled item.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from capacityplanner.domain.calendar_month import CalendarMonth
from capacityplanner.domain.models import PlanningForecast, ScheduledItem, TeamForecast


class ValidationErrorType(Enum):
    """Types of validation errors."""

    END_BEFORE_START = "end_before_start"
    ITEMS_OVERLAP = "items_overlap"
    OUT_OF_ORDER = "out_of_order"
    DUPLICATE_ITEM = "duplicate_item"
    COMPLETED_ITEM_SCHEDULED = "completed_item_scheduled"
    STARTS_BEFORE_PLAN = "starts_before_plan"
    COMPLETION_MISMATCH = "completion_mismatch"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    team_id: Optional[str] = None
    item_id: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.team_id:
            parts.append(f"Team {self.team_id}:")
        if self.item_id:
            parts.append(f"Item {self.item_id}:")
        parts.append(self.message)
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a forecast."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def merge(self, other: "ValidationResult") -> None:
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)


class ScheduleValidator:
    """Validates schedules and team forecasts.

    Example:
        >>> validator = ScheduleValidator()
        >>> result = validator.validate(forecast)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate(self, forecast: PlanningForecast) -> ValidationResult:
        """Validate every team forecast in a planning forecast."""
        result = ValidationResult(is_valid=True)
        for team_forecast in forecast.team_forecasts.values():
            result.merge(self.validate_team(team_forecast, forecast.start_date))
        return result

    def validate_team(
        self,
        team_forecast: TeamForecast,
        start_date: date,
    ) -> ValidationResult:
        """Validate one team's schedule and metrics.

        Args:
            team_forecast: The team forecast to check.
            start_date: Reference date the forecast was computed from.
        """
        team_id = team_forecast.team.id
        result = self.validate_schedule(team_forecast.schedule, start_date, team_id)

        for item in team_forecast.unscheduled:
            result.add_warning(
                f"Team {team_id}: item {item.id} cannot be scheduled within the month cap"
            )

        metrics = team_forecast.metrics
        if metrics.never_completes:
            result.add_warning(f"Team {team_id}: backlog never completes")
        elif team_forecast.schedule and not team_forecast.unscheduled:
            last_end = team_forecast.schedule[-1].end_date
            completion = metrics.completion_date
            # Combined and per-item consumption may round to adjacent days
            if completion is None or abs((completion - last_end).days) > 1:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.COMPLETION_MISMATCH,
                        message=(
                            f"Completion date {metrics.completion_date} does not match "
                            f"last item end {last_end}"
                        ),
                        team_id=team_id,
                        details={
                            "completion_date": metrics.completion_date,
                            "last_end_date": last_end,
                        },
                    )
                )

        return result

    def validate_schedule(
        self,
        schedule: list[ScheduledItem],
        start_date: date,
        team_id: Optional[str] = None,
    ) -> ValidationResult:
        """Validate the sequencing of a single team's schedule."""
        result = ValidationResult(is_valid=True)
        plan_start = CalendarMonth.from_date(start_date).to_date()
        seen: set[str] = set()

        for entry in schedule:
            item = entry.item

            if item.id in seen:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_ITEM,
                        message="Item scheduled more than once",
                        team_id=team_id,
                        item_id=item.id,
                    )
                )
            seen.add(item.id)

            if item.remaining_effort <= 0:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.COMPLETED_ITEM_SCHEDULED,
                        message="Item has no remaining effort but was scheduled",
                        team_id=team_id,
                        item_id=item.id,
                    )
                )

            if entry.end_date < entry.start_date:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.END_BEFORE_START,
                        message=f"Ends {entry.end_date} before it starts {entry.start_date}",
                        team_id=team_id,
                        item_id=item.id,
                    )
                )

            if entry.start_date < plan_start:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.STARTS_BEFORE_PLAN,
                        message=f"Starts {entry.start_date} before plan start {plan_start}",
                        team_id=team_id,
                        item_id=item.id,
                    )
                )

        for prev, current in zip(schedule, schedule[1:]):
            if prev.end_date > current.start_date:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.ITEMS_OVERLAP,
                        message=(
                            f"Starts {current.start_date} before item "
                            f"{prev.item.id} ends {prev.end_date}"
                        ),
                        team_id=team_id,
                        item_id=current.item.id,
                    )
                )
            if prev.item.order_key > current.item.order_key:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.OUT_OF_ORDER,
                        message=(
                            f"Order key {current.item.order_key} scheduled after "
                            f"{prev.item.order_key}"
                        ),
                        team_id=team_id,
                        item_id=current.item.id,
                    )
                )

        return result
