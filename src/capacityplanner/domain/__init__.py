"""Domain models and capacity rules for planning."""

from capacityplanner.domain.calendar_month import (
    CalendarMonth,
    CalendarMonthError,
    FormatError,
    MonthRangeError,
    months_between,
)
from capacityplanner.domain.capacity import capacity_for
from capacityplanner.domain.models import (
    BacklogMetrics,
    CapacityOverride,
    CapacityProfile,
    PlanningForecast,
    PlanningRequest,
    ScheduledItem,
    Team,
    TeamForecast,
    WorkItem,
    group_work_items_by_team,
    remaining_effort,
    sort_by_order_key,
    total_effort,
)

__all__ = [
    # Calendar
    "CalendarMonth",
    "CalendarMonthError",
    "FormatError",
    "MonthRangeError",
    "months_between",
    # Models
    "BacklogMetrics",
    "CapacityOverride",
    "CapacityProfile",
    "PlanningForecast",
    "PlanningRequest",
    "ScheduledItem",
    "Team",
    "TeamForecast",
    "WorkItem",
    # Helpers
    "capacity_for",
    "group_work_items_by_team",
    "remaining_effort",
    "sort_by_order_key",
    "total_effort",
]
