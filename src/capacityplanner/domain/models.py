"""Domain models for capacity planning.

This module contains the core data structures used throughout the
forecasting engine: team capacity profiles, work items, and the
schedule and metrics outputs.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from capacityplanner.domain.calendar_month import CalendarMonth


@dataclass(frozen=True)
class CapacityOverride:
    """Capacity for one specific month, superseding the team default.

    Attributes:
        year_month: The month this override applies to.
        capacity: Effort units available in that month (e.g. person-months).
    """

    year_month: CalendarMonth
    capacity: float

    def __post_init__(self):
        if not math.isfinite(self.capacity) or self.capacity < 0:
            raise ValueError(
                f"Capacity must be a non-negative number, "
                f"got {self.capacity} for {self.year_month}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "CapacityOverride":
        return cls(
            year_month=CalendarMonth.parse(data["year_month"]),
            capacity=float(data["capacity"]),
        )


@dataclass(frozen=True)
class CapacityProfile:
    """Monthly work capacity of a team.

    Profiles are immutable. Overrides are stored as a tuple and indexed by
    month on construction so lookups are O(1).

    Attributes:
        default_monthly_capacity: Capacity for any month without an override.
        overrides: Per-month capacity overrides, at most one per month.
    """

    default_monthly_capacity: float
    overrides: tuple[CapacityOverride, ...] = ()
    _by_month: dict[CalendarMonth, float] = field(
        init=False, repr=False, compare=False, hash=False, default_factory=dict
    )

    def __post_init__(self):
        if (
            not math.isfinite(self.default_monthly_capacity)
            or self.default_monthly_capacity < 0
        ):
            raise ValueError(
                f"Default monthly capacity must be a non-negative number, "
                f"got {self.default_monthly_capacity}"
            )
        object.__setattr__(self, "overrides", tuple(self.overrides))
        for override in self.overrides:
            if override.year_month in self._by_month:
                raise ValueError(f"Duplicate capacity override for {override.year_month}")
            self._by_month[override.year_month] = override.capacity

    def override_for(self, month: CalendarMonth) -> Optional[float]:
        """Overridden capacity for a month, or None if it uses the default."""
        return self._by_month.get(month)

    @classmethod
    def from_dict(cls, data: dict) -> "CapacityProfile":
        return cls(
            default_monthly_capacity=float(data["monthly_capacity"]),
            overrides=[
                CapacityOverride.from_dict(o) for o in data.get("capacity_overrides", [])
            ],
        )


@dataclass
class Team:
    """A team that works through its backlog sequentially.

    Attributes:
        id: Unique team identifier.
        name: Display name.
        capacity: The team's monthly capacity profile.
    """

    id: str
    name: str
    capacity: CapacityProfile

    @classmethod
    def from_dict(cls, data: dict) -> "Team":
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            capacity=CapacityProfile.from_dict(data),
        )


@dataclass
class WorkItem:
    """A unit of planned work in a team backlog.

    Attributes:
        id: Unique work item identifier.
        size: Nominal effort (e.g. person-months), ignoring progress.
        title: Display title.
        progress_percent: Completed share of the item, 0-100.
        priority: Backlog priority; lower values are scheduled first.
        scheduled_position: Explicit board position, overrides priority.
        team_id: Assigned team, or None when unassigned.
    """

    id: str
    size: float
    title: str = ""
    progress_percent: float = 0.0
    priority: int = 0
    scheduled_position: Optional[int] = None
    team_id: Optional[str] = None

    def __post_init__(self):
        if not math.isfinite(self.size) or self.size <= 0:
            raise ValueError(
                f"Work item {self.id}: size must be a positive number, got {self.size}"
            )
        if not 0 <= self.progress_percent <= 100:
            raise ValueError(
                f"Work item {self.id}: progress must be between 0 and 100, "
                f"got {self.progress_percent}"
            )
        if self.priority < 0:
            raise ValueError(
                f"Work item {self.id}: priority must be non-negative, got {self.priority}"
            )
        if not self.title:
            self.title = self.id

    @property
    def remaining_effort(self) -> float:
        """Effort still to be done, accounting for progress."""
        return self.size * (1 - self.progress_percent / 100)

    @property
    def order_key(self) -> float:
        """Sequential scheduling key (lower is scheduled first)."""
        if self.scheduled_position is not None:
            return self.scheduled_position
        return self.priority

    @classmethod
    def from_dict(cls, data: dict) -> "WorkItem":
        return cls(
            id=str(data["id"]),
            size=float(data["size"]),
            title=data.get("title", ""),
            progress_percent=float(data.get("progress_percent", 0)),
            priority=int(data.get("priority", 0)),
            scheduled_position=(
                int(data["scheduled_position"])
                if data.get("scheduled_position") is not None
                else None
            ),
            team_id=data.get("team_id"),
        )


@dataclass(frozen=True)
class ScheduledItem:
    """A work item placed on the calendar.

    Attributes:
        item: The scheduled work item.
        start_date: Day the team starts on the item.
        end_date: Day the item is finished.
    """

    item: WorkItem
    start_date: date
    end_date: date

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days


@dataclass(frozen=True)
class BacklogMetrics:
    """Aggregate forecast for one team's backlog.

    Attributes:
        total_effort: Sum of nominal item sizes.
        remaining_effort: Sum of remaining effort.
        months_to_complete: Working months needed (fractional), or infinity
            if the backlog never completes within the month cap.
        completion_date: Day the backlog completes, or None when there is
            nothing left to do or it never completes.
    """

    total_effort: float
    remaining_effort: float
    months_to_complete: float
    completion_date: Optional[date]

    @property
    def never_completes(self) -> bool:
        return math.isinf(self.months_to_complete)


@dataclass
class TeamForecast:
    """Forecast for a single team: metrics plus item schedule."""

    team: Team
    metrics: BacklogMetrics
    schedule: list[ScheduledItem] = field(default_factory=list)
    unscheduled: list[WorkItem] = field(default_factory=list)


@dataclass
class PlanningRequest:
    """Input for a multi-team forecast.

    Attributes:
        start_date: Reference date scheduling starts from.
        teams: Teams with their capacity profiles.
        work_items: All work items, assigned to teams via ``team_id``.
    """

    start_date: date
    teams: list[Team]
    work_items: list[WorkItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict, start_date: date) -> "PlanningRequest":
        if not isinstance(data, dict):
            raise ValueError(
                f"Planning input must be a JSON object, got {type(data).__name__}"
            )
        return cls(
            start_date=start_date,
            teams=[Team.from_dict(t) for t in data.get("teams", [])],
            work_items=[WorkItem.from_dict(w) for w in data.get("work_items", [])],
        )


@dataclass
class PlanningForecast:
    """Forecast for every team in a planning request."""

    start_date: date
    team_forecasts: dict[str, TeamForecast] = field(default_factory=dict)
    unassigned: list[WorkItem] = field(default_factory=list)

    def get_team_forecast(self, team_id: str) -> Optional[TeamForecast]:
        return self.team_forecasts.get(team_id)

    @property
    def latest_completion_date(self) -> Optional[date]:
        dates = [
            f.metrics.completion_date
            for f in self.team_forecasts.values()
            if f.metrics.completion_date is not None
        ]
        return max(dates) if dates else None


def sort_by_order_key(items: list[WorkItem]) -> list[WorkItem]:
    """Return items in scheduling order without mutating the input.

    The sort is stable, so items with equal keys keep their input order.
    """
    return sorted(items, key=lambda item: item.order_key)


def group_work_items_by_team(
    items: list[WorkItem],
) -> tuple[dict[str, list[WorkItem]], list[WorkItem]]:
    """Split items into per-team lists plus the unassigned ones."""
    by_team: dict[str, list[WorkItem]] = {}
    unassigned: list[WorkItem] = []
    for item in items:
        if item.team_id:
            by_team.setdefault(item.team_id, []).append(item)
        else:
            unassigned.append(item)
    return by_team, unassigned


def total_effort(items: list[WorkItem]) -> float:
    return sum(item.size for item in items)


def remaining_effort(items: list[WorkItem]) -> float:
    return sum(item.remaining_effort for item in items)
