"""Capacity cursor for month-by-month work simulation.

The cursor tracks a position in time: the current month plus the fraction
of that month's capacity already consumed. Work is consumed against the
team's capacity profile, skipping zero-capacity months, until either the
work is done or the month cap is reached.

Both the mutating ``consume_work`` and the read-only
``count_months_for_work`` are driven by the same step function,
``consume``, which maps a ``CursorState`` to a new one.
"""

import logging
import math
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from capacityplanner.domain.calendar_month import CalendarMonth
from capacityplanner.domain.capacity import capacity_for
from capacityplanner.domain.models import CapacityProfile

logger = logging.getLogger(__name__)


@dataclass
class ForecastConfig:
    """Configuration for capacity simulation.

    Attributes:
        max_months: Hard cap on months a cursor may advance. Stops the
            simulation for teams whose capacity stays at zero.
        epsilon: Tolerance when deciding a month is fully consumed, and when
            deciding an item was fully absorbed.
    """

    max_months: int = 240  # 20 years
    epsilon: float = 1e-9

    def __post_init__(self):
        if self.max_months <= 0:
            raise ValueError(f"max_months must be positive, got {self.max_months}")
        if self.epsilon < 0:
            raise ValueError(f"epsilon must be non-negative, got {self.epsilon}")


@dataclass(frozen=True)
class CursorState:
    """Immutable cursor position.

    Attributes:
        month: Month the cursor is in.
        fraction_consumed: Share of the month's capacity already used. Reaches
            1.0 only when work ends exactly at the end of the month.
        months_advanced: Months stepped over since the cursor was created.
    """

    month: CalendarMonth
    fraction_consumed: float = 0.0
    months_advanced: int = 0

    def advance(self) -> "CursorState":
        return CursorState(
            month=self.month.add_months(1),
            fraction_consumed=0.0,
            months_advanced=self.months_advanced + 1,
        )

    def to_date(self) -> date:
        """Calendar day corresponding to the fractional position in the month."""
        days = self.month.days_in_month()
        day = max(1, min(math.ceil(self.fraction_consumed * days), days))
        return self.month.day(day)


@dataclass(frozen=True)
class StepResult:
    """Outcome of consuming work from a cursor state.

    Attributes:
        state: Cursor state after consumption.
        consumed: Work actually absorbed.
        remaining: Work left over when the month cap was hit (0 otherwise).
        working_months: Fractional months of non-zero capacity used.
    """

    state: CursorState
    consumed: float
    remaining: float
    working_months: float


@dataclass(frozen=True)
class ConsumeResult:
    consumed: float
    end_date: date


@dataclass(frozen=True)
class WorkDuration:
    """Working months needed for an amount of work, and the day it completes.

    ``months`` is infinite and ``completion_date`` None when the work cannot
    be completed within the month cap.
    """

    months: float
    completion_date: Optional[date]


def consume(
    profile: CapacityProfile,
    state: CursorState,
    amount: float,
    config: ForecastConfig,
) -> StepResult:
    """Consume ``amount`` units of work starting from ``state``.

    Months with zero capacity are skipped. A month is left only when it is
    fully consumed and work remains, so the returned state sits in the month
    where the work finished. Leftover work below ``config.epsilon`` counts
    as done.

    Args:
        profile: Team capacity profile.
        state: Starting cursor state.
        amount: Work to consume.
        config: Simulation configuration.

    Returns:
        StepResult with the new state and how much work was absorbed.
    """
    remaining = amount
    working_months = 0.0

    while remaining > 0 and state.months_advanced < config.max_months:
        month_capacity = capacity_for(profile, state.month)

        if month_capacity <= 0:
            state = state.advance()
            continue

        available = month_capacity * (1 - state.fraction_consumed)
        if available <= 0:
            state = state.advance()
            continue

        work_done = min(remaining, available)
        remaining -= work_done
        if remaining < config.epsilon:
            remaining = 0.0

        fraction_used = work_done / month_capacity
        working_months += fraction_used
        state = replace(state, fraction_consumed=state.fraction_consumed + fraction_used)

        if state.fraction_consumed >= 1 - config.epsilon and remaining > 0:
            state = state.advance()

    if remaining > 0:
        logger.debug(
            "Month cap of %d reached at %s with %.4f work remaining",
            config.max_months,
            state.month,
            remaining,
        )

    return StepResult(
        state=state,
        consumed=amount - remaining,
        remaining=max(remaining, 0.0),
        working_months=working_months,
    )


class CapacityCursor:
    """Stateful cursor over a team's monthly capacity.

    A cursor is created fresh for one team and one computation, starting at
    the beginning of the month containing ``start_date``. Repeated calls to
    ``consume_work`` continue where the previous call left off, which is how
    items are scheduled finish-to-start.

    Example:
        >>> cursor = CapacityCursor(profile, date(2025, 1, 1))
        >>> first = cursor.consume_work(2.0)
        >>> second = cursor.consume_work(1.0)  # starts where first ended
    """

    def __init__(
        self,
        profile: CapacityProfile,
        start_date: date,
        config: Optional[ForecastConfig] = None,
    ):
        """Initialize cursor at the start of ``start_date``'s month.

        Args:
            profile: Team capacity profile (read-only).
            start_date: Reference date; only its month is used.
            config: Simulation configuration.
        """
        self.profile = profile
        self.config = config or ForecastConfig()
        self._state = CursorState(month=CalendarMonth.from_date(start_date))

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def current_month(self) -> CalendarMonth:
        return self._state.month

    @property
    def fraction_consumed(self) -> float:
        return self._state.fraction_consumed

    @property
    def months_advanced(self) -> int:
        return self._state.months_advanced

    def to_date(self) -> date:
        """Current position as a calendar day."""
        return self._state.to_date()

    def available_capacity(self) -> float:
        """Capacity left in the current month."""
        month_capacity = capacity_for(self.profile, self._state.month)
        return month_capacity * (1 - self._state.fraction_consumed)

    def is_exhausted(self) -> bool:
        """True once the cursor has advanced ``max_months`` months."""
        return self._state.months_advanced >= self.config.max_months

    def consume_work(self, amount: float) -> ConsumeResult:
        """Consume work, moving the cursor forward.

        Returns:
            ConsumeResult with the work absorbed (less than ``amount`` only if
            the cursor exhausted) and the day the cursor ended on.
        """
        result = consume(self.profile, self._state, amount, self.config)
        self._state = result.state
        return ConsumeResult(consumed=result.consumed, end_date=self._state.to_date())

    def count_months_for_work(self, amount: float) -> WorkDuration:
        """Working months and completion day for ``amount`` of work.

        Only months with capacity count toward ``months``. The cursor itself
        is not moved.
        """
        if amount <= 0:
            return WorkDuration(months=0.0, completion_date=None)

        result = consume(self.profile, self._state, amount, self.config)
        if result.remaining > 0:
            return WorkDuration(months=math.inf, completion_date=None)

        return WorkDuration(
            months=result.working_months,
            completion_date=result.state.to_date(),
        )
