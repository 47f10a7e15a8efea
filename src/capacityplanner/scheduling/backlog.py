"""Backlog metrics and finish-to-start schedules for a single team."""

import logging
from datetime import date
from typing import Optional

from capacityplanner.domain.models import (
    BacklogMetrics,
    CapacityProfile,
    ScheduledItem,
    WorkItem,
    remaining_effort,
    sort_by_order_key,
    total_effort,
)
from capacityplanner.scheduling.cursor import CapacityCursor, ForecastConfig

logger = logging.getLogger(__name__)


def compute_backlog_metrics(
    profile: CapacityProfile,
    work_items: list[WorkItem],
    start_date: date,
    config: Optional[ForecastConfig] = None,
) -> BacklogMetrics:
    """Forecast how long a team needs to finish its backlog.

    Args:
        profile: Team capacity profile.
        work_items: Items assigned to the team.
        start_date: Reference date scheduling starts from.
        config: Simulation configuration.

    Returns:
        BacklogMetrics. ``months_to_complete`` is infinite and
        ``completion_date`` None when the team never finishes within the
        month cap; both are zero/None when nothing remains.
    """
    total = total_effort(work_items)
    remaining = remaining_effort(work_items)

    if remaining <= 0:
        return BacklogMetrics(
            total_effort=total,
            remaining_effort=0.0,
            months_to_complete=0.0,
            completion_date=None,
        )

    cursor = CapacityCursor(profile, start_date, config)
    duration = cursor.count_months_for_work(remaining)

    return BacklogMetrics(
        total_effort=total,
        remaining_effort=remaining,
        months_to_complete=duration.months,
        completion_date=duration.completion_date,
    )


def compute_schedule(
    profile: CapacityProfile,
    work_items: list[WorkItem],
    start_date: date,
    config: Optional[ForecastConfig] = None,
) -> list[ScheduledItem]:
    """Schedule items sequentially against the team's capacity.

    Items are ordered by ``order_key`` (stable) and each one starts on the
    day the previous one ended. Finished items are skipped. Items the cursor
    cannot absorb before reaching its month cap are omitted.
    """
    config = config or ForecastConfig()
    cursor = CapacityCursor(profile, start_date, config)
    schedule: list[ScheduledItem] = []

    for item in sort_by_order_key(work_items):
        effort = item.remaining_effort
        if effort <= 0:
            continue

        item_start = cursor.to_date()
        result = cursor.consume_work(effort)

        if result.consumed >= effort - config.epsilon:
            schedule.append(
                ScheduledItem(item=item, start_date=item_start, end_date=result.end_date)
            )
        else:
            logger.debug(
                "Item %s not schedulable: %.4f of %.4f absorbed before month cap",
                item.id,
                result.consumed,
                effort,
            )

    return schedule
