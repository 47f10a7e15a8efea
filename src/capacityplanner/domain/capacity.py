"""Capacity lookup for a team's capacity profile."""

from capacityplanner.domain.calendar_month import CalendarMonth
from capacityplanner.domain.models import CapacityProfile


def capacity_for(profile: CapacityProfile, month: CalendarMonth) -> float:
    """Capacity available in a month.

    Returns the month's override if the profile has one, otherwise the
    profile's default monthly capacity.
    """
    override = profile.override_for(month)
    if override is not None:
        return override
    return profile.default_monthly_capacity
