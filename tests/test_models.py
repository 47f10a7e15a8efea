"""Tests for domain models and capacity lookup."""

import math
from dataclasses import FrozenInstanceError

import pytest

from capacityplanner.domain.calendar_month import CalendarMonth, FormatError
from capacityplanner.domain.capacity import capacity_for
from capacityplanner.domain.models import (
    CapacityOverride,
    CapacityProfile,
    PlanningRequest,
    Team,
    WorkItem,
    group_work_items_by_team,
    remaining_effort,
    sort_by_order_key,
    total_effort,
)


class TestCapacityProfile:
    """Tests for capacity profiles and lookups."""

    @pytest.fixture
    def profile(self):
        """Default 2 per month, with January reduced and February off."""
        return CapacityProfile(
            default_monthly_capacity=2.0,
            overrides=[
                CapacityOverride(CalendarMonth(2025, 1), 1.0),
                CapacityOverride(CalendarMonth(2025, 2), 0.0),
            ],
        )

    def test_override_used(self, profile):
        assert capacity_for(profile, CalendarMonth(2025, 1)) == 1.0

    def test_zero_override_used(self, profile):
        assert capacity_for(profile, CalendarMonth(2025, 2)) == 0.0

    def test_default_used_without_override(self, profile):
        assert capacity_for(profile, CalendarMonth(2025, 3)) == 2.0
        assert capacity_for(profile, CalendarMonth(2026, 1)) == 2.0

    def test_override_for(self, profile):
        assert profile.override_for(CalendarMonth(2025, 1)) == 1.0
        assert profile.override_for(CalendarMonth(2025, 3)) is None

    def test_negative_default_rejected(self):
        with pytest.raises(ValueError):
            CapacityProfile(default_monthly_capacity=-1.0)

    def test_negative_override_rejected(self):
        with pytest.raises(ValueError):
            CapacityOverride(CalendarMonth(2025, 1), -0.5)

    def test_duplicate_override_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            CapacityProfile(
                default_monthly_capacity=1.0,
                overrides=[
                    CapacityOverride(CalendarMonth(2025, 1), 1.0),
                    CapacityOverride(CalendarMonth(2025, 1), 2.0),
                ],
            )

    def test_lookup_does_not_mutate_profile(self, profile):
        before = profile.overrides
        capacity_for(profile, CalendarMonth(2030, 5))
        assert profile.overrides == before
        assert profile.override_for(CalendarMonth(2030, 5)) is None

    def test_profile_is_immutable(self, profile):
        assert isinstance(profile.overrides, tuple)
        with pytest.raises(FrozenInstanceError):
            profile.overrides = ()
        with pytest.raises(AttributeError):
            profile.overrides.append(CapacityOverride(CalendarMonth(2025, 3), 5.0))
        assert capacity_for(profile, CalendarMonth(2025, 3)) == 2.0

    @pytest.mark.parametrize("value", [math.nan, math.inf])
    def test_non_finite_capacity_rejected(self, value):
        with pytest.raises(ValueError):
            CapacityProfile(default_monthly_capacity=value)
        with pytest.raises(ValueError):
            CapacityOverride(CalendarMonth(2025, 1), value)

    def test_from_dict(self):
        profile = CapacityProfile.from_dict(
            {
                "monthly_capacity": 3,
                "capacity_overrides": [{"year_month": "2025-07", "capacity": 1.5}],
            }
        )
        assert profile.default_monthly_capacity == 3.0
        assert capacity_for(profile, CalendarMonth(2025, 7)) == 1.5

    def test_from_dict_bad_month(self):
        with pytest.raises(FormatError):
            CapacityProfile.from_dict(
                {
                    "monthly_capacity": 3,
                    "capacity_overrides": [{"year_month": "July 2025", "capacity": 1}],
                }
            )


class TestWorkItem:
    """Tests for work item derived values."""

    def test_remaining_effort_without_progress(self):
        assert WorkItem(id="W1", size=4.0).remaining_effort == 4.0

    def test_remaining_effort_with_progress(self):
        item = WorkItem(id="W1", size=4.0, progress_percent=25)
        assert item.remaining_effort == pytest.approx(3.0)

    def test_remaining_effort_done(self):
        assert WorkItem(id="W1", size=4.0, progress_percent=100).remaining_effort == 0.0

    def test_order_key_uses_priority(self):
        assert WorkItem(id="W1", size=1.0, priority=7).order_key == 7

    def test_order_key_prefers_scheduled_position(self):
        item = WorkItem(id="W1", size=1.0, priority=7, scheduled_position=2)
        assert item.order_key == 2

    def test_scheduled_position_zero_is_used(self):
        item = WorkItem(id="W1", size=1.0, priority=7, scheduled_position=0)
        assert item.order_key == 0

    def test_title_defaults_to_id(self):
        assert WorkItem(id="W1", size=1.0).title == "W1"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"size": 0.0},
            {"size": -1.0},
            {"size": math.nan},
            {"size": math.inf},
            {"size": 1.0, "progress_percent": math.nan},
            {"size": 1.0, "progress_percent": -5},
            {"size": 1.0, "progress_percent": 101},
            {"size": 1.0, "priority": -1},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            WorkItem(id="W1", **kwargs)

    def test_from_dict(self):
        item = WorkItem.from_dict(
            {
                "id": "W9",
                "title": "Billing",
                "size": 3,
                "progress_percent": 50,
                "priority": 2,
                "team_id": "T1",
            }
        )
        assert item.remaining_effort == pytest.approx(1.5)
        assert item.team_id == "T1"
        assert item.scheduled_position is None

    def test_from_dict_coerces_scheduled_position(self):
        item = WorkItem.from_dict({"id": "W1", "size": 1, "scheduled_position": "2"})
        assert item.scheduled_position == 2
        assert item.order_key == 2

    def test_from_dict_rejects_bad_scheduled_position(self):
        with pytest.raises(ValueError):
            WorkItem.from_dict({"id": "W1", "size": 1, "scheduled_position": "first"})


class TestBacklogHelpers:
    """Tests for sorting, grouping and effort sums."""

    def test_sort_by_order_key_is_stable(self):
        items = [
            WorkItem(id="c", size=1.0, priority=2),
            WorkItem(id="a", size=1.0, priority=1),
            WorkItem(id="b", size=1.0, priority=1),
            WorkItem(id="d", size=1.0, priority=5, scheduled_position=0),
        ]
        assert [i.id for i in sort_by_order_key(items)] == ["d", "a", "b", "c"]

    def test_sort_does_not_mutate_input(self):
        items = [WorkItem(id="b", size=1.0, priority=2), WorkItem(id="a", size=1.0, priority=1)]
        sort_by_order_key(items)
        assert [i.id for i in items] == ["b", "a"]

    def test_group_by_team(self):
        items = [
            WorkItem(id="1", size=1.0, team_id="T1"),
            WorkItem(id="2", size=1.0),
            WorkItem(id="3", size=1.0, team_id="T2"),
            WorkItem(id="4", size=1.0, team_id="T1"),
        ]
        by_team, unassigned = group_work_items_by_team(items)
        assert [i.id for i in by_team["T1"]] == ["1", "4"]
        assert [i.id for i in by_team["T2"]] == ["3"]
        assert [i.id for i in unassigned] == ["2"]

    def test_effort_sums(self):
        items = [
            WorkItem(id="1", size=2.0, progress_percent=50),
            WorkItem(id="2", size=3.0),
        ]
        assert total_effort(items) == 5.0
        assert remaining_effort(items) == pytest.approx(4.0)
        assert total_effort([]) == 0
        assert remaining_effort([]) == 0


class TestPlanningRequest:
    """Tests for building requests from plain data."""

    def test_from_dict(self):
        from datetime import date

        request = PlanningRequest.from_dict(
            {
                "teams": [{"id": "T1", "name": "Core", "monthly_capacity": 2}],
                "work_items": [{"id": "W1", "size": 4, "team_id": "T1"}],
            },
            start_date=date(2025, 1, 1),
        )
        assert isinstance(request.teams[0], Team)
        assert request.teams[0].capacity.default_monthly_capacity == 2.0
        assert request.work_items[0].size == 4.0

    def test_team_name_defaults_to_id(self):
        team = Team.from_dict({"id": "T7", "monthly_capacity": 1})
        assert team.name == "T7"

    @pytest.mark.parametrize("payload", [[], "teams", None])
    def test_from_dict_rejects_non_object(self, payload):
        from datetime import date

        with pytest.raises(ValueError, match="JSON object"):
            PlanningRequest.from_dict(payload, start_date=date(2025, 1, 1))
