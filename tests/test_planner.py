"""Tests for the multi-team planner."""

import logging
from datetime import date

import pytest

from capacityplanner.domain.models import (
    CapacityProfile,
    PlanningRequest,
    Team,
    WorkItem,
)
from capacityplanner.scheduling.cursor import ForecastConfig
from capacityplanner.scheduling.planner import CapacityPlanner


class TestCapacityPlanner:
    """Tests for CapacityPlanner."""

    @pytest.fixture
    def planner(self):
        return CapacityPlanner()

    @pytest.fixture
    def teams(self):
        return [
            Team(id="T1", name="Platform", capacity=CapacityProfile(default_monthly_capacity=2.0)),
            Team(id="T2", name="Mobile", capacity=CapacityProfile(default_monthly_capacity=1.0)),
        ]

    @pytest.fixture
    def request_data(self, teams):
        return PlanningRequest(
            start_date=date(2025, 1, 1),
            teams=teams,
            work_items=[
                WorkItem(id="W1", size=4.0, priority=0, team_id="T1"),
                WorkItem(id="W2", size=2.0, priority=0, team_id="T2"),
                WorkItem(id="W3", size=1.0, priority=1, team_id="T2"),
                WorkItem(id="W4", size=1.0, priority=0),
                WorkItem(id="W5", size=1.0, priority=0, team_id="ghost"),
            ],
        )

    def test_forecast_per_team(self, planner, request_data):
        forecast = planner.forecast(request_data)

        t1 = forecast.get_team_forecast("T1")
        assert t1.metrics.completion_date == date(2025, 2, 28)
        assert [s.item.id for s in t1.schedule] == ["W1"]

        t2 = forecast.get_team_forecast("T2")
        assert t2.metrics.completion_date == date(2025, 3, 31)
        assert [s.item.id for s in t2.schedule] == ["W2", "W3"]

    def test_teams_do_not_share_cursor(self, planner, request_data):
        forecast = planner.forecast(request_data)
        for team_forecast in forecast.team_forecasts.values():
            assert team_forecast.schedule[0].start_date == date(2025, 1, 1)

    def test_unassigned_and_unknown_team(self, planner, request_data):
        forecast = planner.forecast(request_data)
        assert sorted(i.id for i in forecast.unassigned) == ["W4", "W5"]

    def test_team_without_items(self, planner, teams):
        request = PlanningRequest(start_date=date(2025, 1, 1), teams=teams)
        forecast = planner.forecast(request)

        t1 = forecast.get_team_forecast("T1")
        assert t1.schedule == []
        assert t1.metrics.months_to_complete == 0
        assert forecast.latest_completion_date is None

    def test_latest_completion_date(self, planner, request_data):
        forecast = planner.forecast(request_data)
        assert forecast.latest_completion_date == date(2025, 3, 31)

    def test_unscheduled_items_reported(self, teams):
        planner = CapacityPlanner(ForecastConfig(max_months=2))
        request = PlanningRequest(
            start_date=date(2025, 1, 1),
            teams=teams,
            work_items=[
                WorkItem(id="W1", size=1.0, priority=0, team_id="T2"),
                WorkItem(id="W2", size=5.0, priority=1, team_id="T2"),
            ],
        )
        forecast = planner.forecast(request)

        t2 = forecast.get_team_forecast("T2")
        assert [s.item.id for s in t2.schedule] == ["W1"]
        assert [i.id for i in t2.unscheduled] == ["W2"]
        assert t2.metrics.never_completes

    def test_never_completing_team_logs_warning(self, caplog):
        planner = CapacityPlanner(ForecastConfig(max_months=12))
        team = Team(id="idle", name="Idle", capacity=CapacityProfile(default_monthly_capacity=0.0))

        with caplog.at_level(logging.WARNING, logger="capacityplanner.scheduling.planner"):
            result = planner.forecast_team(team, [WorkItem(id="W1", size=1.0)], date(2025, 1, 1))

        assert result.metrics.never_completes
        assert "idle" in caplog.text

    def test_forecast_with_stats(self, planner, request_data):
        forecast, stats = planner.forecast_with_stats(request_data)

        assert stats["total_teams"] == 2
        assert stats["total_items"] == 5
        assert stats["scheduled_items"] == 3
        assert stats["unscheduled_items"] == 0
        assert stats["unassigned_items"] == 2
        assert stats["total_effort"] == pytest.approx(7.0)
        assert stats["remaining_effort"] == pytest.approx(7.0)
        assert stats["latest_completion_date"] == date(2025, 3, 31)
        assert stats["teams_never_completing"] == []

    def test_repeated_calls_are_deterministic(self, planner, request_data):
        first = planner.forecast(request_data)
        second = planner.forecast(request_data)
        for team_id in ("T1", "T2"):
            assert (
                first.get_team_forecast(team_id).schedule
                == second.get_team_forecast(team_id).schedule
            )
