"""Tests for the command-line interface."""

import json
from datetime import date

import pytest

from capacityplanner.cli import (
    EXIT_BAD_INPUT,
    EXIT_OK,
    EXIT_USAGE,
    create_sample_teams,
    create_sample_work_items,
    main,
)


@pytest.fixture
def plan_file(tmp_path):
    path = tmp_path / "plan.json"
    path.write_text(
        json.dumps(
            {
                "teams": [
                    {
                        "id": "T1",
                        "name": "Platform",
                        "monthly_capacity": 2,
                        "capacity_overrides": [{"year_month": "2025-02", "capacity": 0}],
                    }
                ],
                "work_items": [
                    {"id": "W1", "title": "Auth", "size": 4, "priority": 0, "team_id": "T1"},
                    {"id": "W2", "title": "Docs", "size": 1, "progress_percent": 50, "team_id": "T1"},
                ],
            }
        )
    )
    return path


class TestSampleData:
    """Tests for demo data generation."""

    def test_sample_teams(self):
        teams = create_sample_teams(10, date(2025, 1, 1))
        assert len(teams) == 10
        assert len({t.id for t in teams}) == 10
        assert teams[9].name == "Payments2"

    def test_sample_items_assigned_round_robin(self):
        teams = create_sample_teams(3, date(2025, 1, 1))
        items = create_sample_work_items(6, teams)
        assert [i.team_id for i in items] == ["T01", "T02", "T03", "T01", "T02", "T03"]

    def test_sample_items_without_teams(self):
        items = create_sample_work_items(2, [])
        assert all(i.team_id is None for i in items)


class TestMain:
    """Tests for the CLI entry point."""

    def test_no_command(self, capsys):
        assert main([]) == EXIT_USAGE

    def test_demo(self, capsys):
        assert main(["demo", "--start", "2025-01-01"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Capacity Forecast from Jan 1, 2025" in out
        assert "Validation: PASSED" in out

    def test_forecast_from_file(self, plan_file, tmp_path, capsys):
        report = tmp_path / "report.txt"
        code = main(["forecast", str(plan_file), "--start", "2025-01-01", "--text", str(report)])

        assert code == EXIT_OK
        out = capsys.readouterr().out
        assert "Platform (T1)" in out
        assert "W1: 2025-01-01 -> 2025-03-31" in out
        assert "TEAM Platform (T1)" in report.read_text()

    def test_forecast_pdf(self, plan_file, tmp_path):
        pytest.importorskip("reportlab")
        pdf = tmp_path / "forecast.pdf"
        assert main(["forecast", str(plan_file), "-s", "2025-01-01", "-o", str(pdf)]) == EXIT_OK
        assert pdf.read_bytes().startswith(b"%PDF")

    def test_missing_file(self, tmp_path, capsys):
        assert main(["forecast", str(tmp_path / "missing.json")]) == EXIT_BAD_INPUT
        assert "cannot load" in capsys.readouterr().err

    def test_malformed_month(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps(
                {
                    "teams": [
                        {
                            "id": "T1",
                            "monthly_capacity": 1,
                            "capacity_overrides": [{"year_month": "2025-2", "capacity": 1}],
                        }
                    ]
                }
            )
        )
        assert main(["forecast", str(path)]) == EXIT_BAD_INPUT

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert main(["forecast", str(path)]) == EXIT_BAD_INPUT

    def test_top_level_list(self, tmp_path, capsys):
        path = tmp_path / "list.json"
        path.write_text("[]")
        assert main(["forecast", str(path)]) == EXIT_BAD_INPUT
        assert "JSON object" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "position, expected",
        [("2", EXIT_OK), ("first", EXIT_BAD_INPUT)],
    )
    def test_string_scheduled_position(self, tmp_path, position, expected):
        path = tmp_path / "plan.json"
        path.write_text(
            json.dumps(
                {
                    "teams": [{"id": "T1", "monthly_capacity": 1}],
                    "work_items": [
                        {"id": "W1", "size": 1, "scheduled_position": position, "team_id": "T1"},
                        {"id": "W2", "size": 1, "scheduled_position": 1, "team_id": "T1"},
                    ],
                }
            )
        )
        assert main(["forecast", str(path), "--start", "2025-01-01"]) == expected

    def test_nan_size(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text('{"work_items": [{"id": "W1", "size": NaN}]}')
        assert main(["forecast", str(path)]) == EXIT_BAD_INPUT

    def test_bad_start_date(self, plan_file):
        with pytest.raises(SystemExit):
            main(["forecast", str(plan_file), "--start", "01/01/2025"])

    def test_bad_max_months(self, plan_file):
        with pytest.raises(SystemExit):
            main(["forecast", str(plan_file), "--max-months", "0"])
