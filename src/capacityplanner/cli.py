"""Command-line interface for the capacity planning tool."""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from capacityplanner.domain.calendar_month import CalendarMonth
from capacityplanner.domain.models import (
    CapacityOverride,
    CapacityProfile,
    PlanningForecast,
    PlanningRequest,
    Team,
    WorkItem,
)
from capacityplanner.output.formatting import format_date, format_months
from capacityplanner.output.pdf_generator import PDFGenerator
from capacityplanner.output.report_generator import ForecastReportGenerator
from capacityplanner.scheduling.cursor import ForecastConfig
from capacityplanner.scheduling.planner import CapacityPlanner
from capacityplanner.validation.validator import ScheduleValidator

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_BAD_INPUT = 2


def create_sample_teams(count: int, start_date: date) -> list[Team]:
    """Create sample teams with varied capacity.

    Every third team has a reduced month two months in, and every fourth
    team takes the sixth month off.
    """
    names = ["Platform", "Payments", "Mobile", "Search", "Data", "Growth", "Infra", "Web"]
    start_month = CalendarMonth.from_date(start_date)
    teams = []

    for i in range(count):
        overrides = []
        if i % 3 == 0:
            overrides.append(CapacityOverride(start_month.add_months(2), 0.5 + i % 2))
        if i % 4 == 0:
            overrides.append(CapacityOverride(start_month.add_months(5), 0.0))

        name = names[i % len(names)]
        if i >= len(names):
            name = f"{name}{i // len(names) + 1}"

        teams.append(
            Team(
                id=f"T{i + 1:02d}",
                name=name,
                capacity=CapacityProfile(
                    default_monthly_capacity=float(2 + i % 3),
                    overrides=overrides,
                ),
            )
        )

    return teams


def create_sample_work_items(count: int, teams: list[Team]) -> list[WorkItem]:
    """Create sample work items spread across the teams."""
    items = []
    for i in range(count):
        team = teams[i % len(teams)] if teams else None
        items.append(
            WorkItem(
                id=f"W{i + 1:03d}",
                title=f"Work package {i + 1}",
                size=float(1 + (i * 7) % 5),
                progress_percent=float((i * 10) % 100) if i % 4 == 0 else 0.0,
                priority=i,
                team_id=team.id if team else None,
            )
        )
    return items


def load_request(input_path: Path, start_date: date) -> PlanningRequest:
    """Load teams and work items from a JSON file."""
    data = json.loads(Path(input_path).read_text())
    return PlanningRequest.from_dict(data, start_date)


def print_forecast(forecast: PlanningForecast, stats: dict) -> None:
    """Print forecast summary to stdout."""
    print(f"\n{'=' * 60}")
    print(f"Capacity Forecast from {format_date(forecast.start_date)}")
    print(f"{'=' * 60}")
    print(f"  Teams: {stats['total_teams']}")
    print(f"  Items: {stats['scheduled_items']}/{stats['total_items']} scheduled")
    print(f"  Remaining effort: {stats['remaining_effort']:.1f}")

    for team_forecast in forecast.team_forecasts.values():
        metrics = team_forecast.metrics
        print(f"\n  {team_forecast.team.name} ({team_forecast.team.id}):")
        print(f"    {format_months(metrics.months_to_complete)} left, "
              f"completes {format_date(metrics.completion_date)}")
        for entry in team_forecast.schedule[:5]:
            print(f"    - {entry.item.id}: {entry.start_date} -> {entry.end_date}")
        if len(team_forecast.schedule) > 5:
            print(f"    ... and {len(team_forecast.schedule) - 5} more items")

    if stats["unassigned_items"]:
        print(f"\n  Unassigned items: {stats['unassigned_items']}")
    if stats["teams_never_completing"]:
        print(f"  Never completing: {', '.join(stats['teams_never_completing'])}")


def run_forecast(
    request: PlanningRequest,
    config: ForecastConfig,
    text_path: Optional[str] = None,
    output_path: Optional[str] = None,
) -> None:
    """Forecast, validate and report."""
    planner = CapacityPlanner(config)
    forecast, stats = planner.forecast_with_stats(request)

    print_forecast(forecast, stats)

    result = ScheduleValidator().validate(forecast)
    if result.is_valid:
        print("\n  Validation: PASSED")
    else:
        print(f"\n  Validation: FAILED ({len(result.errors)} errors)")
        for error in result.errors[:5]:
            print(f"    - {error}")
        if len(result.errors) > 5:
            print(f"    ... and {len(result.errors) - 5} more errors")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings[:3]:
            print(f"    - {warning}")
        if len(result.warnings) > 3:
            print(f"    ... and {len(result.warnings) - 3} more warnings")

    if text_path:
        ForecastReportGenerator().generate(forecast, text_path)
        print(f"\nText report written to {text_path}")

    if output_path:
        print(f"\nGenerating PDF: {output_path}")
        PDFGenerator().generate(forecast, output_path)
        print("  PDF created successfully!")


def run_demo(
    team_count: int,
    item_count: int,
    start_date: date,
    config: ForecastConfig,
    output_path: Optional[str] = None,
) -> None:
    """Run a demo forecast with sample data."""
    print(f"Forecasting {item_count} work items across {team_count} teams...")
    teams = create_sample_teams(team_count, start_date)
    request = PlanningRequest(
        start_date=start_date,
        teams=teams,
        work_items=create_sample_work_items(item_count, teams),
    )
    run_forecast(request, config, output_path=output_path)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected YYYY-MM-DD)")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--start", "-s",
        type=_parse_date,
        default=None,
        help="Planning start date YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--max-months", "-m",
        type=int,
        default=ForecastConfig.max_months,
        help=f"Planning horizon in months (default: {ForecastConfig.max_months})",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output PDF file path",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Capacity Planner - Team Backlog Forecasting Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                          Forecast sample data for 3 teams
  %(prog)s demo --teams 5 --items 40     Larger sample
  %(prog)s demo --output forecast.pdf    Generate PDF output

  %(prog)s forecast plan.json            Forecast teams and items from JSON
  %(prog)s forecast plan.json --start 2025-01-01 --text forecast.txt
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", help="Run demo forecast with sample data")
    demo_parser.add_argument(
        "--teams", "-t",
        type=int,
        default=3,
        help="Number of teams to generate (default: 3)",
    )
    demo_parser.add_argument(
        "--items", "-i",
        type=int,
        default=12,
        help="Number of work items to generate (default: 12)",
    )
    _add_common_arguments(demo_parser)

    forecast_parser = subparsers.add_parser("forecast", help="Forecast a plan from a JSON file")
    forecast_parser.add_argument("input", type=Path, help="JSON file with teams and work_items")
    forecast_parser.add_argument(
        "--text",
        type=str,
        help="Output text report file path",
    )
    _add_common_arguments(forecast_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_USAGE

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ForecastConfig(max_months=args.max_months)
    except ValueError as e:
        parser.error(str(e))

    start_date = args.start or date.today()

    if args.command == "demo":
        run_demo(args.teams, args.items, start_date, config, args.output)
        return EXIT_OK

    try:
        request = load_request(args.input, start_date)
    except (OSError, KeyError, ValueError, TypeError) as e:
        print(f"Error: cannot load {args.input}: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    run_forecast(request, config, args.text, args.output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
