"""Capacity scheduling and forecasting engine."""

from capacityplanner.scheduling.backlog import compute_backlog_metrics, compute_schedule
from capacityplanner.scheduling.cursor import (
    CapacityCursor,
    ConsumeResult,
    CursorState,
    ForecastConfig,
    StepResult,
    WorkDuration,
    consume,
)
from capacityplanner.scheduling.planner import CapacityPlanner

__all__ = [
    # Planner
    "CapacityPlanner",
    # Single-team forecasting
    "compute_backlog_metrics",
    "compute_schedule",
    # Cursor
    "CapacityCursor",
    "CursorState",
    "consume",
    "ConsumeResult",
    "StepResult",
    "WorkDuration",
    # Configuration
    "ForecastConfig",
]
