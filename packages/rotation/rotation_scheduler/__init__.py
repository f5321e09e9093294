"""
Rotation Scheduler Package

Memoized assignment graph + branch-and-bound search for fair rotations.
"""

from .api import build_schedule_api
from .availability import AvailabilityContext, can_assign, validate_inputs
from .core import (
    DEFAULT_MAX_STEPS,
    DEFAULT_MAX_TIME_IN_SECONDS,
    RotationScheduler,
    SearchConfig,
    build_schedule,
)
from .exceptions import (
    ComputationTimeout,
    ConfigurationError,
    RotationSchedulerError,
    SchedulingInfeasible,
)
from .graph import AssignmentGraph, GraphNode
from .models import Assignment, Candidate, Schedule, ScheduleResult, SearchStats, Slot
from .sources import merge_conflicts, roster_from_records, slots_from_dates, weekly_slots

__version__ = "0.1.0"
__all__ = [
    "build_schedule",
    "build_schedule_api",
    "RotationScheduler",
    "SearchConfig",
    "DEFAULT_MAX_STEPS",
    "DEFAULT_MAX_TIME_IN_SECONDS",
    "AssignmentGraph",
    "GraphNode",
    "AvailabilityContext",
    "can_assign",
    "validate_inputs",
    "Candidate",
    "Slot",
    "Assignment",
    "Schedule",
    "ScheduleResult",
    "SearchStats",
    "RotationSchedulerError",
    "ConfigurationError",
    "SchedulingInfeasible",
    "ComputationTimeout",
    "merge_conflicts",
    "roster_from_records",
    "slots_from_dates",
    "weekly_slots",
]
