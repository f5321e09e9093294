"""
Data models for rotation scheduling.

Inputs (candidates and slots) are immutable for the duration of one search.
Outputs are plain dataclasses so the solver stays dependency-light; the
pydantic request/response models live in ``rotation_scheduler.api``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class Candidate:
    """Person (or resource) that can be assigned to a slot."""

    id: str
    label: str = ""
    blackout_dates: frozenset[date] = frozenset()

    @property
    def display_name(self) -> str:
        return self.label or self.id

    def with_blackouts(self, dates) -> Candidate:
        """Return a copy whose blackout set also contains ``dates``."""
        extra = frozenset(dates)
        if extra <= self.blackout_dates:
            return self
        return Candidate(
            id=self.id,
            label=self.label,
            blackout_dates=self.blackout_dates | extra,
        )


@dataclass(frozen=True)
class Slot:
    """Position in the slot sequence plus the calendar date it covers."""

    index: int
    date: date


@dataclass(frozen=True)
class Assignment:
    slot_index: int
    date: date
    candidate_id: str


@dataclass(frozen=True)
class Schedule:
    """One complete assignment, slot-ascending."""

    assignments: tuple[Assignment, ...]
    cost: int
    candidate_indices: tuple[int, ...] = ()

    def __len__(self) -> int:
        return len(self.assignments)

    def as_mapping(self) -> dict[date, str]:
        return {a.date: a.candidate_id for a in self.assignments}

    def assignment_counts(self) -> dict[str, int]:
        """Number of slots each candidate covers in this schedule."""
        return dict(Counter(a.candidate_id for a in self.assignments))

    @property
    def candidate_ids(self) -> list[str]:
        return [a.candidate_id for a in self.assignments]


@dataclass
class SearchStats:
    nodes_built: int = 0
    expansions: int = 0
    pruned: int = 0
    leaves_reached: int = 0
    max_depth_reached: int = 0


@dataclass
class ScheduleResult:
    """Result of a rotation search.

    ``schedules`` holds every goal path tied at ``cost``. Picking one of them
    is left to the caller; ``preferred`` applies the fixed roster order.
    """

    schedules: list[Schedule] = field(default_factory=list)
    cost: int = 0
    optimization_status: str = "UNKNOWN"
    solve_time_seconds: float = 0.0
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def success(self) -> bool:
        return bool(self.schedules)

    @property
    def preferred(self) -> Schedule | None:
        if not self.schedules:
            return None
        return min(self.schedules, key=lambda s: s.candidate_indices)
