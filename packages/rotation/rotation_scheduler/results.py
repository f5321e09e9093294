"""
Turn goal paths of the search into schedules.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from .models import Assignment, Candidate, Schedule, Slot

if TYPE_CHECKING:
    from .core import TraversalNode


def extract_path(goal: TraversalNode) -> list[tuple[int, int]]:
    """Walk from a leaf back to its root; return slot-ascending (slot, candidate) pairs."""
    path: list[tuple[int, int]] = []
    entry: TraversalNode | None = goal
    while entry is not None:
        path.append((entry.node.slot_index, entry.node.candidate_index))
        entry = entry.parent
    path.reverse()
    return path


def to_schedule(
    goal: TraversalNode, candidates: Sequence[Candidate], slots: Sequence[Slot]
) -> Schedule:
    path = extract_path(goal)
    assignments = tuple(
        Assignment(
            slot_index=slot_index,
            date=slots[slot_index].date,
            candidate_id=candidates[candidate_index].id,
        )
        for slot_index, candidate_index in path
    )
    return Schedule(
        assignments=assignments,
        cost=goal.cost,
        candidate_indices=tuple(candidate_index for _, candidate_index in path),
    )
