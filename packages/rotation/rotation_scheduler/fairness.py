"""
Recency-based fairness cost.

Every candidate carries a "visibility" counter: set to ``num_candidates``
when assigned, then cooling down by one per slot. Reusing a candidate costs
its current visibility, so the cheapest path is the one that always picks
the least recently used eligible candidate.

Visibility depends on the path taken, not on the graph node, so it is kept
on the traversal overlay and never on the shared graph.
"""

from __future__ import annotations

Visibility = tuple[int, ...]

# Cost of the assignment at the first slot
ROOT_COST = 1

# Cheapest possible assignment
MIN_INCREMENT = 1


def initial_visibility(num_candidates: int, root_index: int) -> Visibility:
    values = [0] * num_candidates
    values[root_index] = num_candidates
    return tuple(values)


def update_visibility(visibility: Visibility, chosen: int) -> Visibility:
    """Cool every candidate down by one, then reset ``chosen`` to the maximum."""
    cooled = [value - 1 if value > 0 else 0 for value in visibility]
    cooled[chosen] = len(visibility)
    return tuple(cooled)


def incremental_cost(visibility: Visibility, candidate_index: int) -> int:
    return max(visibility[candidate_index], MIN_INCREMENT)


def cost_floor(num_slots: int) -> int:
    """Lowest total cost any complete path can have."""
    return num_slots * MIN_INCREMENT


def remaining_lower_bound(num_slots: int, depth: int) -> int:
    """Admissible estimate of the cost still to pay after ``depth`` slots."""
    return (num_slots - depth) * MIN_INCREMENT
