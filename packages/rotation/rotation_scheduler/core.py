"""
Branch-and-bound search for fair rotation schedules.

The search walks the shared assignment graph through an overlay of
traversal nodes that carry the path-dependent fairness cost, pruning any
branch whose admissible lower bound cannot beat the best complete path
found so far.
"""

from __future__ import annotations

import logging
import math
import time as time_module
from collections.abc import Mapping, Sequence, Iterable
from dataclasses import dataclass, field
from datetime import date

from .availability import AvailabilityContext, validate_inputs
from .exceptions import ComputationTimeout, ConfigurationError, SchedulingInfeasible
from .fairness import (
    ROOT_COST,
    Visibility,
    cost_floor,
    incremental_cost,
    initial_visibility,
    remaining_lower_bound,
    update_visibility,
)
from .graph import AssignmentGraph, GraphNode
from .models import Candidate, ScheduleResult, SearchStats, Slot
from .results import to_schedule
from .sources import merge_conflicts

logger = logging.getLogger(__name__)

# How often (in expansions) the wall-clock budget is checked
_CLOCK_CHECK_INTERVAL = 256

# Budget applied when the caller sets none; pass None to search unbounded
DEFAULT_MAX_STEPS = 5_000_000
DEFAULT_MAX_TIME_IN_SECONDS = 30.0


@dataclass(frozen=True)
class SearchConfig:
    # Keep every bound-passing child instead of only the cheapest ones.
    # Provably optimal, but explores far more of the graph.
    strict: bool = False
    stop_at_floor: bool = True
    max_steps: int | None = DEFAULT_MAX_STEPS
    max_time_in_seconds: float | None = DEFAULT_MAX_TIME_IN_SECONDS
    log_search_progress: bool = False
    progress_interval: int = 10_000

    def __post_init__(self):
        if self.max_steps is not None and self.max_steps <= 0:
            raise ConfigurationError("Step budget must be positive", "max_steps")
        if self.max_time_in_seconds is not None and self.max_time_in_seconds <= 0:
            raise ConfigurationError(
                "Time budget must be positive", "max_time_in_seconds"
            )
        if self.progress_interval <= 0:
            raise ConfigurationError(
                "Progress interval must be positive", "progress_interval"
            )


class TraversalNode:
    """One explored path prefix.

    Owned by exactly one frontier entry; never shared or memoized. The
    visibility map is derived from the parent on first use, so nodes that
    are pruned from the frontier before expansion never pay for it.
    """

    __slots__ = ("node", "parent", "cost", "_visibility")

    def __init__(
        self,
        node: GraphNode,
        parent: TraversalNode | None,
        cost: int,
        visibility: Visibility | None = None,
    ):
        self.node = node
        self.parent = parent
        self.cost = cost
        self._visibility = visibility

    @property
    def visibility(self) -> Visibility:
        if self._visibility is None:
            self._visibility = update_visibility(
                self.parent.visibility, self.node.candidate_index
            )
        return self._visibility

    @property
    def is_leaf(self) -> bool:
        return self.node.is_leaf


@dataclass
class _SearchState:
    """Mutable state of a single solve() call."""

    lowest_cost: float = math.inf
    goals: list[TraversalNode] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)
    floor_reached: bool = False

    def offer_leaf(self, leaf: TraversalNode) -> None:
        self.stats.leaves_reached += 1
        if leaf.cost < self.lowest_cost:
            self.lowest_cost = leaf.cost
            self.goals = [leaf]
        elif leaf.cost == self.lowest_cost:
            self.goals.append(leaf)


class RotationScheduler:
    """Find the fairest complete rotation for one roster and slot sequence.

    Each instance owns its graph and cache; build a new one per request.
    """

    def __init__(
        self,
        candidates: Sequence[Candidate],
        slots: Sequence[Slot],
        context: AvailabilityContext | None = None,
        config: SearchConfig | None = None,
    ):
        validate_inputs(candidates, slots)
        self.candidates = list(candidates)
        self.slots = list(slots)
        self.context = context
        self.config = config or SearchConfig()
        self.num_candidates = len(self.candidates)
        self.num_slots = len(self.slots)
        self.graph = AssignmentGraph(self.candidates, self.slots, context)

    def _raise_infeasible(self) -> None:
        slot_index = self.graph.first_unreachable_slot()
        if slot_index is None:
            # Every layer is populated but no leaf was reached
            slot_index = self.num_slots - 1
        raise SchedulingInfeasible(slot_index, self.slots[slot_index].date)

    def _expand(
        self, entry: TraversalNode, state: _SearchState
    ) -> list[TraversalNode]:
        """Return the children of ``entry`` that survive pruning.

        Cheapest first; equal costs keep roster order.
        """
        survivors: list[tuple[int, TraversalNode]] = []
        visibility = entry.visibility

        for child in entry.node.children:
            increment = incremental_cost(visibility, child.candidate_index)
            child_cost = entry.cost + increment
            bound = child_cost + remaining_lower_bound(self.num_slots, child.depth)
            if bound >= state.lowest_cost:
                state.stats.pruned += 1
                continue
            survivors.append((increment, TraversalNode(child, entry, child_cost)))

        if not survivors:
            return []

        if self.config.strict:
            # Stable sort: ties stay in roster order
            survivors.sort(key=lambda item: item[0])
            return [candidate for _, candidate in survivors]

        cheapest = min(increment for increment, _ in survivors)
        kept = []
        for increment, candidate in survivors:
            if increment == cheapest:
                kept.append(candidate)
            else:
                state.stats.pruned += 1
        return kept

    def _check_budget(self, state: _SearchState, started: float) -> None:
        steps = state.stats.expansions
        if self.config.max_steps is not None and steps > self.config.max_steps:
            raise ComputationTimeout(
                steps, time_module.perf_counter() - started, "step budget"
            )
        if (
            self.config.max_time_in_seconds is not None
            and steps % _CLOCK_CHECK_INTERVAL == 0
        ):
            elapsed = time_module.perf_counter() - started
            if elapsed > self.config.max_time_in_seconds:
                raise ComputationTimeout(steps, elapsed, "time budget")

    def _search(self, state: _SearchState, started: float) -> None:
        floor = cost_floor(self.num_slots)

        # LIFO frontier; pushed in reverse so the first roster candidate pops first
        frontier: list[TraversalNode] = [
            TraversalNode(
                root,
                None,
                ROOT_COST,
                initial_visibility(self.num_candidates, root.candidate_index),
            )
            for root in reversed(self.graph.roots)
        ]

        while frontier:
            entry = frontier.pop()
            stats = state.stats
            if entry.node.depth > stats.max_depth_reached:
                stats.max_depth_reached = entry.node.depth

            if entry.is_leaf:
                state.offer_leaf(entry)
                if state.lowest_cost <= floor and self.config.stop_at_floor:
                    state.floor_reached = True
                    logger.debug(f"Cost floor {floor} reached, stopping search")
                    return
                continue

            # A bound found after this entry was pushed may already rule it out
            bound = entry.cost + remaining_lower_bound(self.num_slots, entry.node.depth)
            if bound >= state.lowest_cost:
                stats.pruned += 1
                continue

            stats.expansions += 1
            self._check_budget(state, started)
            if (
                self.config.log_search_progress
                and stats.expansions % self.config.progress_interval == 0
            ):
                logger.info(
                    f"Search progress: {stats.expansions} expansions, "
                    f"frontier={len(frontier)}, best={state.lowest_cost}"
                )

            frontier.extend(reversed(self._expand(entry, state)))

        state.floor_reached = state.lowest_cost <= floor

    def solve(self) -> ScheduleResult:
        """Run the search and return every tied minimal-cost schedule.

        Raises:
            SchedulingInfeasible: no complete assignment exists
            ComputationTimeout: the configured budget was exhausted
        """
        started = time_module.perf_counter()
        state = _SearchState()

        self.graph.build_roots()
        state.stats.nodes_built = self.graph.node_count

        if self.graph.first_unreachable_slot() is not None:
            self._raise_infeasible()

        self._search(state, started)

        if not state.goals:
            self._raise_infeasible()

        if state.floor_reached:
            status = "FLOOR_REACHED"
        elif self.config.strict:
            status = "OPTIMAL"
        else:
            status = "HEURISTIC"

        schedules = [to_schedule(goal, self.candidates, self.slots) for goal in state.goals]
        solve_time = time_module.perf_counter() - started

        logger.info(
            f"Rotation search finished: status={status}, cost={state.lowest_cost}, "
            f"tied_schedules={len(schedules)}, expansions={state.stats.expansions}, "
            f"pruned={state.stats.pruned}, time={solve_time:.3f}s"
        )

        return ScheduleResult(
            schedules=schedules,
            cost=int(state.lowest_cost),
            optimization_status=status,
            solve_time_seconds=solve_time,
            stats=state.stats,
        )


def build_schedule(
    candidates: Sequence[Candidate],
    slots: Sequence[Slot],
    *,
    conflicts: Mapping[str, Iterable[date]] | None = None,
    config: SearchConfig | None = None,
) -> ScheduleResult:
    """
    Build the fairest rotation for the given roster and slots.

    Args:
        candidates: Roster in the fixed order used to break ties
        slots: Slot sequence, dates strictly ascending
        conflicts: Dates each candidate already covers elsewhere; merged
            into the blackout sets before the graph is built
        config: Search options and budget

    Returns:
        ScheduleResult holding every tied minimal-cost schedule
    """
    if conflicts:
        candidates = merge_conflicts(candidates, conflicts)
    scheduler = RotationScheduler(candidates, slots, config=config)
    return scheduler.solve()
