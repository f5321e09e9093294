"""
Assignment graph: a DAG of "candidate assigned at slot" nodes.

Nodes are memoized by ``(slot_index, candidate_index)`` so every path that
reaches the same pair shares one node, and the graph stays within
``num_candidates * num_slots`` nodes however many root paths exist.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .availability import AvailabilityContext, can_assign
from .models import Candidate, Slot

logger = logging.getLogger(__name__)


class GraphNode:
    """A candidate assigned at a slot."""

    __slots__ = ("slot_index", "candidate_index", "is_leaf", "children")

    def __init__(self, slot_index: int, candidate_index: int, is_leaf: bool):
        self.slot_index = slot_index
        self.candidate_index = candidate_index
        self.is_leaf = is_leaf
        self.children: list[GraphNode] = []

    @property
    def depth(self) -> int:
        """Number of slots assigned on any path ending at this node."""
        return self.slot_index + 1

    @property
    def key(self) -> tuple[int, int]:
        return (self.slot_index, self.candidate_index)

    def __repr__(self) -> str:
        return (
            f"GraphNode(slot={self.slot_index}, candidate={self.candidate_index}, "
            f"children={len(self.children)}, leaf={self.is_leaf})"
        )


class AssignmentGraph:
    """Arena and memoization cache for one scheduling request.

    The cache is never reused across requests; create a new graph for each
    search.
    """

    def __init__(
        self,
        candidates: Sequence[Candidate],
        slots: Sequence[Slot],
        context: AvailabilityContext | None = None,
    ):
        self.candidates = candidates
        self.slots = slots
        self.context = context
        self.num_candidates = len(candidates)
        self.num_slots = len(slots)
        self._cache: dict[tuple[int, int], GraphNode] = {}
        self.roots: list[GraphNode] = []
        # Feasibility ignores the parent, so every node at a slot has the
        # same children; the first completed list for a layer is shared
        self._layer_children: dict[int, list[GraphNode]] = {}

    @property
    def node_count(self) -> int:
        return len(self._cache)

    def get(self, slot_index: int, candidate_index: int) -> GraphNode | None:
        return self._cache.get((slot_index, candidate_index))

    def _materialize(
        self, slot_index: int, candidate_index: int
    ) -> tuple[GraphNode | None, bool]:
        """Return ``(node, created)``; node is None when the pair is infeasible."""
        key = (slot_index, candidate_index)
        node = self._cache.get(key)
        if node is not None:
            return node, False

        if not can_assign(
            self.candidates[candidate_index], self.slots[slot_index], self.context
        ):
            return None, False

        node = GraphNode(
            slot_index, candidate_index, is_leaf=slot_index == self.num_slots - 1
        )
        # Cached before its children exist so later requests for the key reuse it
        self._cache[key] = node
        return node, True

    def build(self, candidate_index: int, slot_index: int = 0) -> GraphNode | None:
        """Build (or fetch) the subgraph rooted at ``(slot_index, candidate_index)``.

        Equivalent to the recursive definition: a new node appends, in roster
        order, the node of every candidate feasible at the next slot, each
        built the same way. An explicit frame stack replaces recursion so long
        horizons do not hit the interpreter's recursion limit. Once one node
        at a slot has linked its children, later nodes at that slot reuse the
        same list instead of probing every candidate again.
        """
        root, created = self._materialize(slot_index, candidate_index)
        if root is None or not created:
            return root

        # Each frame is [node, next candidate index to try as a child]
        stack: list[list] = [[root, 0]]
        while stack:
            frame = stack[-1]
            node, next_index = frame
            if node.is_leaf:
                stack.pop()
                continue
            if next_index == 0:
                completed = self._layer_children.get(node.slot_index + 1)
                if completed is not None:
                    node.children = completed
                    stack.pop()
                    continue
            if next_index >= self.num_candidates:
                self._layer_children[node.slot_index + 1] = node.children
                stack.pop()
                continue
            frame[1] = next_index + 1

            child, child_created = self._materialize(node.slot_index + 1, next_index)
            if child is None:
                continue
            node.children.append(child)
            if child_created:
                stack.append([child, 0])

        return root

    def build_roots(self) -> list[GraphNode]:
        """Build one root per candidate at slot 0, sharing this graph's cache."""
        self.roots = []
        for candidate_index in range(self.num_candidates):
            root = self.build(candidate_index, 0)
            if root is not None:
                self.roots.append(root)

        logger.info(
            f"Assignment graph built: {self.node_count} nodes, "
            f"{len(self.roots)} roots, {self.num_slots} slots"
        )
        return self.roots

    def layer_sizes(self) -> list[int]:
        """Number of materialized nodes per slot."""
        sizes = [0] * self.num_slots
        for slot_index, _candidate_index in self._cache:
            sizes[slot_index] += 1
        return sizes

    def first_unreachable_slot(self) -> int | None:
        """First slot with no reachable eligible candidate, or None."""
        for slot_index, size in enumerate(self.layer_sizes()):
            if size == 0:
                return slot_index
        return None
