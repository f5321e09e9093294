"""
Tests for the memoized assignment graph.
"""

from factories import make_candidates, make_slots
from rotation_scheduler.availability import AvailabilityContext
from rotation_scheduler.graph import AssignmentGraph


class TestGraphConstruction:
    """Shape of the graph without blackouts."""

    def test_roots_one_per_candidate(self):
        """Each candidate feasible at slot 0 gets a root."""
        graph = AssignmentGraph(make_candidates(3), make_slots(4))
        roots = graph.build_roots()

        assert [root.candidate_index for root in roots] == [0, 1, 2]
        assert all(root.slot_index == 0 and root.depth == 1 for root in roots)

    def test_node_count_is_candidates_times_slots(self):
        """Without blackouts every (slot, candidate) pair is materialized once."""
        graph = AssignmentGraph(make_candidates(3), make_slots(4))
        graph.build_roots()

        assert graph.node_count == 12
        assert graph.layer_sizes() == [3, 3, 3, 3]

    def test_children_follow_roster_order(self):
        """Children are linked in roster order."""
        graph = AssignmentGraph(make_candidates(4), make_slots(3))
        root = graph.build_roots()[2]

        assert [child.candidate_index for child in root.children] == [0, 1, 2, 3]
        assert all(child.slot_index == 1 for child in root.children)

    def test_only_last_slot_is_leaf(self):
        """Leaves sit at the last slot and have no children."""
        graph = AssignmentGraph(make_candidates(2), make_slots(3))
        graph.build_roots()

        for slot_index in range(3):
            for candidate_index in range(2):
                node = graph.get(slot_index, candidate_index)
                assert node.is_leaf is (slot_index == 2)
                if node.is_leaf:
                    assert node.children == []

    def test_shared_descendants_are_identical_instances(self):
        """Paths through the same pair share one node."""
        graph = AssignmentGraph(make_candidates(3), make_slots(3))
        roots = graph.build_roots()

        shared = roots[0].children[1]
        assert roots[1].children[1] is shared
        assert roots[2].children[1] is shared
        assert graph.get(1, 1) is shared

    def test_build_returns_memoized_node(self):
        """Building a cached root creates nothing new."""
        graph = AssignmentGraph(make_candidates(3), make_slots(3))
        first = graph.build(0)
        count = graph.node_count

        assert graph.build(0) is first
        assert graph.node_count == count

    def test_second_root_reuses_cached_subtrees(self):
        graph = AssignmentGraph(make_candidates(3), make_slots(5))
        graph.build(0)
        after_first_root = graph.node_count
        graph.build(1)

        # Only the new root itself is created; its whole subtree is shared
        assert graph.node_count == after_first_root + 1

    def test_nodes_at_a_slot_share_one_children_list(self):
        """Children depend only on the next slot, so the list is linked once per layer."""
        slots = make_slots(4)
        candidates = make_candidates(3, {1: [slots[2].date]})
        graph = AssignmentGraph(candidates, slots)
        roots = graph.build_roots()

        assert roots[0].children is roots[1].children is roots[2].children
        layer_one = [graph.get(1, i) for i in range(3)]
        assert layer_one[0].children is layer_one[2].children
        assert [child.candidate_index for child in layer_one[1].children] == [0, 2]


class TestGraphAvailability:
    """Infeasible pairs are never materialized."""

    def test_blacked_out_pair_is_pruned(self):
        """A blacked-out pair never becomes a node."""
        slots = make_slots(3)
        candidates = make_candidates(3, {1: [slots[1].date]})
        graph = AssignmentGraph(candidates, slots)
        roots = graph.build_roots()

        assert graph.get(1, 1) is None
        assert graph.layer_sizes() == [3, 2, 3]
        for root in roots:
            assert [child.candidate_index for child in root.children] == [0, 2]

    def test_infeasible_root_returns_none(self):
        """An unavailable candidate has no root."""
        slots = make_slots(2)
        candidates = make_candidates(2, {0: [slots[0].date]})
        graph = AssignmentGraph(candidates, slots)

        assert graph.build(0) is None
        assert [root.candidate_index for root in graph.build_roots()] == [1]

    def test_context_conflicts_prune_nodes(self):
        """Injected conflicts prune nodes like blackouts."""
        slots = make_slots(2)
        context = AvailabilityContext.from_mapping({"m2": [slots[1].date]})
        graph = AssignmentGraph(make_candidates(2), slots, context)
        graph.build_roots()

        assert graph.get(1, 1) is None
        assert graph.get(1, 0) is not None

    def test_first_unreachable_slot(self):
        """The first empty layer is reported and its parents dead-end."""
        slots = make_slots(4)
        everyone_out = {i: [slots[2].date] for i in range(3)}
        graph = AssignmentGraph(make_candidates(3, everyone_out), slots)
        graph.build_roots()

        assert graph.layer_sizes() == [3, 3, 0, 0]
        assert graph.first_unreachable_slot() == 2
        dead_end = graph.get(1, 0)
        assert dead_end.is_leaf is False
        assert dead_end.children == []

    def test_fully_reachable_graph_has_no_unreachable_slot(self):
        graph = AssignmentGraph(make_candidates(2), make_slots(3))
        graph.build_roots()
        assert graph.first_unreachable_slot() is None


class TestGraphBounds:
    """Node count stays within candidates x slots."""

    def test_memoization_bound_with_blackouts(self):
        """Blackouts only ever shrink the graph."""
        slots = make_slots(40)
        blackouts = {
            k: [slot.date for slot in slots if (slot.index * 7 + k * 3) % 5 == 0]
            for k in range(6)
        }
        graph = AssignmentGraph(make_candidates(6, blackouts), slots)
        graph.build_roots()

        assert graph.node_count <= 6 * 40

    def test_long_horizon_does_not_recurse(self):
        """Test that a long horizon builds without hitting the recursion limit"""
        graph = AssignmentGraph(make_candidates(2), make_slots(5000))
        roots = graph.build_roots()

        assert len(roots) == 2
        assert graph.node_count == 10000
        assert graph.get(4999, 1).is_leaf
