"""Tests for BFS, DFS, Dijkstra, Prim and Kruskal."""

import pytest

from algorithms.bfs import bfs, reconstruct_path
from algorithms.dfs import dfs
from algorithms.dijkstra import dijkstra
from algorithms.errors import InvalidGraphError
from algorithms.kruskal import UnionFind, kruskal
from algorithms.prim import prim
from algorithms.step import GraphStep
from conftest import drain, graph_from_edges


class TestBFS:
    """Breadth-first traversal order, parents and snapshots."""

    def test_visit_order(self, tree_graph):
        """Nodes are visited layer by layer."""
        _, result = drain(bfs(tree_graph, "A"))
        assert result.visited == ("A", "B", "C", "D", "E", "F")

    def test_parents(self, tree_graph):
        """Every non-start node records the node that discovered it."""
        _, result = drain(bfs(tree_graph, "A"))
        assert result.parents == {"B": "A", "C": "A", "D": "B", "E": "B", "F": "C"}

    def test_no_revisit(self, triangle_graph):
        """No node appears twice in the visited order, even with cycles."""
        _, result = drain(bfs(triangle_graph, "A"))
        assert sorted(result.visited) == ["A", "B", "C"]

    def test_start_only_component(self):
        """Nodes unreachable from the start are never visited."""
        g = graph_from_edges([("A", "B"), ("C", "D")])
        _, result = drain(bfs(g, "A"))
        assert result.visited == ("A", "B")

    def test_directed_edges_respected(self):
        """Directed edges are only followed forwards."""
        g = graph_from_edges([("A", "B"), ("C", "A")], directed=True)
        _, result = drain(bfs(g, "A"))
        assert result.visited == ("A", "B")

    def test_snapshots_are_independent(self, tree_graph):
        """Snapshots do not change after the generator moves on."""
        steps, _ = drain(bfs(tree_graph, "A"))
        assert steps[0].visited == ()
        assert steps[0].frontier == ("A",)
        assert steps[0].explored == ()
        assert all(isinstance(s, GraphStep) for s in steps)

    def test_tree_edges_follow_examining(self, tree_graph):
        """A tree edge is always preceded by an examining event for it."""
        _, result = drain(bfs(tree_graph, "A"))
        events = [(e.source, e.target, e.kind) for e in result.explored]
        for i, (s, t, kind) in enumerate(events):
            if kind == "tree":
                assert events[i - 1] == (s, t, "examining")

    def test_examine_steps_are_brief(self, tree_graph):
        """Edge examination snapshots carry delay factor 0.5."""
        steps, _ = drain(bfs(tree_graph, "A"))
        assert {s.delay_factor for s in steps if s.line == 6} == {0.5}

    def test_reconstruct_path(self, tree_graph):
        """The parent map yields the start→target path."""
        _, result = drain(bfs(tree_graph, "A"))
        assert reconstruct_path(result.parents, "E") == ["A", "B", "E"]
        assert reconstruct_path(result.parents, "A") == ["A"]


class TestDFS:
    """Depth-first traversal."""

    def test_visit_order(self, tree_graph):
        """DFS dives into the first neighbour before the second."""
        _, result = drain(dfs(tree_graph, "A"))
        assert result.visited == ("A", "B", "D", "E", "C", "F")

    def test_parents(self, tree_graph):
        """Tree edges record the node a node was reached from."""
        _, result = drain(dfs(tree_graph, "A"))
        assert result.parents == {"B": "A", "D": "B", "E": "B", "C": "A", "F": "C"}

    def test_no_revisit_on_cycle(self, triangle_graph):
        """Each node is visited once."""
        _, result = drain(dfs(triangle_graph, "A"))
        assert len(result.visited) == len(set(result.visited)) == 3

    def test_cursor_is_current_node(self, tree_graph):
        """GraphStep.cursor is the node being expanded."""
        steps, _ = drain(dfs(tree_graph, "A"))
        assert steps[1].cursor == "A"


class TestDijkstra:
    """Shortest paths with non-negative weights."""

    def test_triangle(self, triangle_graph):
        """A→C costs 2 via B, not 4 directly."""
        _, result = drain(dijkstra(triangle_graph, "A"))
        assert result.distances == {"A": 0.0, "B": 1.0, "C": 2.0}
        assert result.parents["C"] == "B"

    def test_unreachable_distance_is_infinite(self):
        """Nodes outside the start's component keep distance ∞."""
        g = graph_from_edges([("A", "B", 3)], nodes=["A", "B", "Z"])
        _, result = drain(dijkstra(g, "A"))
        assert result.distances["Z"] == float("inf")
        assert "Z" not in result.visited

    def test_nodes_finalised_in_distance_order(self):
        """Visited order is non-decreasing in final distance."""
        g = graph_from_edges([("A", "B", 7), ("A", "C", 9), ("A", "F", 14), ("B", "C", 10),
                              ("B", "D", 15), ("C", "D", 11), ("C", "F", 2), ("D", "E", 6), ("E", "F", 9)])
        _, result = drain(dijkstra(g, "A"))
        dists = [result.distances[n] for n in result.visited]
        assert dists == sorted(dists)
        assert result.distances["E"] == 20

    def test_relaxation_records_distance(self, triangle_graph):
        """Tree edges carry the tentative distance they produced."""
        _, result = drain(dijkstra(triangle_graph, "A"))
        tree = [e for e in result.explored if e.kind == "tree"]
        assert ("A", "C", 4.0) in [(e.source, e.target, e.distance) for e in tree]
        assert ("B", "C", 2.0) in [(e.source, e.target, e.distance) for e in tree]

    def test_negative_weight_rejected(self):
        """Negative weights raise InvalidGraphError."""
        g = graph_from_edges([("A", "B", -1)])
        with pytest.raises(InvalidGraphError):
            drain(dijkstra(g, "A"))


class TestMinimumSpanningTree:
    """Prim and Kruskal agree on total weight."""

    def test_kruskal_weight(self, mst_graph):
        """The classic graph's MST weighs 16 with 4 edges."""
        _, result = drain(kruskal(mst_graph))
        assert result.total_weight == 16
        assert len(result.mst_edges) == 4

    def test_prim_weight(self, mst_graph):
        """Prim from any start finds the same total weight."""
        for start in mst_graph.node_ids():
            _, result = drain(prim(mst_graph, start))
            assert result.total_weight == 16
            assert len(result.mst_edges) == 4

    def test_kruskal_rejects_cycle_edge(self, triangle_graph):
        """The heaviest triangle edge closes a cycle and is skipped."""
        _, result = drain(kruskal(triangle_graph))
        accepted = {(e.source, e.target) for e in result.mst_edges}
        assert accepted == {("A", "B"), ("B", "C")}

    def test_kruskal_forest_on_disconnected_graph(self):
        """A disconnected graph yields a spanning forest."""
        g = graph_from_edges([("A", "B", 1), ("C", "D", 2)])
        _, result = drain(kruskal(g))
        assert result.total_weight == 3
        assert len(result.mst_edges) == 2

    def test_prim_ignores_direction(self):
        """Prim treats directed edges as undirected."""
        g = graph_from_edges([("B", "A", 1), ("B", "C", 2)], directed=True)
        _, result = drain(prim(g, "A"))
        assert result.total_weight == 3


class TestUnionFind:
    """Disjoint-set helper."""

    def test_union_and_find(self):
        """union merges, a repeated union reports False."""
        uf = UnionFind("abcd")
        assert uf.union("a", "b")
        assert uf.union("c", "d")
        assert not uf.union("b", "a")
        assert uf.find("a") == uf.find("b")
        assert uf.find("a") != uf.find("c")
        assert uf.union("a", "d")
        assert len({uf.find(x) for x in "abcd"}) == 1
