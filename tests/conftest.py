"""Shared fixtures and helpers for the test suite."""

import pytest

from engine.stepper import Stepper
from graph import Graph


def drain(gen):
    """Run a generator to exhaustion.  Returns (snapshots, return value)."""
    steps = []
    while True:
        try:
            steps.append(next(gen))
        except StopIteration as stop:
            return steps, stop.value


def graph_from_edges(edges, directed=False, nodes=None):
    """Build a Graph from (source, target[, weight]) tuples."""
    g = Graph(directed=directed)
    ids = list(nodes or [])
    for edge in edges:
        for end in edge[:2]:
            if end not in ids:
                ids.append(end)
    for node_id in ids:
        g.create_node(node_id)
    for edge in edges:
        weight = edge[2] if len(edge) > 2 else 1.0
        g.create_edge(edge[0], edge[1], weight=weight)
    return g


class RecordingSleep:
    """Stand-in for time.sleep that records every requested duration."""

    def __init__(self, hook=None):
        self.calls = []
        self.hook = hook

    def __call__(self, seconds):
        self.calls.append(seconds)
        if self.hook is not None:
            self.hook(len(self.calls))


@pytest.fixture
def no_sleep_stepper():
    """A Stepper that never really sleeps."""
    return Stepper(sleep=RecordingSleep(), delay_scale=0.0)


@pytest.fixture
def triangle_graph():
    """A-B 1, B-C 1, A-C 4: the shortest A→C path goes through B."""
    return graph_from_edges([("A", "B", 1), ("B", "C", 1), ("A", "C", 4)])


@pytest.fixture
def tree_graph():
    """A small undirected tree: A-B, A-C, B-D, B-E, C-F."""
    return graph_from_edges([("A", "B"), ("A", "C"), ("B", "D"), ("B", "E"), ("C", "F")])


@pytest.fixture
def mst_graph():
    """Classic 5-node weighted graph whose MST weighs 16."""
    return graph_from_edges([
        ("A", "B", 2), ("A", "D", 6), ("B", "C", 3), ("B", "D", 8),
        ("B", "E", 5), ("C", "E", 7), ("D", "E", 9),
    ])
