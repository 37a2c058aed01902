"""
bfs.py — Breadth-First Search
==============================
Generator-based BFS over the start node's component.  Yields a GraphStep at:
  1. Initialise  →  start placed in the queue
  2. Dequeue a node  →  mark it visited / CURRENT
  3. Examine an edge to an unvisited neighbour  →  "examining" edge
  4. First discovery of a neighbour  →  "tree" edge, parent recorded, enqueue

Nodes are marked visited on dequeue, not on enqueue.  A separate
`discovered` set stops a node from being enqueued twice.

Returns a GraphResult (visited order + parent map + explored edges).
"""

from collections import deque
from typing import Dict, Generator, List, Set

from graph import Graph
from algorithms.step import GraphResult, GraphStep, GraphStepBuilder


# ---------------------------------------------------------------------------
# Pseudocode: each string is one displayed line; index = GraphStep.line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BFS(graph, start):",                      # 0
    "    queue ← [start]; discovered ← {start}",   # 1
    "    while queue is not empty:",               # 2
    "        node ← queue.dequeue()",              # 3
    "        visited.add(node)",                   # 4
    "        for neighbour in adj(node):",         # 5
    "            if neighbour in visited: skip",   # 6
    "            if neighbour not discovered:",    # 7
    "                parent[neighbour] = node",    # 8
    "                queue.enqueue(neighbour)",    # 9
    "    return visited, parent",                  # 10
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def bfs(graph: Graph, start: str) -> Generator[GraphStep, None, GraphResult]:
    """
    Args:
        graph : The graph to traverse (read only).
        start : Starting node id.

    Yields:
        GraphStep – one per dequeue, edge examination and discovery.
    """
    sb = GraphStepBuilder()
    queue = deque([start])
    discovered: Set[str] = {start}

    # --- initialisation step ---
    sb.frontier    = list(queue)
    sb.line        = 1
    sb.explanation = f"Initialise: start node '{start}' is placed into the queue."
    yield sb.build()

    # --- main loop ---
    while queue:
        node = queue.popleft()
        sb.visit(node)
        sb.frontier    = list(queue)
        sb.line        = 4
        sb.explanation = f"Dequeue '{node}' and mark it visited (FIFO: earliest discovered first)."
        yield sb.build()

        for nbr, edge in graph.neighbours(node):
            if sb.is_visited(nbr):
                continue

            sb.examine(node, nbr, edge.weight)
            sb.line        = 6
            sb.explanation = f"Examine edge {node}→{nbr}."
            yield sb.build(delay_factor=0.5)

            if nbr not in discovered:
                discovered.add(nbr)
                sb.tree_edge(node, nbr, edge.weight)
                queue.append(nbr)
                sb.frontier    = list(queue)
                sb.line        = 9
                sb.explanation = f"'{nbr}' is new: parent = '{node}', enqueue it."
                yield sb.build()

    sb.current = None
    return sb.result()


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------
def reconstruct_path(parents: Dict[str, str], target: str) -> List[str]:
    """Walk the parent map back from target; [target] when it has no parent."""
    path: List[str] = []
    cur = target
    while cur is not None:
        path.append(cur)
        cur = parents.get(cur)
    path.reverse()
    return path
