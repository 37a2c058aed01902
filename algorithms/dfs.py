"""
dfs.py — Depth-First Search
=============================
Generator-based DFS using an explicit stack (no Python recursion limit
issues, and every iteration is a place the run can be paused).

The stack holds (node, parent) pairs.  Neighbours are pushed in REVERSE
adjacency order so the first neighbour is popped first, giving the same
visiting order as the natural recursive DFS.  A node is marked visited,
and its parent / tree edge recorded, when it is popped.

Yields a GraphStep at:
  1. Push start onto the stack
  2. Pop an unvisited node  →  visited / CURRENT (+ tree edge)
  3. Examine each edge to an unvisited neighbour
"""

from typing import Generator, List, Optional, Tuple

from graph import Graph
from algorithms.step import GraphResult, GraphStep, GraphStepBuilder


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def DFS(graph, start):",                          # 0
    "    stack ← [(start, None)]",                     # 1
    "    while stack is not empty:",                   # 2
    "        (node, parent) ← stack.pop()",            # 3
    "        if node in visited: continue",            # 4
    "        visited.add(node); parent[node] = p",     # 5
    "        for neighbour in adj(node):",             # 6
    "            if neighbour not visited:",           # 7
    "                stack.push((neighbour, node))",   # 8  (reverse order)
    "    return visited, parent",                      # 9
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dfs(graph: Graph, start: str) -> Generator[GraphStep, None, GraphResult]:
    sb = GraphStepBuilder()
    stack: List[Tuple[str, Optional[str], Optional[float]]] = [(start, None, None)]

    # --- init step ---
    sb.frontier    = [start]
    sb.line        = 1
    sb.explanation = f"Initialise: push '{start}' onto the stack. DFS dives deep before backtracking."
    yield sb.build()

    # --- main loop ---
    while stack:
        node, parent, weight = stack.pop()
        if sb.is_visited(node):
            continue

        sb.visit(node)
        if parent is not None:
            sb.tree_edge(parent, node, weight)
        sb.frontier    = [n for n, _, _ in reversed(stack)]
        sb.line        = 5
        sb.explanation = (
            f"Pop '{node}' and mark it visited"
            + (f" (reached from '{parent}')." if parent is not None else ".")
        )
        yield sb.build()

        pending = []
        for nbr, edge in graph.neighbours(node):
            if sb.is_visited(nbr):
                continue
            sb.examine(node, nbr, edge.weight)
            sb.line        = 7
            sb.explanation = f"Examine edge {node}→{nbr}: '{nbr}' not visited yet, push it."
            yield sb.build(delay_factor=0.5)
            pending.append((nbr, node, edge.weight))

        # reverse so the first neighbour ends up on top
        stack.extend(reversed(pending))

    sb.current = None
    return sb.result()
