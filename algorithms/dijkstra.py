"""
dijkstra.py — Dijkstra's Shortest-Path Algorithm
==================================================
Generator-based Dijkstra using a min-heap (heapq) keyed by
(tentative distance, insertion sequence).  The sequence number makes
ties resolve in insertion order, so runs are deterministic.

Yields a GraphStep at:
  1. Initialise distances / push start
  2. Pop minimum-distance node  →  CURRENT, distance final
  3. Each edge to an unfinalised neighbour  →  "examining" edge (with weight)
  4. Successful relaxation  →  "tree" edge (with new distance), parent updated

Stale heap entries (a better distance was pushed later) are skipped
silently.  Distances are ∞ for every node except the start.

Correctness note: Dijkstra requires non-negative weights; a graph with a
negative edge is rejected before the first step.
"""

import heapq
import itertools
from typing import Dict, Generator, List, Set, Tuple

from graph import Graph
from algorithms.errors import InvalidGraphError
from algorithms.step import GraphResult, GraphStep, GraphStepBuilder


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Dijkstra(graph, start):",                # 0
    "    dist ← {v: ∞ for v in V}",               # 1
    "    dist[start] ← 0; pq ← [(0, start)]",     # 2
    "    while pq is not empty:",                  # 3
    "        (d, node) ← pq.pop_min()",           # 4
    "        if node finalised: continue",        # 5
    "        for (neighbour, w) in adj(node):",   # 6
    "            new_dist ← dist[node] + w",      # 7
    "            if new_dist < dist[neighbour]:", # 8
    "                dist[neighbour] ← new_dist", # 9
    "                parent[neighbour] = node",   # 10
    "                pq.push((new_dist, nbr))",   # 11
    "    return dist, parent",                    # 12
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dijkstra(graph: Graph, start: str) -> Generator[GraphStep, None, GraphResult]:
    if graph.has_negative_edges():
        raise InvalidGraphError("Dijkstra requires non-negative edge weights")

    INF = float("inf")
    seq = itertools.count()

    sb = GraphStepBuilder()
    sb.distances = {nid: INF for nid in graph.nodes}
    sb.distances[start] = 0.0
    pq: List[Tuple[float, int, str]] = [(0.0, next(seq), start)]   # (distance, seq, node_id)
    finalised: Set[str] = set()

    # --- init step ---
    sb.frontier    = [start]
    sb.line        = 2
    sb.explanation = f"Initialise: all distances = ∞ except start '{start}' = 0."
    yield sb.build()

    # --- main loop ---
    while pq:
        d, _, node = heapq.heappop(pq)
        if node in finalised:
            continue
        finalised.add(node)

        sb.visit(node)
        sb.frontier    = _frontier(pq, finalised)
        sb.line        = 4
        sb.explanation = f"Pop '{node}' with distance {d}; this distance is now final."
        yield sb.build()

        for nbr, edge in graph.neighbours(node):
            if nbr in finalised:
                continue

            sb.examine(node, nbr, edge.weight)
            sb.line        = 8
            sb.explanation = f"Examine {node}→{nbr} (w={edge.weight})."
            yield sb.build(delay_factor=0.5)

            new_dist = sb.distances[node] + edge.weight
            if new_dist < sb.distances[nbr]:
                sb.distances[nbr] = new_dist
                sb.tree_edge(node, nbr, edge.weight, distance=new_dist)
                heapq.heappush(pq, (new_dist, next(seq), nbr))
                sb.frontier    = _frontier(pq, finalised)
                sb.line        = 9
                sb.explanation = f"Relax {node}→{nbr}: distance improves to {new_dist}."
                yield sb.build()

    sb.current = None
    return sb.result()


def _frontier(pq: List[Tuple[float, int, str]], finalised: Set[str]) -> List[str]:
    # pop order, without stale duplicates
    seen: Dict[str, None] = {}
    for _, _, n in sorted(pq):
        if n not in finalised:
            seen.setdefault(n, None)
    return list(seen)
