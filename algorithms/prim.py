"""
prim.py — Prim's Minimum Spanning Tree
========================================
Grows a spanning tree from the start node.  The heap is keyed by the
weight of the single edge that would attach a node to the tree, NOT by
cumulative distance (that would be Dijkstra), with an insertion sequence
as tie-break.

Edges are treated as undirected even on a directed graph.  Only the start
node's component is spanned.

Yields a GraphStep at:
  1. Initialise
  2. A node joins the tree  →  "tree" edge from its attaching parent
  3. Each candidate edge to a node outside the tree  →  "examining" edge
"""

import heapq
import itertools
from typing import Generator, List, Optional, Tuple

from graph import Graph
from algorithms.step import ExploredEdge, GraphResult, GraphStep, GraphStepBuilder


PSEUDOCODE: List[str] = [
    "def Prim(graph, start):",                          # 0
    "    pq ← [(0, start, None)]",                      # 1
    "    while pq is not empty:",                       # 2
    "        (w, node, parent) ← pq.pop_min()",         # 3
    "        if node in tree: continue",                # 4
    "        tree.add(node); mst.add((parent, node))",  # 5
    "        for (neighbour, w) in incident(node):",    # 6
    "            if neighbour not in tree:",            # 7
    "                pq.push((w, neighbour, node))",    # 8
    "    return mst",                                   # 9
]


def prim(graph: Graph, start: str) -> Generator[GraphStep, None, GraphResult]:
    seq = itertools.count()
    sb  = GraphStepBuilder()
    pq: List[Tuple[float, int, str, Optional[str]]] = [(0.0, next(seq), start, None)]
    mst_edges: List[ExploredEdge] = []
    total = 0.0

    sb.frontier    = [start]
    sb.line        = 1
    sb.explanation = f"Initialise: grow the tree from '{start}'."
    yield sb.build()

    while pq:
        w, _, node, parent = heapq.heappop(pq)
        if sb.is_visited(node):
            continue

        sb.visit(node)
        if parent is not None:
            mst_edges.append(sb.tree_edge(parent, node, w))
            total += w
            sb.explanation = f"Cheapest crossing edge {parent}–{node} (w={w}) joins the tree."
        else:
            sb.explanation = f"'{node}' starts the tree."
        sb.frontier = [n for _, _, n, _ in sorted(pq) if not sb.is_visited(n)]
        sb.line     = 5
        yield sb.build()

        for nbr, edge in graph.incident(node):
            if sb.is_visited(nbr):
                continue
            sb.examine(node, nbr, edge.weight)
            heapq.heappush(pq, (edge.weight, next(seq), nbr, node))
            sb.line        = 8
            sb.explanation = f"Candidate edge {node}–{nbr} (w={edge.weight})."
            yield sb.build(delay_factor=0.5)

    sb.current = None
    return sb.result(mst_edges=tuple(mst_edges), total_weight=total)
