"""
kruskal.py — Kruskal's Minimum Spanning Tree (forest)
=======================================================
Edges are stable-sorted ascending by weight (equal weights keep insertion
order) and each one is accepted iff its endpoints lie in different
components of a union-find structure.  Every edge is processed; the loop
does not stop early once V-1 edges are accepted.

The start node is not needed; disconnected graphs yield a spanning forest.
"""

from typing import Dict, Generator, List, Optional

from graph import Graph
from algorithms.errors import InvariantViolationError
from algorithms.step import ExploredEdge, GraphResult, GraphStep, GraphStepBuilder


PSEUDOCODE: List[str] = [
    "def Kruskal(graph):",                              # 0
    "    sort edges by weight",                         # 1
    "    make_set(v) for v in V",                       # 2
    "    for (u, v, w) in edges:",                      # 3
    "        if find(u) != find(v):",                   # 4
    "            union(u, v); mst.add((u, v))",         # 5
    "    return mst",                                   # 6
]


# ---------------------------------------------------------------------------
# Union-Find
# ---------------------------------------------------------------------------
class UnionFind:
    """Disjoint sets over node ids, path compression + union by size."""

    def __init__(self, items):
        self.parent: Dict[str, str] = {x: x for x in items}
        self.size:   Dict[str, int] = {x: 1 for x in items}

    def find(self, x: str) -> str:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        # path compression
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: str, b: str) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self.size[ra] < self.size[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        self.size[ra] += self.size[rb]
        return True


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def kruskal(graph: Graph, start: Optional[str] = None) -> Generator[GraphStep, None, GraphResult]:
    sb    = GraphStepBuilder()
    edges = sorted(graph.edges.values(), key=lambda e: e.weight)
    uf    = UnionFind(graph.nodes)
    mst_edges: List[ExploredEdge] = []
    total = 0.0

    sb.line        = 1
    sb.explanation = f"Sort {len(edges)} edge(s) by weight; every node starts in its own set."
    yield sb.build()

    for edge in edges:
        u, v = edge.source, edge.target
        sb.current     = u
        sb.examine(u, v, edge.weight)
        sb.line        = 4
        sb.explanation = f"Consider {u}–{v} (w={edge.weight})."
        yield sb.build(delay_factor=0.5)

        if uf.union(u, v):
            if uf.find(u) != uf.find(v):
                raise InvariantViolationError(f"union-find did not merge {u!r} and {v!r}")
            sb.visit(u)
            sb.visit(v)
            mst_edges.append(sb.tree_edge(u, v, edge.weight))
            total += edge.weight
            sb.line        = 5
            sb.explanation = f"{u} and {v} were in different components: accept {u}–{v}."
        else:
            sb.line        = 4
            sb.explanation = f"{u} and {v} are already connected: {u}–{v} would form a cycle."
        yield sb.build()

    sb.current = None
    return sb.result(mst_edges=tuple(mst_edges), total_weight=total)
