"""
graph.py — Graph Container
===========================
Single source of truth for a graph input.  Engines only read it.

Responsibilities:
  1. CRUD on nodes & edges                  (add / remove / get)
  2. Adjacency queries                      (neighbours, incident, …)
  3. Import from adjacency-list / matrix    (text → graph)
  4. Serialisation round-trip               (to_dict / from_dict)
  5. Structural checks                      (validate_data, connected_components)

Design decisions:
  - Nodes & edges stored in plain dicts keyed by id for O(1) lookup.
  - A separate adjacency dict  `_adj[node_id] → [(neighbour_id, edge_id)]`
    is maintained incrementally so neighbour queries are O(degree), not O(E).
    Its order is edge insertion order, which is what makes traversal
    order deterministic.
  - `directed` is a graph-level flag; individual Edge objects also carry it
    so serialisation is self-contained.
"""

import math
import re
from typing import Dict, List, Tuple, Optional, Set

from graph.node import Node
from graph.edge import Edge

_ADJ_SEPARATOR = re.compile(r"\s*(?::|->|→)\s*")
_ADJ_TOKEN     = re.compile(r"^([^()\s]+)(?:\(([^()]*)\))?$")
_NO_EDGE       = (0.0, -1.0, math.inf)


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


class Graph:
    """
    Attributes:
        nodes      : {node_id: Node}
        edges      : {edge_id: Edge}
        directed   : bool – graph-level directedness
        _adj       : {node_id: [(neighbour_id, edge_id), …]}
    """

    def __init__(self, directed: bool = False):
        self.nodes:    Dict[str, Node] = {}
        self.edges:    Dict[str, Edge] = {}
        self.directed: bool           = directed
        self._adj:     Dict[str, List[Tuple[str, str]]] = {}   # node_id → [(nbr, edge_id)]

    # ==================================================================
    # NODES
    # ==================================================================
    def add_node(self, node: Node) -> Node:
        self.nodes[node.id] = node
        self._adj.setdefault(node.id, [])
        return node

    def create_node(self, node_id: str, label: Optional[str] = None) -> Node:
        """Convenience: create + add in one call."""
        return self.add_node(Node(node_id=node_id, label=label))

    # ==================================================================
    # EDGES
    # ==================================================================
    def add_edge(self, edge: Edge) -> Edge:
        # parallel edges share the default id; keep them apart
        base, n = edge.id, 1
        while edge.id in self.edges:
            edge.id = f"{base}#{n}"
            n += 1
        self.edges[edge.id] = edge
        # maintain adjacency
        self._adj.setdefault(edge.source, []).append((edge.target, edge.id))
        if not edge.directed and edge.source != edge.target:
            self._adj.setdefault(edge.target, []).append((edge.source, edge.id))
        return edge

    def create_edge(self, source: str, target: str, weight: float = 1.0, edge_id: Optional[str] = None) -> Edge:
        return self.add_edge(Edge(source=source, target=target, weight=weight, directed=self.directed, edge_id=edge_id))

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, node_id: str) -> List[Tuple[str, Edge]]:
        """Return [(neighbour_id, edge)] for every reachable neighbour."""
        return [(nbr_id, self.edges[eid]) for nbr_id, eid in self._adj.get(node_id, [])]

    def incident(self, node_id: str) -> List[Tuple[str, Edge]]:
        """
        Like neighbours(), but ignores direction: every edge touching the
        node, in edge insertion order.  Spanning-tree algorithms use this.
        """
        if not self.directed:
            return self.neighbours(node_id)
        result = []
        for e in self.edges.values():
            if e.source == node_id:
                result.append((e.target, e))
            elif e.target == node_id:
                result.append((e.source, e))
        return result

    def connected_components(self) -> List[List[str]]:
        """Weakly-connected components, each in discovery order."""
        seen: Set[str] = set()
        components = []
        for start in self.nodes:
            if start in seen:
                continue
            component, stack = [], [start]
            seen.add(start)
            while stack:
                node = stack.pop()
                component.append(node)
                for nbr, _ in self.incident(node):
                    if nbr not in seen:
                        seen.add(nbr)
                        stack.append(nbr)
            components.append(component)
        return components

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "nodes":    [n.to_dict() for n in self.nodes.values()],
            "edges":    [e.to_dict() for e in self.edges.values()],
        }

    @classmethod
    def from_dict(cls, data: dict, directed: Optional[bool] = None) -> "Graph":
        """Build without checks; run validate_data() first on untrusted input."""
        if directed is None:
            directed = data.get("directed", False)
        g = cls(directed=directed)
        for nd in data.get("nodes", []):
            g.add_node(Node.from_dict(nd))
        for ed in data.get("edges", []):
            g.add_edge(Edge.from_dict(ed, directed=directed))
        return g

    @staticmethod
    def validate_data(data: dict) -> List[str]:
        """
        Structural problems in a raw {"nodes": …, "edges": …} dict.

        Returns:
            A list of human-readable issues; empty when the data is usable.
        """
        issues: List[str] = []
        ids: Set[str] = set()
        for nd in data.get("nodes", []):
            nid = str(nd["id"]) if isinstance(nd, dict) and "id" in nd else (None if isinstance(nd, dict) else str(nd))
            if nid is None:
                issues.append(f"node without id: {nd!r}")
                continue
            if nid in ids:
                issues.append(f"duplicate node id '{nid}'")
            ids.add(nid)

        for i, ed in enumerate(data.get("edges", [])):
            if not isinstance(ed, dict) or "source" not in ed or "target" not in ed:
                issues.append(f"edge {i} needs 'source' and 'target'")
                continue
            for end in ("source", "target"):
                if str(ed[end]) not in ids:
                    issues.append(f"edge {i} {end} '{ed[end]}' is not a node")
            weight = ed.get("weight", 1.0)
            if isinstance(weight, bool) or not isinstance(weight, (int, float)):
                issues.append(f"edge {i} weight {weight!r} is not a number")
            elif not math.isfinite(weight):
                issues.append(f"edge {i} weight {weight!r} is not finite")
        return issues

    # ==================================================================
    # TEXT IMPORT
    # ==================================================================
    @classmethod
    def from_adjacency_list(cls, text: str, directed: bool = False) -> "Graph":
        """
        One source node per line, then its neighbours separated by spaces
        or commas, each with an optional weight in parentheses:

            A: B(3) C
            0 -> 1, 2(5)     # trailing comments are ignored

        Nodes are created in order of first appearance.  In an undirected
        graph a pair listed from both ends becomes a single edge.

        Raises:
            ValueError – a line has no ':' / '->' separator, or a neighbour
                         token is malformed or has a non-finite weight.
        """
        g = cls(directed=directed)
        pending: List[Tuple[str, str, float]] = []

        for lineno, raw in enumerate(text.splitlines(), 1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            parts = _ADJ_SEPARATOR.split(line, maxsplit=1)
            if len(parts) != 2 or not parts[0]:
                raise ValueError(f"line {lineno}: expected 'node: neighbours', got {line!r}")
            src = parts[0]
            if src not in g.nodes:
                g.create_node(src)
            for token in parts[1].replace(",", " ").split():
                m = _ADJ_TOKEN.match(token)
                if m is None:
                    raise ValueError(f"line {lineno}: cannot parse neighbour {token!r}")
                tgt = m.group(1)
                if tgt not in g.nodes:
                    g.create_node(tgt)
                weight = float(m.group(2)) if m.group(2) else 1.0
                if not math.isfinite(weight):
                    raise ValueError(f"line {lineno}: weight of {token!r} is not finite")
                pending.append((src, tgt, weight))

        seen: Set = set()
        for src, tgt, weight in pending:
            key = (src, tgt) if directed else frozenset((src, tgt))
            if key not in seen:
                seen.add(key)
                g.create_edge(src, tgt, weight=weight)
        return g

    @classmethod
    def from_adjacency_matrix(
        cls,
        text: str,
        directed: bool = False,
        labels: Optional[List[str]] = None,
    ) -> "Graph":
        """
        Rows of numbers separated by spaces or commas.  A first row that is
        not all numeric names the nodes; otherwise they are "0", "1", ….
        A cell of 0, -1 or inf means no edge, anything else is the weight.

            0 4 0
            4 0 8
            0 8 0

        Raises:
            ValueError – the matrix is not square, a cell is NaN or -inf, or
                         the labels do not fit.
        """
        rows = [r.replace(",", " ").split() for r in text.splitlines() if r.strip()]
        if rows and not all(_is_number(t) for t in rows[0]):
            labels, rows = rows[0], rows[1:]
        matrix = [[float(v) for v in row] for row in rows]
        if any(math.isnan(v) or v == -math.inf for row in matrix for v in row):
            raise ValueError("adjacency matrix cells must be numbers (inf for no edge)")

        n = len(matrix)
        if any(len(row) != n for row in matrix):
            raise ValueError(f"adjacency matrix must be square, got {n} rows of lengths {[len(r) for r in matrix]}")
        names = [str(label) for label in labels] if labels is not None else [str(i) for i in range(n)]
        if len(names) != n:
            raise ValueError(f"{len(names)} labels for a {n}x{n} matrix")

        g = cls(directed=directed)
        for name in names:
            g.create_node(name)
        seen: Set = set()
        for i, row in enumerate(matrix):
            for j, weight in enumerate(row):
                if weight in _NO_EDGE:
                    continue
                key = (i, j) if directed else frozenset((i, j))
                if key not in seen:
                    seen.add(key)
                    g.create_edge(names[i], names[j], weight=weight)
        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def has_negative_edges(self) -> bool:
        return any(e.weight < 0 for e in self.edges.values())

    def node_ids(self) -> List[str]:
        return list(self.nodes.keys())

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, directed={self.directed})"
