"""
step.py — Algorithm Step Snapshots
===================================
Every algorithm is a generator that yields snapshot objects and
`return`s its final result.  A snapshot is a frozen-in-time picture of
everything an observer needs to render one frame of one algorithm
family:

    ArrayStep    – sorting:       array + highlighted indices
    SearchStep   – searching:     array + probe index + live bounds
    GraphStep    – graph:         visited, current, parents, explored edges
    TableStep    – dynamic prog.: 1D / 2D table + current cell
    GreedyStep   – greedy:        selected items + running totals
    HuffmanStep  – huffman:       current forest of (immutable) nodes
    BoardStep    – backtracking:  board + cursor + accumulated solutions
    TreeStep     – trees:         flat node views + current value
    NumberStep   – number theory: working values + current number

Design decisions:
  - Steps are frozen dataclasses whose sequences are tuples and whose
    mappings are fresh dict copies.  The generator keeps mutating its own
    state right after the yield; nothing in a Step aliases that state.
  - `delay_factor` scales the stepper delay for this frame, so a
    "brief highlight" is a property of the step, not of the driver.
  - `Tick` is a suspension point with nothing to show (pause still takes
    effect there, and it still costs a scaled delay).
  - `cursor` is the algorithm-specific position marker the run reports.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from algorithms.errors import RunCancelled


@dataclass(frozen=True)
class Tick:
    delay_factor: float = 1.0


# ---------------------------------------------------------------------------
# Sorting / searching
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ArrayStep:
    """
    Attributes:
        array   : The array as it stands at this step.
        current : Primary highlighted index (-1 when none).
        compare : Secondary highlighted index (-1 when none).
        action  : "init", "compare", "swap", "shift", "write", "pivot", "split".
    """

    array:        Tuple[Any, ...] = ()
    current:      int             = -1
    compare:      int             = -1
    action:       str             = ""
    delay_factor: float           = 1.0

    @property
    def cursor(self) -> Tuple[int, int]:
        return (self.current, self.compare)


@dataclass(frozen=True)
class SearchStep:
    array:        Tuple[Any, ...] = ()
    probe:        int             = -1
    low:          int             = -1
    high:         int             = -1
    found:        bool            = False
    delay_factor: float           = 1.0

    @property
    def cursor(self) -> int:
        return self.probe


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ExploredEdge:
    """
    kind is "examining" (being inspected, not yet accepted) or "tree"
    (now part of the traversal / spanning structure).
    """

    source:   str
    target:   str
    kind:     str
    weight:   Optional[float] = None
    distance: Optional[float] = None


@dataclass(frozen=True)
class GraphStep:
    """
    Attributes:
        visited     : Node ids in the order they were visited.
        current     : Node being expanded right now (or None).
        parents     : {node_id: parent_id} discovered so far.
        explored    : Every edge event so far, oldest first.
        distances   : {node_id: tentative distance} (Dijkstra only).
        frontier    : Queue / stack / heap contents, in pop order where cheap.
        line        : 0-based index into the algorithm's PSEUDOCODE.
        explanation : Plain-English reason for this step.
    """

    visited:      Tuple[str, ...]          = ()
    current:      Optional[str]            = None
    parents:      Dict[str, str]           = field(default_factory=dict)
    explored:     Tuple[ExploredEdge, ...] = ()
    distances:    Dict[str, float]         = field(default_factory=dict)
    frontier:     Tuple[str, ...]          = ()
    line:         int                      = 0
    explanation:  str                      = ""
    delay_factor: float                    = 1.0

    @property
    def cursor(self) -> Optional[str]:
        return self.current


@dataclass(frozen=True)
class GraphResult:
    visited:      Tuple[str, ...]
    parents:      Dict[str, str]
    explored:     Tuple[ExploredEdge, ...]
    distances:    Dict[str, float]         = field(default_factory=dict)
    mst_edges:    Tuple[ExploredEdge, ...] = ()
    total_weight: float                    = 0.0


class GraphStepBuilder:
    """
    Mutable scratch-pad that graph generators use to construct Steps.

    Usage inside an algorithm generator:
        sb = GraphStepBuilder()
        sb.visit("A")
        sb.examine("A", "B", weight=3)
        sb.line = 7
        yield sb.build(delay_factor=0.3)
    """

    def __init__(self):
        self.visited:     List[str]          = []
        self.current:     Optional[str]      = None
        self.parents:     Dict[str, str]     = {}
        self.explored:    List[ExploredEdge] = []
        self.distances:   Dict[str, float]   = {}
        self.frontier:    List[str]          = []
        self.line:        int                = 0
        self.explanation: str                = ""
        self._seen:       Set[str]           = set()

    # -- helpers --
    def visit(self, node_id: str) -> None:
        self.current = node_id
        if node_id not in self._seen:
            self._seen.add(node_id)
            self.visited.append(node_id)

    def is_visited(self, node_id: str) -> bool:
        return node_id in self._seen

    def examine(self, source: str, target: str, weight: Optional[float] = None) -> None:
        self.explored.append(ExploredEdge(source, target, "examining", weight=weight))

    def tree_edge(
        self,
        source: str,
        target: str,
        weight: Optional[float] = None,
        distance: Optional[float] = None,
    ) -> ExploredEdge:
        edge = ExploredEdge(source, target, "tree", weight=weight, distance=distance)
        self.explored.append(edge)
        self.parents[target] = source
        return edge

    def build(self, delay_factor: float = 1.0) -> GraphStep:
        return GraphStep(
            visited=tuple(self.visited),
            current=self.current,
            parents=dict(self.parents),
            explored=tuple(self.explored),
            distances=dict(self.distances),
            frontier=tuple(self.frontier),
            line=self.line,
            explanation=self.explanation,
            delay_factor=delay_factor,
        )

    def result(self, **extra) -> GraphResult:
        return GraphResult(
            visited=tuple(self.visited),
            parents=dict(self.parents),
            explored=tuple(self.explored),
            distances=dict(self.distances),
            **extra,
        )


# ---------------------------------------------------------------------------
# Dynamic programming
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TableStep:
    """table is a tuple (1D) or a tuple of tuples (2D); cell is (i,) or (i, j)."""

    table:        Tuple[Any, ...]            = ()
    cell:         Optional[Tuple[int, ...]]  = None
    delay_factor: float                      = 1.0

    @property
    def cursor(self) -> Optional[Tuple[int, ...]]:
        return self.cell


# ---------------------------------------------------------------------------
# Greedy
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class GreedyStep:
    selected:     Tuple[Any, ...]  = ()
    current:      int              = -1
    totals:       Dict[str, float] = field(default_factory=dict)
    delay_factor: float            = 1.0

    @property
    def cursor(self) -> int:
        return self.current


@dataclass(frozen=True)
class HuffmanNode:
    """Immutable, so a forest snapshot can share subtrees safely."""

    freq:  float
    char:  Optional[str]           = None
    left:  Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


@dataclass(frozen=True)
class HuffmanStep:
    forest:       Tuple[HuffmanNode, ...] = ()
    merged:       Optional[HuffmanNode]   = None
    delay_factor: float                   = 1.0

    @property
    def cursor(self) -> Optional[float]:
        return self.merged.freq if self.merged else None


# ---------------------------------------------------------------------------
# Backtracking
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class BoardStep:
    """
    Attributes:
        board     : Cell values, row-major (queens: 1 = queen, 0 = empty).
        fixed     : Same shape as board; True for cells given by the puzzle.
                    Empty tuple when the board has no fixed cells.
        cursor    : (row, col) of the decision point.
        action    : "place", "reject", "remove", "solution", "conflict".
        solutions : Every solution recorded up to this step.
    """

    board:        Tuple[Tuple[int, ...], ...]                   = ()
    fixed:        Tuple[Tuple[bool, ...], ...]                  = ()
    cursor:       Optional[Tuple[int, int]]                     = None
    action:       str                                           = ""
    solutions:    Tuple[Tuple[Tuple[int, ...], ...], ...]       = ()
    delay_factor: float                                         = 1.0


# ---------------------------------------------------------------------------
# Trees
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TreeStep:
    """
    nodes is a flat tuple of NodeView (see tree.arena); links are ids into
    the same tuple's `id` space, root is the root id.
    """

    nodes:        Tuple[Any, ...]  = ()
    root:         Optional[int]    = None
    current:      Optional[Any]    = None
    action:       str              = ""
    visited:      Tuple[Any, ...]  = ()
    delay_factor: float            = 1.0

    @property
    def cursor(self) -> Optional[Any]:
        return self.current


# ---------------------------------------------------------------------------
# Number theory
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NumberStep:
    values:       Tuple[Any, ...] = ()
    current:      Optional[int]   = None
    explanation:  str             = ""
    delay_factor: float           = 1.0

    @property
    def cursor(self) -> Optional[int]:
        return self.current


def check_cancelled(cancel_token) -> None:
    """Unwind the calling generator if its cancel token has fired."""
    if cancel_token is not None and cancel_token.cancelled:
        raise RunCancelled()
