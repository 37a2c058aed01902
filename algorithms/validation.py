"""
validation.py — Input Preparation
==================================
One `prepare_*` function per input shape.  Each takes the raw `input` and
`options` of a run request (JSON-ish values), checks them, and returns the
positional + keyword arguments for the algorithm generator:

    args, kwargs = prepare_array(raw, {"ascending": False})
    gen = quick_sort(*args, **kwargs)

Everything here runs synchronously at run-start.  A bad input raises an
InvalidInputError subclass before any run (and any snapshot) exists.
Every prepared argument is a fresh copy, so a run never shares mutable
data with its caller.
"""

import math
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Tuple

from algorithms.errors import (
    InvalidArrayError,
    InvalidBoardError,
    InvalidGraphError,
    InvalidInputError,
    InvalidSpeedError,
)
from algorithms.backtracking import MAX_QUEENS, PUZZLES
from algorithms.greedy import Activity, Item, Job
from algorithms.tree_ops import OPERATIONS, TRAVERSAL_ORDERS, contains_value
from graph import Graph
from tree import balanced_bst, parse_level_order

Prepared = Tuple[tuple, Dict[str, Any]]

MAX_ARRAY_LENGTH = 1000
MAX_FIBONACCI_N = 1000
MAX_CAPACITY = 200
MAX_STRING_LENGTH = 100
MAX_TREE_NODES = 500
MAX_SIEVE_LIMIT = 1000


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------
def is_number(value: Any) -> bool:
    """int / float but not bool, and finite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def require_int(value: Any, name: str, lo: Optional[int] = None, hi: Optional[int] = None, error=InvalidInputError) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise error(f"{name} must be an integer, got {value!r}")
    if lo is not None and value < lo:
        raise error(f"{name} must be ≥ {lo}, got {value}")
    if hi is not None and value > hi:
        raise error(f"{name} must be ≤ {hi}, got {value}")
    return value


def validate_speed(speed: Any) -> int:
    if not is_number(speed) or not 0 <= speed <= 100:
        raise InvalidSpeedError(f"speed must be a number in 0..100, got {speed!r}")
    return int(speed)


def _field(raw: Any, options: Mapping[str, Any], name: str, default: Any = None) -> Any:
    """Look a value up in a dict input first, then in the options."""
    if isinstance(raw, Mapping) and name in raw:
        return raw[name]
    return options.get(name, default)


def numeric_array(raw: Any, name: str = "array") -> List[Any]:
    if not isinstance(raw, (list, tuple)):
        raise InvalidArrayError(f"{name} must be a list, got {type(raw).__name__}")
    if len(raw) > MAX_ARRAY_LENGTH:
        raise InvalidArrayError(f"{name} has {len(raw)} elements; at most {MAX_ARRAY_LENGTH} are supported")
    for i, v in enumerate(raw):
        if not is_number(v):
            raise InvalidArrayError(f"{name}[{i}] = {v!r} is not a number")
    return list(raw)


# ---------------------------------------------------------------------------
# Sorting / searching / LIS
# ---------------------------------------------------------------------------
def prepare_array(raw: Any, options: Mapping[str, Any]) -> Prepared:
    array = _field(raw, options, "array", raw)
    ascending = options.get("ascending", True)
    if not isinstance(ascending, bool):
        raise InvalidInputError(f"ascending must be true or false, got {ascending!r}")
    return (numeric_array(array),), {"ascending": ascending}


def prepare_search(raw: Any, options: Mapping[str, Any]) -> Prepared:
    array = numeric_array(_field(raw, options, "array", raw))
    target = _field(raw, options, "target")
    if not is_number(target):
        raise InvalidInputError(f"target must be a number, got {target!r}")
    return (array, target), {}


def prepare_lis(raw: Any, options: Mapping[str, Any]) -> Prepared:
    return (numeric_array(_field(raw, options, "array", raw)),), {}


# ---------------------------------------------------------------------------
# Graphs
# ---------------------------------------------------------------------------
def build_graph(raw: Any, directed: bool = False) -> Graph:
    """
    Accepts {"nodes": […], "edges": […]}, {"adjacency_list": "A: B(3) C"}
    or {"adjacency_matrix": "0 1\\n1 0"}.
    """
    if not isinstance(raw, Mapping):
        raise InvalidGraphError("graph input must be an object")
    try:
        if "adjacency_list" in raw:
            graph = Graph.from_adjacency_list(str(raw["adjacency_list"]), directed=directed)
        elif "adjacency_matrix" in raw:
            graph = Graph.from_adjacency_matrix(str(raw["adjacency_matrix"]), directed=directed, labels=raw.get("labels"))
        else:
            issues = Graph.validate_data(raw)
            if issues:
                raise InvalidGraphError("; ".join(issues))
            graph = Graph.from_dict(raw, directed=directed)
    except (ValueError, TypeError, KeyError) as exc:
        if isinstance(exc, InvalidGraphError):
            raise
        raise InvalidGraphError(f"cannot parse graph: {exc}") from exc
    if graph.node_count() == 0:
        raise InvalidGraphError("graph has no nodes")
    return graph


def prepare_graph(raw: Any, options: Mapping[str, Any], allow_negative: bool = True) -> Prepared:
    directed = options.get("directed", raw.get("directed", False) if isinstance(raw, Mapping) else False)
    if not isinstance(directed, bool):
        raise InvalidInputError(f"directed must be true or false, got {directed!r}")
    graph = build_graph(raw, directed=directed)

    start = _field(raw, options, "start")
    if start is None:
        start = graph.node_ids()[0]
    start = str(start)
    if start not in graph.nodes:
        raise InvalidGraphError(f"start node '{start}' is not in the graph")
    if not allow_negative and graph.has_negative_edges():
        raise InvalidGraphError("negative edge weights are not supported by this algorithm")
    return (graph, start), {}


def prepare_weighted_graph(raw: Any, options: Mapping[str, Any]) -> Prepared:
    return prepare_graph(raw, options, allow_negative=False)


# ---------------------------------------------------------------------------
# Dynamic programming
# ---------------------------------------------------------------------------
def prepare_fibonacci(raw: Any, options: Mapping[str, Any]) -> Prepared:
    n = _field(raw, options, "n", raw)
    return (require_int(n, "n", 0, MAX_FIBONACCI_N),), {}


def prepare_knapsack(raw: Any, options: Mapping[str, Any]) -> Prepared:
    weights = numeric_array(_field(raw, options, "weights", []), "weights")
    values = numeric_array(_field(raw, options, "values", []), "values")
    capacity = require_int(_field(raw, options, "capacity"), "capacity", 0, MAX_CAPACITY)
    if len(weights) != len(values):
        raise InvalidArrayError(f"{len(weights)} weights but {len(values)} values")
    for i, w in enumerate(weights):
        require_int(w, f"weights[{i}]", 0, error=InvalidArrayError)
    return (weights, values, capacity), {}


def prepare_lcs(raw: Any, options: Mapping[str, Any]) -> Prepared:
    strings = []
    for name in ("str1", "str2"):
        s = _field(raw, options, name, "")
        if not isinstance(s, str):
            raise InvalidInputError(f"{name} must be a string, got {s!r}")
        if len(s) > MAX_STRING_LENGTH:
            raise InvalidInputError(f"{name} is longer than {MAX_STRING_LENGTH} characters")
        strings.append(s)
    return tuple(strings), {}


# ---------------------------------------------------------------------------
# Greedy
# ---------------------------------------------------------------------------
def _records(raw: Any, name: str) -> List[Any]:
    if not isinstance(raw, (list, tuple)):
        raise InvalidInputError(f"{name} must be a list")
    return list(raw)


def prepare_activities(raw: Any, options: Mapping[str, Any]) -> Prepared:
    activities = []
    for i, a in enumerate(_records(_field(raw, options, "activities", raw), "activities")):
        if isinstance(a, Mapping):
            start, finish, name = a.get("start"), a.get("finish"), a.get("name", f"A{i + 1}")
        elif isinstance(a, (list, tuple)) and len(a) == 2:
            (start, finish), name = a, f"A{i + 1}"
        else:
            raise InvalidInputError(f"activity {i} must be {{start, finish}} or a [start, finish] pair")
        if not is_number(start) or not is_number(finish) or start > finish:
            raise InvalidInputError(f"activity {i} needs numeric start ≤ finish")
        activities.append(Activity(str(name), start, finish))
    return (activities,), {}


def prepare_frequencies(raw: Any, options: Mapping[str, Any]) -> Prepared:
    freqs = _field(raw, options, "frequencies", raw)
    if isinstance(freqs, str):
        freqs = dict(Counter(freqs))
    if not isinstance(freqs, Mapping) or not freqs:
        raise InvalidInputError("frequencies must be a non-empty {symbol: count} map or a text")
    for ch, f in freqs.items():
        if not is_number(f) or f <= 0:
            raise InvalidInputError(f"frequency of {ch!r} must be a positive number")
    return ({str(k): v for k, v in freqs.items()},), {}


def prepare_fractional_knapsack(raw: Any, options: Mapping[str, Any]) -> Prepared:
    items = []
    for i, it in enumerate(_records(_field(raw, options, "items", []), "items")):
        if not isinstance(it, Mapping):
            raise InvalidInputError(f"item {i} must be an object")
        weight, value = it.get("weight"), it.get("value")
        if not is_number(weight) or weight <= 0 or not is_number(value) or value < 0:
            raise InvalidInputError(f"item {i} needs weight > 0 and value ≥ 0")
        items.append(Item(str(it.get("name", f"I{i + 1}")), weight, value))
    capacity = _field(raw, options, "capacity")
    if not is_number(capacity) or capacity < 0:
        raise InvalidInputError(f"capacity must be a non-negative number, got {capacity!r}")
    return (items, capacity), {}


def prepare_jobs(raw: Any, options: Mapping[str, Any]) -> Prepared:
    jobs = []
    for i, j in enumerate(_records(_field(raw, options, "jobs", raw), "jobs")):
        if not isinstance(j, Mapping):
            raise InvalidInputError(f"job {i} must be an object")
        deadline = require_int(j.get("deadline"), f"jobs[{i}].deadline", 1, MAX_ARRAY_LENGTH)
        profit = j.get("profit")
        if not is_number(profit):
            raise InvalidInputError(f"jobs[{i}].profit must be a number")
        jobs.append(Job(str(j.get("name", f"J{i + 1}")), deadline, profit))
    return (jobs,), {}


# ---------------------------------------------------------------------------
# Backtracking
# ---------------------------------------------------------------------------
def prepare_queens(raw: Any, options: Mapping[str, Any]) -> Prepared:
    n = _field(raw, options, "n", raw if raw is not None else options.get("size"))
    return (require_int(n, "board size", 1, MAX_QUEENS, error=InvalidBoardError),), {}


def prepare_sudoku(raw: Any, options: Mapping[str, Any]) -> Prepared:
    board = _field(raw, options, "board", raw)
    if board is None:
        difficulty = options.get("difficulty", "medium")
        if difficulty not in PUZZLES:
            raise InvalidBoardError(f"difficulty must be one of {sorted(PUZZLES)}, got {difficulty!r}")
        board = PUZZLES[difficulty]

    if not isinstance(board, (list, tuple)) or len(board) != 9:
        raise InvalidBoardError("sudoku board must have 9 rows")
    values, fixed = [], []
    for r, row in enumerate(board):
        if not isinstance(row, (list, tuple)) or len(row) != 9:
            raise InvalidBoardError(f"row {r} must have 9 cells")
        vrow, frow = [], []
        for c, cell in enumerate(row):
            if isinstance(cell, Mapping):
                v, f = cell.get("value", 0), bool(cell.get("fixed", False))
            else:
                v, f = cell, None
            require_int(v, f"cell ({r}, {c})", 0, 9, error=InvalidBoardError)
            if f and v == 0:
                raise InvalidBoardError(f"cell ({r}, {c}) is fixed but empty")
            vrow.append(v)
            frow.append(v != 0 if f is None else f)
        values.append(vrow)
        fixed.append(frow)
    return (values,), {"fixed": fixed}


# ---------------------------------------------------------------------------
# Trees
# ---------------------------------------------------------------------------
def _tree_values(raw: Any) -> List[Any]:
    values = numeric_array(raw if raw is not None else [], "values")
    if len(values) > MAX_TREE_NODES:
        raise InvalidInputError(f"at most {MAX_TREE_NODES} tree values are supported")
    return values


def _level_order(raw: Any):
    try:
        arena = parse_level_order(raw if raw is not None else [])
    except (ValueError, TypeError) as exc:
        raise InvalidInputError(f"cannot parse tree: {exc}") from exc
    if len(arena) > MAX_TREE_NODES:
        raise InvalidInputError(f"at most {MAX_TREE_NODES} tree nodes are supported")
    return arena


def prepare_traversal(raw: Any, options: Mapping[str, Any]) -> Prepared:
    order = options.get("order", "inorder")
    if order not in TRAVERSAL_ORDERS:
        raise InvalidInputError(f"order must be one of {list(TRAVERSAL_ORDERS)}, got {order!r}")
    tree = _field(raw, options, "tree", raw)
    return (_level_order(tree), order), {}


def make_tree_preparer(kind: str):
    """Preparer for the search-tree kinds: initial values + an operation list."""
    allowed = OPERATIONS[kind]

    def prepare(raw: Any, options: Mapping[str, Any]) -> Prepared:
        arena = balanced_bst(_tree_values(_field(raw, options, "values", [])), colored=kind == "red-black-tree")
        ops = []
        for i, op in enumerate(_records(_field(raw, options, "operations", []), "operations")):
            if isinstance(op, Mapping):
                name, value = op.get("op"), op.get("value")
            elif isinstance(op, (list, tuple)) and len(op) == 2:
                name, value = op
            else:
                raise InvalidInputError(f"operation {i} must be {{op, value}} or an [op, value] pair")
            if name not in allowed:
                raise InvalidInputError(f"operation {i}: unknown op {name!r}, expected one of {sorted(allowed)}")
            if not is_number(value):
                raise InvalidInputError(f"operation {i}: value {value!r} is not a number")
            ops.append((name, value))
        return (arena, kind, ops), {}

    return prepare


def prepare_lca(raw: Any, options: Mapping[str, Any]) -> Prepared:
    arena = _level_order(_field(raw, options, "tree"))
    a, b = _field(raw, options, "a"), _field(raw, options, "b")
    for name, v in (("a", a), ("b", b)):
        if not contains_value(arena, v):
            raise InvalidInputError(f"{name} = {v!r} is not in the tree")
    return (arena, a, b), {}


# ---------------------------------------------------------------------------
# Number theory
# ---------------------------------------------------------------------------
def prepare_gcd(raw: Any, options: Mapping[str, Any]) -> Prepared:
    a = require_int(_field(raw, options, "a"), "a", 0)
    b = require_int(_field(raw, options, "b"), "b", 0)
    return (a, b), {}


def prepare_sieve(raw: Any, options: Mapping[str, Any]) -> Prepared:
    limit = _field(raw, options, "limit", raw)
    return (require_int(limit, "limit", 2, MAX_SIEVE_LIMIT),), {}


def prepare_factorization(raw: Any, options: Mapping[str, Any]) -> Prepared:
    n = _field(raw, options, "n", raw)
    return (require_int(n, "n", 2, 10 ** 12),), {}
