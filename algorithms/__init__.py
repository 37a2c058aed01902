"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm the engine knows about.

    from algorithms import REGISTRY, get_algorithm, create_generator

REGISTRY is a dict:
    {
        "quick-sort": AlgoInfo(key, label, family, fn, prepare, tags, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine and the HTTP layer both
consume it, so adding a new algorithm is literally: write the generator,
write (or reuse) a prepare function, add one entry here.

Ids are kebab-case.  `normalize_id` also accepts human labels
("Quick Sort") and the historical aliases ("dijkstras", "prims", …).
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generator, List, Mapping, Optional

from algorithms.errors import UnknownAlgorithmError
from algorithms import validation as v

from algorithms.sorting       import bubble_sort, insertion_sort, selection_sort, merge_sort, quick_sort
from algorithms.searching     import linear_search, binary_search, jump_search, interpolation_search
from algorithms.bfs           import bfs,      PSEUDOCODE as _bfs_pc
from algorithms.dfs           import dfs,      PSEUDOCODE as _dfs_pc
from algorithms.dijkstra      import dijkstra, PSEUDOCODE as _dij_pc
from algorithms.prim          import prim,     PSEUDOCODE as _prim_pc
from algorithms.kruskal       import kruskal,  PSEUDOCODE as _kru_pc
from algorithms.dp            import fibonacci, knapsack, lcs, lis
from algorithms.greedy        import activity_selection, huffman_coding, fractional_knapsack, job_scheduling
from algorithms.backtracking  import n_queens, sudoku_solver
from algorithms.tree_ops      import traverse, run_operations, lowest_common_ancestor
from algorithms.number_theory import gcd, sieve, prime_factorization


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                    # registry key, e.g. "quick-sort"
    label:            str                    # human label, e.g. "Quick Sort"
    family:           str                    # delay-curve family, e.g. "sorting"
    fn:               Callable               # the generator function
    prepare:          Callable               # (input, options) -> (args, kwargs)
    pseudocode:       List[str] = field(default_factory=list)
    tags:             List[str] = field(default_factory=list)
    cancellable:      bool      = False      # generator takes a cancel_token
    complexity_time:  str       = ""
    complexity_space: str       = ""
    description:      str       = ""         # one-liner for listings


def _info(key, label, family, fn, prepare, **kw) -> AlgoInfo:
    return AlgoInfo(key=key, label=label, family=family, fn=fn, prepare=prepare, **kw)


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
_ENTRIES: List[AlgoInfo] = [
    # -- sorting --
    _info("bubble-sort", "Bubble Sort", "sorting", bubble_sort, v.prepare_array,
          tags=["stable", "in-place"], complexity_time="O(n²)", complexity_space="O(1)",
          description="Swaps adjacent pairs; stops after a pass with no swap."),
    _info("insertion-sort", "Insertion Sort", "sorting", insertion_sort, v.prepare_array,
          tags=["stable", "in-place"], complexity_time="O(n²)", complexity_space="O(1)",
          description="Shifts larger elements right to open a slot for each new one."),
    _info("selection-sort", "Selection Sort", "sorting", selection_sort, v.prepare_array,
          tags=["in-place"], complexity_time="O(n²)", complexity_space="O(1)",
          description="Finds the extremum of the unsorted tail; one swap per pass."),
    _info("merge-sort", "Merge Sort", "sorting", merge_sort, v.prepare_array,
          tags=["stable", "divide-and-conquer"], complexity_time="O(n log n)", complexity_space="O(n)",
          description="Splits in halves and merges them back in order."),
    _info("quick-sort", "Quick Sort", "sorting", quick_sort, v.prepare_array,
          tags=["in-place", "divide-and-conquer"], complexity_time="O(n log n) avg", complexity_space="O(log n)",
          description="Lomuto partition around the last element."),

    # -- searching --
    _info("linear-search", "Linear Search", "searching", linear_search, v.prepare_search,
          complexity_time="O(n)", complexity_space="O(1)",
          description="Probes every element in turn."),
    _info("binary-search", "Binary Search", "searching", binary_search, v.prepare_search,
          tags=["sorted-input"], complexity_time="O(log n)", complexity_space="O(1)",
          description="Halves the sorted range each probe."),
    _info("jump-search", "Jump Search", "searching", jump_search, v.prepare_search,
          tags=["sorted-input"], complexity_time="O(√n)", complexity_space="O(1)",
          description="Jumps √n ahead, then scans the block."),
    _info("interpolation-search", "Interpolation Search", "searching", interpolation_search, v.prepare_search,
          tags=["sorted-input"], complexity_time="O(log log n) avg", complexity_space="O(1)",
          description="Estimates the probe position from the key's value."),

    # -- graph --
    _info("bfs", "Breadth-First Search", "graph", bfs, v.prepare_graph, pseudocode=_bfs_pc,
          tags=["traversal", "unweighted"], complexity_time="O(V + E)", complexity_space="O(V)",
          description="Explores layer-by-layer from the start node."),
    _info("dfs", "Depth-First Search", "graph", dfs, v.prepare_graph, pseudocode=_dfs_pc,
          tags=["traversal", "unweighted"], complexity_time="O(V + E)", complexity_space="O(V)",
          description="Dives deep before backtracking."),
    _info("dijkstra", "Dijkstra's Algorithm", "graph", dijkstra, v.prepare_weighted_graph, pseudocode=_dij_pc,
          tags=["weighted", "shortest-path"], complexity_time="O((V + E) log V)", complexity_space="O(V)",
          description="Greedily finalises the closest node. Non-negative weights only."),
    _info("prim", "Prim's Algorithm", "graph", prim, v.prepare_graph, pseudocode=_prim_pc,
          tags=["weighted", "mst"], complexity_time="O(E log V)", complexity_space="O(V + E)",
          description="Grows a spanning tree along the cheapest crossing edge."),
    _info("kruskal", "Kruskal's Algorithm", "graph", kruskal, v.prepare_graph, pseudocode=_kru_pc,
          tags=["weighted", "mst"], complexity_time="O(E log E)", complexity_space="O(V)",
          description="Accepts edges cheapest-first unless they close a cycle."),

    # -- dynamic programming --
    _info("fibonacci", "Fibonacci", "dp", fibonacci, v.prepare_fibonacci,
          tags=["1d-table"], complexity_time="O(n)", complexity_space="O(n)",
          description="Bottom-up table of Fibonacci numbers."),
    _info("knapsack", "0/1 Knapsack", "dp", knapsack, v.prepare_knapsack,
          tags=["2d-table"], complexity_time="O(n·W)", complexity_space="O(n·W)",
          description="Best value within a weight capacity, each item once."),
    _info("lcs", "Longest Common Subsequence", "dp", lcs, v.prepare_lcs,
          tags=["2d-table", "strings"], complexity_time="O(m·n)", complexity_space="O(m·n)",
          description="Longest subsequence shared by two strings."),
    _info("lis", "Longest Increasing Subsequence", "dp", lis, v.prepare_lis,
          tags=["1d-table"], complexity_time="O(n²)", complexity_space="O(n)",
          description="Longest strictly increasing subsequence."),

    # -- greedy --
    _info("activity-selection", "Activity Selection", "greedy", activity_selection, v.prepare_activities,
          complexity_time="O(n log n)", complexity_space="O(n)",
          description="Earliest finish first maximises the number of activities."),
    _info("huffman-coding", "Huffman Coding", "greedy", huffman_coding, v.prepare_frequencies,
          tags=["heap", "tree"], complexity_time="O(n log n)", complexity_space="O(n)",
          description="Merges the two rarest subtrees until one remains."),
    _info("fractional-knapsack", "Fractional Knapsack", "greedy", fractional_knapsack, v.prepare_fractional_knapsack,
          complexity_time="O(n log n)", complexity_space="O(n)",
          description="Best value-per-weight first; the last item may be split."),
    _info("job-scheduling", "Job Sequencing", "greedy", job_scheduling, v.prepare_jobs,
          complexity_time="O(n·d)", complexity_space="O(d)",
          description="Highest profit first, into the latest free slot before its deadline."),

    # -- backtracking --
    _info("n-queens", "N-Queens", "backtracking", n_queens, v.prepare_queens, cancellable=True,
          complexity_time="O(n!)", complexity_space="O(n²)",
          description="All placements of n non-attacking queens."),
    _info("sudoku-solver", "Sudoku Solver", "backtracking", sudoku_solver, v.prepare_sudoku, cancellable=True,
          complexity_time="O(9^k)", complexity_space="O(81)",
          description="Fills empty cells 1–9, backtracking on contradictions."),

    # -- trees --
    _info("tree-traversal", "Tree Traversal", "tree", traverse, v.prepare_traversal,
          complexity_time="O(n)", complexity_space="O(h)",
          description="In-, pre-, post- or level-order walk."),
    _info("bst", "Binary Search Tree", "tree", run_operations, v.make_tree_preparer("bst"),
          complexity_time="O(h) per op", complexity_space="O(n)",
          description="Insert, delete (in-order successor) and search."),
    _info("avl-tree", "AVL Tree", "tree", run_operations, v.make_tree_preparer("avl-tree"),
          tags=["self-balancing"], complexity_time="O(log n) per op", complexity_space="O(n)",
          description="BST with LL / RR / LR / RL rotations after every change."),
    _info("red-black-tree", "Red-Black Tree", "tree", run_operations, v.make_tree_preparer("red-black-tree"),
          tags=["self-balancing"], complexity_time="O(log n) per op", complexity_space="O(n)",
          description="BST kept balanced by colour rules, recolouring and rotations."),
    _info("tree-lca", "Lowest Common Ancestor", "tree", lowest_common_ancestor, v.prepare_lca,
          complexity_time="O(n)", complexity_space="O(h)",
          description="Deepest node with both values in its subtree."),

    # -- mathematical --
    _info("gcd", "Greatest Common Divisor", "math", gcd, v.prepare_gcd,
          complexity_time="O(log min(a, b))", complexity_space="O(1)",
          description="Euclid's algorithm."),
    _info("sieve-of-eratosthenes", "Sieve of Eratosthenes", "math", sieve, v.prepare_sieve,
          complexity_time="O(n log log n)", complexity_space="O(n)",
          description="Crosses out multiples of each prime."),
    _info("prime-factorization", "Prime Factorization", "math", prime_factorization, v.prepare_factorization,
          complexity_time="O(√n)", complexity_space="O(log n)",
          description="Trial division up to √n."),
]

REGISTRY: Dict[str, AlgoInfo] = {info.key: info for info in _ENTRIES}

ALIASES: Dict[str, str] = {
    "dijkstras":    "dijkstra",
    "prims":        "prim",
    "kruskals":     "kruskal",
    "nqueens":      "n-queens",
    "sudoku":       "sudoku-solver",
    "huffman":      "huffman-coding",
    "avl":          "avl-tree",
    "red-black":    "red-black-tree",
    "rb-tree":      "red-black-tree",
    "sieve":        "sieve-of-eratosthenes",
    "lca":          "tree-lca",
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def normalize_id(name: str) -> str:
    """ "Quick Sort" → "quick-sort", "Dijkstra's" → "dijkstras"."""
    slug = re.sub(r"[^a-z0-9]+", "-", str(name).lower().replace("'", "")).strip("-")
    return ALIASES.get(slug, slug)


def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, label or alias, or None."""
    info = REGISTRY.get(key)
    if info is None:
        info = REGISTRY.get(normalize_id(key))
    if info is None:
        by_label = {normalize_id(a.label): a for a in REGISTRY.values()}
        info = by_label.get(normalize_id(key))
    return info


def require_algorithm(key: str) -> AlgoInfo:
    info = get_algorithm(key)
    if info is None:
        raise UnknownAlgorithmError(f"unknown algorithm {key!r}")
    return info


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


def algorithms_by_family(family: str) -> List[AlgoInfo]:
    return [a for a in REGISTRY.values() if a.family == family]


def create_generator(
    key: str,
    input: Any,
    options: Optional[Mapping[str, Any]] = None,
    cancel_token=None,
) -> Generator:
    """Validate input, then build the algorithm's generator (not started)."""
    info = require_algorithm(key)
    args, kwargs = info.prepare(input, dict(options or {}))
    if info.cancellable:
        kwargs["cancel_token"] = cancel_token
    return info.fn(*args, **kwargs)


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "ALIASES",
    "normalize_id",
    "get_algorithm",
    "require_algorithm",
    "list_algorithms",
    "algorithms_by_tag",
    "algorithms_by_family",
    "create_generator",
]
