"""Tests for the algorithm registry and run-start input validation."""

import inspect

import pytest

from algorithms import (
    REGISTRY,
    algorithms_by_family,
    algorithms_by_tag,
    create_generator,
    get_algorithm,
    list_algorithms,
    normalize_id,
    require_algorithm,
)
from algorithms.errors import (
    EngineError,
    InvalidArrayError,
    InvalidBoardError,
    InvalidGraphError,
    InvalidInputError,
    InvalidSpeedError,
    UnknownAlgorithmError,
)
from algorithms.validation import (
    MAX_ARRAY_LENGTH,
    MAX_CAPACITY,
    prepare_sudoku,
    validate_speed,
)
from engine.config import DELAY_CURVES
from conftest import drain

GRAPH = {"nodes": ["A", "B"], "edges": [{"source": "A", "target": "B", "weight": 2}]}

# One valid input per algorithm; every entry must run to completion.
VALID_INPUTS = {
    "bubble-sort":           ([3, 1, 2], {}),
    "insertion-sort":        ([3, 1, 2], {"ascending": False}),
    "selection-sort":        ([3, 1, 2], {}),
    "merge-sort":            ([3, 1, 2], {}),
    "quick-sort":            ([3, 1, 2], {}),
    "linear-search":         ({"array": [1, 2, 3], "target": 2}, {}),
    "binary-search":         ([1, 2, 3], {"target": 3}),
    "jump-search":           ({"array": [1, 2, 3], "target": 4}, {}),
    "interpolation-search":  ({"array": [1, 2, 3], "target": 1}, {}),
    "bfs":                   (GRAPH, {"start": "A"}),
    "dfs":                   (GRAPH, {}),
    "dijkstra":              (GRAPH, {"start": "B"}),
    "prim":                  (GRAPH, {}),
    "kruskal":               ({"adjacency_list": "A: B(2) C(1)"}, {}),
    "fibonacci":             (8, {}),
    "knapsack":              ({"weights": [1, 2], "values": [3, 4], "capacity": 3}, {}),
    "lcs":                   ({"str1": "AB", "str2": "B"}, {}),
    "lis":                   ([1, 3, 2], {}),
    "activity-selection":    ([[1, 2], {"start": 2, "finish": 3}], {}),
    "huffman-coding":        ("abracadabra", {}),
    "fractional-knapsack":   ({"items": [{"weight": 2, "value": 4}], "capacity": 1}, {}),
    "job-scheduling":        ([{"deadline": 1, "profit": 5}], {}),
    "n-queens":              (4, {}),
    "sudoku-solver":         (None, {"difficulty": "easy"}),
    "tree-traversal":        ("1,2,3", {"order": "postorder"}),
    "bst":                   ({"values": [2, 1], "operations": [["insert", 3]]}, {}),
    "avl-tree":              ({"values": [], "operations": [{"op": "insert", "value": 1}]}, {}),
    "red-black-tree":        ({"values": [1, 2, 3], "operations": [["delete", 2]]}, {}),
    "tree-lca":              ({"tree": "1,2,3", "a": 2, "b": 3}, {}),
    "gcd":                   ({"a": 12, "b": 8}, {}),
    "sieve-of-eratosthenes": (20, {}),
    "prime-factorization":   ({"n": 12}, {}),
}


class TestRegistry:
    """Lookup and metadata."""

    def test_every_entry_has_a_curve_and_input(self):
        """Each family has a delay curve; each algorithm has a smoke input here."""
        assert set(VALID_INPUTS) == set(REGISTRY)
        for info in list_algorithms():
            assert info.family in DELAY_CURVES
            assert info.label and info.description

    def test_cancellable_flag_matches_signature(self):
        """cancellable entries are exactly the ones taking a cancel_token."""
        for info in REGISTRY.values():
            takes_token = "cancel_token" in inspect.signature(info.fn).parameters
            assert info.cancellable == takes_token, info.key

    @pytest.mark.parametrize("name,key", [
        ("Quick Sort", "quick-sort"),
        ("quick_sort", "quick-sort"),
        ("Dijkstra's", "dijkstra"),
        ("prims", "prim"),
        ("RB Tree", "red-black-tree"),
        ("sieve", "sieve-of-eratosthenes"),
    ])
    def test_normalize_and_lookup(self, name, key):
        """Labels, slugs and aliases resolve to the same key."""
        assert get_algorithm(name).key == key

    def test_normalize_id(self):
        """Slugs are lower-case kebab with apostrophes dropped."""
        assert normalize_id("  Merge  Sort ") == "merge-sort"
        assert normalize_id("Kruskal's") == "kruskal"

    def test_label_lookup(self):
        """A registered label finds its entry."""
        assert get_algorithm("Longest Common Subsequence").key == "lcs"
        assert get_algorithm("Depth-First Search").key == "dfs"

    def test_unknown(self):
        """Unknown names return None or raise UnknownAlgorithmError."""
        assert get_algorithm("bogo-sort") is None
        with pytest.raises(UnknownAlgorithmError):
            require_algorithm("bogo-sort")

    def test_filters(self):
        """Family and tag filters."""
        assert [a.key for a in algorithms_by_family("math")] == ["gcd", "sieve-of-eratosthenes", "prime-factorization"]
        assert {a.key for a in algorithms_by_tag("mst")} == {"prim", "kruskal"}

    @pytest.mark.parametrize("key", sorted(VALID_INPUTS))
    def test_smoke(self, key):
        """Every algorithm runs to completion on a small valid input."""
        raw, options = VALID_INPUTS[key]
        steps, _ = drain(create_generator(key, raw, options))
        assert steps
        assert all(hasattr(s, "delay_factor") for s in steps)


class TestErrorTaxonomy:
    """Every input error is an InvalidInputError and a ValueError."""

    def test_hierarchy(self):
        """Subclasses share the base types."""
        for exc in (UnknownAlgorithmError, InvalidArrayError, InvalidGraphError, InvalidBoardError, InvalidSpeedError):
            assert issubclass(exc, InvalidInputError)
            assert issubclass(exc, EngineError)
            assert issubclass(exc, ValueError)


class TestValidation:
    """Run-start rejections."""

    @pytest.mark.parametrize("key,raw,options,error", [
        ("bubble-sort", "3,1,2", {}, InvalidArrayError),
        ("bubble-sort", [1, None], {}, InvalidArrayError),
        ("bubble-sort", [1, True], {}, InvalidArrayError),
        ("bubble-sort", [1, float("inf")], {}, InvalidArrayError),
        ("bubble-sort", list(range(MAX_ARRAY_LENGTH + 1)), {}, InvalidArrayError),
        ("bubble-sort", [1], {"ascending": "yes"}, InvalidInputError),
        ("binary-search", [1, 2], {}, InvalidInputError),
        ("bfs", [1, 2], {}, InvalidGraphError),
        ("bfs", {"nodes": [], "edges": []}, {}, InvalidGraphError),
        ("bfs", GRAPH, {"start": "Q"}, InvalidGraphError),
        ("bfs", {"nodes": ["A", "A"], "edges": []}, {}, InvalidGraphError),
        ("bfs", {"adjacency_matrix": "0 1\n1"}, {}, InvalidGraphError),
        ("bfs", GRAPH, {"directed": "no"}, InvalidInputError),
        ("dijkstra", {"nodes": ["A", "B"], "edges": [{"source": "A", "target": "B", "weight": -1}]}, {}, InvalidGraphError),
        ("dijkstra", {"nodes": ["A", "B"], "edges": [{"source": "A", "target": "B", "weight": float("nan")}]}, {}, InvalidGraphError),
        ("prim", {"nodes": ["A", "B"], "edges": [{"source": "A", "target": "B", "weight": float("inf")}]}, {}, InvalidGraphError),
        ("kruskal", {"adjacency_list": "A: B(nan)"}, {}, InvalidGraphError),
        ("fibonacci", -1, {}, InvalidInputError),
        ("fibonacci", 2.5, {}, InvalidInputError),
        ("knapsack", {"weights": [1], "values": [1, 2], "capacity": 3}, {}, InvalidArrayError),
        ("knapsack", {"weights": [1], "values": [1], "capacity": MAX_CAPACITY + 1}, {}, InvalidInputError),
        ("knapsack", {"weights": [1.5], "values": [1], "capacity": 3}, {}, InvalidArrayError),
        ("lcs", {"str1": 5, "str2": "A"}, {}, InvalidInputError),
        ("activity-selection", [[3, 1]], {}, InvalidInputError),
        ("huffman-coding", {}, {}, InvalidInputError),
        ("huffman-coding", {"a": 0}, {}, InvalidInputError),
        ("fractional-knapsack", {"items": [{"weight": 0, "value": 1}], "capacity": 1}, {}, InvalidInputError),
        ("job-scheduling", [{"deadline": 0, "profit": 1}], {}, InvalidInputError),
        ("n-queens", 0, {}, InvalidBoardError),
        ("n-queens", 13, {}, InvalidBoardError),
        ("sudoku-solver", None, {"difficulty": "fiendish"}, InvalidBoardError),
        ("sudoku-solver", [[0] * 9] * 8, {}, InvalidBoardError),
        ("tree-traversal", "1,2", {"order": "zigzag"}, InvalidInputError),
        ("tree-traversal", "1,two", {}, InvalidInputError),
        ("bst", {"operations": [["rotate", 1]]}, {}, InvalidInputError),
        ("bst", {"operations": [["insert", "x"]]}, {}, InvalidInputError),
        ("tree-lca", {"tree": "1,2,3", "a": 2, "b": 9}, {}, InvalidInputError),
        ("gcd", {"a": -1, "b": 2}, {}, InvalidInputError),
        ("sieve-of-eratosthenes", 1, {}, InvalidInputError),
        ("prime-factorization", 1, {}, InvalidInputError),
    ])
    def test_rejected(self, key, raw, options, error):
        """Bad input raises before any generator exists."""
        with pytest.raises(error):
            create_generator(key, raw, options)

    def test_inputs_are_copied(self):
        """The caller's array is never mutated by a run."""
        data = [3, 2, 1]
        drain(create_generator("quick-sort", data, {}))
        assert data == [3, 2, 1]

    def test_sudoku_cell_objects(self):
        """Cells may be {value, fixed} objects; fixed must be non-empty."""
        board = [[{"value": 0} for _ in range(9)] for _ in range(9)]
        board[0][0] = {"value": 5, "fixed": True}
        (values,), kwargs = prepare_sudoku(board, {})
        assert values[0][0] == 5
        assert kwargs["fixed"][0][0] is True
        assert kwargs["fixed"][0][1] is False
        board[0][1] = {"value": 0, "fixed": True}
        with pytest.raises(InvalidBoardError):
            prepare_sudoku(board, {})

    @pytest.mark.parametrize("speed", [-1, 101, "fast", None, True, float("nan")])
    def test_bad_speed(self, speed):
        """Speeds outside 0..100 are rejected."""
        with pytest.raises(InvalidSpeedError):
            validate_speed(speed)

    def test_good_speed(self):
        """Floats are truncated to int."""
        assert validate_speed(0) == 0
        assert validate_speed(99.9) == 99
