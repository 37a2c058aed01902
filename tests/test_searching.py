"""Tests for the search generators."""

import math

import pytest

from algorithms.searching import binary_search, interpolation_search, jump_search, linear_search
from conftest import drain

SEARCHES = [linear_search, binary_search, jump_search, interpolation_search]
SORTED = [1, 3, 5, 7, 9, 11]


@pytest.mark.parametrize("search", SEARCHES, ids=lambda f: f.__name__)
class TestSearchCorrectness:
    """All searches agree on sorted input."""

    def test_found(self, search):
        """7 sits at index 3."""
        _, index = drain(search(SORTED, 7))
        assert index == 3

    def test_missing(self, search):
        """A value between elements is reported as -1."""
        _, index = drain(search(SORTED, 4))
        assert index == -1

    def test_out_of_range(self, search):
        """Values beyond either end are not found."""
        assert drain(search(SORTED, 0))[1] == -1
        assert drain(search(SORTED, 12))[1] == -1

    def test_every_element(self, search):
        """Each element is found at its own index."""
        for i, v in enumerate(SORTED):
            assert drain(search(SORTED, v))[1] == i

    def test_empty(self, search):
        """An empty array yields no probes and returns -1."""
        steps, index = drain(search([], 3))
        assert steps == []
        assert index == -1

    def test_last_probe_marks_found(self, search):
        """Only the final probe of a successful search is flagged found."""
        steps, index = drain(search(SORTED, 9))
        assert steps[-1].found and steps[-1].probe == index
        assert not any(s.found for s in steps[:-1])


class TestProbeBounds:
    """Probe counts stay within each algorithm's bound."""

    def test_linear_probes_every_element_when_missing(self):
        """A missing key costs n probes."""
        steps, _ = drain(linear_search(SORTED, 100))
        assert len(steps) == len(SORTED)

    def test_binary_log_bound(self):
        """Binary search probes at most floor(log2 n) + 1 times."""
        data = list(range(0, 200, 2))
        bound = math.floor(math.log2(len(data))) + 1
        for target in (-1, 0, 57, 100, 198, 199):
            steps, _ = drain(binary_search(data, target))
            assert len(steps) <= bound

    def test_jump_sqrt_bound(self):
        """Jump search probes at most 2·ceil(√n) + 1 times."""
        data = list(range(100))
        bound = 2 * math.ceil(math.sqrt(len(data))) + 1
        for target in (0, 9, 10, 55, 99, 150, -3):
            steps, _ = drain(jump_search(data, target))
            assert len(steps) <= bound

    def test_jump_scan_uses_short_delay(self):
        """In-block scan probes are brief highlights."""
        steps, _ = drain(jump_search(list(range(16)), 5))
        assert steps[0].delay_factor == 1.0
        assert steps[-1].delay_factor == 0.5

    def test_interpolation_uniform_hits_first_probe(self):
        """Evenly spaced keys are found with one probe."""
        data = list(range(0, 1000, 10))
        steps, index = drain(interpolation_search(data, 430))
        assert index == 43
        assert len(steps) == 1

    def test_interpolation_all_equal(self):
        """A constant array does not divide by zero."""
        _, index = drain(interpolation_search([4, 4, 4], 4))
        assert index == 0

    def test_snapshot_bounds(self):
        """Binary search snapshots carry the live low/high window."""
        steps, _ = drain(binary_search(SORTED, 11))
        assert (steps[0].low, steps[0].high) == (0, 5)
        assert steps[0].cursor == steps[0].probe == 2
