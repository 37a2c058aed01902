"""Tests for the dynamic programming generators."""

from algorithms.dp import fibonacci, knapsack, lcs, lis
from conftest import drain


class TestFibonacci:
    """Bottom-up Fibonacci table."""

    def test_fib_10(self):
        """fib(10) is 55."""
        _, result = drain(fibonacci(10))
        assert result.value == 55
        assert result.table == (0, 1, 1, 2, 3, 5, 8, 13, 21, 34, 55)

    def test_small_n(self):
        """fib(0) = 0 and fib(1) = 1 with a single snapshot."""
        for n, expected in ((0, 0), (1, 1)):
            steps, result = drain(fibonacci(n))
            assert result.value == expected
            assert len(steps) == 1

    def test_snapshot_per_cell(self):
        """One snapshot per filled index, cursor on that index."""
        steps, _ = drain(fibonacci(5))
        assert [s.cursor for s in steps] == [None, (2,), (3,), (4,), (5,)]


class TestKnapsack:
    """0/1 knapsack table."""

    WEIGHTS = [10, 20, 30]
    VALUES = [60, 100, 120]

    def test_classic(self):
        """Capacity 50 gives 220 by taking items 1 and 2."""
        _, result = drain(knapsack(self.WEIGHTS, self.VALUES, 50))
        assert result.value == 220
        assert result.solution == [1, 2]

    def test_snapshot_count_and_factors(self):
        """Initial snapshot is long; base row/column cells are short."""
        steps, _ = drain(knapsack([1, 2], [3, 4], 3))
        assert len(steps) == 1 + 3 * 4
        assert steps[0].delay_factor == 2.0
        base = [s for s in steps[1:] if 0 in s.cell]
        assert base and all(s.delay_factor == 0.5 for s in base)

    def test_zero_capacity(self):
        """Nothing fits in a zero-capacity knapsack."""
        _, result = drain(knapsack(self.WEIGHTS, self.VALUES, 0))
        assert result.value == 0
        assert result.solution == []

    def test_item_too_heavy(self):
        """Items heavier than the capacity are never chosen."""
        _, result = drain(knapsack([5, 1], [100, 1], 4))
        assert result.value == 1
        assert result.solution == [1]


class TestLCS:
    """Longest common subsequence."""

    def test_classic(self):
        """ABCDGH vs AEDFHR share ADH."""
        _, result = drain(lcs("ABCDGH", "AEDFHR"))
        assert result.value == 3
        assert result.solution == "ADH"

    def test_empty_string(self):
        """An empty side gives length 0 and a single snapshot."""
        steps, result = drain(lcs("", "ABC"))
        assert result.value == 0
        assert result.solution == ""
        assert len(steps) == 1

    def test_table_shape(self):
        """The table is (m+1) × (n+1)."""
        _, result = drain(lcs("AB", "XYZ"))
        assert len(result.table) == 3
        assert all(len(row) == 4 for row in result.table)


class TestLIS:
    """Longest strictly increasing subsequence."""

    def test_classic(self):
        """[10, 9, 2, 5, 3, 7, 101, 18] has an LIS of length 4."""
        _, result = drain(lis([10, 9, 2, 5, 3, 7, 101, 18]))
        assert result.value == 4
        assert result.solution == [2, 5, 7, 101]

    def test_strictly_increasing_only(self):
        """Equal elements do not extend a subsequence."""
        _, result = drain(lis([3, 3, 3]))
        assert result.value == 1

    def test_empty(self):
        """An empty array has an LIS of 0."""
        _, result = drain(lis([]))
        assert result.value == 0
        assert result.solution == []

    def test_update_snapshots_are_quick(self):
        """Inner-loop snapshots use delay factor 0.7."""
        steps, _ = drain(lis([1, 2, 3]))
        assert {s.delay_factor for s in steps[1:]} == {0.7}
