"""
dp.py — Dynamic Programming
============================
Table-filling generators.  Each one pre-sizes its table (zeros, or ones for
LIS), yields the untouched table first, then fills it yielding a TableStep
per cell / index.  They return a DPResult:

    value    – the optimal value (fib(n), best knapsack value, LCS / LIS length)
    table    – the final table, as tuples
    inputs   – the original inputs, echoed back for result interpretation
    solution – the reconstructed answer (item indices / LCS string / one LIS)

Empty inputs (n = 0, "", []) produce trivially small tables.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Sequence

from algorithms.step import TableStep


@dataclass(frozen=True)
class DPResult:
    value:    Any
    table:    tuple
    inputs:   Dict[str, Any] = field(default_factory=dict)
    solution: Any            = None


DPGenerator = Generator[TableStep, None, DPResult]


def _freeze(table: List[Any]) -> tuple:
    if table and isinstance(table[0], list):
        return tuple(tuple(row) for row in table)
    return tuple(table)


# ---------------------------------------------------------------------------
# Fibonacci
# ---------------------------------------------------------------------------
def fibonacci(n: int) -> DPGenerator:
    """dp[i] = dp[i-1] + dp[i-2], dp[0] = 0, dp[1] = 1."""
    dp = [0] * (n + 1)
    if n >= 1:
        dp[1] = 1
    yield TableStep(_freeze(dp))

    for i in range(2, n + 1):
        dp[i] = dp[i - 1] + dp[i - 2]
        yield TableStep(_freeze(dp), (i,))

    return DPResult(dp[n], _freeze(dp), {"n": n}, dp[n])


# ---------------------------------------------------------------------------
# 0/1 Knapsack
# ---------------------------------------------------------------------------
def knapsack(weights: Sequence[int], values: Sequence[float], capacity: int) -> DPGenerator:
    """
    dp[i][w] = best value using the first i items within weight w.
    Row 0 and column 0 stay zero; they still get a (shorter) snapshot.
    """
    n  = len(weights)
    dp = [[0] * (capacity + 1) for _ in range(n + 1)]
    yield TableStep(_freeze(dp), delay_factor=2.0)

    for i in range(n + 1):
        for w in range(capacity + 1):
            if i == 0 or w == 0:
                yield TableStep(_freeze(dp), (i, w), delay_factor=0.5)
                continue
            if weights[i - 1] <= w:
                dp[i][w] = max(dp[i - 1][w], values[i - 1] + dp[i - 1][w - weights[i - 1]])
            else:
                dp[i][w] = dp[i - 1][w]
            yield TableStep(_freeze(dp), (i, w))

    # walk back up the rows: a changed value means item i-1 was taken
    chosen, w = [], capacity
    for i in range(n, 0, -1):
        if dp[i][w] != dp[i - 1][w]:
            chosen.append(i - 1)
            w -= weights[i - 1]
    chosen.reverse()

    inputs = {"weights": list(weights), "values": list(values), "capacity": capacity}
    return DPResult(dp[n][capacity], _freeze(dp), inputs, chosen)


# ---------------------------------------------------------------------------
# Longest Common Subsequence
# ---------------------------------------------------------------------------
def lcs(str1: str, str2: str) -> DPGenerator:
    m, n = len(str1), len(str2)
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    yield TableStep(_freeze(dp))

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if str1[i - 1] == str2[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])
            yield TableStep(_freeze(dp), (i, j))

    chars, i, j = [], m, n
    while i > 0 and j > 0:
        if str1[i - 1] == str2[j - 1]:
            chars.append(str1[i - 1])
            i, j = i - 1, j - 1
        elif dp[i - 1][j] >= dp[i][j - 1]:
            i -= 1
        else:
            j -= 1

    return DPResult(dp[m][n], _freeze(dp), {"str1": str1, "str2": str2}, "".join(reversed(chars)))


# ---------------------------------------------------------------------------
# Longest Increasing Subsequence
# ---------------------------------------------------------------------------
def lis(array: Sequence[Any]) -> DPGenerator:
    """O(n²) LIS; one snapshot per inner-loop update."""
    arr  = list(array)
    n    = len(arr)
    dp   = [1] * n
    prev = [-1] * n
    yield TableStep(_freeze(dp))

    for i in range(1, n):
        for j in range(i):
            if arr[j] < arr[i]:
                if dp[j] + 1 > dp[i]:
                    dp[i] = dp[j] + 1
                    prev[i] = j
                yield TableStep(_freeze(dp), (i,), delay_factor=0.7)

    if n == 0:
        return DPResult(0, (), {"array": arr}, [])

    end = max(range(n), key=lambda k: dp[k])
    seq = []
    while end != -1:
        seq.append(arr[end])
        end = prev[end]
    seq.reverse()
    return DPResult(max(dp), _freeze(dp), {"array": arr}, seq)
