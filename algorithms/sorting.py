"""
sorting.py — Comparison Sorts
==============================
Five generator-based sorts sharing one signature:

    gen = quick_sort(array, ascending=True, key=None)
    for step in gen: ...            # ArrayStep snapshots
    # StopIteration.value is the sorted list

Design decisions:
  - The input is copied; the caller's list is never touched.
  - Order is decided by ONE comparator, `out_of_order(a, b)`, built from
    `ascending` (+ optional `key`) and passed through every helper, so
    descending order is not a second copy of each algorithm.
  - Every sort emits an "init" snapshot first.  Arrays shorter than 2
    return right after it.
  - Quick sort is driven by an explicit range stack (already-sorted input
    would otherwise nest one generator frame per element).
"""

from typing import Any, Callable, Generator, List, Optional

from algorithms.step import ArrayStep


Comparator = Callable[[Any, Any], bool]
SortGenerator = Generator[ArrayStep, None, List[Any]]


def make_comparator(ascending: bool = True, key: Optional[Callable[[Any], Any]] = None) -> Comparator:
    """Return out_of_order(a, b): True when a must come AFTER b."""
    k = key if key is not None else (lambda x: x)
    if ascending:
        return lambda a, b: k(a) > k(b)
    return lambda a, b: k(a) < k(b)


def _snap(arr: List[Any], current: int = -1, compare: int = -1, action: str = "", delay_factor: float = 1.0) -> ArrayStep:
    return ArrayStep(tuple(arr), current, compare, action, delay_factor)


# ---------------------------------------------------------------------------
# Bubble
# ---------------------------------------------------------------------------
def bubble_sort(array: List[Any], ascending: bool = True, key=None) -> SortGenerator:
    """Adjacent compare/swap; stops after a pass with no swap."""
    arr = list(array)
    out_of_order = make_comparator(ascending, key)
    yield _snap(arr, action="init")
    n = len(arr)
    if n < 2:
        return arr

    for i in range(n - 1):
        swapped = False
        for j in range(n - 1 - i):
            yield _snap(arr, j, j + 1, "compare")
            if out_of_order(arr[j], arr[j + 1]):
                arr[j], arr[j + 1] = arr[j + 1], arr[j]
                swapped = True
                yield _snap(arr, j, j + 1, "swap")
        if not swapped:
            break
    return arr


# ---------------------------------------------------------------------------
# Insertion
# ---------------------------------------------------------------------------
def insertion_sort(array: List[Any], ascending: bool = True, key=None) -> SortGenerator:
    arr = list(array)
    out_of_order = make_comparator(ascending, key)
    yield _snap(arr, action="init")
    if len(arr) < 2:
        return arr

    # each shift is a swap with the held element, so every snapshot is a
    # permutation of the input
    for i in range(1, len(arr)):
        j = i - 1
        while j >= 0 and out_of_order(arr[j], arr[j + 1]):
            arr[j], arr[j + 1] = arr[j + 1], arr[j]
            yield _snap(arr, j, j + 1, "shift", 0.5)
            j -= 1
        yield _snap(arr, j + 1, i, "insert", 0.5)
    return arr


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------
def selection_sort(array: List[Any], ascending: bool = True, key=None) -> SortGenerator:
    """Linear scan for the extremum of the unsorted tail, one swap per pass."""
    arr = list(array)
    out_of_order = make_comparator(ascending, key)
    yield _snap(arr, action="init")
    n = len(arr)
    if n < 2:
        return arr

    for i in range(n - 1):
        best = i
        for j in range(i + 1, n):
            yield _snap(arr, best, j, "compare")
            if out_of_order(arr[best], arr[j]):
                best = j
        if best != i:
            arr[i], arr[best] = arr[best], arr[i]
            yield _snap(arr, i, best, "swap")
    return arr


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------
def merge_sort(array: List[Any], ascending: bool = True, key=None) -> SortGenerator:
    """
    Top-down merge sort.  Stable: on a tie the left-half element is placed
    first, because it is only skipped when strictly out of order.
    """
    arr = list(array)
    out_of_order = make_comparator(ascending, key)
    yield _snap(arr, action="init")
    if len(arr) < 2:
        return arr
    yield from _merge_sort(arr, 0, len(arr) - 1, out_of_order)
    return arr


def _merge_sort(arr: List[Any], lo: int, hi: int, out_of_order: Comparator) -> Generator[ArrayStep, None, None]:
    if lo >= hi:
        return
    mid = (lo + hi) // 2
    yield _snap(arr, lo, hi, "split", 0.5)
    yield from _merge_sort(arr, lo, mid, out_of_order)
    yield from _merge_sort(arr, mid + 1, hi, out_of_order)
    yield from _merge(arr, lo, mid, hi, out_of_order)


def _merge(arr: List[Any], lo: int, mid: int, hi: int, out_of_order: Comparator) -> Generator[ArrayStep, None, None]:
    left, right = arr[lo:mid + 1], arr[mid + 1:hi + 1]
    i = j = 0
    k = lo

    def view() -> List[Any]:
        # merged prefix, then what is still pending in each half
        return arr[:k] + left[i:] + right[j:] + arr[hi + 1:]

    while i < len(left) and j < len(right):
        yield _snap(view(), k, k + len(left) - i, "compare")
        if out_of_order(left[i], right[j]):
            arr[k] = right[j]
            j += 1
        else:
            arr[k] = left[i]
            i += 1
        k += 1
        yield _snap(view(), k - 1, -1, "write", 0.5)

    while i < len(left):
        arr[k] = left[i]
        i += 1
        k += 1
        yield _snap(view(), k - 1, -1, "write", 0.5)
    while j < len(right):
        arr[k] = right[j]
        j += 1
        k += 1
        yield _snap(view(), k - 1, -1, "write", 0.5)


# ---------------------------------------------------------------------------
# Quick
# ---------------------------------------------------------------------------
def quick_sort(array: List[Any], ascending: bool = True, key=None) -> SortGenerator:
    """Lomuto partition, last element as pivot.  Not stable."""
    arr = list(array)
    out_of_order = make_comparator(ascending, key)
    yield _snap(arr, action="init")
    if len(arr) < 2:
        return arr

    ranges = [(0, len(arr) - 1)]
    while ranges:
        lo, hi = ranges.pop()
        if lo >= hi:
            continue
        pivot = arr[hi]
        yield _snap(arr, hi, -1, "pivot", 0.5)

        i = lo
        for j in range(lo, hi):
            yield _snap(arr, j, hi, "compare")
            if not out_of_order(arr[j], pivot):
                if i != j:
                    arr[i], arr[j] = arr[j], arr[i]
                    yield _snap(arr, i, j, "swap")
                i += 1
        if i != hi:
            arr[i], arr[hi] = arr[hi], arr[i]
            yield _snap(arr, i, hi, "swap")

        # left range on top: same order as the recursive version
        ranges.append((i + 1, hi))
        ranges.append((lo, i - 1))
    return arr
