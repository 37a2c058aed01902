"""
searching.py — Array Search
============================
Generator-based searches.  Each probe of an array element yields one
SearchStep; the generator returns the found index or -1.

binary / jump / interpolation search assume the array is sorted
ascending.  That precondition is the caller's, it is not re-checked.

Probe bounds (also the snapshot bounds):
    linear         ≤ n
    binary         ≤ floor(log2 n) + 1
    jump           ≤ 2·ceil(√n) + 1
    interpolation  ≤ n, ~log log n on uniformly spread keys
"""

import math
from typing import Any, Generator, List

from algorithms.step import SearchStep


SearchGenerator = Generator[SearchStep, None, int]


def linear_search(array: List[Any], target: Any) -> SearchGenerator:
    arr = tuple(array)
    for i, value in enumerate(arr):
        found = value == target
        yield SearchStep(arr, i, i, len(arr) - 1, found)
        if found:
            return i
    return -1


def binary_search(array: List[Any], target: Any) -> SearchGenerator:
    arr = tuple(array)
    lo, hi = 0, len(arr) - 1
    while lo <= hi:
        mid = (lo + hi) // 2
        found = arr[mid] == target
        yield SearchStep(arr, mid, lo, hi, found)
        if found:
            return mid
        if arr[mid] < target:
            lo = mid + 1
        else:
            hi = mid - 1
    return -1


def jump_search(array: List[Any], target: Any) -> SearchGenerator:
    """
    Probe the last element of each √n-sized block until one is ≥ target,
    then scan that block linearly.
    """
    arr = tuple(array)
    n = len(arr)
    if n == 0:
        return -1

    block = max(1, math.isqrt(n))
    prev, idx = 0, min(block, n) - 1
    while True:
        found = arr[idx] == target
        yield SearchStep(arr, idx, prev, idx, found, delay_factor=1.0)
        if found:
            return idx
        if arr[idx] > target:
            break
        prev = idx + 1
        if prev >= n:
            return -1
        idx = min(idx + block, n - 1)

    # linear scan inside the block; arr[idx] was already probed
    for i in range(prev, idx):
        found = arr[i] == target
        yield SearchStep(arr, i, prev, idx, found, delay_factor=0.5)
        if found:
            return i
        if arr[i] > target:
            break
    return -1


def interpolation_search(array: List[Any], target: Any) -> SearchGenerator:
    arr = tuple(array)
    lo, hi = 0, len(arr) - 1
    while lo <= hi and arr[lo] <= target <= arr[hi]:
        if arr[hi] == arr[lo]:
            pos = lo
        else:
            pos = lo + int((target - arr[lo]) * (hi - lo) / (arr[hi] - arr[lo]))
        found = arr[pos] == target
        yield SearchStep(arr, pos, lo, hi, found)
        if found:
            return pos
        if arr[pos] < target:
            lo = pos + 1
        else:
            hi = pos - 1
    return -1
