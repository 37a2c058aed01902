"""
greedy.py — Greedy Algorithms
==============================
    activity_selection   – earliest-finish-first interval scheduling
    huffman_coding       – optimal prefix codes via a min-heap of subtrees
    fractional_knapsack  – best value/weight ratio first, last item split
    job_scheduling       – highest profit first, latest free slot ≤ deadline

Design decisions:
  - Input records are frozen dataclasses, so a snapshot's `selected`
    tuple can hold them directly without copying.
  - Huffman's heap is keyed (freq, insertion seq): equal frequencies merge
    in the order they were created, which keeps codes deterministic.
  - Skipped activities are a Tick(0.5), not a snapshot; nothing visible
    changed, the run just lingers briefly on them.
"""

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Dict, Generator, List, Optional, Sequence, Tuple, Union

from algorithms.errors import InvalidInputError
from algorithms.step import GreedyStep, HuffmanNode, HuffmanStep, Tick


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Activity:
    name:   str
    start:  float
    finish: float


@dataclass(frozen=True)
class Item:
    name:   str
    weight: float
    value:  float


@dataclass(frozen=True)
class Pick:
    """An Item taken into the fractional knapsack, possibly in part."""
    name:     str
    weight:   float
    value:    float
    fraction: float


@dataclass(frozen=True)
class Job:
    name:     str
    deadline: int
    profit:   float


@dataclass(frozen=True)
class GreedyResult:
    selected: Tuple
    totals:   Dict[str, float]         = field(default_factory=dict)
    slots:    Tuple[Optional[str], ...] = ()


@dataclass(frozen=True)
class HuffmanResult:
    root:           Optional[HuffmanNode]
    codes:          Dict[str, str]
    encoded_length: float


# ---------------------------------------------------------------------------
# Activity selection
# ---------------------------------------------------------------------------
def activity_selection(activities: Sequence[Activity]) -> Generator[Union[GreedyStep, Tick], None, GreedyResult]:
    ordered = sorted(activities, key=lambda a: a.finish)   # stable on ties
    selected: List[Activity] = []
    last_finish = None

    for i, act in enumerate(ordered):
        if last_finish is None or act.start >= last_finish:
            selected.append(act)
            last_finish = act.finish
            yield GreedyStep(tuple(selected), i, {"count": len(selected), "last_finish": last_finish})
        else:
            yield Tick(0.5)

    return GreedyResult(tuple(selected), {"count": len(selected)})


# ---------------------------------------------------------------------------
# Huffman coding
# ---------------------------------------------------------------------------
def huffman_coding(frequencies: Dict[str, float]) -> Generator[HuffmanStep, None, HuffmanResult]:
    if not frequencies:
        raise InvalidInputError("huffman coding needs at least one symbol")

    seq  = itertools.count()
    heap: List[Tuple[float, int, HuffmanNode]] = [
        (freq, next(seq), HuffmanNode(freq, char)) for char, freq in frequencies.items()
    ]
    heapq.heapify(heap)
    yield HuffmanStep(_forest(heap))

    while len(heap) > 1:
        f1, _, left  = heapq.heappop(heap)
        f2, _, right = heapq.heappop(heap)
        parent = HuffmanNode(f1 + f2, None, left, right)
        heapq.heappush(heap, (parent.freq, next(seq), parent))
        yield HuffmanStep(_forest(heap), parent)

    root  = heap[0][2]
    codes = huffman_codes(root)
    encoded = sum(frequencies[ch] * len(code) for ch, code in codes.items())
    return HuffmanResult(root, codes, encoded)


def huffman_codes(root: Optional[HuffmanNode]) -> Dict[str, str]:
    """Root-to-leaf walk: "0" for left, "1" for right.  A lone leaf gets "0"."""
    if root is None:
        return {}
    if root.is_leaf:
        return {root.char: "0"}

    codes: Dict[str, str] = {}
    stack = [(root, "")]
    while stack:
        node, prefix = stack.pop()
        if node.is_leaf:
            codes[node.char] = prefix
            continue
        if node.right is not None:
            stack.append((node.right, prefix + "1"))
        if node.left is not None:
            stack.append((node.left, prefix + "0"))
    return codes


def _forest(heap) -> Tuple[HuffmanNode, ...]:
    return tuple(node for _, _, node in sorted(heap, key=lambda e: (e[0], e[1])))


# ---------------------------------------------------------------------------
# Fractional knapsack
# ---------------------------------------------------------------------------
def fractional_knapsack(items: Sequence[Item], capacity: float) -> Generator[GreedyStep, None, GreedyResult]:
    ordered = sorted(items, key=lambda it: it.value / it.weight, reverse=True)
    picks: List[Pick] = []
    total, remaining = 0.0, capacity

    yield GreedyStep((), -1, {"total_value": total, "remaining": remaining})

    for i, item in enumerate(ordered):
        if remaining >= item.weight:
            picks.append(Pick(item.name, item.weight, item.value, 1.0))
            total += item.value
            remaining -= item.weight
        elif remaining > 0:
            fraction = remaining / item.weight
            picks.append(Pick(item.name, item.weight, item.value, fraction))
            total += item.value * fraction
            remaining = 0
        yield GreedyStep(tuple(picks), i, {"total_value": total, "remaining": remaining})
        if remaining == 0:
            break

    return GreedyResult(tuple(picks), {"total_value": total, "remaining": remaining})


# ---------------------------------------------------------------------------
# Job sequencing with deadlines
# ---------------------------------------------------------------------------
def job_scheduling(jobs: Sequence[Job]) -> Generator[GreedyStep, None, GreedyResult]:
    ordered = sorted(jobs, key=lambda j: j.profit, reverse=True)
    horizon = max((j.deadline for j in ordered), default=0)
    slots: List[Optional[Job]] = [None] * horizon
    scheduled: List[Job] = []
    profit = 0.0

    yield GreedyStep((), -1, {"profit": profit})

    for i, job in enumerate(ordered):
        for s in range(min(horizon, job.deadline) - 1, -1, -1):
            if slots[s] is None:
                slots[s] = job
                scheduled.append(job)
                profit += job.profit
                break
        yield GreedyStep(tuple(scheduled), i, {"profit": profit})

    return GreedyResult(
        tuple(scheduled),
        {"profit": profit},
        tuple(j.name if j else None for j in slots),
    )
