"""
build.py — Tree Builders
=========================
    parse_level_order("1,2,null,3")   → arbitrary binary tree (queue order)
    balanced_bst([5, 1, 9, 3])        → height-balanced BST of the unique values

Level-order input follows the common "null marks a missing child" format:
children are assigned to nodes in queue order, so a missing node has no
placeholder children of its own.
"""

from collections import deque
from typing import Any, List, Optional, Sequence, Union

from tree.arena import Color, TreeArena


def _tokens(data: Union[str, Sequence[Any]]) -> List[Optional[Any]]:
    if isinstance(data, str):
        items = [t.strip() for t in data.split(",")] if data.strip() else []
    else:
        items = list(data)
    values: List[Optional[Any]] = []
    for item in items:
        if item is None or (isinstance(item, str) and item.lower() in ("null", "none", "")):
            values.append(None)
        elif isinstance(item, str):
            values.append(int(item))
        else:
            values.append(item)
    return values


def parse_level_order(data: Union[str, Sequence[Any]]) -> TreeArena:
    """
    Raises:
        ValueError – a token is neither an integer nor "null".
    """
    values = _tokens(data)
    arena = TreeArena()
    if not values or values[0] is None:
        return arena

    arena.root = arena.new(values[0])
    queue = deque([arena.root])
    i = 1
    while queue and i < len(values):
        parent = queue.popleft()
        for side in ("left", "right"):
            if i >= len(values):
                break
            if values[i] is not None:
                child = arena.new(values[i])
                arena[child].parent = parent
                setattr(arena[parent], side, child)
                queue.append(child)
            i += 1

    arena.refresh_heights()
    return arena


def balanced_bst(values: Sequence[Any], colored: bool = False) -> TreeArena:
    """
    Middle element of the sorted unique values at each level.  With
    `colored`, every node is black except the deepest level, which makes
    the result a valid red-black tree too.
    """
    ordered = sorted(set(values))
    arena = TreeArena(colored=colored)

    def build(lo: int, hi: int, parent: Optional[int]) -> Optional[int]:
        if lo > hi:
            return None
        mid = (lo + hi) // 2
        idx = arena.new(ordered[mid], color=Color.BLACK)
        arena[idx].parent = parent
        arena[idx].left   = build(lo, mid - 1, idx)
        arena[idx].right  = build(mid + 1, hi, idx)
        arena.update_height(idx)
        return idx

    arena.root = build(0, len(ordered) - 1, None)
    if colored and not _is_perfect(len(ordered)):
        # an incomplete bottom row turns red
        full = arena.depth()
        for idx in list(arena.inorder_ids()):
            if _depth_of(arena, idx) == full:
                arena[idx].color = Color.RED
    return arena


def _depth_of(arena: TreeArena, idx: int) -> int:
    d = 1
    while arena[idx].parent is not None:
        idx = arena[idx].parent
        d += 1
    return d


def _is_perfect(n: int) -> bool:
    return (n + 1) & n == 0

