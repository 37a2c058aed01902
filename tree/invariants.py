"""
invariants.py — Tree Invariant Inspectors
==========================================
Each checker walks a TreeArena and returns a list of human-readable
issues; an empty list means the invariant holds.  The tree engine turns a
non-empty list into an InvariantViolationError after AVL / red-black
operations, and the tests assert on the lists directly.
"""

from typing import Any, List, Optional

from tree.arena import Color, TreeArena


def check_links(arena: TreeArena) -> List[str]:
    """Every child's parent link points back; the root has no parent."""
    issues: List[str] = []
    if arena.root is None:
        return issues
    if arena[arena.root].parent is not None:
        issues.append(f"root {arena[arena.root].value!r} has a parent")
    stack = [arena.root]
    while stack:
        idx = stack.pop()
        for child in (arena[idx].left, arena[idx].right):
            if child is None:
                continue
            if arena[child].parent != idx:
                issues.append(f"node {arena[child].value!r} does not link back to {arena[idx].value!r}")
            stack.append(child)
    return issues


def check_bst(arena: TreeArena) -> List[str]:
    """In-order values strictly increase (also rules out duplicates)."""
    issues = check_links(arena)
    prev: Optional[Any] = None
    first = True
    for value in arena.values():
        if not first and not prev < value:
            issues.append(f"in-order sequence breaks at {prev!r} → {value!r}")
        prev, first = value, False
    return issues


def check_avl(arena: TreeArena) -> List[str]:
    """BST order, stored heights correct, balance factor in {-1, 0, 1}."""
    issues = check_bst(arena)

    def walk(idx: Optional[int]) -> int:
        if idx is None:
            return 0
        node = arena[idx]
        hl, hr = walk(node.left), walk(node.right)
        h = 1 + max(hl, hr)
        if node.height != h:
            issues.append(f"node {node.value!r} stores height {node.height}, actual {h}")
        if abs(hl - hr) > 1:
            issues.append(f"node {node.value!r} has balance factor {hl - hr}")
        return h

    walk(arena.root)
    return issues


def check_red_black(arena: TreeArena) -> List[str]:
    """BST order, black root, no red node with a red child, equal black heights."""
    issues = check_bst(arena)
    if arena.root is not None and arena.is_red(arena.root):
        issues.append("root is red")

    def walk(idx: Optional[int]) -> int:
        if idx is None:
            return 1
        node = arena[idx]
        if node.color is Color.RED and (arena.is_red(node.left) or arena.is_red(node.right)):
            issues.append(f"red node {node.value!r} has a red child")
        bl, br = walk(node.left), walk(node.right)
        if bl != br:
            issues.append(f"node {node.value!r} has black heights {bl} / {br}")
        return max(bl, br) + (1 if node.color is Color.BLACK else 0)

    walk(arena.root)
    return issues


def black_height(arena: TreeArena) -> int:
    """Black nodes on the leftmost root-to-nil path, nil included."""
    h, idx = 1, arena.root
    while idx is not None:
        if not arena.is_red(idx):
            h += 1
        idx = arena[idx].left
    return h
