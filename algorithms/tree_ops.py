"""
tree_ops.py — Tree Operations
==============================
Generators over a TreeArena (mutated in place; the caller hands in the
run's own copy):

    bst_insert / bst_delete / bst_search
    avl_insert / avl_delete              – BST + bottom-up LL/RR/LR/RL rebalancing
    rb_insert  / rb_delete               – CLRS insert fixup + full delete fixup
    traverse(arena, order)               – inorder / preorder / postorder / levelorder
    lowest_common_ancestor(arena, a, b)  – any binary tree, not only BSTs
    run_operations(arena, kind, ops)     – a sequence of the above

Each yields a TreeStep per node visited or restructuring performed and
returns a TreeResult.  After every AVL / red-black operation the tree is
checked against its invariants; a breach raises InvariantViolationError
rather than letting the run continue on a corrupt tree.
"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Generator, List, Optional, Sequence, Tuple

from algorithms.errors import InvalidInputError, InvariantViolationError
from algorithms.step import TreeStep
from tree.arena import Color, NodeView, TreeArena
from tree.invariants import check_avl, check_bst, check_red_black


@dataclass(frozen=True)
class TreeResult:
    nodes:  Tuple[NodeView, ...]
    root:   Optional[int]
    values: Tuple[Any, ...]      # in-order values after the operation(s)
    answer: Any = None           # found flag / traversal order / LCA value / …


TreeGenerator = Generator[TreeStep, None, TreeResult]

TRAVERSAL_ORDERS = ("inorder", "preorder", "postorder", "levelorder")


def _snap(arena: TreeArena, current=None, action: str = "", visited=(), delay_factor: float = 1.0) -> TreeStep:
    return TreeStep(arena.views(), arena.root, current, action, tuple(visited), delay_factor)


def _result(arena: TreeArena, answer=None) -> TreeResult:
    return TreeResult(arena.views(), arena.root, tuple(arena.values()), answer)


def _ensure(issues: List[str], what: str) -> None:
    if issues:
        raise InvariantViolationError(f"{what} invariant broken: " + "; ".join(issues))


# ---------------------------------------------------------------------------
# Plain BST
# ---------------------------------------------------------------------------
def _descend(arena: TreeArena, value: Any) -> Generator[TreeStep, None, Tuple[Optional[int], Optional[int]]]:
    """Walk toward `value`; returns (match or None, last node visited)."""
    cur, last = arena.root, None
    while cur is not None:
        node = arena[cur]
        yield _snap(arena, node.value, "compare", delay_factor=0.5)
        if value == node.value:
            return cur, last
        last = cur
        cur = node.left if value < node.value else node.right
    return None, last


def _attach(arena: TreeArena, value: Any, color: Color = Color.RED) -> Generator[TreeStep, None, Optional[int]]:
    match, parent = yield from _descend(arena, value)
    if match is not None:
        yield _snap(arena, value, "duplicate")
        return None
    idx = arena.new(value, color)
    arena[idx].parent = parent
    if parent is None:
        arena.root = idx
    elif value < arena[parent].value:
        arena[parent].left = idx
    else:
        arena[parent].right = idx
    _refresh_path(arena, parent)
    yield _snap(arena, value, "insert")
    return idx


def _refresh_path(arena: TreeArena, idx: Optional[int]) -> None:
    while idx is not None:
        arena.update_height(idx)
        idx = arena[idx].parent


def _unlink(arena: TreeArena, z: int) -> Generator[TreeStep, None, Optional[int]]:
    """
    CLRS TREE-DELETE on node z (in-order successor for two children).
    Returns the lowest node whose subtree changed, for rebalancing.
    """
    node = arena[z]
    if node.left is None:
        lowest = node.parent
        arena.transplant(z, node.right)
    elif node.right is None:
        lowest = node.parent
        arena.transplant(z, node.left)
    else:
        y = arena.minimum(node.right)
        yield _snap(arena, arena[y].value, "successor")
        if arena[y].parent != z:
            lowest = arena[y].parent
            arena.transplant(y, arena[y].right)
            arena[y].right = node.right
            arena[arena[y].right].parent = y
        else:
            lowest = y
        arena.transplant(z, y)
        arena[y].left = node.left
        arena[arena[y].left].parent = y
    arena.release(z)
    _refresh_path(arena, lowest)
    return lowest


def bst_insert(arena: TreeArena, value: Any) -> TreeGenerator:
    """Duplicates are ignored (a "duplicate" step, tree unchanged)."""
    idx = yield from _attach(arena, value)
    return _result(arena, idx is not None)


def bst_search(arena: TreeArena, value: Any) -> TreeGenerator:
    match, _ = yield from _descend(arena, value)
    yield _snap(arena, value, "found" if match is not None else "missing")
    return _result(arena, match is not None)


def bst_delete(arena: TreeArena, value: Any) -> TreeGenerator:
    match, _ = yield from _descend(arena, value)
    if match is None:
        yield _snap(arena, value, "missing")
        return _result(arena, False)
    yield from _unlink(arena, match)
    yield _snap(arena, value, "delete")
    _ensure(check_bst(arena), "BST")
    return _result(arena, True)


# ---------------------------------------------------------------------------
# AVL
# ---------------------------------------------------------------------------
def _avl_rebalance(arena: TreeArena, idx: Optional[int]) -> Generator[TreeStep, None, None]:
    """Retrace from idx to the root fixing heights and rotating where |bf| > 1."""
    while idx is not None:
        arena.update_height(idx)
        parent = arena[idx].parent
        bf = arena.balance(idx)
        if bf > 1:
            case = "LL"
            if arena.balance(arena[idx].left) < 0:
                case = "LR"
                arena.rotate_left(arena[idx].left)
            top = arena.rotate_right(idx)
            yield _snap(arena, arena[top].value, f"rotate-{case}")
        elif bf < -1:
            case = "RR"
            if arena.balance(arena[idx].right) > 0:
                case = "RL"
                arena.rotate_right(arena[idx].right)
            top = arena.rotate_left(idx)
            yield _snap(arena, arena[top].value, f"rotate-{case}")
        idx = parent


def avl_insert(arena: TreeArena, value: Any) -> TreeGenerator:
    idx = yield from _attach(arena, value)
    if idx is not None:
        yield from _avl_rebalance(arena, arena[idx].parent)
    _ensure(check_avl(arena), "AVL")
    return _result(arena, idx is not None)


def avl_delete(arena: TreeArena, value: Any) -> TreeGenerator:
    match, _ = yield from _descend(arena, value)
    if match is None:
        yield _snap(arena, value, "missing")
        return _result(arena, False)
    lowest = yield from _unlink(arena, match)
    yield _snap(arena, value, "delete")
    yield from _avl_rebalance(arena, lowest)
    _ensure(check_avl(arena), "AVL")
    return _result(arena, True)


# ---------------------------------------------------------------------------
# Red-Black
# ---------------------------------------------------------------------------
def rb_insert(arena: TreeArena, value: Any) -> TreeGenerator:
    z = yield from _attach(arena, value, Color.RED)
    if z is None:
        return _result(arena, False)

    while arena.is_red(arena[z].parent):
        p = arena[z].parent
        g = arena[p].parent              # exists: a red node is never the root
        if p == arena[g].left:
            uncle = arena[g].right
            if arena.is_red(uncle):
                arena[p].color = arena[uncle].color = Color.BLACK
                arena[g].color = Color.RED
                z = g
                yield _snap(arena, arena[g].value, "recolor")
                continue
            if z == arena[p].right:
                z = p
                arena.rotate_left(z)
                yield _snap(arena, arena[z].value, "rotate-left")
            p = arena[z].parent
            g = arena[p].parent
            arena[p].color = Color.BLACK
            arena[g].color = Color.RED
            arena.rotate_right(g)
            yield _snap(arena, arena[p].value, "rotate-right")
        else:
            uncle = arena[g].left
            if arena.is_red(uncle):
                arena[p].color = arena[uncle].color = Color.BLACK
                arena[g].color = Color.RED
                z = g
                yield _snap(arena, arena[g].value, "recolor")
                continue
            if z == arena[p].left:
                z = p
                arena.rotate_right(z)
                yield _snap(arena, arena[z].value, "rotate-right")
            p = arena[z].parent
            g = arena[p].parent
            arena[p].color = Color.BLACK
            arena[g].color = Color.RED
            arena.rotate_left(g)
            yield _snap(arena, arena[p].value, "rotate-left")

    if arena.is_red(arena.root):
        arena[arena.root].color = Color.BLACK
        yield _snap(arena, arena[arena.root].value, "recolor")
    arena.refresh_heights()
    _ensure(check_red_black(arena), "red-black")
    return _result(arena, True)


def rb_delete(arena: TreeArena, value: Any) -> TreeGenerator:
    """CLRS RB-DELETE; x may be nil (None), so its parent is tracked separately."""
    z, _ = yield from _descend(arena, value)
    if z is None:
        yield _snap(arena, value, "missing")
        return _result(arena, False)

    node = arena[z]
    removed_color = node.color
    if node.left is None:
        x, x_parent = node.right, node.parent
        arena.transplant(z, node.right)
    elif node.right is None:
        x, x_parent = node.left, node.parent
        arena.transplant(z, node.left)
    else:
        y = arena.minimum(node.right)
        yield _snap(arena, arena[y].value, "successor")
        removed_color = arena[y].color
        x = arena[y].right
        if arena[y].parent == z:
            x_parent = y
        else:
            x_parent = arena[y].parent
            arena.transplant(y, arena[y].right)
            arena[y].right = node.right
            arena[arena[y].right].parent = y
        arena.transplant(z, y)
        arena[y].left = node.left
        arena[arena[y].left].parent = y
        arena[y].color = node.color
    arena.release(z)
    yield _snap(arena, value, "delete")

    if removed_color is Color.BLACK:
        yield from _rb_delete_fixup(arena, x, x_parent)

    arena.refresh_heights()
    _ensure(check_red_black(arena), "red-black")
    return _result(arena, True)


def _rb_delete_fixup(arena: TreeArena, x: Optional[int], x_parent: Optional[int]) -> Generator[TreeStep, None, None]:
    """Push the extra black up (cases 1–4 and their mirrors)."""
    while x != arena.root and not arena.is_red(x):
        if x == arena[x_parent].left:
            w = arena[x_parent].right
            if arena.is_red(w):                                       # case 1
                arena[w].color = Color.BLACK
                arena[x_parent].color = Color.RED
                arena.rotate_left(x_parent)
                w = arena[x_parent].right
                yield _snap(arena, arena[x_parent].value, "fixup-case-1")
            if not arena.is_red(arena[w].left) and not arena.is_red(arena[w].right):
                arena[w].color = Color.RED                            # case 2
                x, x_parent = x_parent, arena[x_parent].parent
                yield _snap(arena, arena[x].value, "fixup-case-2")
                continue
            if not arena.is_red(arena[w].right):                      # case 3
                arena[arena[w].left].color = Color.BLACK
                arena[w].color = Color.RED
                arena.rotate_right(w)
                w = arena[x_parent].right
                yield _snap(arena, arena[w].value, "fixup-case-3")
            arena[w].color = arena[x_parent].color                    # case 4
            arena[x_parent].color = Color.BLACK
            arena[arena[w].right].color = Color.BLACK
            arena.rotate_left(x_parent)
            yield _snap(arena, arena[w].value, "fixup-case-4")
            x, x_parent = arena.root, None
        else:
            w = arena[x_parent].left
            if arena.is_red(w):
                arena[w].color = Color.BLACK
                arena[x_parent].color = Color.RED
                arena.rotate_right(x_parent)
                w = arena[x_parent].left
                yield _snap(arena, arena[x_parent].value, "fixup-case-1")
            if not arena.is_red(arena[w].left) and not arena.is_red(arena[w].right):
                arena[w].color = Color.RED
                x, x_parent = x_parent, arena[x_parent].parent
                yield _snap(arena, arena[x].value, "fixup-case-2")
                continue
            if not arena.is_red(arena[w].left):
                arena[arena[w].right].color = Color.BLACK
                arena[w].color = Color.RED
                arena.rotate_left(w)
                w = arena[x_parent].left
                yield _snap(arena, arena[w].value, "fixup-case-3")
            arena[w].color = arena[x_parent].color
            arena[x_parent].color = Color.BLACK
            arena[arena[w].left].color = Color.BLACK
            arena.rotate_right(x_parent)
            yield _snap(arena, arena[w].value, "fixup-case-4")
            x, x_parent = arena.root, None

    if x is not None and arena.is_red(x):
        arena[x].color = Color.BLACK
        yield _snap(arena, arena[x].value, "recolor")


# ---------------------------------------------------------------------------
# Operation sequences
# ---------------------------------------------------------------------------
OPERATIONS = {
    "bst":            {"insert": bst_insert, "delete": bst_delete, "search": bst_search},
    "avl-tree":       {"insert": avl_insert, "delete": avl_delete, "search": bst_search},
    "red-black-tree": {"insert": rb_insert,  "delete": rb_delete,  "search": bst_search},
}


def run_operations(arena: TreeArena, kind: str, operations: Sequence[Tuple[str, Any]]) -> TreeGenerator:
    """Apply (op, value) pairs in order; answer is the per-operation outcomes."""
    table = OPERATIONS[kind]
    yield _snap(arena, action="init")
    outcomes = []
    for op, value in operations:
        res = yield from table[op](arena, value)
        outcomes.append(res.answer)
    return _result(arena, outcomes)


# ---------------------------------------------------------------------------
# Traversals (read only)
# ---------------------------------------------------------------------------
def traverse(arena: TreeArena, order: str = "inorder") -> TreeGenerator:
    if order not in TRAVERSAL_ORDERS:
        raise InvalidInputError(f"unknown traversal order {order!r}")
    views = arena.views()
    visited: List[Any] = []
    for idx in _walk(arena, order):
        value = arena[idx].value
        visited.append(value)
        yield TreeStep(views, arena.root, value, "visit", tuple(visited))
    return _result(arena, visited)


def _walk(arena: TreeArena, order: str):
    if order == "inorder":
        yield from arena.inorder_ids()
    elif order == "preorder":
        yield from arena.preorder_ids()
    elif order == "postorder":
        # reverse of a root-right-left preorder
        out, stack = [], [arena.root] if arena.root is not None else []
        while stack:
            idx = stack.pop()
            out.append(idx)
            for child in (arena[idx].left, arena[idx].right):
                if child is not None:
                    stack.append(child)
        yield from reversed(out)
    else:
        queue = deque([arena.root] if arena.root is not None else [])
        while queue:
            idx = queue.popleft()
            yield idx
            for child in (arena[idx].left, arena[idx].right):
                if child is not None:
                    queue.append(child)


# ---------------------------------------------------------------------------
# Lowest common ancestor
# ---------------------------------------------------------------------------
def lowest_common_ancestor(arena: TreeArena, a: Any, b: Any) -> TreeGenerator:
    """
    Post-order search on an arbitrary binary tree: a node is the LCA when
    a and b come back from different sides, or when it is one of them.
    Both values are expected to be present.
    """
    visited: List[Any] = []
    views = arena.views()

    def search(idx: Optional[int]) -> Generator[TreeStep, None, Optional[int]]:
        if idx is None:
            return None
        value = arena[idx].value
        visited.append(value)
        yield TreeStep(views, arena.root, value, "visit", tuple(visited))
        if value == a or value == b:
            return idx
        left = yield from search(arena[idx].left)
        right = yield from search(arena[idx].right)
        if left is not None and right is not None:
            return idx
        return left if left is not None else right

    found = yield from search(arena.root)
    answer = arena[found].value if found is not None else None
    if found is not None:
        yield TreeStep(views, arena.root, answer, "lca", tuple(visited))
    return _result(arena, answer)


def contains_value(arena: TreeArena, value: Any) -> bool:
    """Linear scan; works for trees that are not search trees."""
    return any(v.value == value for v in arena.views())
