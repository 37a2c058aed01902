"""
arena.py — Arena-backed Binary Tree
====================================
Nodes live in one flat list and refer to each other by integer index.
Parent back-links are therefore plain ints, not a reference cycle, and a
snapshot of the whole tree is just a tuple of NodeView rows.

Design decisions:
  - `None` is the nil link (CLRS's NIL sentinel).  Helpers such as
    `height()` and `color()` accept None and answer for the empty tree.
  - Deleted slots go on a free-list and are reused by `new()`, so ids
    stay small and stable for the lifetime of a node.
  - The arena owns `root`.  Rotations and `transplant()` keep it current.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple


class Color(Enum):
    RED   = "red"
    BLACK = "black"


@dataclass
class TreeNode:
    value:  Any
    left:   Optional[int] = None
    right:  Optional[int] = None
    parent: Optional[int] = None
    height: int           = 1
    color:  Color         = Color.RED


@dataclass(frozen=True)
class NodeView:
    """Read-only row of a tree snapshot."""
    id:     int
    value:  Any
    left:   Optional[int]
    right:  Optional[int]
    parent: Optional[int]
    height: int
    color:  Optional[str] = None


class TreeArena:
    """
    Attributes:
        nodes   : Slots; None marks a freed slot.
        root    : Index of the root node, or None for the empty tree.
        colored : True for red-black trees (views then carry colours).
    """

    def __init__(self, colored: bool = False):
        self.nodes:   List[Optional[TreeNode]] = []
        self.root:    Optional[int]            = None
        self.colored: bool                     = colored
        self._free:   List[int]                = []

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------
    def new(self, value: Any, color: Color = Color.RED) -> int:
        node = TreeNode(value, color=color)
        if self._free:
            idx = self._free.pop()
            self.nodes[idx] = node
        else:
            idx = len(self.nodes)
            self.nodes.append(node)
        return idx

    def release(self, idx: int) -> None:
        self.nodes[idx] = None
        self._free.append(idx)

    def __getitem__(self, idx: int) -> TreeNode:
        node = self.nodes[idx]
        if node is None:
            raise KeyError(f"tree node {idx} was released")
        return node

    def __len__(self) -> int:
        return len(self.nodes) - len(self._free)

    def copy(self) -> "TreeArena":
        other = TreeArena(colored=self.colored)
        other.nodes = [replace(n) if n is not None else None for n in self.nodes]
        other.root  = self.root
        other._free = list(self._free)
        return other

    # ------------------------------------------------------------------
    # Nil-safe accessors
    # ------------------------------------------------------------------
    def height(self, idx: Optional[int]) -> int:
        return 0 if idx is None else self[idx].height

    def update_height(self, idx: int) -> None:
        n = self[idx]
        n.height = 1 + max(self.height(n.left), self.height(n.right))

    def balance(self, idx: Optional[int]) -> int:
        if idx is None:
            return 0
        n = self[idx]
        return self.height(n.left) - self.height(n.right)

    def color(self, idx: Optional[int]) -> Color:
        return Color.BLACK if idx is None else self[idx].color

    def is_red(self, idx: Optional[int]) -> bool:
        return self.color(idx) is Color.RED

    # ------------------------------------------------------------------
    # Structural primitives
    # ------------------------------------------------------------------
    def _replace_child(self, parent: Optional[int], old: int, new: Optional[int]) -> None:
        if parent is None:
            self.root = new
        elif self[parent].left == old:
            self[parent].left = new
        else:
            self[parent].right = new

    def rotate_left(self, x: int) -> int:
        """
            x                y
           / \\             / \\
          a   y    →      x   c
             / \\         / \\
            b   c       a   b
        Returns the new subtree root (y).  Heights of x and y are refreshed.
        """
        y = self[x].right
        b = self[y].left
        self[x].right = b
        if b is not None:
            self[b].parent = x
        self[y].parent = self[x].parent
        self._replace_child(self[x].parent, x, y)
        self[y].left   = x
        self[x].parent = y
        self.update_height(x)
        self.update_height(y)
        return y

    def rotate_right(self, x: int) -> int:
        """Mirror of rotate_left.  Returns the new subtree root."""
        y = self[x].left
        b = self[y].right
        self[x].left = b
        if b is not None:
            self[b].parent = x
        self[y].parent = self[x].parent
        self._replace_child(self[x].parent, x, y)
        self[y].right  = x
        self[x].parent = y
        self.update_height(x)
        self.update_height(y)
        return y

    def transplant(self, u: int, v: Optional[int]) -> None:
        """Put subtree v where subtree u was (u's own links are left alone)."""
        parent = self[u].parent
        self._replace_child(parent, u, v)
        if v is not None:
            self[v].parent = parent

    def refresh_heights(self) -> None:
        """Recompute every stored height from the links (post-order)."""
        order = list(self.preorder_ids())
        for idx in reversed(order):
            self.update_height(idx)

    def minimum(self, idx: int) -> int:
        while self[idx].left is not None:
            idx = self[idx].left
        return idx

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def find(self, value: Any) -> Optional[int]:
        cur = self.root
        while cur is not None:
            v = self[cur].value
            if value == v:
                return cur
            cur = self[cur].left if value < v else self[cur].right
        return None

    def inorder_ids(self) -> Iterator[int]:
        stack: List[int] = []
        cur = self.root
        while stack or cur is not None:
            while cur is not None:
                stack.append(cur)
                cur = self[cur].left
            cur = stack.pop()
            yield cur
            cur = self[cur].right

    def preorder_ids(self) -> Iterator[int]:
        stack = [self.root] if self.root is not None else []
        while stack:
            idx = stack.pop()
            yield idx
            n = self[idx]
            if n.right is not None:
                stack.append(n.right)
            if n.left is not None:
                stack.append(n.left)

    def values(self) -> List[Any]:
        """In-order values."""
        return [self[i].value for i in self.inorder_ids()]

    def depth(self) -> int:
        """Number of levels, computed from links (not from stored heights)."""
        best, stack = 0, [(self.root, 1)] if self.root is not None else []
        while stack:
            idx, d = stack.pop()
            best = max(best, d)
            for child in (self[idx].left, self[idx].right):
                if child is not None:
                    stack.append((child, d + 1))
        return best

    def views(self) -> Tuple[NodeView, ...]:
        return tuple(
            NodeView(
                i, n.value, n.left, n.right, n.parent, n.height,
                n.color.value if self.colored else None,
            )
            for i, n in enumerate(self.nodes)
            if n is not None
        )

    def __repr__(self) -> str:
        return f"TreeArena(size={len(self)}, root={self.root}, colored={self.colored})"
