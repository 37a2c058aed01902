"""
tree/
-----
Arena-backed binary tree data layer.  Public API:

    from tree import TreeArena, TreeNode, NodeView, Color
    from tree import parse_level_order, balanced_bst
    from tree import check_bst, check_avl, check_red_black
"""

from tree.arena      import Color, NodeView, TreeArena, TreeNode
from tree.build      import balanced_bst, parse_level_order
from tree.invariants import black_height, check_avl, check_bst, check_links, check_red_black

__all__ = [
    "Color",
    "NodeView",
    "TreeArena",
    "TreeNode",
    "balanced_bst",
    "parse_level_order",
    "black_height",
    "check_avl",
    "check_bst",
    "check_links",
    "check_red_black",
]
