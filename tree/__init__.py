"""Category tree rendering and drag-and-drop reorder/move."""

from tree.drag import DragController, DragState, DropResult, KeyboardDrag
from tree.index import TreeIndex, TreeNode, array_move, find_by_id, get_siblings
from tree.view import CategoryTreeView

__all__ = [
    "CategoryTreeView",
    "DragController",
    "DragState",
    "DropResult",
    "KeyboardDrag",
    "TreeIndex",
    "TreeNode",
    "array_move",
    "find_by_id",
    "get_siblings",
]
