"""Text rendering of the category tree and its admin actions."""

from typing import Callable, List, Optional, Sequence, Set, Tuple

from models.category import Category
from tree.drag import DragController, KeyboardDrag
from tree.index import find_by_id

INDENT = "    "
HANDLE = "≡"
DRAGGING_HANDLE = "↕"
EXPANDED = "▾"
COLLAPSED = "▸"


class CategoryTreeView:
    """Collapsible, drag-sortable category tree.

    Persistence goes through the callbacks only: on_reorder and on_move via
    the drag controller, on_delete and on_add_subcategory forwarded as-is.

    Args:
        categories: Root categories with nested children.
        on_reorder: Receives the new sibling order of one parent group.
        on_move: Receives (category_id, new_parent_id, new_order).
        on_delete: Receives the Category the user asked to delete.
        get_icon_url: Maps a stored icon path to a displayable URL.
        on_add_subcategory: Optional, receives the parent ID for a new child.
        commit_timeout: Optional seconds before a commit is treated as failed.
    """

    def __init__(
        self,
        categories: Sequence[Category],
        on_reorder: Callable,
        on_move: Callable,
        on_delete: Callable[[Category], None],
        get_icon_url: Callable[[Optional[str]], Optional[str]],
        on_add_subcategory: Optional[Callable[[str], None]] = None,
        commit_timeout: Optional[float] = None,
    ):
        self.controller = DragController(categories, on_reorder, on_move, commit_timeout)
        self.keyboard = KeyboardDrag(self.controller, self.visible_ids)
        self.on_delete = on_delete
        self.on_add_subcategory = on_add_subcategory
        self.get_icon_url = get_icon_url
        self._collapsed: Set[str] = set()

    @property
    def categories(self) -> List[Category]:
        return self.controller.categories

    def set_categories(self, categories: Sequence[Category]) -> None:
        """Show a freshly fetched tree. Expand/collapse state is kept."""
        self.controller.set_tree(categories)

    def is_expanded(self, category_id: str) -> bool:
        return category_id not in self._collapsed

    def toggle(self, category_id: str) -> bool:
        """Flip expand/collapse of a category with children.

        Returns:
            The new expanded state. Leaves always report True.
        """
        category = find_by_id(self.categories, category_id)
        if category is None or not category.children:
            return True

        if category_id in self._collapsed:
            self._collapsed.discard(category_id)
        else:
            self._collapsed.add(category_id)
        return self.is_expanded(category_id)

    def visible_rows(self) -> List[Tuple[Category, int]]:
        """Categories currently on screen with their depth, in display order."""
        rows: List[Tuple[Category, int]] = []

        def walk(nodes, depth):
            for node in nodes:
                rows.append((node, depth))
                if node.children and self.is_expanded(node.id):
                    walk(node.children, depth + 1)

        walk(self.categories, 0)
        return rows

    def visible_ids(self) -> List[str]:
        return [node.id for node, _ in self.visible_rows()]

    def render(self, show_actions: bool = True) -> List[str]:
        return [
            self.render_row(node, depth, show_actions)
            for node, depth in self.visible_rows()
        ]

    def render_row(self, category: Category, depth: int, show_actions: bool = True) -> str:
        handle = DRAGGING_HANDLE if category.id == self.controller.active_id else HANDLE

        if category.children:
            toggle = EXPANDED if self.is_expanded(category.id) else COLLAPSED
        else:
            toggle = " "

        parts = [
            f"{INDENT * depth}{handle} {toggle}",
            self._icon(category),
            category.title,
            "[active]" if category.is_active else "[inactive]",
        ]
        if category.level and category.level > 1:
            parts.append(f"(level {category.level})")
        parts.append(f"- {category.slug}")

        if show_actions:
            actions = ["[edit]", "[delete]"]
            if self.on_add_subcategory is not None:
                actions.insert(0, "[+sub]")
            parts.append(" ".join(actions))

        return " ".join(parts)

    def render_overlay(self) -> Optional[str]:
        """Preview of the dragged category, or None when nothing is dragged."""
        category = self.controller.overlay()
        if category is None:
            return None

        icon_url = self.get_icon_url(category.icon_url)
        if icon_url:
            return f"{DRAGGING_HANDLE} <{icon_url}> {category.title}"
        return f"{DRAGGING_HANDLE} {category.title}"

    def delete(self, category_id: str) -> bool:
        category = find_by_id(self.categories, category_id)
        if category is None:
            return False
        self.on_delete(category)
        return True

    def add_subcategory(self, parent_id: str) -> bool:
        if self.on_add_subcategory is None:
            return False
        self.on_add_subcategory(parent_id)
        return True

    def _icon(self, category: Category) -> str:
        icon_url = self.get_icon_url(category.icon_url)
        if icon_url:
            return f"<{icon_url}>"
        initial = category.title[:1].upper() if category.title else "?"
        return f"[{initial}]"
