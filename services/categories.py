"""Category service for database operations.

This is the repository behind the category tree: it serves the nested
tree and applies the reorder/move/delete requests the tree emits.
"""

import re
import uuid
from typing import Dict, List, Optional, Sequence
from models.category import Category
from errors import CategoryHasChildrenError, CategoryNotFoundError, InvalidMoveError
from logger import get_logger

logger = get_logger()

_COLUMNS = (
    "id, title, slug, description, icon_url, is_active, meta_title, "
    "meta_description, parent_id, level, sort_order, created_at, updated_at"
)

# Persian/Arabic blocks, lowercase latin, digits, whitespace and hyphens survive
_SLUG_DISALLOWED = re.compile(
    r"[^\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFFa-z0-9\s-]"
)

# Sentinel for update(): None is a meaningful parent_id (root)
UNCHANGED = object()


def generate_slug(text: str) -> str:
    """Turn a title into a URL slug, keeping Persian and Arabic letters.

    Args:
        text: Title or user-supplied slug.

    Returns:
        Lowercase slug with words joined by single hyphens.
    """
    slug = text.lower().strip()
    slug = _SLUG_DISALLOWED.sub("", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _row_to_category(row) -> Category:
    return Category(
        id=row[0],
        title=row[1],
        slug=row[2],
        description=row[3],
        icon_url=row[4],
        is_active=bool(row[5]),
        meta_title=row[6],
        meta_description=row[7],
        parent_id=row[8],
        level=row[9],
        order=row[10],
        created_at=row[11],
        updated_at=row[12],
    )


class CategoryService:
    """Service for managing the category tree."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Category]:
        """Get all categories as a flat list.

        Returns:
            List of Category objects, ordered by level then sibling order.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM categories "
                "ORDER BY level, sort_order, created_at, rowid"
            )
            return [_row_to_category(row) for row in cursor.fetchall()]

    def find(self, category_id: str) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            return self._find(conn, category_id)

    def find_by_slug(self, slug: str) -> Optional[Category]:
        """Get an active category by slug.

        Args:
            slug: The slug to look up.

        Returns:
            Category object if an active category has this slug, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM categories WHERE slug = ? AND is_active = 1",
                (slug,),
            )
            row = cursor.fetchone()
            return _row_to_category(row) if row else None

    def find_children(self, parent_id: Optional[str]) -> List[Category]:
        """Get the direct children of a category in sibling order.

        Args:
            parent_id: Parent category ID, or None for root categories.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM categories WHERE parent_id IS ? "
                "ORDER BY sort_order, created_at, rowid",
                (parent_id,),
            )
            return [_row_to_category(row) for row in cursor.fetchall()]

    def create(
        self,
        title: str,
        slug: Optional[str] = None,
        description: Optional[str] = None,
        icon_url: Optional[str] = None,
        meta_title: Optional[str] = None,
        meta_description: Optional[str] = None,
        parent_id: Optional[str] = None,
        level: Optional[int] = None,
    ) -> Category:
        """Create a new category at the end of its sibling group.

        Args:
            title: Category title.
            slug: Optional slug; generated from the title when empty. A numeric
                suffix is appended when the slug is already taken.
            description: Optional description.
            icon_url: Optional stored icon path.
            meta_title: Optional SEO title.
            meta_description: Optional SEO description.
            parent_id: Optional parent category ID.
            level: Optional explicit level; defaults to parent level + 1.

        Returns:
            The created Category object.

        Raises:
            CategoryNotFoundError: If parent_id does not exist.
        """
        base_slug = generate_slug(slug if slug and slug.strip() else title)

        with self.db_manager.connect() as conn:
            computed_level = 1
            if parent_id:
                parent = self._find(conn, parent_id)
                if parent is None:
                    raise CategoryNotFoundError(parent_id)
                computed_level = parent.level + 1
            else:
                parent_id = None

            if level is None:
                level = computed_level

            category_id = str(uuid.uuid4())
            conn.execute(
                "INSERT INTO categories (id, title, slug, description, icon_url, "
                "meta_title, meta_description, parent_id, level, sort_order) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    category_id,
                    title,
                    self._unique_slug(conn, base_slug),
                    description or None,
                    icon_url or None,
                    meta_title or None,
                    meta_description or None,
                    parent_id,
                    level,
                    self._next_order(conn, parent_id),
                ),
            )
            conn.commit()

            logger.debug(f"Created category {category_id} ({title})")
            return self._find(conn, category_id)

    def update(
        self,
        category_id: str,
        title: Optional[str] = None,
        slug: Optional[str] = None,
        description: Optional[str] = None,
        icon_url: Optional[str] = None,
        is_active: Optional[bool] = None,
        meta_title: Optional[str] = None,
        meta_description: Optional[str] = None,
        parent_id=UNCHANGED,
    ) -> Category:
        """Update an existing category.

        Only the arguments that are given are changed. Passing parent_id=None
        turns the category into a root.

        Returns:
            The updated Category object.

        Raises:
            CategoryNotFoundError: If the category or the new parent is missing.
            InvalidMoveError: If the new parent is the category or a descendant.
        """
        with self.db_manager.connect() as conn:
            category = self._find(conn, category_id)
            if category is None:
                raise CategoryNotFoundError(category_id)

            if parent_id is not UNCHANGED:
                self._reparent(conn, category, parent_id or None, None)

            fields: Dict[str, object] = {}
            if title:
                fields["title"] = title
            if description is not None:
                fields["description"] = description
            if icon_url is not None:
                fields["icon_url"] = icon_url
            if is_active is not None:
                fields["is_active"] = 1 if is_active else 0
            if meta_title is not None:
                fields["meta_title"] = meta_title
            if meta_description is not None:
                fields["meta_description"] = meta_description

            if slug:
                fields["slug"] = self._unique_slug(
                    conn, generate_slug(slug), exclude_id=category_id
                )
            elif title and title != category.title:
                fields["slug"] = self._unique_slug(
                    conn, generate_slug(title), exclude_id=category_id
                )

            if fields:
                assignments = ", ".join(f"{name} = ?" for name in fields)
                conn.execute(
                    f"UPDATE categories SET {assignments}, "
                    "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (*fields.values(), category_id),
                )

            conn.commit()
            return self._find(conn, category_id)

    def delete(self, category_id: str) -> None:
        """Delete a category that has no subcategories.

        Args:
            category_id: The category ID to delete.

        Raises:
            CategoryNotFoundError: If the category does not exist.
            CategoryHasChildrenError: If the category still has children.
        """
        with self.db_manager.connect() as conn:
            if self._find(conn, category_id) is None:
                raise CategoryNotFoundError(category_id)

            cursor = conn.execute(
                "SELECT COUNT(*) FROM categories WHERE parent_id = ?", (category_id,)
            )
            if cursor.fetchone()[0] > 0:
                raise CategoryHasChildrenError(
                    f"Category {category_id} has subcategories and cannot be deleted"
                )

            conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
            logger.info(f"Deleted category {category_id}")

    def get_tree(self, active_only: bool = False) -> List[Category]:
        """Get the categories nested under their parents.

        Categories whose parent is missing from the result (for example an
        inactive parent when active_only is set) are returned as roots.

        Args:
            active_only: Only include active categories.

        Returns:
            Root categories with children populated, in sibling order.
        """
        with self.db_manager.connect() as conn:
            where = "WHERE is_active = 1 " if active_only else ""
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM categories {where}"
                "ORDER BY sort_order, created_at, rowid"
            )
            categories = [_row_to_category(row) for row in cursor.fetchall()]

        by_id = {category.id: category for category in categories}
        roots = []
        for category in categories:
            if category.parent_id and category.parent_id in by_id:
                by_id[category.parent_id].children.append(category)
            else:
                roots.append(category)

        return roots

    def reorder(self, category_ids: Sequence[str]) -> None:
        """Persist a sibling order: each category gets its index as order.

        Args:
            category_ids: Category IDs in their new display order.

        Raises:
            CategoryNotFoundError: If any ID is unknown. Nothing is changed.
            InvalidMoveError: If the IDs belong to more than one sibling group.
        """
        with self.db_manager.connect() as conn:
            parent_ids = set()
            for category_id in category_ids:
                category = self._find(conn, category_id)
                if category is None:
                    raise CategoryNotFoundError(category_id)
                parent_ids.add(category.parent_id)

            if len(parent_ids) > 1:
                raise InvalidMoveError("Reordered categories must share the same parent")

            for index, category_id in enumerate(category_ids):
                conn.execute(
                    "UPDATE categories SET sort_order = ?, "
                    "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (index, category_id),
                )
            conn.commit()

        logger.info(f"Reordered {len(category_ids)} categories")

    def move(
        self,
        category_id: str,
        new_parent_id: Optional[str],
        new_order: Optional[int] = None,
    ) -> None:
        """Move a category (with its subtree) under a new parent.

        Args:
            category_id: The category to move.
            new_parent_id: New parent ID, or None to make it a root.
            new_order: Position within the new sibling group. Appended after
                the last sibling when omitted.

        Raises:
            CategoryNotFoundError: If the category or the new parent is missing.
            InvalidMoveError: If the new parent is the category or a descendant.
        """
        with self.db_manager.connect() as conn:
            category = self._find(conn, category_id)
            if category is None:
                raise CategoryNotFoundError(category_id)

            self._reparent(conn, category, new_parent_id, new_order)
            conn.commit()

        logger.info(f"Moved category {category_id} under {new_parent_id or 'root'}")

    def get_path(self, category_id: str) -> List[Category]:
        """Get the breadcrumb path from the root down to a category.

        Raises:
            CategoryNotFoundError: If the category does not exist.
        """
        with self.db_manager.connect() as conn:
            category = self._find(conn, category_id)
            if category is None:
                raise CategoryNotFoundError(category_id)

            path = [category]
            seen = {category.id}
            while category.parent_id and category.parent_id not in seen:
                category = self._find(conn, category.parent_id)
                if category is None:
                    break
                seen.add(category.id)
                path.insert(0, category)

            return path

    def _find(self, conn, category_id: str) -> Optional[Category]:
        cursor = conn.execute(
            f"SELECT {_COLUMNS} FROM categories WHERE id = ?", (category_id,)
        )
        row = cursor.fetchone()
        return _row_to_category(row) if row else None

    def _next_order(self, conn, parent_id: Optional[str]) -> int:
        cursor = conn.execute(
            "SELECT COALESCE(MAX(sort_order) + 1, 0) FROM categories "
            "WHERE parent_id IS ?",
            (parent_id,),
        )
        return cursor.fetchone()[0]

    def _unique_slug(self, conn, base_slug: str, exclude_id: Optional[str] = None) -> str:
        slug = base_slug
        counter = 1
        while True:
            cursor = conn.execute("SELECT id FROM categories WHERE slug = ?", (slug,))
            row = cursor.fetchone()
            if row is None or (exclude_id and row[0] == exclude_id):
                return slug
            slug = f"{base_slug}-{counter}"
            counter += 1

    def _is_descendant(self, conn, ancestor_id: str, category_id: str) -> bool:
        """Check whether category_id lies somewhere below ancestor_id."""
        seen = set()
        current = self._find(conn, category_id)
        while current is not None and current.parent_id and current.id not in seen:
            if current.parent_id == ancestor_id:
                return True
            seen.add(current.id)
            current = self._find(conn, current.parent_id)
        return False

    def _reparent(
        self,
        conn,
        category: Category,
        new_parent_id: Optional[str],
        new_order: Optional[int],
    ) -> None:
        if new_parent_id == category.id:
            raise InvalidMoveError("A category cannot be its own parent")

        level = 1
        if new_parent_id is not None:
            parent = self._find(conn, new_parent_id)
            if parent is None:
                raise CategoryNotFoundError(new_parent_id)
            if self._is_descendant(conn, category.id, new_parent_id):
                raise InvalidMoveError(
                    "A category cannot be moved under one of its own subcategories"
                )
            level = parent.level + 1

        if new_order is None:
            if new_parent_id == category.parent_id:
                new_order = category.order
            else:
                new_order = self._next_order(conn, new_parent_id)

        conn.execute(
            "UPDATE categories SET parent_id = ?, sort_order = ?, "
            "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (new_parent_id, new_order, category.id),
        )
        self._update_levels(conn, category.id, level)

    def _update_levels(self, conn, category_id: str, level: int) -> None:
        """Set the level of a category and cascade it to its subtree."""
        pending = [(category_id, level)]
        seen = set()
        while pending:
            current_id, current_level = pending.pop()
            if current_id in seen:
                continue
            seen.add(current_id)
            conn.execute(
                "UPDATE categories SET level = ? WHERE id = ?",
                (current_level, current_id),
            )
            cursor = conn.execute(
                "SELECT id FROM categories WHERE parent_id = ?", (current_id,)
            )
            pending.extend((row[0], current_level + 1) for row in cursor.fetchall())
