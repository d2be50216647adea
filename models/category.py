"""Category model for the marketplace category tree."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Category:
    """Represents an industry category, possibly nested under a parent.

    Attributes:
        id: Unique identifier (UUID string), stable across moves.
        title: Display title.
        slug: URL identity, unique among categories.
        parent_id: Parent category ID, or None for root categories.
        is_active: Whether the category is shown publicly.
        icon_url: Stored icon path, resolved for display by IconResolver.
        children: Ordered child categories (populated by tree queries only).
        level: Depth hint for display; roots are level 1.
        order: Position within the sibling group.
    """

    id: str
    title: str
    slug: str
    parent_id: Optional[str] = None
    is_active: bool = True
    icon_url: Optional[str] = None
    children: List["Category"] = field(default_factory=list)
    level: Optional[int] = None
    order: int = 0
    description: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
