"""
Custom exceptions for Keesti category administration.
"""


class KeestiError(Exception):
    """Base exception for Keesti errors."""
    pass


class CategoryNotFoundError(KeestiError):
    """Raised when a category (or a requested parent) does not exist."""

    def __init__(self, category_id):
        super().__init__(f"Category with ID {category_id} not found")
        self.category_id = category_id


class InvalidMoveError(KeestiError):
    """Raised when a move would make a category its own ancestor."""
    pass


class CategoryHasChildrenError(KeestiError):
    """Raised when deleting a category that still has subcategories."""
    pass
