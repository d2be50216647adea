"""Helper utilities for tests."""

from pathlib import Path
import sqlite3

from models.category import Category


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        conn.executescript(migration_file.read_text(encoding="utf-8"))

    conn.commit()


def node(category_id, parent_id=None, children=None, **fields) -> Category:
    """Build an in-memory Category for tree tests."""
    fields.setdefault("title", f"Category {category_id}")
    fields.setdefault("slug", f"category-{category_id}")
    return Category(
        id=category_id,
        parent_id=parent_id,
        children=children or [],
        **fields,
    )
