#!/usr/bin/env python3

import sys
import asyncio
from logger import get_logger
from tree.drag import BUSY, STALE
from tree.view import CategoryTreeView
from errors import KeestiError

logger = get_logger()


def build_tree_view(services, categories):
    """Wire a tree view to the category repository."""

    def on_delete(category):
        services.categories.delete(category.id)

    return CategoryTreeView(
        categories,
        on_reorder=services.categories.reorder,
        on_move=services.categories.move,
        on_delete=on_delete,
        get_icon_url=services.icons.get_icon_url,
        commit_timeout=services.config.commit_timeout,
    )


def cmd_list(args, services):
    """List all categories in the database."""
    categories = services.categories.find_all()

    if not categories:
        logger.info("No categories found.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        logger.info(f"ID: {category.id}")
        logger.info(f"Title: {category.title}")
        logger.info(f"Slug: {category.slug}")
        logger.info(f"Status: {'active' if category.is_active else 'inactive'}")
        if category.parent_id:
            logger.info(f"Parent ID: {category.parent_id}")
        logger.info("-" * 80)

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_tree(args, services):
    """Render the category tree."""
    categories = services.categories.get_tree(active_only=args.active_only)
    if not categories:
        logger.info("No categories found.")
        return

    view = build_tree_view(services, categories)
    for category_id in args.collapse or []:
        view.toggle(category_id)

    for line in view.render(show_actions=False):
        logger.info(line)


def cmd_create(args, services):
    """Interactively create a new category."""
    print("\nCreate New Category")
    print("=" * 80)

    title = input("Title: ").strip()
    if not title:
        logger.error("Category title cannot be empty.")
        sys.exit(1)

    slug = input("Slug (optional, generated from title): ").strip() or None
    description = input("Description (optional): ").strip() or None
    icon_url = input("Icon path (optional): ").strip() or None
    parent_id = input("Parent category ID (optional): ").strip() or None

    try:
        category = services.categories.create(
            title,
            slug=slug,
            description=description,
            icon_url=icon_url,
            parent_id=parent_id,
        )
    except KeestiError as e:
        logger.error(f"Error creating category: {e}")
        sys.exit(1)

    logger.info(f"\n✓ Category created successfully with ID: {category.id}")
    logger.info(f"  Slug: {category.slug}")
    logger.info(f"  Level: {category.level}")


def cmd_delete(args, services):
    """Delete a category by ID."""
    category = services.categories.find(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    logger.info(f"\nCategory to delete: {category.title} ({category.slug})")
    confirm = (
        input("\nAre you sure you want to delete this category? (yes/no): ")
        .strip()
        .lower()
    )
    if confirm != "yes":
        logger.info("Deletion cancelled.")
        return

    view = build_tree_view(services, services.categories.get_tree())
    try:
        view.delete(category.id)
    except KeestiError as e:
        logger.error(f"Error deleting category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category '{category.title}' deleted successfully.")


def cmd_reorder(args, services):
    """Set the order of one sibling group."""
    try:
        services.categories.reorder(args.category_ids)
    except KeestiError as e:
        logger.error(f"Error reordering categories: {e}")
        sys.exit(1)

    logger.info(f"✓ Reordered {len(args.category_ids)} categories.")


def cmd_move(args, services):
    """Move a category under a new parent (or to the root)."""
    try:
        services.categories.move(args.category_id, args.parent, args.order)
    except KeestiError as e:
        logger.error(f"Error moving category: {e}")
        sys.exit(1)

    logger.info(f"✓ Moved category {args.category_id}.")


def cmd_drag(args, services):
    """Drop one category onto another, as the tree's drag-and-drop would."""
    view = build_tree_view(services, services.categories.get_tree())

    view.controller.drag_start(args.active_id)
    preview = view.render_overlay()
    if preview is None:
        logger.error(f"Category with ID {args.active_id} not found.")
        sys.exit(1)
    logger.info(f"Dragging: {preview}")

    result = asyncio.run(view.controller.drag_end(args.active_id, args.over_id))

    if result.error is not None or result.action in (STALE, BUSY):
        logger.error(f"Drop was not applied ({result.action}).")
        sys.exit(1)

    if result.committed:
        logger.info(f"✓ Applied {result.action}.")
    else:
        logger.info("Nothing to do.")

    # Refresh after mutate
    view.set_categories(services.categories.get_tree())
    for line in view.render(show_actions=False):
        logger.info(line)


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, render and rearrange marketplace categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.set_defaults(func=cmd_list)

    tree_parser = categories_subparsers.add_parser(
        "tree", help="Render the category tree"
    )
    tree_parser.add_argument(
        "--active-only", action="store_true", help="Hide inactive categories"
    )
    tree_parser.add_argument(
        "--collapse",
        nargs="*",
        metavar="ID",
        help="Categories to show collapsed",
    )
    tree_parser.set_defaults(func=cmd_tree)

    create_parser = categories_subparsers.add_parser(
        "create", help="Create a new category interactively"
    )
    create_parser.set_defaults(func=cmd_create)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category by ID"
    )
    delete_parser.add_argument("category_id", help="ID of the category to delete")
    delete_parser.set_defaults(func=cmd_delete)

    reorder_parser = categories_subparsers.add_parser(
        "reorder", help="Set the order of a sibling group"
    )
    reorder_parser.add_argument(
        "category_ids", nargs="+", help="Sibling IDs in their new order"
    )
    reorder_parser.set_defaults(func=cmd_reorder)

    move_parser = categories_subparsers.add_parser(
        "move", help="Move a category under a new parent"
    )
    move_parser.add_argument("category_id", help="ID of the category to move")
    move_parser.add_argument(
        "--parent", default=None, help="New parent ID (omit to make it a root)"
    )
    move_parser.add_argument(
        "--order", type=int, default=None, help="Position among the new siblings"
    )
    move_parser.set_defaults(func=cmd_move)

    drag_parser = categories_subparsers.add_parser(
        "drag", help="Drop a category onto another category"
    )
    drag_parser.add_argument("active_id", help="ID of the dragged category")
    drag_parser.add_argument(
        "over_id", nargs="?", default=None, help="ID of the category dropped onto"
    )
    drag_parser.set_defaults(func=cmd_drag)
