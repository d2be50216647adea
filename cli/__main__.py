#!/usr/bin/env python3
"""
Keesti CLI - manage the marketplace category tree.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    categories   List, render and rearrange categories
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli categories create
    python -m cli categories tree
    python -m cli categories drag <dragged-id> <target-id>
    python -m cli categories move <id> --parent <parent-id>
"""

import sys
import argparse
from cli import categories, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def build_parser():
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Keesti - marketplace category administration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    categories.setup_parser(subparsers)
    migrate.setup_parser(subparsers)
    return parser


def main():
    """Main CLI entry point with subcommands."""
    parser = build_parser()
    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        config = load_config()
        setup_logging(config)

        if args.command == "migrate":
            # Migrate commands need db_manager for raw database operations
            args.func(args, DatabaseManager(config))
        else:
            args.func(args, Services(config))
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
