"""Manú Lanches management CLI.

Usage:
    python src/manage.py setup-db                 # Create all tables
    python src/manage.py drop-db                  # Drop all tables
    python src/manage.py load-menu cardapio.json  # Seed the menu catalog
    python src/manage.py purge-carts --days 7     # Empty stale session carts
"""

import argparse
import json
import sys
from pathlib import Path

from ordering.domain import ordering


def setup_databases():
    """Create the database schema for the configured SQL providers."""
    from ordering.utils.db import setup_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Creating database schema...")
    providers = setup_db(ordering)
    print(f"  schema ready ({', '.join(providers) or 'no SQL providers configured'}).")
    print("Done.")


def drop_databases():
    """Drop the database schema for the configured SQL providers."""
    from ordering.utils.db import drop_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Dropping database schema...")
    drop_db(ordering)
    print("  schema dropped.")
    print("Done.")


def load_menu(path):
    """Register every item of a JSON menu export (``GET /api/cardapio`` shape)."""
    from ordering.menu.loading import RegisterMenuItem
    from ordering.utils.db import setup_db

    items = json.loads(Path(path).read_text(encoding="utf-8"))

    ordering.init()
    setup_db(ordering)
    with ordering.domain_context():
        for entry in items:
            item_id = ordering.process(
                RegisterMenuItem(
                    item_id=str(entry["id"]) if entry.get("id") is not None else None,
                    name=entry["nome"],
                    description=entry.get("descricao"),
                    price=entry["preco"],
                    image=entry.get("imagem"),
                    category=entry.get("categoria"),
                ),
                asynchronous=False,
            )
            print(f"  {item_id}: {entry['nome']}")
    print(f"Loaded {len(items)} menu item(s).")


def purge_carts(days=None):
    """Empty session carts idle for more than ``days`` days."""
    from ordering.cart.staleness import PurgeStaleCarts

    ordering.init()
    with ordering.domain_context():
        purged = ordering.process(PurgeStaleCarts(idle_days=days), asynchronous=False)
    print(f"Purged {purged} stale cart(s).")


def main():
    parser = argparse.ArgumentParser(description="Manú Lanches management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    load_parser = subparsers.add_parser("load-menu", help="Seed the menu catalog from a JSON file")
    load_parser.add_argument("file", help="JSON array of menu items")

    purge_parser = subparsers.add_parser("purge-carts", help="Empty stale session carts")
    purge_parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Idle days before a cart is stale (default: LANCHONETE_STALE_CART_DAYS or 7)",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "load-menu":
        load_menu(args.file)
    elif args.command == "purge-carts":
        purge_carts(args.days)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
