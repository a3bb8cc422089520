"""Storefront management CLI.

Creates and drops the storefront schema (domain tables and the stock
ledger) and prints a variant's stock movement log.

Usage:
    python src/manage.py setup-db                 # Create all tables
    python src/manage.py drop-db                  # Drop all tables
    python src/manage.py stock-log <variant_id>   # Show stock movements
"""

import argparse
import sys


def setup_databases():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating storefront schema...")
    setup_db(storefront)
    print("Done.")


def drop_databases():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping storefront schema...")
    drop_db(storefront)
    print("Done.")


def print_stock_log(variant_id):
    from storefront.inventory import get_ledger

    ledger = get_ledger()
    movements = ledger.movements(variant_id)
    if not movements:
        print(f"No stock movements recorded for {variant_id}.")
        return

    for movement in movements:
        print(
            f"{movement.created_at:%Y-%m-%d %H:%M:%S}  {movement.kind:<8} "
            f"{movement.quantity_change:+5d}  → {movement.balance_after:<5d} {movement.reference or ''}"
        )


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    log_parser = subparsers.add_parser("stock-log", help="Show the stock movements of a variant")
    log_parser.add_argument("variant_id")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "stock-log":
        print_stock_log(args.variant_id)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
