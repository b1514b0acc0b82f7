"""Store database management CLI.

Creates and drops the database schema for the store domain, using whatever
database the active PROTEAN_ENV overlay configures.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    from store.domain import store
    from store.utils.db import setup_db

    print("Initializing store domain...")
    store.init()
    print("Creating store database schema...")
    setup_db(store)
    print("Done.")


def drop_database():
    from store.domain import store
    from store.utils.db import drop_db

    print("Initializing store domain...")
    store.init()
    print("Dropping store database schema...")
    drop_db(store)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Store database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
