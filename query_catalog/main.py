#!/usr/bin/env python3
"""
Bookstore query catalog console runner
======================================

Usage:
    query-catalog [mongo_uri] [database] [collection]

Example:
    query-catalog "mongodb://localhost:27017" plp_bookstore books

Arguments override MONGO_URI / DATABASE_NAME / COLLECTION_NAME from the
environment (or ``.env``). Every catalog query is run in order and its
results printed; a failing query is reported and the run continues.

Exit status is 0 unless the store cannot be reached or every query failed.
"""

import sys
from typing import List, Optional

from catalog import BOOKSTORE_CATALOG
from cluster_manager import open_collection
from config import COLLECTION_NAME, DATABASE_NAME, MONGO_URI, QUERY_TIMEOUT_MS
from errors import StoreConnectionError
from logger import logger
from response_formatter import bold, green, red
from runner import QueryCatalogRunner, exit_code


def usage(prog: str) -> None:
    print(bold("Bookstore query catalog"))
    print()
    print("Usage:")
    print(f"  {prog} [mongo_uri] [database] [collection]")
    print()
    print("Defaults:")
    print(f"  mongo_uri:  {MONGO_URI}")
    print(f"  database:   {DATABASE_NAME}")
    print(f"  collection: {COLLECTION_NAME}")


def main(argv: Optional[List[str]] = None) -> int:
    prog = sys.argv[0] if sys.argv else "query-catalog"
    args = sys.argv[1:] if argv is None else argv

    if any(a in ("-h", "--help") for a in args):
        usage(prog)
        return 0
    if len(args) > 3:
        usage(prog)
        return 2

    mongo_uri = args[0] if len(args) > 0 else MONGO_URI
    database = args[1] if len(args) > 1 else DATABASE_NAME
    collection_name = args[2] if len(args) > 2 else COLLECTION_NAME

    if not mongo_uri or not database or not collection_name:
        print(red("Error: mongo_uri, database, and collection are required"), file=sys.stderr)
        return 2

    tty = sys.stdout.isatty()
    connected = False
    try:
        with open_collection(mongo_uri, database, collection_name) as collection:
            connected = True
            print(green("Connected to MongoDB server") if tty else "Connected to MongoDB server")
            runner = QueryCatalogRunner(
                collection,
                BOOKSTORE_CATALOG,
                timeout_ms=QUERY_TIMEOUT_MS,
                colour=tty,
            )
            outcomes = runner.run()
    except StoreConnectionError as e:
        logger.error("[MAIN] Aborting run: %s", e)
        print(red(f"Error running queries: {e}") if tty else f"Error running queries: {e}", file=sys.stderr)
        if connected:
            print("\nConnection closed")
        return 1

    print("\nConnection closed")
    return exit_code(outcomes)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
