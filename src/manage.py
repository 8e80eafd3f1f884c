"""Storefront database management CLI.

Provides commands to create and drop database schemas for both domains, and
to import a catalogue file into the catalogue domain.

Usage:
    python src/manage.py setup-db                  # Create all tables
    python src/manage.py drop-db                   # Drop all tables
    python src/manage.py import-catalogue seed.json
"""

import argparse
import json
import sys

DOMAIN_NAMES = ["catalogue", "bundles"]


def _domains():
    from bundles.domain import bundles
    from catalogue.domain import catalogue

    return {"catalogue": catalogue, "bundles": bundles}


def _selected(names):
    all_domains = _domains()
    return {name: all_domains[name] for name in names} if names else all_domains


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    for name, domain in _selected(domains).items():
        domain.init()
        providers = setup_db(domain)
        print(f"{name}: schema ready on {', '.join(providers) or 'no SQL providers'}")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    for name, domain in _selected(domains).items():
        domain.init()
        providers = drop_db(domain)
        print(f"{name}: schema dropped on {', '.join(providers) or 'no SQL providers'}")


def import_catalogue_file(path):
    """Load a ``{products, tiers, prices}`` JSON file into the catalogue."""
    from catalogue.importing import import_catalogue

    catalogue = _domains()["catalogue"]
    catalogue.init()

    with open(path, encoding="utf-8") as f:
        payload = json.load(f)

    with catalogue.domain_context():
        summary = import_catalogue(payload)

    print(
        f"Imported {summary['products']} products, {summary['tiers']} tiers, "
        f"{summary['prices']} prices ({summary['rejected']} rows rejected)."
    )


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    import_parser = subparsers.add_parser("import-catalogue", help="Import products, tiers and prices")
    import_parser.add_argument("path", help="JSON file with products, tiers and prices")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "import-catalogue":
        import_catalogue_file(args.path)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
