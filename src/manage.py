"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db                       # Create all tables
    python src/manage.py drop-db                        # Drop all tables
    python src/manage.py seed                           # Register the default color variants
    python src/manage.py seed --stock Black=5 Gray=0    # ... with explicit stock
    python src/manage.py expire-checkouts               # Close checkouts idle for 2+ hours
"""

import argparse
import sys

# Catalog declaration order; first-available scans follow it
DEFAULT_VARIANTS = ["Black", "White", "Gray", "Silvery"]
DEFAULT_STOCK = 20


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    domain = _domain()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    domain = _domain()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def parse_stock(pairs: list[str] | None) -> dict[str, int]:
    """``["Black=5", "Gray=0"]`` → ``{"Black": 5, "Gray": 0}``."""
    stock = {}
    for pair in pairs or []:
        color, sep, units = pair.partition("=")
        if not sep or not units.isdigit():
            raise ValueError(f"Expected COLOR=UNITS, got {pair!r}")
        stock[color] = int(units)
    return stock


def seed_variants(stock: dict[str, int] | None = None) -> list[str]:
    """Register every default color that is not registered yet. Returns the new colors."""
    from protean.utils.globals import current_domain

    from storefront.catalogue.cache import find_variant
    from storefront.catalogue.management import RegisterVariant

    stock = stock or {}
    created = []
    for position, color in enumerate(DEFAULT_VARIANTS):
        if find_variant(color) is not None:
            continue
        command = RegisterVariant(color=color, stock=stock.get(color, DEFAULT_STOCK), position=position)
        current_domain.process(command, asynchronous=False)
        created.append(color)
    return created


def seed(stock_pairs=None):
    domain = _domain()
    with domain.domain_context():
        created = seed_variants(parse_stock(stock_pairs))
    print(f"Seeded variants: {', '.join(created) if created else 'none (already present)'}")


def expire_checkouts(idle_hours=None):
    from protean.utils.globals import current_domain

    from storefront.checkout.retention import ExpireIdleCheckouts

    domain = _domain()
    with domain.domain_context():
        command = ExpireIdleCheckouts(idle_threshold_hours=idle_hours) if idle_hours else ExpireIdleCheckouts()
        expired = current_domain.process(command, asynchronous=False)
    print(f"Expired idle checkouts: {expired}")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    seed_parser = subparsers.add_parser("seed", help="Register the default color variants")
    seed_parser.add_argument("--stock", nargs="*", metavar="COLOR=UNITS", help="Initial stock per color")
    expire_parser = subparsers.add_parser("expire-checkouts", help="Close checkouts the shopper walked away from")
    expire_parser.add_argument("--idle-hours", type=int, help="Idle threshold in hours")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed(args.stock)
    elif args.command == "expire-checkouts":
        expire_checkouts(args.idle_hours)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
