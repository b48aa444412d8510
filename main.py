"""
main.py
-------
Command-line entry point for the LightBnB data layer.

Responsibilities:
    - Initialize the database connection pool, schema and seed data.
    - Run user, reservation and property lookups against either backend.

Examples:
    python main.py init-db
    python main.py seed
    python main.py --backend fixtures properties --city Vancouver --min-rating 4
    python main.py reservations 2 --limit 5
"""

import argparse
import asyncio
import sys

from config import BACKENDS, DATA_BACKEND
from utils.logger import get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lightbnb", description="LightBnB data access")
    parser.add_argument(
        "--backend", choices=BACKENDS, default=DATA_BACKEND,
        help="data source to query (default: %(default)s)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create the database tables")
    sub.add_parser("seed", help="load the JSON fixtures into the database")

    user = sub.add_parser("user", help="look up a user by email")
    user.add_argument("email")

    props = sub.add_parser("properties", help="search property listings")
    props.add_argument("--owner-id", type=int)
    props.add_argument("--city")
    props.add_argument("--min-price", type=float, help="minimum price per night")
    props.add_argument("--max-price", type=float, help="maximum price per night")
    props.add_argument("--min-rating", type=float)
    props.add_argument("--limit", type=int, default=10)

    res = sub.add_parser("reservations", help="list a guest's past reservations")
    res.add_argument("guest_id", type=int)
    res.add_argument("--limit", type=int, default=10)
    return parser


async def run_query(args: argparse.Namespace) -> list[str]:
    """Run a lookup sub-command and return its output lines."""
    from services.listing_service import ListingService, build_backend

    service = ListingService(build_backend(args.backend))

    if args.command == "user":
        user = await service.get_user_with_email(args.email)
        return [str(user) if user else f"No user with email {args.email}"]

    if args.command == "properties":
        options = {
            "owner_id": args.owner_id,
            "city": args.city,
            "minimum_price_per_night": args.min_price,
            "maximum_price_per_night": args.max_price,
            "minimum_rating": args.min_rating,
        }
        listings = await service.get_all_properties(options, args.limit)
        return [str(p) for p in listings] or ["No matching properties."]

    rows = await service.get_all_reservations(args.guest_id, args.limit)
    return [
        f"{r['start_date']} -> {r['end_date']} | {r['title']} ({r['city']})"
        for r in rows
    ] or ["No past reservations."]


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the requested command."""
    args = build_parser().parse_args(argv)

    if args.command in ("init-db", "seed"):
        from db.connection import close_pool, init_pool

        logger.info(f"Running {args.command} against PostgreSQL...")
        init_pool()
        try:
            if args.command == "init-db":
                from db.init_db import create_tables
                create_tables()
            else:
                from db.seed import seed
                seed()
        finally:
            close_pool()
        return 0

    try:
        for line in asyncio.run(run_query(args)):
            print(line)
    finally:
        from db.connection import close_pool, is_initialized
        if is_initialized():
            close_pool()
    return 0


if __name__ == "__main__":
    sys.exit(main())
