"""
db/seed.py
----------
Loads the JSON fixture tables (db/json/) into PostgreSQL so both backends
serve the same data. Rows keep their fixture ids; the id sequences are
moved past the highest seeded id afterwards.
Run this module directly after creating the schema:
    python -m db.seed
"""

from pathlib import Path

from config import FIXTURES_DIR
from db.connection import get_connection, release_connection
from repositories.fixture_repo import TABLES, FixtureTables
from utils.logger import get_logger

logger = get_logger(__name__)

# Insert order respects the foreign keys between the tables.
COLUMNS: dict[str, tuple[str, ...]] = {
    "users": ("id", "name", "email", "password"),
    "properties": (
        "id", "owner_id", "title", "description", "thumbnail_photo_url",
        "cover_photo_url", "cost_per_night", "parking_spaces",
        "number_of_bathrooms", "number_of_bedrooms", "country", "street",
        "city", "province", "post_code", "active",
    ),
    "reservations": ("id", "start_date", "end_date", "property_id", "guest_id"),
    "property_reviews": ("id", "guest_id", "property_id", "reservation_id", "rating", "message"),
}


def insert_statement(table: str) -> str:
    """INSERT for one fixture row; rows already present are left alone."""
    columns = COLUMNS[table]
    placeholders = ", ".join(["%s"] * len(columns))
    return (
        f"INSERT INTO {table} ({', '.join(columns)}) "
        f"VALUES ({placeholders}) ON CONFLICT (id) DO NOTHING;"
    )


def seed(directory: Path | str = FIXTURES_DIR) -> dict[str, int]:
    """
    Insert every fixture row into its table in one transaction.

    Returns:
        Dict mapping table name to the number of rows sent.
    """
    tables = FixtureTables(directory)
    counts: dict[str, int] = {}

    conn = get_connection()
    try:
        with conn.cursor() as cur:
            for table in TABLES:
                rows = getattr(tables, table)
                columns = COLUMNS[table]
                sql = insert_statement(table)
                for key in sorted(rows):
                    row = rows[key]
                    cur.execute(sql, tuple(row.get(c) for c in columns))
                counts[table] = len(rows)
                cur.execute(
                    f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                    f"COALESCE((SELECT MAX(id) FROM {table}), 0) + 1, false);"
                )
        conn.commit()
        logger.info(f"Seeded database from {tables.directory}: {counts}")
        return counts
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to seed database: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    seed()
    print("Database seeded successfully.")
