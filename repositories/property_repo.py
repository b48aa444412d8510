"""
repositories/property_repo.py
------------------------------
Data access layer for property listings.
All SQL queries related to the `properties` table live here, including
the dynamic search query used by the listings page.
"""

from typing import Optional

from db.connection import dict_cursor, get_connection, release_connection
from models.property import Property, PropertySearch
from utils.logger import get_logger

logger = get_logger(__name__)

_SEARCH_SELECT = """
    SELECT properties.*, AVG(property_reviews.rating) AS average_rating
    FROM properties
    LEFT JOIN property_reviews ON properties.id = property_reviews.property_id
"""


def build_property_search(
    search: Optional[PropertySearch] = None, limit: int = 10
) -> tuple[str, list]:
    """
    Build the listing query for a set of optional filters.

    Row filters (owner, city, price) go into a single WHERE clause, the
    rating filter applies to the per-property average and so goes into
    HAVING. Parameters are returned in placeholder order; the limit is
    always last.

    Args:
        search: The filters to apply; None means no filtering.
        limit: Maximum number of rows.

    Returns:
        Tuple of (sql, params) ready for cursor.execute().
    """
    search = search or PropertySearch()
    params: list = []
    conditions: list[str] = []

    if search.is_set(search.owner_id):
        params.append(search.owner_id)
        conditions.append("properties.owner_id = %s")

    if search.is_set(search.city):
        params.append(f"%{search.city}%")
        conditions.append("properties.city LIKE %s")

    if search.minimum_cents is not None:
        params.append(search.minimum_cents)
        conditions.append("properties.cost_per_night >= %s")

    if search.maximum_cents is not None:
        params.append(search.maximum_cents)
        conditions.append("properties.cost_per_night <= %s")

    sql = _SEARCH_SELECT
    if conditions:
        sql += "    WHERE " + "\n      AND ".join(conditions) + "\n"
    sql += "    GROUP BY properties.id\n"

    if search.is_set(search.minimum_rating):
        params.append(search.minimum_rating)
        sql += "    HAVING AVG(property_reviews.rating) >= %s\n"

    params.append(limit)
    sql += "    ORDER BY properties.cost_per_night\n    LIMIT %s;"
    return sql, params


class PropertyRepository:
    """Repository for listing searches and inserts on the properties table."""

    # ── READ ──────────────────────────────────────────────

    def search(self, search: Optional[PropertySearch] = None, limit: int = 10) -> list[Property]:
        """
        Fetch properties matching the given filters, cheapest first.

        Args:
            search: Optional filters (see PropertySearch).
            limit: Maximum number of rows.

        Returns:
            List of Property objects with average_rating filled in.
        """
        sql, params = build_property_search(search, limit)
        logger.debug(f"Property search: {sql} {params}")

        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(sql, params)
                return [Property.from_row(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── CREATE ────────────────────────────────────────────

    def add(self, prop: Property) -> Property:
        """
        Insert a new property listing.

        Args:
            prop: The Property to persist (its id is ignored).

        Returns:
            The stored Property, with its id populated.
        """
        sql = """
            INSERT INTO properties (
                owner_id, title, description, thumbnail_photo_url, cover_photo_url,
                cost_per_night, street, city, province, post_code, country,
                parking_spaces, number_of_bathrooms, number_of_bedrooms
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING *;
        """
        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(sql, (
                    prop.owner_id, prop.title, prop.description,
                    prop.thumbnail_photo_url, prop.cover_photo_url,
                    prop.cost_per_night, prop.street, prop.city,
                    prop.province, prop.post_code, prop.country,
                    prop.parking_spaces, prop.number_of_bathrooms,
                    prop.number_of_bedrooms,
                ))
                row = cur.fetchone()
            conn.commit()
            stored = Property.from_row(row)
            logger.info(f"Added property #{stored.id} '{stored.title}' for owner {stored.owner_id}")
            return stored
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add property '{prop.title}': {e}")
            raise
        finally:
            release_connection(conn)
