"""
repositories/reservation_repo.py
---------------------------------
Data access layer for reservations.
"""

from db.connection import dict_cursor, get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

# Reservation columns are aliased so they do not collide with the property's.
PAST_RESERVATIONS_SQL = """
    SELECT reservations.id AS reservation_id,
           reservations.start_date,
           reservations.end_date,
           reservations.guest_id,
           properties.*,
           AVG(property_reviews.rating) AS average_rating
    FROM reservations
    JOIN properties ON reservations.property_id = properties.id
    LEFT JOIN property_reviews ON properties.id = property_reviews.property_id
    WHERE reservations.guest_id = %s
      AND reservations.end_date < now()::date
    GROUP BY reservations.id, properties.id
    ORDER BY reservations.start_date
    LIMIT %s;
"""


class ReservationRepository:
    """Repository for read operations on the reservations table."""

    def get_past_for_guest(self, guest_id: int, limit: int = 10) -> list[dict]:
        """
        Fetch a guest's completed reservations joined with their properties.

        Args:
            guest_id: The guest's user id.
            limit: Maximum number of rows.

        Returns:
            List of dicts ordered by start_date. Each carries the property's
            columns plus reservation_id, start_date, end_date, guest_id
            and average_rating (float or None).
        """
        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(PAST_RESERVATIONS_SQL, (guest_id, limit))
                rows = [self._normalize(r) for r in cur.fetchall()]
            logger.debug(f"Fetched {len(rows)} past reservations for guest {guest_id}")
            return rows
        finally:
            release_connection(conn)

    @staticmethod
    def _normalize(row) -> dict:
        """Turn a RealDictRow into a plain dict with a float rating."""
        data = dict(row)
        if data.get("average_rating") is not None:
            data["average_rating"] = float(data["average_rating"])
        return data
