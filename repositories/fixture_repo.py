"""
repositories/fixture_repo.py
-----------------------------
In-memory repositories backed by the static JSON fixture tables in db/json/.
They answer the same calls as the PostgreSQL repositories, so the rest of the
application can run without a database. Inserts live only as long as the
process.
"""

import json
import threading
from datetime import date
from pathlib import Path
from typing import Optional

from config import FIXTURES_DIR
from models.property import Property, PropertySearch
from models.reservation import Reservation
from models.user import User
from utils.logger import get_logger

logger = get_logger(__name__)

TABLES: tuple[str, ...] = ("users", "properties", "reservations", "property_reviews")


class FixtureTables:
    """
    The fixture tables, keyed by integer id.

    Each JSON file holds one object mapping id strings to rows, e.g.
    ``{"1": {"id": 1, "name": ...}}``. A missing file loads as an empty table.
    """

    def __init__(self, directory: Path | str = FIXTURES_DIR):
        self.directory = Path(directory)
        self._lock = threading.Lock()
        self.users: dict[int, dict] = self._load("users")
        self.properties: dict[int, dict] = self._load("properties")
        self.reservations: dict[int, dict] = self._load("reservations")
        self.property_reviews: dict[int, dict] = self._load("property_reviews")
        logger.info(
            f"Loaded fixtures from {self.directory}: "
            f"{len(self.users)} users, {len(self.properties)} properties, "
            f"{len(self.reservations)} reservations"
        )

    def _load(self, table: str) -> dict[int, dict]:
        path = self.directory / f"{table}.json"
        if not path.exists():
            logger.warning(f"Fixture file {path} not found, using an empty table.")
            return {}
        with path.open(encoding="utf-8") as fh:
            raw = json.load(fh)
        return {int(key): row for key, row in raw.items() if row}

    def rows(self, table: str) -> list[dict]:
        """Snapshot of a table's rows, safe to iterate while inserts run."""
        with self._lock:
            return list(getattr(self, table).values())

    def insert(self, table: str, row: dict) -> dict:
        """Store a copy of row under the next id (highest id + 1) and return it."""
        with self._lock:
            rows = getattr(self, table)
            stored = dict(row, id=max(rows, default=0) + 1)
            rows[stored["id"]] = stored
            return stored

    def average_rating(self, property_id: int) -> Optional[float]:
        ratings = [
            r["rating"] for r in self.rows("property_reviews")
            if r["property_id"] == property_id
        ]
        if not ratings:
            return None
        return sum(ratings) / len(ratings)


class FixtureUserRepository:
    """Users served from the fixture tables."""

    def __init__(self, tables: FixtureTables):
        self.tables = tables

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Case-insensitive email match over every user.

        Scans the whole table, so with duplicate emails the last row wins.
        """
        wanted = email.lower()
        found = None
        for row in self.tables.rows("users"):
            if row["email"].lower() == wanted:
                found = row
        return User.from_row(found) if found else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        row = self.tables.users.get(int(user_id))
        return User.from_row(row) if row else None

    def add(self, user: User) -> User:
        row = self.tables.insert(
            "users", {"name": user.name, "email": user.email, "password": user.password}
        )
        logger.info(f"Added fixture user #{row['id']} ({row['email']})")
        return User.from_row(row)


class FixturePropertyRepository:
    """Properties served from the fixture tables, filtered like the SQL search."""

    def __init__(self, tables: FixtureTables):
        self.tables = tables

    def search(self, search: Optional[PropertySearch] = None, limit: int = 10) -> list[Property]:
        search = search or PropertySearch()
        city = str(search.city) if search.is_set(search.city) else None
        minimum = search.minimum_cents
        maximum = search.maximum_cents
        min_rating = (
            float(search.minimum_rating) if search.is_set(search.minimum_rating) else None
        )

        results = []
        for row in self.tables.rows("properties"):
            if search.is_set(search.owner_id) and row["owner_id"] != int(search.owner_id):
                continue
            if city is not None and city not in row["city"]:
                continue
            if minimum is not None and row["cost_per_night"] < minimum:
                continue
            if maximum is not None and row["cost_per_night"] > maximum:
                continue
            rating = self.tables.average_rating(row["id"])
            # AVG over no reviews is NULL, which never satisfies the HAVING clause
            if min_rating is not None and (rating is None or rating < min_rating):
                continue
            results.append(Property.from_row(dict(row, average_rating=rating)))

        results.sort(key=lambda p: (p.cost_per_night, p.id))
        return results[:limit]

    def add(self, prop: Property) -> Property:
        data = prop.to_dict()
        data.pop("id", None)
        data.pop("average_rating", None)
        row = self.tables.insert("properties", data)
        logger.info(f"Added fixture property #{row['id']} '{row['title']}'")
        return Property.from_row(row)


class FixtureReservationRepository:
    """Reservations served from the fixture tables."""

    def __init__(self, tables: FixtureTables):
        self.tables = tables

    def get_past_for_guest(self, guest_id: int, limit: int = 10) -> list[dict]:
        today = date.today()
        past = [
            Reservation.from_row(row) for row in self.tables.rows("reservations")
            if row["guest_id"] == int(guest_id)
        ]
        past = sorted((r for r in past if r.is_past(today)), key=lambda r: r.start_date)

        rows = []
        for reservation in past:
            if len(rows) >= limit:
                break
            prop = self.tables.properties.get(reservation.property_id)
            if prop is None:
                continue
            rows.append({
                **prop,
                "reservation_id": reservation.id,
                "start_date": reservation.start_date,
                "end_date": reservation.end_date,
                "guest_id": reservation.guest_id,
                "average_rating": self.tables.average_rating(prop["id"]),
            })
        return rows
