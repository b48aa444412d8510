"""
services/listing_service.py
----------------------------
The application's data-access facade. Exposes every user, reservation and
property operation as a coroutine and routes it to the configured backend
(PostgreSQL repositories or the JSON fixture tables).
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Optional

from config import BACKENDS, DATA_BACKEND, FIXTURES_DIR
from models.property import Property, PropertySearch
from models.user import User
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Backend:
    """The three repositories one data source provides."""
    name: str
    users: Any
    properties: Any
    reservations: Any


def postgres_backend() -> Backend:
    """Repositories that talk to PostgreSQL through the connection pool."""
    from db.connection import init_pool
    from repositories.property_repo import PropertyRepository
    from repositories.reservation_repo import ReservationRepository
    from repositories.user_repo import UserRepository

    init_pool()
    return Backend(
        name="postgres",
        users=UserRepository(),
        properties=PropertyRepository(),
        reservations=ReservationRepository(),
    )


def fixture_backend(directory=FIXTURES_DIR) -> Backend:
    """Repositories that read the static JSON fixture tables."""
    from repositories.fixture_repo import (
        FixturePropertyRepository,
        FixtureReservationRepository,
        FixtureTables,
        FixtureUserRepository,
    )

    tables = FixtureTables(directory)
    return Backend(
        name="fixtures",
        users=FixtureUserRepository(tables),
        properties=FixturePropertyRepository(tables),
        reservations=FixtureReservationRepository(tables),
    )


def build_backend(name: str = DATA_BACKEND) -> Backend:
    """
    Create the backend called `name`.

    Raises:
        ValueError: If the name is not one of config.BACKENDS.
    """
    if name == "postgres":
        return postgres_backend()
    if name == "fixtures":
        return fixture_backend()
    raise ValueError(f"Unknown data backend '{name}', expected one of {BACKENDS}")


class ListingService:
    """
    Awaitable access to users, reservations and properties.

    Workflow:
        1. Receive plain values or dicts from the caller (web layer, CLI).
        2. Turn them into domain objects.
        3. Run the blocking repository call in a worker thread.
        4. Log and re-raise any backend failure; a lookup that finds
           nothing returns None.
    """

    def __init__(self, backend: Optional[Backend] = None):
        self.backend = backend or build_backend()

    async def _run(self, operation: str, func: Callable, *args) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except Exception as e:
            logger.error(f"{operation} failed on {self.backend.name} backend: {e}")
            raise

    # ── USERS ─────────────────────────────────────────────

    async def get_user_with_email(self, email: str) -> Optional[User]:
        """Get a single user given their email, or None."""
        return await self._run("get_user_with_email", self.backend.users.get_by_email, email)

    async def get_user_with_id(self, user_id: int) -> Optional[User]:
        """Get a single user given their id, or None."""
        return await self._run("get_user_with_id", self.backend.users.get_by_id, user_id)

    async def add_user(self, user: dict | User) -> User:
        """
        Add a new user.

        Args:
            user: A User or a mapping with name, email and password.

        Returns:
            The stored User with its id.
        """
        if not isinstance(user, User):
            user = User(name=user["name"], email=user["email"], password=user["password"])
        return await self._run("add_user", self.backend.users.add, user)

    # ── RESERVATIONS ──────────────────────────────────────

    async def get_all_reservations(self, guest_id: int, limit: int = 10) -> list[dict]:
        """Get a guest's past reservations with property details, oldest first."""
        return await self._run(
            "get_all_reservations", self.backend.reservations.get_past_for_guest, guest_id, limit
        )

    # ── PROPERTIES ────────────────────────────────────────

    async def get_all_properties(
        self, options: dict | PropertySearch | None = None, limit: int = 10
    ) -> list[Property]:
        """
        Get properties matching the optional filters, cheapest first.

        Args:
            options: owner_id, city, minimum_price_per_night,
                maximum_price_per_night and/or minimum_rating.
            limit: Maximum number of results.
        """
        search = options if isinstance(options, PropertySearch) else PropertySearch.from_options(options)
        return await self._run("get_all_properties", self.backend.properties.search, search, limit)

    async def add_property(self, prop: dict | Property) -> Property:
        """Add a property listing and return the stored record."""
        if not isinstance(prop, Property):
            prop = Property.from_input(prop)
        return await self._run("add_property", self.backend.properties.add, prop)
