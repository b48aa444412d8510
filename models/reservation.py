"""
models/reservation.py
---------------------
Domain model for a guest's stay at a property.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class Reservation:
    """
    Represents a single reservation.

    Attributes:
        id: Database primary key (None for new records).
        start_date: First night of the stay.
        end_date: Check-out date.
        property_id: The reserved property.
        guest_id: The user who made the reservation.
    """
    start_date: date
    end_date: date
    property_id: int
    guest_id: int
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: dict) -> "Reservation":
        start, end = row["start_date"], row["end_date"]
        return cls(
            id=row.get("id"),
            start_date=start if isinstance(start, date) else date.fromisoformat(start),
            end_date=end if isinstance(end, date) else date.fromisoformat(end),
            property_id=row["property_id"],
            guest_id=row["guest_id"],
        )

    def is_past(self, today: Optional[date] = None) -> bool:
        """Returns True once the guest has checked out."""
        return self.end_date < (today or date.today())
