"""
models/property.py
------------------
Domain models for rental listings and listing searches.
"""

from dataclasses import asdict, dataclass, fields
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

# Columns a caller supplies when listing a new property.
PROPERTY_INPUT_FIELDS: tuple[str, ...] = (
    "owner_id",
    "title",
    "description",
    "thumbnail_photo_url",
    "cover_photo_url",
    "cost_per_night",
    "street",
    "city",
    "province",
    "post_code",
    "country",
    "parking_spaces",
    "number_of_bathrooms",
    "number_of_bedrooms",
)


def to_cents(amount: Any) -> int:
    """Convert a price in currency units (e.g. "120.5") to integer cents."""
    cents = Decimal(str(amount)) * 100
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass
class Property:
    """
    Represents a rental listing.

    Attributes:
        id: Database primary key (None for new records).
        owner_id: The user who listed the property.
        cost_per_night: Nightly price in cents.
        active: Whether the listing is currently bookable.
        average_rating: Mean review rating, filled in by listing queries only.
    """
    owner_id: int
    title: str
    thumbnail_photo_url: str
    cover_photo_url: str
    cost_per_night: int
    street: str
    city: str
    province: str
    post_code: str
    country: str
    description: Optional[str] = None
    parking_spaces: int = 0
    number_of_bathrooms: int = 0
    number_of_bedrooms: int = 0
    active: bool = True
    id: Optional[int] = None
    average_rating: Optional[float] = None

    @classmethod
    def from_row(cls, row: dict) -> "Property":
        """Build a Property from a column-name keyed row, ignoring unknown columns."""
        known = {f.name for f in fields(cls)}
        data = {k: v for k, v in row.items() if k in known}
        if data.get("average_rating") is not None:
            data["average_rating"] = float(data["average_rating"])
        return cls(**data)

    @classmethod
    def from_input(cls, data: dict) -> "Property":
        """
        Build a new (unsaved) Property from user-supplied fields.

        Raises:
            TypeError: If a required field is missing.
        """
        values = {name: data[name] for name in PROPERTY_INPUT_FIELDS if name in data}
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def price(self) -> float:
        """Nightly price in currency units."""
        return self.cost_per_night / 100

    def __str__(self) -> str:
        rating = f"{self.average_rating:.2f}" if self.average_rating is not None else "-"
        return f"#{self.id} {self.title} | {self.city} | {self.price:.2f}/night | rating {rating}"


@dataclass
class PropertySearch:
    """
    Optional filters for a property listing query.

    Prices are in currency units; a field left as None (or "") is not filtered on.
    """
    owner_id: Optional[int] = None
    city: Optional[str] = None
    minimum_price_per_night: Optional[float] = None
    maximum_price_per_night: Optional[float] = None
    minimum_rating: Optional[float] = None

    @classmethod
    def from_options(cls, options: Optional[dict]) -> "PropertySearch":
        """Build a search from a loose options mapping (e.g. form data)."""
        if not options:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in options.items() if k in known})

    @staticmethod
    def is_set(value: Any) -> bool:
        """A filter applies unless its value is None or an empty string."""
        return value is not None and value != ""

    @property
    def minimum_cents(self) -> Optional[int]:
        if not self.is_set(self.minimum_price_per_night):
            return None
        return to_cents(self.minimum_price_per_night)

    @property
    def maximum_cents(self) -> Optional[int]:
        if not self.is_set(self.maximum_price_per_night):
            return None
        return to_cents(self.maximum_price_per_night)
