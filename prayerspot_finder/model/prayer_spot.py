"""PrayerSpot - A shared point of interest on the map.

Rows come from the hosted ``prayer_spots`` table. A spot is never physically
removed: ``deleted_at`` marks it inactive and can be cleared again (restore).

Related records:
- PrayerSpotImage: Image reference owned by exactly one spot
- Profile: Per-user record, ``is_admin`` grants delete/restore on any spot
- Identity: The signed-in actor (not stored in a table)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp column, None stays None."""
    if value is None:
        return None
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class PrayerSpot:
    """A prayer spot record.

    Attributes:
        id: Opaque unique identifier assigned at creation
        name: Display name (never empty)
        latitude: Decimal degrees
        longitude: Decimal degrees
        slug: Public URL path ``country/city/name`` without leading slash
        created_by: Identity id of the creator
        description: Optional free text
        address: Optional human-readable address
        city: Geocoded city or "unknown"
        country: Geocoded country or "unknown"
        deleted_at: None while active, timestamp once soft-deleted
        created_at: Creation time, default sort key (newest first)
    """

    id: str
    name: str
    latitude: float
    longitude: float
    slug: str
    created_by: str
    description: Optional[str] = None
    address: Optional[str] = None
    city: str = "unknown"
    country: str = "unknown"
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def url_path(self) -> str:
        """Detail page route, e.g. "/usa/nyc/quiet-room"."""
        return f"/{self.slug}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PrayerSpot":
        """Create PrayerSpot from a table row."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            slug=data["slug"],
            created_by=str(data["created_by"]),
            description=data.get("description"),
            address=data.get("address"),
            city=data.get("city") or "unknown",
            country=data.get("country") or "unknown",
            deleted_at=_parse_timestamp(data.get("deleted_at")),
            created_at=_parse_timestamp(data.get("created_at")),
        )

    def __repr__(self) -> str:
        state = "deleted" if self.is_deleted else "active"
        return f"PrayerSpot({self.id}, {self.slug!r}, {state})"


@dataclass(frozen=True)
class PrayerSpotImage:
    """Image attached to a prayer spot. At most one per spot is primary."""

    id: str
    prayer_spot_id: str
    image_url: str
    is_primary: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PrayerSpotImage":
        return cls(
            id=str(data["id"]),
            prayer_spot_id=str(data["prayer_spot_id"]),
            image_url=data["image_url"],
            is_primary=bool(data.get("is_primary", False)),
            created_at=_parse_timestamp(data.get("created_at")),
        )


@dataclass(frozen=True)
class Profile:
    """User profile keyed by identity id."""

    id: str
    is_admin: bool = False
    full_name: Optional[str] = None
    username: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or self.id

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        return cls(
            id=str(data["id"]),
            is_admin=bool(data.get("is_admin", False)),
            full_name=data.get("full_name"),
            username=data.get("username"),
        )


@dataclass(frozen=True)
class Identity:
    """Authenticated actor.

    Attributes:
        id: Identity service user id (matches created_by / profiles.id)
        email: Sign-in email
        access_token: Bearer token for row-level-security writes
    """

    id: str
    email: Optional[str] = None
    access_token: Optional[str] = None

    def __repr__(self) -> str:
        # Never print the token
        return f"Identity({self.id}, {self.email})"
