"""SpotDraft - Typed form state for a new prayer spot.

Replaces a loose dict of form fields. The draft is mutated by form widgets
and by geocoding, validated before every create call, and cleared after a
successful submit.
"""

from dataclasses import dataclass
from typing import Any, Optional

from prayerspot_finder.constants import GeocodingConfig
from prayerspot_finder.model.geocode_result import GeocodeResult


@dataclass
class SpotDraft:
    """Fields collected by the Spot Form.

    (latitude, longitude) == (0, 0) means "location not resolved yet".
    """

    name: str = ""
    address: str = ""
    description: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    city: str = ""
    country: str = ""
    geocoded_query: Optional[str] = None  # Last address sent to the geocoder

    @property
    def has_location(self) -> bool:
        """True when coordinates are not the unset (0, 0) pair."""
        return not (self.latitude == 0 and self.longitude == 0)

    @property
    def is_submittable(self) -> bool:
        """Gate for the submit button: name, address and location present."""
        return bool(self.name.strip()) and bool(self.address.strip()) and self.has_location

    @property
    def resolved_city(self) -> str:
        return self.city or GeocodingConfig.UNKNOWN

    @property
    def resolved_country(self) -> str:
        return self.country or GeocodingConfig.UNKNOWN

    def needs_geocoding(self) -> bool:
        """True if the address is long enough and differs from the last lookup."""
        query = self.address.strip()
        return len(query) >= GeocodingConfig.MIN_QUERY_CHARS and query != self.geocoded_query

    def drop_stale_location(self) -> bool:
        """Clear a geocoded location once the address no longer matches its lookup.

        Covers edits that fall below the length gate, which are never sent to
        the geocoder. A location seeded before any lookup is left alone.

        Returns:
            True if a location was dropped.
        """
        query = self.address.strip()
        if self.geocoded_query is None or query == self.geocoded_query:
            return False
        self.apply_geocode(query=query, result=None)
        return True

    def seed_location(self, lat: float, lng: float) -> bool:
        """Pre-fill coordinates from the browser position if nothing is resolved yet."""
        if self.has_location or self.geocoded_query is not None:
            return False
        self.latitude = lat
        self.longitude = lng
        return True

    def apply_geocode(self, query: str, result: Optional[GeocodeResult]) -> None:
        """Store a geocoding outcome. A miss clears any previous location."""
        self.geocoded_query = query
        if result is None:
            self.latitude = 0.0
            self.longitude = 0.0
            self.city = ""
            self.country = ""
            return
        self.latitude = result.lat
        self.longitude = result.lng
        self.city = result.city
        self.country = result.country
        if result.formatted_address:
            self.address = result.formatted_address
            # The formatted address is what the user now sees; don't look it up again
            self.geocoded_query = result.formatted_address

    def clear(self) -> None:
        self.name = ""
        self.address = ""
        self.description = ""
        self.latitude = 0.0
        self.longitude = 0.0
        self.city = ""
        self.country = ""
        self.geocoded_query = None

    def to_row(self) -> dict[str, Any]:
        """Fields for the store insert (slug and created_by are added by the store)."""
        return {
            "name": self.name.strip(),
            "description": self.description.strip() or None,
            "address": self.address.strip() or None,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "city": self.resolved_city,
            "country": self.resolved_country,
        }
