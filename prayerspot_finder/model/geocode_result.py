"""GeocodeResult - Coordinates and region names resolved from free text."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GeocodeResult:
    """Resolved address.

    Attributes:
        lat: Latitude in decimal degrees
        lng: Longitude in decimal degrees
        city: City name or "unknown"
        country: Country name or "unknown"
        formatted_address: Provider's canonical address text, if any
    """

    lat: float
    lng: float
    city: str
    country: str
    formatted_address: Optional[str] = None
