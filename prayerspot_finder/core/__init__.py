"""Core services with no Streamlit dependency.

- errors: Exception taxonomy (ValidationError, StoreError, GeocodeError, ...)
- slug: Deterministic slug builder and collision suffixing
- spot_search: Case-insensitive search filter
- spot_store: Record store client (BaseSpotStore, RestSpotStore)
- geocoder: Interchangeable geocoding strategies
- auth_service: Hosted identity service client
"""

from prayerspot_finder.core.auth_service import AuthService
from prayerspot_finder.core.errors import (
    AuthError,
    AuthRequired,
    GeocodeError,
    PrayerSpotError,
    StoreError,
    ValidationError,
)
from prayerspot_finder.core.geocoder import (
    Geocoder,
    GooglePlacesGeocoder,
    MapboxGeocoder,
    NominatimGeocoder,
    ProviderKeyClient,
    create_geocoder,
    extract_city_country,
)
from prayerspot_finder.core.slug import build_slug, unique_slug
from prayerspot_finder.core.spot_search import filter_spots, matches
from prayerspot_finder.core.spot_store import BaseSpotStore, RestSpotStore

__all__ = [
    # Errors
    "PrayerSpotError",
    "ValidationError",
    "StoreError",
    "GeocodeError",
    "AuthError",
    "AuthRequired",
    # Slug
    "build_slug",
    "unique_slug",
    # Search
    "matches",
    "filter_spots",
    # Store
    "BaseSpotStore",
    "RestSpotStore",
    # Geocoding
    "Geocoder",
    "MapboxGeocoder",
    "GooglePlacesGeocoder",
    "NominatimGeocoder",
    "ProviderKeyClient",
    "create_geocoder",
    "extract_city_country",
    # Auth
    "AuthService",
]
