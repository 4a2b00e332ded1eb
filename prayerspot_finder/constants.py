"""Configuration constants for Prayer Spot Finder.

All configurable parameters are centralized here for easy tuning.
Deployment values and secrets are read from the environment once at import.

Classes:
    AppConfig: UI application settings
    BackendConfig: Hosted database/auth project and table names
    GeocodingConfig: Geocoder provider selection and endpoints
    MapConfig: Default map view parameters and map provider
    MarkerConfig: Marker sizes and click settings
    StyleConfig: Marker colors and icons
    RouteConfig: Route paths and query parameter
    SlugConfig: Slug segment rules and collision suffix
"""

import os


class AppConfig:
    """UI application settings."""

    TITLE = "Prayer Spot Finder"
    ICON = "🕌"
    LAYOUT = "wide"


class BackendConfig:
    """Hosted backend project (PostgREST + GoTrue + edge functions)."""

    URL = os.environ.get("SUPABASE_URL", "").rstrip("/")
    ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")

    REST_PATH = "/rest/v1"
    AUTH_PATH = "/auth/v1"
    FUNCTIONS_PATH = "/functions/v1"

    SPOTS_TABLE = "prayer_spots"
    IMAGES_TABLE = "prayer_spot_images"
    PROFILES_TABLE = "profiles"

    # Seconds before a remote call is abandoned and surfaced as an error
    REQUEST_TIMEOUT_S = 10


class GeocodingConfig:
    """Geocoder providers and endpoints."""

    PROVIDER = os.environ.get("GEOCODER_PROVIDER", "mapbox")
    PROVIDERS = ["mapbox", "google", "nominatim"]

    # Caller-side gate: shorter queries are never sent to a provider
    MIN_QUERY_CHARS = 4

    # Placeholder for unresolved city/country components
    UNKNOWN = "unknown"

    MAPBOX_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"
    MAPBOX_TOKEN_FUNCTION = "get-mapbox-token"
    MAPBOX_TOKEN_FIELD = "token"
    MAPBOX_TOKEN = os.environ.get("MAPBOX_TOKEN", "")

    GOOGLE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
    GOOGLE_KEY_FUNCTION = "get-google-maps-key"
    GOOGLE_KEY_FIELD = "GOOGLE_MAPS_API_KEY"
    GOOGLE_KEY = os.environ.get("GOOGLE_MAPS_API_KEY", "")

    NOMINATIM_USER_AGENT = "prayerspot_finder"
    # Public Nominatim allows at most one request per second
    NOMINATIM_MIN_DELAY_S = 1.0

    assert PROVIDER in PROVIDERS, f"Invalid geocoder provider '{PROVIDER}'."


class MapConfig:
    """Default map view parameters."""

    # Initial center: Boston harbour, used until the user pans
    START_CENTER_LAT = 42.35
    START_CENTER_LON = -70.9

    DEFAULT_ZOOM = 11
    SPOT_ZOOM = 14  # Zoom when centering on a selected spot
    LOCATE_ZOOM = 12  # Zoom when centering on the browser position

    HEIGHT_PX = 600

    PROVIDER = os.environ.get("MAP_PROVIDER", "pydeck")
    PROVIDERS = ["pydeck", "folium"]

    assert PROVIDER in PROVIDERS, f"Invalid map provider '{PROVIDER}'."


class MarkerConfig:
    """Map marker sizing and click identification."""

    RADIUS_PX = 9
    SELECTED_RADIUS_PX = 14

    # "type" field on pickable deck.gl objects, used by the click detector
    TYPE_SPOT = "spot"


class StyleConfig:
    """Marker colors (RGBA for deck.gl, CSS names for Leaflet)."""

    ACTIVE_COLOR = [22, 128, 96, 230]
    DELETED_COLOR = [150, 150, 150, 160]
    SELECTED_COLOR = [230, 126, 34, 255]

    FOLIUM_ACTIVE_COLOR = "green"
    FOLIUM_DELETED_COLOR = "gray"
    FOLIUM_SELECTED_COLOR = "orange"
    FOLIUM_ICON = "star"


class RouteConfig:
    """Route table and the query parameter that carries the current path."""

    QUERY_PARAM = "path"

    HOME = "/"
    AUTH = "/auth"
    ADD = "/add"


class SlugConfig:
    """Slug construction rules."""

    # Every maximal run of characters outside this class becomes one hyphen
    SEGMENT_PATTERN = r"[^a-z0-9]+"
    SEPARATOR = "/"

    # Collision handling: "-" + token_hex(SUFFIX_BYTES) is appended to the name segment
    SUFFIX_BYTES = 2
    MAX_SUFFIX_ATTEMPTS = 5
