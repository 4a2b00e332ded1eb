"""Geocoding - resolve free-text addresses to coordinates, city and country.

Interchangeable strategies behind one interface:
- MapboxGeocoder: Mapbox places API, city/country from the feature context
- GooglePlacesGeocoder: Google Geocoding API, city/country from typed
  address components ("locality", "country")
- NominatimGeocoder: OpenStreetMap via geopy, no secret required

Contract for resolve(address):
- Returns GeocodeResult on a match, None when nothing matches
- Missing city/country components become "unknown"
- Raises GeocodeError when the provider (or the key proxy) fails

Provider secrets are never hard-coded. A key set in the server environment is
used directly. Otherwise ProviderKeyClient asks the hosted key proxy
function for it once and caches it.

Length gating / debouncing is the caller's job (see SpotDraft.needs_geocoding).
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Optional
from urllib.parse import quote

import requests
from geopy.exc import GeopyError
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

from prayerspot_finder.constants import BackendConfig, GeocodingConfig
from prayerspot_finder.core.errors import GeocodeError
from prayerspot_finder.model.geocode_result import GeocodeResult

logger = logging.getLogger(__name__)

UNKNOWN = GeocodingConfig.UNKNOWN


class ProviderKeyClient:
    """Fetches a provider key from the hosted secret proxy and caches it.

    Example:
        keys = ProviderKeyClient(function_name="get-mapbox-token", field="token")
        token = keys.get()
    """

    def __init__(
        self,
        function_name: str,
        field: str,
        preset_key: str = "",
        base_url: str = BackendConfig.URL,
        api_key: str = BackendConfig.ANON_KEY,
        session: Optional[requests.Session] = None,
        timeout: float = BackendConfig.REQUEST_TIMEOUT_S,
    ) -> None:
        self.function_name = function_name
        self.field = field
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()
        self._key: Optional[str] = preset_key or None

    def get(self) -> str:
        """Return the provider key.

        Raises:
            GeocodeError: If the proxy is unreachable or returns no key.
        """
        if self._key:
            return self._key

        url = f"{self.base_url}{BackendConfig.FUNCTIONS_PATH}/{self.function_name}"
        headers = {"apikey": self.api_key, "Authorization": f"Bearer {self.api_key}"}
        try:
            response = self._session.post(url, headers=headers, json={}, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"[GEOCODE] Key proxy '{self.function_name}' failed: {e}")
            raise GeocodeError(f"Could not fetch key from '{self.function_name}'") from e

        key = payload.get(self.field) if isinstance(payload, dict) else None
        if not key:
            raise GeocodeError(f"Key proxy '{self.function_name}' returned no '{self.field}'")

        self._key = key
        logger.info(f"[GEOCODE] Fetched provider key via '{self.function_name}'")
        return key


class Geocoder(ABC):
    """Resolve free text to coordinates and administrative names."""

    name: str = "geocoder"

    @abstractmethod
    def resolve(self, address: str) -> Optional[GeocodeResult]:
        """Resolve address. None for no match; GeocodeError on provider failure."""


def _get_json(session: requests.Session, url: str, params: dict[str, str], timeout: float) -> Any:
    """GET a provider endpoint, converting transport failures to GeocodeError."""
    try:
        response = session.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as e:
        raise GeocodeError(f"Geocoding request failed: {e}") from e


class MapboxGeocoder(Geocoder):
    """Mapbox places API. Uses the first feature only."""

    name = "mapbox"

    def __init__(
        self,
        token: Callable[[], str],
        session: Optional[requests.Session] = None,
        timeout: float = BackendConfig.REQUEST_TIMEOUT_S,
    ) -> None:
        self._token = token
        self._session = session or requests.Session()
        self.timeout = timeout

    def resolve(self, address: str) -> Optional[GeocodeResult]:
        url = GeocodingConfig.MAPBOX_URL.format(query=quote(address, safe=""))
        data = _get_json(self._session, url, params={"access_token": self._token()}, timeout=self.timeout)

        features = data.get("features") or []
        if not features:
            logger.info(f"[GEOCODE] mapbox: no match for '{address}'")
            return None

        feature = features[0]
        lng, lat = feature["center"]
        context = list(feature.get("context") or [])
        # A query that is itself a city/country returns that entity as the feature
        context.append({"id": feature.get("id", ""), "text": feature.get("text")})

        return GeocodeResult(
            lat=float(lat),
            lng=float(lng),
            city=_context_text(context, prefix="place"),
            country=_context_text(context, prefix="country"),
        )


def _context_text(context: list[dict[str, Any]], prefix: str) -> str:
    """Text of the first context entry whose id starts with prefix."""
    for entry in context:
        if str(entry.get("id", "")).startswith(prefix) and entry.get("text"):
            return entry["text"]
    return UNKNOWN


def extract_city_country(components: list[dict[str, Any]]) -> tuple[str, str]:
    """Look up (city, country) in typed address components.

    City is the component tagged "locality" and country the one tagged
    "country". Missing tags give "unknown".
    """
    city = next((c.get("long_name") for c in components if "locality" in c.get("types", [])), None)
    country = next((c.get("long_name") for c in components if "country" in c.get("types", [])), None)
    return city or UNKNOWN, country or UNKNOWN


class GooglePlacesGeocoder(Geocoder):
    """Google Geocoding API returning a structured place."""

    name = "google"

    def __init__(
        self,
        key: Callable[[], str],
        session: Optional[requests.Session] = None,
        timeout: float = BackendConfig.REQUEST_TIMEOUT_S,
    ) -> None:
        self._key = key
        self._session = session or requests.Session()
        self.timeout = timeout

    def resolve(self, address: str) -> Optional[GeocodeResult]:
        data = _get_json(
            self._session,
            GeocodingConfig.GOOGLE_URL,
            params={"address": address, "key": self._key()},
            timeout=self.timeout,
        )

        status = data.get("status")
        if status == "ZERO_RESULTS":
            logger.info(f"[GEOCODE] google: no match for '{address}'")
            return None
        if status != "OK":
            raise GeocodeError(f"Google geocoding returned status {status}: {data.get('error_message', '')}")

        place = data["results"][0]
        location = place["geometry"]["location"]
        city, country = extract_city_country(place.get("address_components") or [])
        return GeocodeResult(
            lat=float(location["lat"]),
            lng=float(location["lng"]),
            city=city,
            country=country,
            formatted_address=place.get("formatted_address"),
        )


class NominatimGeocoder(Geocoder):
    """OpenStreetMap Nominatim through geopy."""

    name = "nominatim"

    # Nominatim reports the settlement under different keys by size
    CITY_KEYS = ("city", "town", "village", "municipality", "hamlet")

    def __init__(
        self,
        geolocator: Optional[Nominatim] = None,
        timeout: float = BackendConfig.REQUEST_TIMEOUT_S,
        min_delay_seconds: float = GeocodingConfig.NOMINATIM_MIN_DELAY_S,
    ) -> None:
        self._geolocator = geolocator or Nominatim(user_agent=GeocodingConfig.NOMINATIM_USER_AGENT)
        self.timeout = timeout
        # Spaces consecutive lookups; failures are raised, not retried
        self._geocode = RateLimiter(
            self._geolocator.geocode,
            min_delay_seconds=min_delay_seconds,
            max_retries=0,
            swallow_exceptions=False,
        )

    def resolve(self, address: str) -> Optional[GeocodeResult]:
        try:
            location = self._geocode(
                address,
                exactly_one=True,
                addressdetails=True,
                timeout=self.timeout,
            )
        except GeopyError as e:
            raise GeocodeError(f"Nominatim geocoding failed: {e}") from e

        if location is None:
            logger.info(f"[GEOCODE] nominatim: no match for '{address}'")
            return None

        details = (location.raw or {}).get("address", {})
        city = next((details[k] for k in self.CITY_KEYS if details.get(k)), UNKNOWN)
        return GeocodeResult(
            lat=float(location.latitude),
            lng=float(location.longitude),
            city=city,
            country=details.get("country") or UNKNOWN,
            formatted_address=location.address,
        )


def create_geocoder(
    provider: str = GeocodingConfig.PROVIDER,
    session: Optional[requests.Session] = None,
) -> Geocoder:
    """Build the configured geocoder.

    Raises:
        ValueError: For an unknown provider name.
    """
    if provider == "mapbox":
        keys = ProviderKeyClient(
            function_name=GeocodingConfig.MAPBOX_TOKEN_FUNCTION,
            field=GeocodingConfig.MAPBOX_TOKEN_FIELD,
            preset_key=GeocodingConfig.MAPBOX_TOKEN,
            session=session,
        )
        return MapboxGeocoder(token=keys.get, session=session)
    if provider == "google":
        keys = ProviderKeyClient(
            function_name=GeocodingConfig.GOOGLE_KEY_FUNCTION,
            field=GeocodingConfig.GOOGLE_KEY_FIELD,
            preset_key=GeocodingConfig.GOOGLE_KEY,
            session=session,
        )
        return GooglePlacesGeocoder(key=keys.get, session=session)
    if provider == "nominatim":
        return NominatimGeocoder()
    raise ValueError(f"Unknown geocoder provider '{provider}'. Available: {GeocodingConfig.PROVIDERS}")
