"""Record store client for prayer spots, profiles and spot images.

BaseSpotStore holds the contract that does not depend on transport:
- create() validates the draft, builds a collision-free slug, stamps created_by
- add_image() makes the first image of a spot its primary image

RestSpotStore implements the row primitives against the hosted PostgREST API:
    GET    /rest/v1/prayer_spots?select=*&order=created_at.desc
    GET    /rest/v1/prayer_spots?slug=eq.<slug>&limit=1
    POST   /rest/v1/prayer_spots                      (Prefer: return=representation)
    PATCH  /rest/v1/prayer_spots?id=eq.<id>&deleted_at=is.null   (soft delete)
    PATCH  /rest/v1/prayer_spots?id=eq.<id>                       (restore)

Listing policy: list_spots() returns soft-deleted rows too, newest first.
Callers render them as restorable rather than hiding them.

There is no caching here. Every mutation is followed by a full re-list in
the view-model.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional

import requests

from prayerspot_finder.constants import BackendConfig
from prayerspot_finder.core.errors import StoreError, ValidationError
from prayerspot_finder.core.slug import unique_slug
from prayerspot_finder.model.prayer_spot import Identity, PrayerSpot, PrayerSpotImage, Profile
from prayerspot_finder.model.spot_draft import SpotDraft

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseSpotStore(ABC):
    """Typed accessor over the remote prayer spot collection."""

    # =========================================================================
    # ROW PRIMITIVES (transport specific)
    # =========================================================================

    @abstractmethod
    def list_spots(self) -> list[PrayerSpot]:
        """All spots (including soft-deleted), ordered by created_at descending.

        Raises:
            StoreError: On transport or authorization failure.
        """

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[PrayerSpot]:
        """Spot with this slug, or None if it does not exist."""

    @abstractmethod
    def soft_delete(self, spot_id: str) -> None:
        """Set deleted_at if the spot is active. No-op if already deleted."""

    @abstractmethod
    def restore(self, spot_id: str) -> None:
        """Clear deleted_at. No-op if already active."""

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[Profile]:
        """Profile for a user id, or None."""

    @abstractmethod
    def list_images(self, spot_id: str) -> list[PrayerSpotImage]:
        """Images of a spot, primary image first."""

    @abstractmethod
    def _insert_spot(self, row: dict[str, Any]) -> PrayerSpot:
        """Insert a fully prepared row and return the stored record."""

    @abstractmethod
    def _insert_image(self, row: dict[str, Any]) -> PrayerSpotImage:
        """Insert an image row and return the stored record."""

    # =========================================================================
    # CONTRACT
    # =========================================================================

    def use_identity(self, identity: Optional[Identity]) -> None:
        """Act as identity on subsequent calls. Stores without row-level security ignore it."""

    def slug_exists(self, slug: str) -> bool:
        return self.get_by_slug(slug) is not None

    def create(self, draft: SpotDraft, created_by: str) -> PrayerSpot:
        """Create a spot owned by created_by.

        Raises:
            ValidationError: Missing name, missing/zero coordinates, or no creator.
            StoreError: On transport failure.
        """
        validate_new_spot(draft=draft, created_by=created_by)

        row = draft.to_row()
        row["slug"] = unique_slug(
            name=row["name"],
            city=row["city"],
            country=row["country"],
            exists=self.slug_exists,
        )
        row["created_by"] = created_by

        spot = self._insert_spot(row)
        logger.info(f"[STORE] Created {spot!r} by {created_by}")
        return spot

    def add_image(self, spot_id: str, image_url: str) -> PrayerSpotImage:
        """Attach an image by URL. The first image of a spot becomes primary."""
        if not image_url.strip():
            raise ValidationError("Image URL must not be empty")
        is_first = len(self.list_images(spot_id)) == 0
        image = self._insert_image(
            {"prayer_spot_id": spot_id, "image_url": image_url.strip(), "is_primary": is_first}
        )
        logger.info(f"[STORE] Added image to spot {spot_id} (primary={is_first})")
        return image


def validate_new_spot(draft: SpotDraft, created_by: Optional[str]) -> None:
    """Server-side guard for create(). Raises ValidationError."""
    if not draft.name.strip():
        raise ValidationError("Name is required")
    if draft.latitude is None or draft.longitude is None:
        raise ValidationError("Coordinates are required")
    if not draft.has_location:
        raise ValidationError("Coordinates (0, 0) are treated as unset")
    if not created_by:
        raise ValidationError("created_by must be the current actor")


class RestSpotStore(BaseSpotStore):
    """Record store over the hosted PostgREST interface.

    Example:
        store = RestSpotStore()
        store.use_identity(identity)  # enables row-level-security writes
        spots = store.list_spots()
    """

    def __init__(
        self,
        base_url: str = BackendConfig.URL,
        api_key: str = BackendConfig.ANON_KEY,
        session: Optional[requests.Session] = None,
        timeout: float = BackendConfig.REQUEST_TIMEOUT_S,
    ) -> None:
        """Initialize store client.

        Args:
            base_url: Project URL, e.g. "https://abc.supabase.co"
            api_key: Public anon key sent as ``apikey``
            session: HTTP session (injectable for tests)
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()
        self._access_token: Optional[str] = None

    def use_identity(self, identity: Optional[Identity]) -> None:
        """Send the actor's bearer token on subsequent requests (None = anonymous)."""
        self._access_token = identity.access_token if identity else None

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _headers(self, prefer: Optional[str] = None) -> dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self._access_token or self.api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> Any:
        """Issue one PostgREST request and decode the JSON body.

        Raises:
            StoreError: On connection failure or HTTP status >= 400.
        """
        url = f"{self.base_url}{BackendConfig.REST_PATH}/{table}"
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(prefer=prefer),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"[STORE] {method} {table} failed: {e}")
            raise StoreError(f"{method} {table} failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"[STORE] {method} {table} returned {response.status_code}: {response.text}")
            raise StoreError(
                f"{method} {table} returned {response.status_code}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        return response.json()

    # =========================================================================
    # SPOTS
    # =========================================================================

    def list_spots(self) -> list[PrayerSpot]:
        rows = self._request(
            "GET",
            BackendConfig.SPOTS_TABLE,
            params={"select": "*", "order": "created_at.desc"},
        )
        spots = [PrayerSpot.from_dict(row) for row in rows or []]
        logger.info(f"[STORE] Listed {len(spots)} prayer spots")
        return spots

    def get_by_slug(self, slug: str) -> Optional[PrayerSpot]:
        rows = self._request(
            "GET",
            BackendConfig.SPOTS_TABLE,
            params={"select": "*", "slug": f"eq.{slug}", "limit": "1"},
        )
        if not rows:
            return None
        return PrayerSpot.from_dict(rows[0])

    def soft_delete(self, spot_id: str) -> None:
        # deleted_at=is.null keeps the first deletion timestamp on repeated calls
        self._request(
            "PATCH",
            BackendConfig.SPOTS_TABLE,
            params={"id": f"eq.{spot_id}", "deleted_at": "is.null"},
            json={"deleted_at": utc_now().isoformat()},
            prefer="return=minimal",
        )
        logger.info(f"[STORE] Soft-deleted spot {spot_id}")

    def restore(self, spot_id: str) -> None:
        self._request(
            "PATCH",
            BackendConfig.SPOTS_TABLE,
            params={"id": f"eq.{spot_id}"},
            json={"deleted_at": None},
            prefer="return=minimal",
        )
        logger.info(f"[STORE] Restored spot {spot_id}")

    def _insert_spot(self, row: dict[str, Any]) -> PrayerSpot:
        rows = self._request(
            "POST",
            BackendConfig.SPOTS_TABLE,
            json=[row],
            prefer="return=representation",
        )
        if not rows:
            raise StoreError("Insert returned no row")
        return PrayerSpot.from_dict(rows[0])

    # =========================================================================
    # PROFILES & IMAGES
    # =========================================================================

    def get_profile(self, user_id: str) -> Optional[Profile]:
        rows = self._request(
            "GET",
            BackendConfig.PROFILES_TABLE,
            params={"select": "*", "id": f"eq.{user_id}", "limit": "1"},
        )
        if not rows:
            return None
        return Profile.from_dict(rows[0])

    def list_images(self, spot_id: str) -> list[PrayerSpotImage]:
        rows = self._request(
            "GET",
            BackendConfig.IMAGES_TABLE,
            params={
                "select": "*",
                "prayer_spot_id": f"eq.{spot_id}",
                "order": "is_primary.desc,created_at.asc",
            },
        )
        return [PrayerSpotImage.from_dict(row) for row in rows or []]

    def _insert_image(self, row: dict[str, Any]) -> PrayerSpotImage:
        rows = self._request(
            "POST",
            BackendConfig.IMAGES_TABLE,
            json=[row],
            prefer="return=representation",
        )
        if not rows:
            raise StoreError("Insert returned no row")
        return PrayerSpotImage.from_dict(rows[0])
