"""Shared pytest fixtures for prayerspot_finder tests.

Provides fakes for every remote boundary so the logic layers run without
network access or a Streamlit runtime:
- FakeSession / FakeResponse: stand-ins for requests.Session and Response
- InMemorySpotStore: BaseSpotStore over a list, newest first
- Identities, profiles and spot factories with explicit values
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest
import requests

from prayerspot_finder.core.errors import StoreError
from prayerspot_finder.core.spot_store import BaseSpotStore
from prayerspot_finder.model.prayer_spot import Identity, PrayerSpot, PrayerSpotImage, Profile
from prayerspot_finder.model.spot_draft import SpotDraft
from prayerspot_finder.ui.state_machine import MapContext, MapViewModel

# Fixed clock: records created in tests are 1 minute apart starting here
BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# FAKE HTTP
# =============================================================================


class FakeResponse:
    """Minimal requests.Response replacement."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text or ("" if payload is None else str(payload))
        self.content = b"" if payload is None else b"json"

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeSession:
    """Records every call and replays queued responses (or raises queued errors).

    Each call pops the next item from ``responses``. An Exception instance is
    raised instead of returned.
    """

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def _next(self, **call: Any) -> FakeResponse:
        self.calls.append(call)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {call}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        return self._next(method=method, url=url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next(method="GET", url=url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next(method="POST", url=url, **kwargs)

    @property
    def last_call(self) -> dict[str, Any]:
        return self.calls[-1]


# =============================================================================
# IN-MEMORY STORE
# =============================================================================


class InMemorySpotStore(BaseSpotStore):
    """BaseSpotStore over plain lists.

    list_spots() returns every row (soft-deleted included), newest first.
    Set ``fail_next`` to make the next store call raise StoreError.
    """

    def __init__(self) -> None:
        self.rows: list[PrayerSpot] = []
        self.images: list[PrayerSpotImage] = []
        self.profiles: dict[str, Profile] = {}
        self.fail_next: Optional[str] = None
        self.list_calls = 0
        self.identity: Optional[Identity] = None
        self._clock = BASE_TIME

    def _maybe_fail(self) -> None:
        if self.fail_next is not None:
            message, self.fail_next = self.fail_next, None
            raise StoreError(message, status_code=503)

    def _tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    def _replace(self, spot_id: str, **changes: Any) -> None:
        for i, row in enumerate(self.rows):
            if row.id == spot_id:
                self.rows[i] = replace(row, **changes)

    def use_identity(self, identity: Optional[Identity]) -> None:
        self.identity = identity

    def list_spots(self) -> list[PrayerSpot]:
        self.list_calls += 1
        self._maybe_fail()
        return sorted(self.rows, key=lambda s: s.created_at, reverse=True)

    def get_by_slug(self, slug: str) -> Optional[PrayerSpot]:
        self._maybe_fail()
        return next((s for s in self.rows if s.slug == slug), None)

    def soft_delete(self, spot_id: str) -> None:
        self._maybe_fail()
        row = next(s for s in self.rows if s.id == spot_id)
        if row.deleted_at is None:
            self._replace(spot_id, deleted_at=self._tick())

    def restore(self, spot_id: str) -> None:
        self._maybe_fail()
        self._replace(spot_id, deleted_at=None)

    def get_profile(self, user_id: str) -> Optional[Profile]:
        self._maybe_fail()
        return self.profiles.get(user_id)

    def list_images(self, spot_id: str) -> list[PrayerSpotImage]:
        self._maybe_fail()
        mine = [img for img in self.images if img.prayer_spot_id == spot_id]
        return sorted(mine, key=lambda img: not img.is_primary)

    def _insert_spot(self, row: dict[str, Any]) -> PrayerSpot:
        self._maybe_fail()
        spot = PrayerSpot(id=f"spot-{len(self.rows) + 1}", created_at=self._tick(), **row)
        self.rows.append(spot)
        return spot

    def _insert_image(self, row: dict[str, Any]) -> PrayerSpotImage:
        self._maybe_fail()
        image = PrayerSpotImage(id=f"img-{len(self.images) + 1}", **row)
        self.images.append(image)
        return image


# =============================================================================
# FACTORIES
# =============================================================================


def make_spot(
    spot_id: str = "s1",
    name: str = "Quiet Room",
    created_by: str = "user-owner",
    deleted: bool = False,
    minutes: int = 0,
    **fields: Any,
) -> PrayerSpot:
    """Build a PrayerSpot with readable defaults (New York, USA)."""
    values: dict[str, Any] = {
        "latitude": 40.0,
        "longitude": -73.0,
        "slug": f"usa/nyc/{spot_id}",
        "address": "1 Main St",
        "description": None,
        "city": "NYC",
        "country": "USA",
    }
    values.update(fields)
    return PrayerSpot(
        id=spot_id,
        name=name,
        created_by=created_by,
        deleted_at=BASE_TIME if deleted else None,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        **values,
    )


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def owner() -> Identity:
    return Identity(id="user-owner", email="owner@example.org", access_token="tok-owner")


@pytest.fixture
def stranger() -> Identity:
    return Identity(id="user-stranger", email="stranger@example.org", access_token="tok-stranger")


@pytest.fixture
def admin() -> Identity:
    return Identity(id="user-admin", email="admin@example.org", access_token="tok-admin")


@pytest.fixture
def admin_profile() -> Profile:
    return Profile(id="user-admin", is_admin=True, full_name="Site Admin")


@pytest.fixture
def store() -> InMemorySpotStore:
    return InMemorySpotStore()


@pytest.fixture
def quiet_room_draft() -> SpotDraft:
    """Submittable draft: Quiet Room, 1 Main St, NYC/USA at (40.0, -73.0)."""
    return SpotDraft(
        name="Quiet Room",
        address="1 Main St",
        latitude=40.0,
        longitude=-73.0,
        city="NYC",
        country="USA",
        geocoded_query="1 Main St",
    )


@pytest.fixture
def view_model() -> tuple[MapViewModel, MapContext]:
    """View-model without UI listener."""
    return MapViewModel.create(add_ui_listener=False)
