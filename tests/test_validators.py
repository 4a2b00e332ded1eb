"""Tests for validators.py and SpotDraft gating.

Validators return Optional[Message] and never raise.
"""

import pytest

from prayerspot_finder.model.geocode_result import GeocodeResult
from prayerspot_finder.model.message import LocationUnresolvedMessage, MissingAddressMessage, MissingNameMessage
from prayerspot_finder.model.spot_draft import SpotDraft
from prayerspot_finder.ui.validators import (
    validate_draft,
    validate_draft_address,
    validate_draft_location,
    validate_draft_name,
)


class TestFieldValidators:
    def test_blank_name(self) -> None:
        assert validate_draft_name(SpotDraft(name="  ")) == MissingNameMessage()

    def test_name_present(self) -> None:
        assert validate_draft_name(SpotDraft(name="Quiet Room")) is None

    def test_blank_address(self) -> None:
        assert validate_draft_address(SpotDraft(address="")) == MissingAddressMessage()

    def test_location_not_reported_while_address_empty(self) -> None:
        assert validate_draft_location(SpotDraft()) is None

    def test_zero_coordinates_are_unresolved(self) -> None:
        draft = SpotDraft(address="1 Main St", latitude=0.0, longitude=0.0)
        assert validate_draft_location(draft) == LocationUnresolvedMessage(address="1 Main St")

    @pytest.mark.parametrize(("lat", "lon"), [(0.0, 10.0), (10.0, 0.0), (40.0, -73.0)])
    def test_single_zero_axis_is_a_real_location(self, lat: float, lon: float) -> None:
        draft = SpotDraft(address="1 Main St", latitude=lat, longitude=lon)
        assert validate_draft_location(draft) is None


class TestValidateDraft:
    def test_empty_draft_reports_in_form_order(self) -> None:
        assert validate_draft(SpotDraft()) == [MissingNameMessage(), MissingAddressMessage()]

    def test_submittable_draft_has_no_problems(self, quiet_room_draft: SpotDraft) -> None:
        assert validate_draft(quiet_room_draft) == []
        assert quiet_room_draft.is_submittable

    def test_unresolved_address_blocks_submit(self) -> None:
        draft = SpotDraft(name="Quiet Room", address="1 Main St")
        assert not draft.is_submittable
        assert validate_draft(draft) == [LocationUnresolvedMessage(address="1 Main St")]


class TestDraftGeocodingState:
    def test_short_address_is_not_looked_up(self) -> None:
        assert not SpotDraft(address="abc").needs_geocoding()

    def test_same_query_is_not_looked_up_twice(self) -> None:
        draft = SpotDraft(address="1 Main St")
        assert draft.needs_geocoding()
        draft.apply_geocode(query="1 Main St", result=None)
        assert not draft.needs_geocoding()

    def test_miss_clears_previous_location(self, quiet_room_draft: SpotDraft) -> None:
        quiet_room_draft.address = "Nowhere Lane"
        quiet_room_draft.apply_geocode(query="Nowhere Lane", result=None)
        assert not quiet_room_draft.has_location
        assert (quiet_room_draft.city, quiet_room_draft.country) == ("", "")

    def test_formatted_address_replaces_input(self) -> None:
        draft = SpotDraft(address="1 main st nyc")
        result = GeocodeResult(lat=40.0, lng=-73.0, city="NYC", country="USA", formatted_address="1 Main St, NYC")
        draft.apply_geocode(query="1 main st nyc", result=result)

        assert draft.address == "1 Main St, NYC"
        assert not draft.needs_geocoding()
        assert draft.has_location

    def test_unresolved_region_becomes_unknown_in_row(self) -> None:
        draft = SpotDraft(name="Field", address="Somewhere", latitude=1.0, longitude=2.0)
        row = draft.to_row()
        assert (row["city"], row["country"]) == ("unknown", "unknown")
        assert row["description"] is None

    def test_seed_fills_empty_location_only(self, quiet_room_draft: SpotDraft) -> None:
        draft = SpotDraft()
        assert draft.seed_location(lat=51.5, lng=-0.12)
        assert (draft.latitude, draft.longitude) == (51.5, -0.12)
        assert not quiet_room_draft.seed_location(lat=51.5, lng=-0.12)
        assert quiet_room_draft.latitude == 40.0

    def test_seeded_location_survives_short_address(self) -> None:
        draft = SpotDraft(address="Rom")
        draft.seed_location(lat=51.5, lng=-0.12)
        assert not draft.drop_stale_location()
        assert draft.has_location

    def test_clear_resets_everything(self, quiet_room_draft: SpotDraft) -> None:
        quiet_room_draft.clear()
        assert quiet_room_draft == SpotDraft()
