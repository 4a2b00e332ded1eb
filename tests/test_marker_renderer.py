"""Tests for marker_renderer.py and the map backends.

A RecordingBackend captures every capability call so the diffing can be
asserted without any map library.
"""

from typing import Optional

import pydeck as pdk
import pytest

from conftest import make_spot
from prayerspot_finder.constants import StyleConfig
from prayerspot_finder.model.prayer_spot import Identity, PrayerSpot, Profile
from prayerspot_finder.ui.center_map import PydeckMarkerBackend
from prayerspot_finder.ui.folium_map import FoliumMarkerBackend, build_popup_html
from prayerspot_finder.ui.marker_renderer import (
    ActionKind,
    MarkerBackend,
    MarkerBinding,
    MarkerCallbacks,
    MarkerRenderer,
    build_actions,
)


class RecordingBackend(MarkerBackend):
    def __init__(self) -> None:
        self.placed: dict[str, MarkerBinding] = {}
        self.log: list[tuple[str, str]] = []

    def place_marker(self, binding: MarkerBinding) -> None:
        self.placed[binding.spot_id] = binding
        self.log.append(("place", binding.spot_id))

    def remove_marker(self, spot_id: str) -> None:
        self.placed.pop(spot_id, None)
        self.log.append(("remove", spot_id))

    def show_popup(self, spot_id: str) -> None:
        self.log.append(("popup", spot_id))

    def clear(self) -> None:
        self.placed.clear()
        self.log.append(("clear", ""))


class CallbackLog:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def callbacks(self) -> MarkerCallbacks:
        return MarkerCallbacks(
            view_details=lambda spot: self.calls.append(("view", spot.id)),
            delete=lambda spot: self.calls.append(("delete", spot.id)),
            restore=lambda spot: self.calls.append(("restore", spot.id)),
        )


@pytest.fixture
def callback_log() -> CallbackLog:
    return CallbackLog()


@pytest.fixture
def renderer(callback_log: CallbackLog) -> MarkerRenderer:
    return MarkerRenderer(backend=RecordingBackend(), callbacks=callback_log.callbacks())


def kinds(spot: PrayerSpot, actor: Optional[Identity], profile: Optional[Profile] = None) -> list[ActionKind]:
    noop = MarkerCallbacks(view_details=print, delete=print, restore=print)
    return [a.kind for a in build_actions(spot=spot, actor=actor, profile=profile, callbacks=noop)]


class TestActionAuthorization:
    def test_anonymous_sees_only_view_details(self) -> None:
        assert kinds(make_spot(), actor=None) == [ActionKind.VIEW_DETAILS]

    def test_creator_can_delete(self, owner: Identity) -> None:
        assert kinds(make_spot(created_by=owner.id), actor=owner) == [ActionKind.VIEW_DETAILS, ActionKind.DELETE]

    def test_other_user_cannot_delete(self, stranger: Identity) -> None:
        assert kinds(make_spot(created_by="user-owner"), actor=stranger) == [ActionKind.VIEW_DETAILS]

    def test_admin_can_delete_any(self, admin: Identity, admin_profile: Profile) -> None:
        spot = make_spot(created_by="user-owner")
        assert ActionKind.DELETE in kinds(spot, actor=admin, profile=admin_profile)

    def test_admin_flag_on_someone_elses_profile_is_ignored(self, stranger: Identity, admin_profile: Profile) -> None:
        """The admin profile must belong to the acting user."""
        assert kinds(make_spot(), actor=stranger, profile=admin_profile) == [ActionKind.VIEW_DETAILS]

    def test_deleted_spot_offers_restore(self, owner: Identity) -> None:
        assert kinds(make_spot(deleted=True), actor=owner) == [ActionKind.VIEW_DETAILS, ActionKind.RESTORE]


class TestSync:
    def test_places_one_marker_per_visible_spot(self, renderer: MarkerRenderer) -> None:
        spots = [make_spot("a"), make_spot("b")]
        bindings = renderer.sync(spots=spots, actor=None, profile=None)

        assert [b.spot_id for b in bindings] == ["a", "b"]
        assert set(renderer.backend.placed) == {"a", "b"}

    def test_spot_leaving_the_set_is_removed(self, renderer: MarkerRenderer) -> None:
        renderer.sync(spots=[make_spot("a"), make_spot("b")], actor=None, profile=None)
        renderer.backend.log.clear()

        renderer.sync(spots=[make_spot("a")], actor=None, profile=None)

        assert renderer.backend.log == [("remove", "b")]
        assert set(renderer.backend.placed) == {"a"}
        assert renderer.binding("b") is None

    def test_unchanged_spots_are_not_replaced(self, renderer: MarkerRenderer) -> None:
        spots = [make_spot("a")]
        renderer.sync(spots=spots, actor=None, profile=None)
        renderer.backend.log.clear()

        renderer.sync(spots=spots, actor=None, profile=None)

        assert renderer.backend.log == []

    def test_changed_spot_is_replaced(self, renderer: MarkerRenderer) -> None:
        renderer.sync(spots=[make_spot("a")], actor=None, profile=None)
        renderer.backend.log.clear()

        renderer.sync(spots=[make_spot("a", deleted=True)], actor=None, profile=None)

        assert renderer.backend.log == [("remove", "a"), ("place", "a")]
        assert renderer.backend.placed["a"].spot.is_deleted

    def test_sign_in_replaces_marker_with_new_actions(self, renderer: MarkerRenderer, owner: Identity) -> None:
        renderer.sync(spots=[make_spot("a")], actor=None, profile=None)
        renderer.sync(spots=[make_spot("a")], actor=owner, profile=None)

        assert renderer.binding("a").action(ActionKind.DELETE) is not None

    def test_selected_spot_gets_popup(self, renderer: MarkerRenderer) -> None:
        renderer.sync(spots=[make_spot("a"), make_spot("b")], actor=None, profile=None, selected_id="b")
        assert ("popup", "b") in renderer.backend.log
        assert renderer.binding("b").selected

    def test_reset_clears_backend(self, renderer: MarkerRenderer) -> None:
        renderer.sync(spots=[make_spot("a")], actor=None, profile=None)
        renderer.reset()
        assert renderer.binding("a") is None
        assert renderer.backend.placed == {}

    def test_sync_after_reset_places_again(self, renderer: MarkerRenderer) -> None:
        renderer.sync(spots=[make_spot("a")], actor=None, profile=None)
        renderer.reset()
        renderer.sync(spots=[make_spot("a")], actor=None, profile=None)
        assert list(renderer.backend.placed) == ["a"]


class TestActionClosures:
    def test_each_marker_calls_its_own_spot(
        self, renderer: MarkerRenderer, callback_log: CallbackLog, owner: Identity
    ) -> None:
        renderer.sync(spots=[make_spot("a"), make_spot("b")], actor=owner, profile=None)

        renderer.binding("b").action(ActionKind.DELETE)()
        renderer.binding("a").action(ActionKind.VIEW_DETAILS)()

        assert callback_log.calls == [("delete", "b"), ("view", "a")]

    def test_action_labels(self, renderer: MarkerRenderer, owner: Identity) -> None:
        (binding,) = renderer.sync(spots=[make_spot("a", deleted=True)], actor=owner, profile=None)
        assert [a.label for a in binding.actions] == ["View Details", "Restore"]


class TestPydeckBackend:
    def test_rows_escape_user_text(self) -> None:
        backend = PydeckMarkerBackend()
        spot = make_spot("a", name="<script>x</script>", description="a & b")
        backend.place_marker(MarkerBinding(spot=spot, actions=()))

        (row,) = backend.marker_rows()
        assert row["name"] == "&lt;script&gt;x&lt;/script&gt;"
        assert row["description"] == "a &amp; b"
        assert row["address"] == "1 Main St"
        assert (row["lon"], row["lat"]) == (-73.0, 40.0)

    def test_row_colors(self) -> None:
        backend = PydeckMarkerBackend()
        backend.place_marker(MarkerBinding(spot=make_spot("a"), actions=()))
        backend.place_marker(MarkerBinding(spot=make_spot("b", deleted=True), actions=()))
        backend.place_marker(MarkerBinding(spot=make_spot("c"), actions=()))
        backend.show_popup("c")

        colors = {row["id"]: row["color"] for row in backend.marker_rows()}
        assert colors == {
            "a": StyleConfig.ACTIVE_COLOR,
            "b": StyleConfig.DELETED_COLOR,
            "c": StyleConfig.SELECTED_COLOR,
        }

    def test_removing_popup_marker_clears_popup(self) -> None:
        backend = PydeckMarkerBackend()
        backend.place_marker(MarkerBinding(spot=make_spot("a"), actions=()))
        backend.show_popup("a")
        backend.remove_marker("a")
        assert backend.popup_spot_id is None
        assert backend.marker_ids == []

    def test_render_builds_pickable_layer(self) -> None:
        backend = PydeckMarkerBackend()
        backend.place_marker(MarkerBinding(spot=make_spot("a"), actions=()))
        deck = backend.render(center_lat=40.0, center_lon=-73.0, zoom=12)

        assert isinstance(deck, pdk.Deck)
        (layer,) = deck.layers
        assert layer.id == "prayer-spots"


class TestFoliumBackend:
    def test_popup_escapes_and_links_to_detail_route(self) -> None:
        spot = make_spot("a", name="<b>Room</b>", slug="usa/nyc/room")
        popup = build_popup_html(MarkerBinding(spot=spot, actions=()))

        assert "&lt;b&gt;Room&lt;/b&gt;" in popup
        assert "<b><b>" not in popup
        assert 'href="?path=/usa/nyc/room"' in popup
        assert "View Details" in popup

    def test_deleted_spot_popup_is_marked(self) -> None:
        popup = build_popup_html(MarkerBinding(spot=make_spot("a", deleted=True), actions=()))
        assert "<i>Removed</i>" in popup

    def test_markers_follow_renderer(self, callback_log: CallbackLog) -> None:
        backend = FoliumMarkerBackend()
        renderer = MarkerRenderer(backend=backend, callbacks=callback_log.callbacks())
        renderer.sync(spots=[make_spot("a"), make_spot("b")], actor=None, profile=None)
        renderer.sync(spots=[make_spot("b")], actor=None, profile=None)
        assert backend.marker_ids == ["b"]
