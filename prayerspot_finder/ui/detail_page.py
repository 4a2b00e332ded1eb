"""Detail page (/:country/:city/:slug).

Looks the spot up by slug. A missing slug is a normal outcome and renders a
not-found notice; soft-deleted spots render with a removed banner and, for
their creator or an admin, a Restore button.
"""

import logging
from collections.abc import Callable

import streamlit as st

from prayerspot_finder.constants import MapConfig, RouteConfig
from prayerspot_finder.core.errors import StoreError
from prayerspot_finder.core.spot_store import BaseSpotStore
from prayerspot_finder.model.message import (
    SpotNotFoundMessage,
    SpotRemovedBannerMessage,
    StoreErrorMessage,
    ToastMessage,
)
from prayerspot_finder.model.prayer_spot import Identity, PrayerSpot
from prayerspot_finder.ui.actions import delete_spot, restore_spot
from prayerspot_finder.ui.auth_gate import AuthGate, can_manage
from prayerspot_finder.ui.center_map import PydeckMarkerBackend
from prayerspot_finder.ui.infra import trigger_rerun
from prayerspot_finder.ui.marker_renderer import MarkerBinding
from prayerspot_finder.ui.state_machine import MapViewModel

logger = logging.getLogger(__name__)


def render_detail_page(
    slug: str,
    store: BaseSpotStore,
    gate: AuthGate,
    vm: MapViewModel,
    navigate: Callable[[str], None],
) -> None:
    if st.button("← Back to map"):
        navigate(RouteConfig.HOME)

    try:
        spot = store.get_by_slug(slug)
    except StoreError as e:
        logger.error(f"[STORE] Lookup of /{slug} failed: {e}")
        StoreErrorMessage(action="load this prayer spot").display()
        if st.button("Retry"):
            trigger_rerun()
        return

    if spot is None:
        SpotNotFoundMessage(slug=slug).display()
        return

    _render_spot(spot=spot, store=store)
    _render_manage_buttons(spot=spot, store=store, gate=gate, vm=vm)


def _render_spot(spot: PrayerSpot, store: BaseSpotStore) -> None:
    st.title(spot.name)
    if spot.is_deleted:
        SpotRemovedBannerMessage().display()

    col_info, col_map = st.columns([1, 1])
    with col_info:
        if spot.address:
            st.markdown(f"📍 {spot.address}")
        st.caption(f"{spot.city}, {spot.country}")
        if spot.description:
            st.markdown(spot.description)
        if spot.created_at:
            st.caption(f"Added {spot.created_at:%Y-%m-%d}")
    with col_map:
        backend = PydeckMarkerBackend()
        backend.place_marker(MarkerBinding(spot=spot, actions=()))
        st.pydeck_chart(
            backend.render(center_lat=spot.latitude, center_lon=spot.longitude, zoom=MapConfig.SPOT_ZOOM),
            height=MapConfig.HEIGHT_PX // 2,
        )

    try:
        images = store.list_images(spot.id)
    except StoreError as e:
        logger.error(f"[STORE] Images of {spot!r} not loaded: {e}")
        StoreErrorMessage(action="load images").display()
        return
    if images:
        st.image([img.image_url for img in images], width=240)


def _render_manage_buttons(spot: PrayerSpot, store: BaseSpotStore, gate: AuthGate, vm: MapViewModel) -> None:
    if not can_manage(actor=gate.current_user, profile=gate.profile, spot=spot):
        return

    label = "Restore" if spot.is_deleted else "Delete"
    if not st.button(label, type="secondary"):
        return

    def run(user: Identity) -> ToastMessage:
        action = restore_spot if spot.is_deleted else delete_spot
        return action(spot=spot, store=store, vm=vm, actor=user, profile=gate.profile)

    toast = gate.guard(run)
    if toast is not None:
        toast.display()
        trigger_rerun()
