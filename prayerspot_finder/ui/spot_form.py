"""Spot Form page (/add).

Collects name, address and description into the session's SpotDraft. The
address drives the geocoder once it passes the length gate; the submit
button stays disabled until name, address and a non-(0, 0) location are
present. A failed submit keeps every field.
"""

import logging
from collections.abc import Callable
from typing import Optional

import streamlit as st

from prayerspot_finder.constants import GeocodingConfig, RouteConfig
from prayerspot_finder.core.errors import StoreError, ValidationError
from prayerspot_finder.core.geocoder import Geocoder
from prayerspot_finder.core.spot_store import BaseSpotStore
from prayerspot_finder.model.message import LocationFoundMessage, SpotCreatedMessage, StoreErrorMessage
from prayerspot_finder.model.prayer_spot import Identity, PrayerSpot
from prayerspot_finder.model.spot_draft import SpotDraft
from prayerspot_finder.ui.actions import geocode_draft_address, submit_spot
from prayerspot_finder.ui.geolocation import Position, seed_draft_location
from prayerspot_finder.ui.infra import trigger_rerun
from prayerspot_finder.ui.state_machine import MapViewModel
from prayerspot_finder.ui.validators import validate_draft

logger = logging.getLogger(__name__)


def render_spot_form(
    draft: SpotDraft,
    user: Identity,
    store: BaseSpotStore,
    geocoder: Geocoder,
    vm: MapViewModel,
    navigate: Callable[[str], None],
    position: Optional[Position] = None,
) -> None:
    st.header("Add a Prayer Spot")
    if seed_draft_location(draft=draft, position=position):
        logger.info(f"[GEO] Draft seeded at browser position {position}")

    draft.name = st.text_input("Name *", value=draft.name, placeholder="e.g. Quiet Room")

    typed_address = st.text_input(
        "Address *",
        value=draft.address,
        placeholder="Street, city, country",
        help=f"Lookup starts after {GeocodingConfig.MIN_QUERY_CHARS} characters.",
    )
    draft.address = typed_address
    toast = geocode_draft_address(draft=draft, geocoder=geocoder)
    if toast is not None:
        toast.display()
    if draft.address != typed_address:
        # Geocoder replaced the text with its formatted address; show it
        trigger_rerun()

    draft.description = st.text_area("Description", value=draft.description)
    image_url = st.text_input("Image URL (optional)")

    if draft.has_location:
        LocationFoundMessage(
            city=draft.resolved_city,
            country=draft.resolved_country,
            lat=draft.latitude,
            lng=draft.longitude,
        ).display()
    for problem in validate_draft(draft):
        problem.display()

    col_submit, col_cancel = st.columns(2)
    with col_cancel:
        if st.button("Cancel", use_container_width=True):
            draft.clear()
            navigate(RouteConfig.HOME)
    with col_submit:
        if not st.button(
            "Add Prayer Spot",
            type="primary",
            disabled=not draft.is_submittable,
            use_container_width=True,
        ):
            return

    def on_created(spot: PrayerSpot) -> None:
        if image_url.strip():
            try:
                store.add_image(spot_id=spot.id, image_url=image_url)
            except (StoreError, ValidationError) as e:
                logger.error(f"[STORE] Image for {spot!r} not saved: {e}")
                StoreErrorMessage(action="save the image").display()
        SpotCreatedMessage(name=spot.name).display()
        vm.refresh(store=store)

    try:
        submit_spot(draft=draft, store=store, actor=user, on_created=on_created, navigate=navigate)
    except ValidationError as e:
        logger.warning(f"[STORE] Create rejected: {e}")
        st.error(str(e))
    except StoreError as e:
        logger.error(f"[STORE] Create failed: {e}")
        StoreErrorMessage(action="add prayer spot").display()
