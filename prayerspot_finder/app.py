"""Prayer Spot Finder - Share places to pray on a map.

Browse shared prayer spots on a map, search them, add new ones by address,
and let creators and admins soft-delete or restore them.

Run: streamlit run prayerspot_finder/app.py
"""

import logging
import traceback
from collections.abc import Callable

import streamlit as st
import streamlit.components.v1 as components

from prayerspot_finder.constants import AppConfig, GeocodingConfig, MapConfig, RouteConfig
from prayerspot_finder.core import AuthService, BaseSpotStore, Geocoder, RestSpotStore, create_geocoder
from prayerspot_finder.model import PrayerSpot, SpotDraft
from prayerspot_finder.model.message import (
    LoadingSpotsMessage,
    SpotNotFoundMessage,
    SpotsLoadErrorMessage,
    ToastMessage,
)
from prayerspot_finder.ui import (
    AuthGate,
    ClickDetector,
    FoliumMarkerBackend,
    MapContext,
    MapViewModel,
    MarkerCallbacks,
    MarkerRenderer,
    PydeckMarkerBackend,
    Route,
    RouteKind,
    SidebarRenderer,
    delete_spot,
    parse_route,
    refresh_spots,
    restore_spot,
    sign_out,
)
from prayerspot_finder.ui.auth_page import render_auth_page
from prayerspot_finder.ui.detail_page import render_detail_page
from prayerspot_finder.ui.geolocation import apply_user_position, locate_user
from prayerspot_finder.ui.infra import bump_map_version, current_path, navigate, trigger_rerun
from prayerspot_finder.ui.pydeck_click_handler import render_pydeck_map
from prayerspot_finder.ui.right_panel import render_spot_panel
from prayerspot_finder.ui.spot_form import render_spot_form

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# SESSION STATE
# =============================================================================


def _gate() -> AuthGate:
    return AuthGate(session_state=st.session_state, navigate=navigate)


def _run_manage_action(action: Callable[..., ToastMessage], spot: PrayerSpot) -> None:
    """Delete/restore from a marker, guarded by sign-in."""
    gate = _gate()
    store: BaseSpotStore = st.session_state.store
    vm: MapViewModel = st.session_state.view_model
    toast = gate.guard(lambda user: action(spot=spot, store=store, vm=vm, actor=user, profile=gate.profile))
    if toast is not None:
        toast.display()
        bump_map_version()
        trigger_rerun()


def _create_marker_renderer() -> MarkerRenderer:
    backend = PydeckMarkerBackend() if MapConfig.PROVIDER == "pydeck" else FoliumMarkerBackend()
    callbacks = MarkerCallbacks(
        view_details=lambda spot: navigate(spot.url_path),
        delete=lambda spot: _run_manage_action(delete_spot, spot),
        restore=lambda spot: _run_manage_action(restore_spot, spot),
    )
    return MarkerRenderer(backend=backend, callbacks=callbacks)


def _create_view_model() -> None:
    vm, ctx = MapViewModel.create()
    st.session_state.view_model = vm
    st.session_state.context = ctx


def init_session_state() -> None:
    """Initialize session state with service clients and UI components."""
    if "store" not in st.session_state:
        st.session_state.store = RestSpotStore()

    if "auth_service" not in st.session_state:
        st.session_state.auth_service = AuthService()

    if "geocoder" not in st.session_state:
        st.session_state.geocoder = create_geocoder(GeocodingConfig.PROVIDER)

    if "view_model" not in st.session_state:
        _create_view_model()

    if "marker_renderer" not in st.session_state:
        st.session_state.marker_renderer = _create_marker_renderer()

    if "draft" not in st.session_state:
        st.session_state.draft = SpotDraft()

    if "map_version" not in st.session_state:
        st.session_state.map_version = 0


def reset_ui_state() -> None:
    """Reset UI state to initial while preserving the session.

    Called when an error occurs to recover gracefully. Resets:
    - View-model and context (records are fetched again, click history dropped)
    - Placed markers
    - Map version (to clear any stale map state)

    Preserves:
    - Signed-in identity and profile
    - Spot Form draft
    - Service clients
    """
    logger.info("Resetting UI state due to error recovery")

    _create_view_model()
    st.session_state.marker_renderer.reset()
    st.session_state.map_version = st.session_state.get("map_version", 0) + 1

    logger.info("UI state reset complete - identity and draft preserved")


# =============================================================================
# BROWSE PAGE
# =============================================================================


def _handle_sign_out() -> None:
    sign_out(auth=st.session_state.auth_service, gate=_gate(), store=st.session_state.store).display()
    bump_map_version()
    trigger_rerun()


def _render_map(vm: MapViewModel, ctx: MapContext, renderer: MarkerRenderer, map_version: int) -> None:
    backend = renderer.backend
    if isinstance(backend, PydeckMarkerBackend):
        deck = backend.render(center_lat=ctx.view.lat, center_lon=ctx.view.lon, zoom=ctx.view.zoom)
        result = render_pydeck_map(deck=deck, key=f"spot_map_{map_version}")
        ctx.click_dedup.track_map(map_version)
        click = ClickDetector(dedup=ctx.click_dedup).detect(
            clicked_object=result.clicked_object,
            clicked_coordinate=result.clicked_coordinate,
        )
        if click is not None and vm.select_spot(click.spot_id):
            trigger_rerun()
    else:
        components.html(
            backend.render_html(center_lat=ctx.view.lat, center_lon=ctx.view.lon, zoom=ctx.view.zoom),
            height=MapConfig.HEIGHT_PX,
        )


def render_browse_page() -> None:
    vm: MapViewModel = st.session_state.view_model
    ctx: MapContext = st.session_state.context
    store: BaseSpotStore = st.session_state.store
    renderer: MarkerRenderer = st.session_state.marker_renderer
    map_version = st.session_state.get("map_version", 0)
    gate = _gate()

    vm.mount(store=store)
    if apply_user_position(view=ctx.view, position=locate_user(st.session_state)):
        logger.info(f"[GEO] Map centered on browser position ({ctx.view.lat:.4f}, {ctx.view.lon:.4f})")
    logger.info(f"[RENDER] Browse page: state={vm.get_state_name()}, map_version={map_version}")

    SidebarRenderer(vm=vm, gate=gate, navigate=navigate, on_sign_out=_handle_sign_out).render()

    if vm.is_error:
        SpotsLoadErrorMessage(error=ctx.error or "unknown error", has_stale_data=vm.has_stale_data).display()
        if st.button("🔄 Retry"):
            refresh_spots(vm=vm, store=store)
            trigger_rerun()
    elif vm.is_loading:
        LoadingSpotsMessage().display()

    renderer.sync(
        spots=ctx.visible_spots,
        actor=gate.current_user,
        profile=gate.profile,
        selected_id=ctx.selected_spot_id,
    )

    col_map, col_panel = st.columns([3, 1])
    with col_map:
        _render_map(vm=vm, ctx=ctx, renderer=renderer, map_version=map_version)
    with col_panel:
        binding = renderer.binding(ctx.selected_spot_id) if ctx.selected_spot_id else None
        render_spot_panel(vm=vm, binding=binding, map_version=map_version)


# =============================================================================
# ROUTING
# =============================================================================


def render_route(route: Route) -> None:
    store: BaseSpotStore = st.session_state.store
    vm: MapViewModel = st.session_state.view_model
    gate = _gate()

    if route.kind == RouteKind.HOME:
        render_browse_page()
    elif route.kind == RouteKind.AUTH:
        render_auth_page(auth=st.session_state.auth_service, gate=gate, store=store, navigate=navigate)
    elif route.kind == RouteKind.ADD:
        geocoder: Geocoder = st.session_state.geocoder
        gate.guard(
            lambda user: render_spot_form(
                draft=st.session_state.draft,
                user=user,
                position=locate_user(st.session_state),
                store=store,
                geocoder=geocoder,
                vm=vm,
                navigate=navigate,
            )
        )
    elif route.kind == RouteKind.DETAIL and route.slug:
        render_detail_page(slug=route.slug, store=store, gate=gate, vm=vm, navigate=navigate)
    else:
        SpotNotFoundMessage(slug=current_path().lstrip("/")).display()
        if st.button("← Back to map"):
            navigate(RouteConfig.HOME)


def main() -> None:
    st.set_page_config(page_title=AppConfig.TITLE, page_icon=AppConfig.ICON, layout=AppConfig.LAYOUT)
    init_session_state()

    route = parse_route(current_path())
    logger.info(f"[RENDER] Route {route.kind.name} ({route.path})")
    try:
        render_route(route)
    except Exception as e:
        # Log full traceback for debugging
        error_msg = f"{type(e).__name__}: {e}"
        logger.error(f"[RENDER] Page error caught: {error_msg}\n{traceback.format_exc()}")

        st.error(f"⚠️ Something went wrong: {error_msg}")

        # Reset UI state while preserving identity and draft
        reset_ui_state()

        if st.button("🔄 Reset and Continue", type="primary"):
            navigate(RouteConfig.HOME)


if __name__ == "__main__":
    main()
