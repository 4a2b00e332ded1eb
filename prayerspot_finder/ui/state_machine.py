"""Map view-model for the prayer spot browser.

Uses python-statemachine for the fetch lifecycle with:
- Clear state definitions
- Explicit event-driven transitions
- Before-hooks that write fetched data into the shared context

Architecture Overview
---------------------
The view-model keeps a transient copy of the remote prayer spot list and
derives the visible marker set from it:

1. Page mount -> refresh(store) -> Loading -> Ready(records) / Error(message)
2. Search text change -> set_filter(term): no transition, no network call
3. Successful create/delete/restore -> refresh(store) again (full re-list)

visible_spots = filter_spots(records, filter_term) is recomputed on every
access, so a record leaving the set can never leave a stale marker behind.

States:
    LOADING: Initial state, re-entered whenever a re-list starts
    READY: Records fetched; filter applies to them
    ERROR: Last list() failed. Records of an earlier successful load are
           kept (stale-but-present) and refresh() can be retried

Transitions:
    LOADING/READY/ERROR -> LOADING: start_loading
    LOADING/READY/ERROR -> READY: finish_loading (records applied)
    LOADING/READY/ERROR -> ERROR: fail_loading (message stored)

Overlapping fetches
-------------------
Every refresh is issued a monotonically increasing token. A completion (or
failure) is applied only if its token is newer than the last applied one, so
an older list() that resolves late never overwrites a newer result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from statemachine import State, StateMachine

from prayerspot_finder.constants import MapConfig
from prayerspot_finder.core.errors import StoreError
from prayerspot_finder.core.spot_search import filter_spots

if TYPE_CHECKING:
    from prayerspot_finder.core.spot_store import BaseSpotStore
    from prayerspot_finder.model.prayer_spot import PrayerSpot

logger = logging.getLogger(__name__)


@dataclass
class FetchContext:
    """Refresh token bookkeeping."""

    issued: int = 0  # Last token handed out
    applied: int = 0  # Last token whose outcome was applied

    def issue(self) -> int:
        self.issued += 1
        return self.issued

    def is_stale(self, token: int) -> bool:
        """True if a newer (or the same) fetch outcome was already applied."""
        return token <= self.applied


@dataclass
class ViewContext:
    """Map camera state."""

    lat: float = MapConfig.START_CENTER_LAT
    lon: float = MapConfig.START_CENTER_LON
    zoom: int = MapConfig.DEFAULT_ZOOM
    located: bool = False  # Centered on the browser position already

    def set_center(self, lon: float, lat: float, zoom: int | None = None) -> None:
        self.lon = lon
        self.lat = lat
        if zoom is not None:
            self.zoom = zoom


@dataclass
class ClickDeduplicationContext:
    """Remembers the last processed click.

    The map component returns its last click value on every rerun, so the
    same click must not be processed twice.
    """

    last_click_id: str | None = None
    map_version: int = 0  # Map component instance the last click came from

    def is_new_click(self, click_id: str) -> bool:
        if click_id == self.last_click_id:
            return False
        self.last_click_id = click_id
        return True

    def clear(self) -> None:
        self.last_click_id = None

    def track_map(self, version: int) -> None:
        """Forget the last click when a fresh map component is mounted."""
        if version != self.map_version:
            self.map_version = version
            self.clear()


@dataclass
class MapContext:
    """Shared context/model for the map view-model.

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model.
    """

    # State managed by python-statemachine (model pattern)
    state: str | None = None

    records: list[PrayerSpot] = field(default_factory=list)
    filter_term: str = ""
    error: str | None = None
    loaded_once: bool = False
    selected_spot_id: str | None = None

    fetch: FetchContext = field(default_factory=FetchContext)
    view: ViewContext = field(default_factory=ViewContext)
    click_dedup: ClickDeduplicationContext = field(default_factory=ClickDeduplicationContext)

    @property
    def visible_spots(self) -> list[PrayerSpot]:
        """Records matching the current filter, in store order (newest first)."""
        return filter_spots(spots=self.records, term=self.filter_term)

    @property
    def selected_spot(self) -> PrayerSpot | None:
        if self.selected_spot_id is None:
            return None
        return next((s for s in self.visible_spots if s.id == self.selected_spot_id), None)

    def prune_selection(self) -> None:
        """Drop the selection if the selected spot is no longer visible."""
        if self.selected_spot_id is not None and self.selected_spot is None:
            logger.info(f"[MAP] Selected spot {self.selected_spot_id} left the visible set")
            self.selected_spot_id = None

    def __repr__(self) -> str:
        return (
            f"MapContext(state={self.state}, records={len(self.records)}, "
            f"filter={self.filter_term!r}, selected={self.selected_spot_id}, "
            f"tokens={self.fetch.applied}/{self.fetch.issued})"
        )


class TransitionLogListener:
    """Logs every view-model transition.

    Reruns are issued by the action layer after mutations, never from here:
    refreshes run inside a render pass, and a rerun there would abort the
    fetch.
    """

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.info(f"[STATE] {source.name} --({event})--> {target.name}")


class MapViewModel(StateMachine):
    """State machine owning the fetched prayer spot list and search filter.

    States:
        loading: Fetch in progress (initial)
        ready: Records available
        error: Last fetch failed (earlier records preserved)
    """

    # ==========================================================================
    # State Definitions
    # ==========================================================================

    loading = State("Loading", initial=True)
    ready = State("Ready")
    error = State("Error")

    # ==========================================================================
    # Transitions
    # ==========================================================================

    start_loading = loading.to.itself() | ready.to(loading) | error.to(loading)
    finish_loading = loading.to(ready) | ready.to.itself() | error.to(ready)
    fail_loading = loading.to(error) | ready.to(error) | error.to.itself()

    # ==========================================================================
    # State Check Properties
    # ==========================================================================

    @property
    def is_loading(self) -> bool:
        return self.loading.is_active

    @property
    def is_ready(self) -> bool:
        return self.ready.is_active

    @property
    def is_error(self) -> bool:
        return self.error.is_active

    @property
    def has_stale_data(self) -> bool:
        """Error state that still shows an earlier successful list."""
        return self.is_error and self.context.loaded_once

    # ==========================================================================
    # Transition Actions (before_* hooks)
    # ==========================================================================

    def before_finish_loading(self, records: list[PrayerSpot]) -> None:
        self.context.records = list(records)
        self.context.error = None
        self.context.loaded_once = True

    def before_fail_loading(self, message: str) -> None:
        # Records are kept: stale-but-present beats a blank map
        self.context.error = message

    # ==========================================================================
    # Initialization
    # ==========================================================================

    def __init__(self, context: MapContext | None = None, start_value: str | None = None) -> None:
        """Initialize view-model with model pattern.

        Args:
            context: Shared context/model (creates new if None)
            start_value: Optional initial state value (for restoring state)
        """
        model = context or MapContext()
        super().__init__(model=model, start_value=start_value)

    @property
    def context(self) -> MapContext:
        """Alias for model."""
        return self.model

    # ==========================================================================
    # Fetch Lifecycle
    # ==========================================================================

    def begin_refresh(self) -> int:
        """Enter Loading and return the token for this fetch."""
        token = self.context.fetch.issue()
        self.start_loading()
        return token

    def complete_refresh(self, token: int, records: Iterable[PrayerSpot]) -> bool:
        """Apply a fetch result. Returns False if the result was stale and dropped."""
        if self.context.fetch.is_stale(token):
            logger.info(f"[MAP] Dropping stale list result #{token} (applied #{self.context.fetch.applied})")
            return False
        self.context.fetch.applied = token
        self.finish_loading(records=list(records))
        self.context.prune_selection()
        return True

    def fail_refresh(self, token: int, message: str) -> bool:
        """Apply a fetch failure. Returns False if a newer outcome already applied."""
        if self.context.fetch.is_stale(token):
            logger.info(f"[MAP] Ignoring stale list failure #{token}: {message}")
            return False
        self.context.fetch.applied = token
        self.fail_loading(message=message)
        return True

    def refresh(self, store: BaseSpotStore) -> bool:
        """Re-list all records from the store synchronously.

        Returns:
            True if fresh records were applied, False on failure or stale result.
        """
        token = self.begin_refresh()
        try:
            records = store.list_spots()
        except StoreError as e:
            logger.error(f"[MAP] list() failed for fetch #{token}: {e}")
            self.fail_refresh(token=token, message=str(e))
            return False
        return self.complete_refresh(token=token, records=records)

    def mount(self, store: BaseSpotStore) -> None:
        """Initial load. Does nothing once a fetch has been issued."""
        if self.context.fetch.issued == 0:
            self.refresh(store=store)

    # ==========================================================================
    # Filter & Selection (no transitions)
    # ==========================================================================

    def set_filter(self, term: str) -> None:
        """Change the search term; visible spots are recomputed from records."""
        if term == self.context.filter_term:
            return
        self.context.filter_term = term
        self.context.prune_selection()
        logger.info(f"[MAP] Filter {term!r}: {len(self.context.visible_spots)}/{len(self.context.records)} visible")

    def select_spot(self, spot_id: str) -> bool:
        """Select a visible spot (opens its detail surface)."""
        spot = next((s for s in self.context.visible_spots if s.id == spot_id), None)
        if spot is None:
            logger.warning(f"[MAP] Cannot select spot {spot_id}: not visible")
            return False
        self.context.selected_spot_id = spot_id
        self.context.view.set_center(lon=spot.longitude, lat=spot.latitude)
        return True

    def clear_selection(self) -> None:
        self.context.selected_spot_id = None

    # ==========================================================================
    # Utility Methods
    # ==========================================================================

    def get_state_name(self) -> str:
        return self.current_state.name

    def __repr__(self) -> str:
        return f"MapViewModel(state={self.get_state_name()}, model={self.context!r})"

    @staticmethod
    def create(add_ui_listener: bool = True, **kwargs: Any) -> tuple["MapViewModel", MapContext]:
        """Factory method to create view-model with context and optional listener.

        Args:
            add_ui_listener: If True, adds TransitionLogListener.
                             Set to False for testing.

        Returns:
            Tuple of (MapViewModel, MapContext)
        """
        context = MapContext(**kwargs)
        vm = MapViewModel(context=context)
        if add_ui_listener:
            vm.add_listener(TransitionLogListener())
            logger.info("Created MapViewModel with TransitionLogListener")
        return vm, context
