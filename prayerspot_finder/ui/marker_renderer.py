"""Marker Renderer - keeps map markers in step with the visible spots.

One renderer drives any map provider through the MarkerBackend capability
set {place_marker, remove_marker, show_popup, clear}. Provider bindings live
in center_map.py (pydeck) and folium_map.py (Leaflet via folium).

Every binding carries its actions as closures over the spot, so a click on
"Delete" in a popup calls exactly that spot's handler. There is no global
handler registry keyed by generated HTML.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from prayerspot_finder.model.prayer_spot import Identity, PrayerSpot, Profile
from prayerspot_finder.ui.auth_gate import can_manage

logger = logging.getLogger(__name__)


class ActionKind(Enum):
    VIEW_DETAILS = "View Details"
    DELETE = "Delete"
    RESTORE = "Restore"


@dataclass(frozen=True)
class MarkerAction:
    """A button on a marker's detail surface."""

    kind: ActionKind
    callback: Callable[[], None]

    @property
    def label(self) -> str:
        return self.kind.value

    def __call__(self) -> None:
        self.callback()


@dataclass(frozen=True)
class MarkerBinding:
    """One spot bound to one marker, with the actions its popup exposes."""

    spot: PrayerSpot
    actions: tuple[MarkerAction, ...]
    selected: bool = False

    @property
    def spot_id(self) -> str:
        return self.spot.id

    @property
    def fingerprint(self) -> tuple:
        """Everything that affects how the marker looks or what it offers."""
        return (self.spot, self.selected, tuple(a.kind for a in self.actions))

    def action(self, kind: ActionKind) -> Optional[MarkerAction]:
        return next((a for a in self.actions if a.kind == kind), None)


@dataclass(frozen=True)
class MarkerCallbacks:
    """Handlers the renderer binds into each marker's actions."""

    view_details: Callable[[PrayerSpot], None]
    delete: Callable[[PrayerSpot], None]
    restore: Callable[[PrayerSpot], None]


class MarkerBackend(ABC):
    """Capability set a map provider must offer."""

    @abstractmethod
    def place_marker(self, binding: MarkerBinding) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_marker(self, spot_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def show_popup(self, spot_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError


def _bind(handler: Callable[[PrayerSpot], None], spot: PrayerSpot) -> Callable[[], None]:
    def run() -> None:
        handler(spot)

    return run


def build_actions(
    spot: PrayerSpot,
    actor: Optional[Identity],
    profile: Optional[Profile],
    callbacks: MarkerCallbacks,
) -> tuple[MarkerAction, ...]:
    """View Details always; Delete or Restore only for the creator or an admin."""
    actions = [MarkerAction(kind=ActionKind.VIEW_DETAILS, callback=_bind(callbacks.view_details, spot))]
    if can_manage(actor=actor, profile=profile, spot=spot):
        if spot.is_deleted:
            actions.append(MarkerAction(kind=ActionKind.RESTORE, callback=_bind(callbacks.restore, spot)))
        else:
            actions.append(MarkerAction(kind=ActionKind.DELETE, callback=_bind(callbacks.delete, spot)))
    return tuple(actions)


class MarkerRenderer:
    """Diffs the visible spots against the placed markers.

    Example:
        renderer = MarkerRenderer(backend=PydeckMarkerBackend(), callbacks=callbacks)
        renderer.sync(spots=ctx.visible_spots, actor=user, profile=profile)
    """

    def __init__(self, backend: MarkerBackend, callbacks: MarkerCallbacks) -> None:
        self.backend = backend
        self.callbacks = callbacks
        self._placed: dict[str, MarkerBinding] = {}

    def binding(self, spot_id: str) -> Optional[MarkerBinding]:
        return self._placed.get(spot_id)

    def sync(
        self,
        spots: Iterable[PrayerSpot],
        actor: Optional[Identity],
        profile: Optional[Profile],
        selected_id: Optional[str] = None,
    ) -> list[MarkerBinding]:
        """Make the placed markers exactly match ``spots``.

        Markers whose spot left the set, or whose spot, selection or actions
        changed, are removed; missing ones are placed.

        Returns:
            Bindings in the order of ``spots``.
        """
        wanted: dict[str, MarkerBinding] = {}
        for spot in spots:
            wanted[spot.id] = MarkerBinding(
                spot=spot,
                actions=build_actions(spot=spot, actor=actor, profile=profile, callbacks=self.callbacks),
                selected=spot.id == selected_id,
            )

        removed = 0
        for spot_id, placed in list(self._placed.items()):
            target = wanted.get(spot_id)
            if target is None or target.fingerprint != placed.fingerprint:
                self.backend.remove_marker(spot_id)
                del self._placed[spot_id]
                removed += 1

        added = 0
        for spot_id, binding in wanted.items():
            if spot_id not in self._placed:
                self.backend.place_marker(binding)
                added += 1
            # Refresh closures so they see this run's handlers
            self._placed[spot_id] = binding

        if selected_id is not None and selected_id in self._placed:
            self.backend.show_popup(selected_id)

        if added or removed:
            logger.info(f"[MAP] Markers synced: +{added} -{removed} = {len(self._placed)}")
        return [self._placed[spot_id] for spot_id in wanted]

    def reset(self) -> None:
        """Drop every placed marker; the next sync places them again."""
        logger.info(f"[MAP] Markers reset: -{len(self._placed)}")
        self.backend.clear()
        self._placed.clear()
