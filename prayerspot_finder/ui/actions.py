"""UI Actions - every operation that calls a remote service.

Centralizes the functions that mutate records, resolve addresses or change
the signed-in identity. Each one:
- catches the service's PrayerSpotError subclass at the call site
- logs it
- returns a ToastMessage for the caller to display

No optimistic updates: after a confirmed create/delete/restore the whole
list is fetched again through the view-model.

This module handles:
- Record list refresh (refresh_spots)
- Soft delete / restore (delete_spot, restore_spot)
- Address geocoding for the Spot Form (geocode_draft_address)
- Spot Form submission (submit_spot)
- Sign-in / sign-up / sign-out (sign_in, sign_up, sign_out)
"""

import logging
from collections.abc import Callable
from typing import Optional

from prayerspot_finder.core.auth_service import AuthService
from prayerspot_finder.core.errors import AuthError, GeocodeError, StoreError, ValidationError
from prayerspot_finder.core.geocoder import Geocoder
from prayerspot_finder.core.spot_store import BaseSpotStore
from prayerspot_finder.model.message import (
    ConfirmEmailMessage,
    GeocodeFailedMessage,
    NotAllowedMessage,
    SignedInMessage,
    SignedOutMessage,
    SignInFailedMessage,
    SpotDeletedMessage,
    SpotRestoredMessage,
    StoreErrorMessage,
    ToastMessage,
)
from prayerspot_finder.model.prayer_spot import Identity, PrayerSpot, Profile
from prayerspot_finder.model.spot_draft import SpotDraft
from prayerspot_finder.ui.auth_gate import AuthGate, can_manage
from prayerspot_finder.ui.state_machine import MapViewModel
from prayerspot_finder.ui.validators import validate_draft

logger = logging.getLogger(__name__)


# =============================================================================
# RECORD LIST
# =============================================================================


def refresh_spots(vm: MapViewModel, store: BaseSpotStore) -> bool:
    """Full re-list. Failures land in the view-model's Error state."""
    return vm.refresh(store=store)


# =============================================================================
# SOFT DELETE / RESTORE
# =============================================================================


def delete_spot(
    spot: PrayerSpot,
    store: BaseSpotStore,
    vm: MapViewModel,
    actor: Optional[Identity],
    profile: Optional[Profile],
) -> ToastMessage:
    """Soft-delete a spot the actor may manage, then re-list."""
    if not can_manage(actor=actor, profile=profile, spot=spot):
        logger.warning(f"[STORE] Delete of {spot!r} refused for actor {actor!r}")
        return NotAllowedMessage(action="delete")
    try:
        store.soft_delete(spot.id)
    except StoreError as e:
        logger.error(f"[STORE] Delete of {spot!r} failed: {e}")
        return StoreErrorMessage(action="delete prayer spot")
    vm.refresh(store=store)
    return SpotDeletedMessage(name=spot.name)


def restore_spot(
    spot: PrayerSpot,
    store: BaseSpotStore,
    vm: MapViewModel,
    actor: Optional[Identity],
    profile: Optional[Profile],
) -> ToastMessage:
    """Clear a spot's deleted_at, then re-list."""
    if not can_manage(actor=actor, profile=profile, spot=spot):
        logger.warning(f"[STORE] Restore of {spot!r} refused for actor {actor!r}")
        return NotAllowedMessage(action="restore")
    try:
        store.restore(spot.id)
    except StoreError as e:
        logger.error(f"[STORE] Restore of {spot!r} failed: {e}")
        return StoreErrorMessage(action="restore prayer spot")
    vm.refresh(store=store)
    return SpotRestoredMessage(name=spot.name)


# =============================================================================
# SPOT FORM
# =============================================================================


def geocode_draft_address(draft: SpotDraft, geocoder: Geocoder) -> Optional[ToastMessage]:
    """Resolve the draft's address if it changed and passes the length gate.

    A provider failure clears the location and returns a toast; the same
    query is not retried until the address changes. An address edited below
    the length gate loses its earlier location without a lookup.
    """
    if not draft.needs_geocoding():
        if draft.drop_stale_location():
            logger.info(f"[GEOCODE] Address changed to {draft.address.strip()!r}, location cleared")
        return None
    query = draft.address.strip()
    try:
        result = geocoder.resolve(query)
    except GeocodeError as e:
        logger.error(f"[GEOCODE] Lookup of {query!r} failed: {e}")
        draft.apply_geocode(query=query, result=None)
        return GeocodeFailedMessage()
    draft.apply_geocode(query=query, result=result)
    if result is None:
        logger.info(f"[GEOCODE] No match for {query!r}")
    else:
        logger.info(f"[GEOCODE] {query!r} -> {result.city}, {result.country} ({result.lat:.5f}, {result.lng:.5f})")
    return None


def submit_spot(
    draft: SpotDraft,
    store: BaseSpotStore,
    actor: Identity,
    on_created: Callable[[PrayerSpot], None],
    navigate: Callable[[str], None],
) -> PrayerSpot:
    """Create the drafted spot, clear the form and go to its page.

    The draft is cleared only after the store confirmed the insert, so a
    failure leaves every field in place for a retry.

    Raises:
        ValidationError: Draft not submittable (also enforced by the store).
        StoreError: Insert failed.
    """
    problems = validate_draft(draft)
    if problems:
        raise ValidationError(problems[0].message)

    spot = store.create(draft=draft, created_by=actor.id)
    draft.clear()
    on_created(spot)
    navigate(spot.url_path)
    return spot


# =============================================================================
# AUTH
# =============================================================================


def sign_in(
    auth: AuthService,
    gate: AuthGate,
    store: BaseSpotStore,
    email: str,
    password: str,
) -> ToastMessage:
    """Password sign-in; loads the profile so admin rights are known."""
    try:
        identity = auth.sign_in(email=email, password=password)
    except AuthError as e:
        logger.error(f"[AUTH] Sign-in for {email} failed: {e}")
        return SignInFailedMessage(reason=str(e))

    store.use_identity(identity)
    gate.sign_in(identity=identity, profile=_load_profile(store=store, identity=identity))
    return SignedInMessage(email=identity.email)


def sign_up(
    auth: AuthService,
    gate: AuthGate,
    store: BaseSpotStore,
    email: str,
    password: str,
) -> ToastMessage:
    try:
        identity = auth.sign_up(email=email, password=password)
    except AuthError as e:
        logger.error(f"[AUTH] Sign-up for {email} failed: {e}")
        return SignInFailedMessage(reason=str(e))

    if identity is None:
        return ConfirmEmailMessage(email=email)
    store.use_identity(identity)
    gate.sign_in(identity=identity, profile=_load_profile(store=store, identity=identity))
    return SignedInMessage(email=identity.email)


def sign_out(auth: AuthService, gate: AuthGate, store: BaseSpotStore) -> ToastMessage:
    """Revoke the session. Local state is cleared even if revocation fails."""
    identity = gate.current_user
    if identity is not None:
        try:
            auth.sign_out(identity)
        except AuthError as e:
            logger.warning(f"[AUTH] Server-side sign-out failed, clearing locally: {e}")
    gate.sign_out()
    store.use_identity(None)
    return SignedOutMessage()


def _load_profile(store: BaseSpotStore, identity: Identity) -> Optional[Profile]:
    try:
        return store.get_profile(identity.id)
    except StoreError as e:
        logger.error(f"[STORE] Profile of {identity.id} could not be loaded: {e}")
        return None
