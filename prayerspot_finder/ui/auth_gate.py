"""Auth gate - the signed-in identity and route guarding.

Opening the Spot Form or deleting/restoring a spot requires a signed-in
identity. Without one the gate redirects to the sign-in route instead of
running the action; nothing is raised to the page.
"""

import logging
from collections.abc import Callable, MutableMapping
from typing import Any, Optional, TypeVar

from prayerspot_finder.constants import RouteConfig
from prayerspot_finder.core.errors import AuthRequired
from prayerspot_finder.model.prayer_spot import Identity, PrayerSpot, Profile

logger = logging.getLogger(__name__)

T = TypeVar("T")

IDENTITY_KEY = "identity"
PROFILE_KEY = "profile"


class AuthGate:
    """Wraps the session-state mapping that holds the current identity.

    Example:
        gate = AuthGate(session_state=st.session_state, navigate=navigate)
        gate.guard(lambda user: open_form(user))
    """

    def __init__(self, session_state: MutableMapping[str, Any], navigate: Callable[[str], None]) -> None:
        self._session = session_state
        self._navigate = navigate

    @property
    def current_user(self) -> Optional[Identity]:
        return self._session.get(IDENTITY_KEY)

    @property
    def profile(self) -> Optional[Profile]:
        """Profile of the current user, loaded at sign-in (None if absent)."""
        return self._session.get(PROFILE_KEY)

    def sign_in(self, identity: Identity, profile: Optional[Profile] = None) -> None:
        self._session[IDENTITY_KEY] = identity
        self._session[PROFILE_KEY] = profile
        logger.info(f"[AUTH] Session identity set: {identity!r} (admin={bool(profile and profile.is_admin)})")

    def sign_out(self) -> None:
        identity = self._session.pop(IDENTITY_KEY, None)
        self._session.pop(PROFILE_KEY, None)
        logger.info(f"[AUTH] Session identity cleared: {identity!r}")

    def require_user(self) -> Identity:
        """Return the current user.

        Raises:
            AuthRequired: No identity in the session.
        """
        user = self.current_user
        if user is None:
            raise AuthRequired("Sign in required")
        return user

    def guard(self, action: Callable[[Identity], T]) -> Optional[T]:
        """Run ``action`` with the current identity, or redirect to sign-in."""
        try:
            user = self.require_user()
        except AuthRequired:
            logger.info(f"[AUTH] No identity, redirecting to {RouteConfig.AUTH}")
            self._navigate(RouteConfig.AUTH)
            return None
        return action(user)


def can_manage(actor: Optional[Identity], profile: Optional[Profile], spot: PrayerSpot) -> bool:
    """Delete/restore rule: the creator or an admin."""
    if actor is None:
        return False
    if actor.id == spot.created_by:
        return True
    return profile is not None and profile.id == actor.id and profile.is_admin
