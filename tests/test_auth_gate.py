"""Tests for auth_gate.py - identity session state and route guarding."""

import pytest

from conftest import make_spot
from prayerspot_finder.core.errors import AuthRequired
from prayerspot_finder.model.prayer_spot import Identity, Profile
from prayerspot_finder.ui.auth_gate import IDENTITY_KEY, AuthGate, can_manage


@pytest.fixture
def navigated() -> list[str]:
    return []


@pytest.fixture
def gate(navigated: list[str]) -> AuthGate:
    return AuthGate(session_state={}, navigate=navigated.append)


class TestGuard:
    def test_signed_out_redirects_to_sign_in(self, gate: AuthGate, navigated: list[str]) -> None:
        ran: list[str] = []
        assert gate.guard(lambda user: ran.append(user.id)) is None
        assert ran == []
        assert navigated == ["/auth"]

    def test_signed_in_runs_action_with_identity(
        self, gate: AuthGate, navigated: list[str], owner: Identity
    ) -> None:
        gate.sign_in(identity=owner)
        assert gate.guard(lambda user: user.id) == "user-owner"
        assert navigated == []

    def test_require_user_raises_when_signed_out(self, gate: AuthGate, navigated: list[str]) -> None:
        with pytest.raises(AuthRequired):
            gate.require_user()
        assert navigated == []

    def test_sign_out_clears_identity_and_profile(self, gate: AuthGate, admin: Identity, admin_profile: Profile) -> None:
        gate.sign_in(identity=admin, profile=admin_profile)
        gate.sign_out()
        assert gate.current_user is None
        assert gate.profile is None

    def test_identity_lives_in_session_state(self, owner: Identity) -> None:
        session: dict = {}
        AuthGate(session_state=session, navigate=lambda path: None).sign_in(identity=owner)
        assert session[IDENTITY_KEY] == owner


class TestCanManage:
    def test_anonymous_cannot(self) -> None:
        assert not can_manage(actor=None, profile=None, spot=make_spot())

    def test_creator_can(self, owner: Identity) -> None:
        assert can_manage(actor=owner, profile=None, spot=make_spot(created_by=owner.id))

    def test_non_admin_profile_cannot(self, stranger: Identity) -> None:
        profile = Profile(id=stranger.id, is_admin=False)
        assert not can_manage(actor=stranger, profile=profile, spot=make_spot())

    def test_admin_can(self, admin: Identity, admin_profile: Profile) -> None:
        assert can_manage(actor=admin, profile=admin_profile, spot=make_spot(created_by="someone-else"))
