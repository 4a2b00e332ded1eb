"""Sidebar UI renderer for the prayer spot finder.

Renders the left sidebar with:
- Search box (filters markers locally, no store call)
- Visible/total summary
- Add button (guarded: redirects to sign-in when signed out)
- Signed-in identity with sign-out
"""

import logging
from collections.abc import Callable

import streamlit as st

from prayerspot_finder.constants import AppConfig, RouteConfig
from prayerspot_finder.model.message import SearchSummaryMessage, SignInToAddMessage
from prayerspot_finder.ui.auth_gate import AuthGate
from prayerspot_finder.ui.state_machine import MapViewModel

logger = logging.getLogger(__name__)


class SidebarRenderer:
    """Renders the sidebar for the browse page.

    Example:
        SidebarRenderer(vm=vm, gate=gate, navigate=navigate, on_sign_out=handle_sign_out).render()
    """

    def __init__(
        self,
        vm: MapViewModel,
        gate: AuthGate,
        navigate: Callable[[str], None],
        on_sign_out: Callable[[], None],
    ) -> None:
        self.vm = vm
        self.gate = gate
        self.navigate = navigate
        self.on_sign_out = on_sign_out

    def render(self) -> None:
        with st.sidebar:
            st.title(f"{AppConfig.ICON} {AppConfig.TITLE}")
            self._render_search()
            st.divider()
            self._render_add_button()
            st.divider()
            self._render_account()

    def _render_search(self) -> None:
        ctx = self.vm.context
        term = st.text_input(
            "Search prayer spots",
            value=ctx.filter_term,
            placeholder="Name, address or description",
            key="search_term",
        )
        self.vm.set_filter(term)
        if self.vm.context.loaded_once:
            SearchSummaryMessage(
                visible=len(ctx.visible_spots),
                total=len(ctx.records),
                term=ctx.filter_term,
            ).display()

    def _render_add_button(self) -> None:
        if st.button("➕ Add Prayer Spot", type="primary", use_container_width=True):
            self.gate.guard(lambda user: self.navigate(RouteConfig.ADD))
        if self.gate.current_user is None:
            SignInToAddMessage().display()

    def _render_account(self) -> None:
        user = self.gate.current_user
        if user is None:
            if st.button("🔑 Sign in", use_container_width=True):
                self.navigate(RouteConfig.AUTH)
            return

        profile = self.gate.profile
        label = profile.display_name if profile else (user.email or user.id)
        st.caption(f"Signed in as **{label}**" + (" (admin)" if profile and profile.is_admin else ""))
        if st.button("Sign out", use_container_width=True):
            self.on_sign_out()
