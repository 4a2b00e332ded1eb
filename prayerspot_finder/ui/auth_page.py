"""Sign-in page (/auth).

Password sign-in and sign-up against the hosted identity service. After a
successful sign-in the user is sent back to the map.
"""

import logging
from collections.abc import Callable

import streamlit as st

from prayerspot_finder.constants import RouteConfig
from prayerspot_finder.core.auth_service import AuthService
from prayerspot_finder.core.spot_store import BaseSpotStore
from prayerspot_finder.model.message import SignedInMessage
from prayerspot_finder.ui.actions import sign_in, sign_out, sign_up
from prayerspot_finder.ui.auth_gate import AuthGate

logger = logging.getLogger(__name__)


def render_auth_page(
    auth: AuthService,
    gate: AuthGate,
    store: BaseSpotStore,
    navigate: Callable[[str], None],
) -> None:
    st.header("Sign in")

    user = gate.current_user
    if user is not None:
        st.success(f"Signed in as {user.email or user.id}")
        col_map, col_out = st.columns(2)
        with col_map:
            if st.button("Go to map", type="primary", use_container_width=True):
                navigate(RouteConfig.HOME)
        with col_out:
            if st.button("Sign out", use_container_width=True):
                sign_out(auth=auth, gate=gate, store=store).display()
                navigate(RouteConfig.HOME)
        return

    tab_in, tab_up = st.tabs(["Sign in", "Create account"])
    with tab_in:
        with st.form("sign_in_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", type="primary")
        if submitted:
            toast = sign_in(auth=auth, gate=gate, store=store, email=email.strip(), password=password)
            toast.display()
            if isinstance(toast, SignedInMessage):
                navigate(RouteConfig.HOME)

    with tab_up:
        with st.form("sign_up_form"):
            email = st.text_input("Email", key="sign_up_email")
            password = st.text_input("Password", type="password", key="sign_up_password")
            submitted = st.form_submit_button("Create account")
        if submitted:
            toast = sign_up(auth=auth, gate=gate, store=store, email=email.strip(), password=password)
            toast.display()
            if isinstance(toast, SignedInMessage):
                navigate(RouteConfig.HOME)
