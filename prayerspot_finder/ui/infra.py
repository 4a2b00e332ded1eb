"""Infrastructure utilities for Streamlit UI operations.

This module abstracts Streamlit-specific infrastructure (st.rerun,
st.query_params, st.session_state) so actions stay testable.

Pattern: Actions receive ``navigate`` as a callable and import rerun helpers
from here. Tests pass a recording callable instead of patching Streamlit.
"""

import logging

import streamlit as st

from prayerspot_finder.constants import RouteConfig

logger = logging.getLogger(__name__)


def trigger_rerun(scope: str = "app") -> None:
    """Trigger Streamlit rerun with optional scope.

    In tests, patch 'prayerspot_finder.ui.infra.trigger_rerun' to prevent
    actual reruns (which raise StopExecution).
    """
    st.rerun(scope=scope)


def bump_map_version() -> None:
    """Increment map_version to create a fresh map component.

    A new component instance has no memory of earlier click events, so a
    marker removed by a re-list cannot deliver a ghost click.
    """
    old_version = st.session_state.get("map_version", 0)
    st.session_state.map_version = old_version + 1
    logger.info(f"[MAP] Bumped map_version: {old_version} -> {old_version + 1}")


def current_path() -> str:
    return st.query_params.get(RouteConfig.QUERY_PARAM, RouteConfig.HOME)


def navigate(path: str) -> None:
    """Go to ``path``. Raises StopExecution through st.rerun()."""
    logger.info(f"[ROUTE] Navigate {current_path()} -> {path}")
    st.query_params[RouteConfig.QUERY_PARAM] = path
    bump_map_version()
    trigger_rerun()
