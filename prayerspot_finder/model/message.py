"""Message - User-facing messages for the prayer spot finder UI.

Architecture:
- INLINE messages (Message): persistent blocks in panels and pages
  (loading state, load errors, form hints, not-found notices)
- TOAST messages (ToastMessage): transient notifications for the outcome of
  a remote call (created, deleted, restored, failed)

Design Principles:
- Remote-call failures never crash the page; they become a toast
- Messages know their own display level; callers decide when to show them
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MessageLevel(Enum):
    """Display level for UI messages."""

    INFO = "info"  # Blue - context/status/loading
    WARNING = "warning"  # Yellow - what the user still has to do
    ERROR = "error"  # Red - failures


@dataclass(frozen=True)
class Message(ABC):
    """Abstract base class for messages displayed inline (sidebar, panels, pages)."""

    @property
    @abstractmethod
    def message(self) -> str:
        """Formatted message for display in Streamlit."""
        raise NotImplementedError

    @property
    @abstractmethod
    def level(self) -> MessageLevel:
        """Display level."""
        raise NotImplementedError

    def display(self) -> None:
        """Render this message using the appropriate Streamlit function."""
        import streamlit as st

        render_fn = {
            MessageLevel.INFO: st.info,
            MessageLevel.WARNING: st.warning,
            MessageLevel.ERROR: st.error,
        }[self.level]
        render_fn(self.message)


@dataclass(frozen=True)
class ToastMessage(ABC):
    """Abstract base class for transient popup notifications.

    Good for: outcome of a store/geocoder call, auth feedback
    Bad for: loading state, form hints, page-level notices
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Formatted message for the toast notification."""
        raise NotImplementedError

    @property
    @abstractmethod
    def icon(self) -> str:
        """Icon to show in toast."""
        raise NotImplementedError

    def display(self) -> None:
        """Show this message as a toast notification and log it."""
        import streamlit as st

        logger = logging.getLogger(__name__)
        logger.info(f"[TOAST] {self.icon} {self.message}")
        st.toast(f"{self.icon} {self.message}")


# =============================================================================
# TOAST MESSAGES - Outcome of remote calls
# =============================================================================


@dataclass(frozen=True)
class StoreErrorMessage(ToastMessage):
    """A read or write against the record store failed."""

    action: str  # e.g. "load prayer spots", "delete prayer spot"

    @property
    def icon(self) -> str:
        return "❌"

    @property
    def message(self) -> str:
        return f"Failed to {self.action}"


@dataclass(frozen=True)
class GeocodeFailedMessage(ToastMessage):
    """Geocoding provider could not be reached. Typing stays unblocked."""

    @property
    def icon(self) -> str:
        return "📡"

    @property
    def message(self) -> str:
        return "Address search is temporarily unavailable — try again in a moment"


@dataclass(frozen=True)
class SpotCreatedMessage(ToastMessage):
    name: str

    @property
    def icon(self) -> str:
        return "✅"

    @property
    def message(self) -> str:
        return f"Prayer spot **{self.name}** added successfully!"


@dataclass(frozen=True)
class SpotDeletedMessage(ToastMessage):
    name: str

    @property
    def icon(self) -> str:
        return "🗑️"

    @property
    def message(self) -> str:
        return f"Prayer spot **{self.name}** deleted successfully"


@dataclass(frozen=True)
class SpotRestoredMessage(ToastMessage):
    name: str

    @property
    def icon(self) -> str:
        return "♻️"

    @property
    def message(self) -> str:
        return f"Prayer spot **{self.name}** restored successfully"


@dataclass(frozen=True)
class NotAllowedMessage(ToastMessage):
    """Actor is neither the creator nor an admin."""

    action: str  # "delete" / "restore"

    @property
    def icon(self) -> str:
        return "⛔"

    @property
    def message(self) -> str:
        return f"Only the creator or an admin can {self.action} this prayer spot"


@dataclass(frozen=True)
class SignInFailedMessage(ToastMessage):
    reason: str

    @property
    def icon(self) -> str:
        return "🔒"

    @property
    def message(self) -> str:
        return f"Sign-in failed — {self.reason}"


@dataclass(frozen=True)
class SignedInMessage(ToastMessage):
    email: Optional[str]

    @property
    def icon(self) -> str:
        return "👋"

    @property
    def message(self) -> str:
        return f"Signed in as {self.email}" if self.email else "Signed in"


@dataclass(frozen=True)
class SignedOutMessage(ToastMessage):
    @property
    def icon(self) -> str:
        return "👋"

    @property
    def message(self) -> str:
        return "Signed out"


@dataclass(frozen=True)
class ConfirmEmailMessage(ToastMessage):
    """Sign-up accepted; the account must be confirmed before signing in."""

    email: str

    @property
    def icon(self) -> str:
        return "📧"

    @property
    def message(self) -> str:
        return f"Check {self.email} for a confirmation link, then sign in."


# =============================================================================
# INLINE MESSAGES - Map page
# =============================================================================


@dataclass(frozen=True)
class LoadingSpotsMessage(Message):
    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        return "Loading prayer spots..."


@dataclass(frozen=True)
class SpotsLoadErrorMessage(Message):
    """list() failed. With stale data the map keeps showing the last good list."""

    error: str
    has_stale_data: bool = False

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.ERROR

    @property
    def message(self) -> str:
        if self.has_stale_data:
            return f"Failed to refresh prayer spots ({self.error}). Showing the last loaded list."
        return f"Failed to load prayer spots ({self.error})."


@dataclass(frozen=True)
class SearchSummaryMessage(Message):
    visible: int
    total: int
    term: str

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        if not self.term:
            return f"📍 {self.total} prayer spots"
        return f"🔎 {self.visible} of {self.total} prayer spots match **{self.term}**"


@dataclass(frozen=True)
class SignInToAddMessage(Message):
    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        return "Sign in to add prayer spots or manage the ones you created."


# =============================================================================
# INLINE MESSAGES - Spot Form hints (returned by validators)
# =============================================================================


@dataclass(frozen=True)
class MissingNameMessage(Message):
    @property
    def level(self) -> MessageLevel:
        return MessageLevel.WARNING

    @property
    def message(self) -> str:
        return "Enter a name for the prayer spot."


@dataclass(frozen=True)
class MissingAddressMessage(Message):
    @property
    def level(self) -> MessageLevel:
        return MessageLevel.WARNING

    @property
    def message(self) -> str:
        return "Enter the address of the prayer spot."


@dataclass(frozen=True)
class LocationUnresolvedMessage(Message):
    """Address typed but no coordinates yet (too short, no match, or failed)."""

    address: str

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.WARNING

    @property
    def message(self) -> str:
        return f"Please enter a valid address — no location found for “{self.address}”."


@dataclass(frozen=True)
class LocationFoundMessage(Message):
    city: str
    country: str
    lat: float
    lng: float

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        return f"📍 Location found: {self.city}, {self.country} ({self.lat:.6f}, {self.lng:.6f})"


# =============================================================================
# INLINE MESSAGES - Detail page
# =============================================================================


@dataclass(frozen=True)
class SpotNotFoundMessage(Message):
    slug: str

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.WARNING

    @property
    def message(self) -> str:
        return f"**Prayer Spot Not Found** — nothing exists at /{self.slug}."


@dataclass(frozen=True)
class SpotRemovedBannerMessage(Message):
    """Detail page of a soft-deleted spot."""

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.WARNING

    @property
    def message(self) -> str:
        return "This prayer spot has been removed and may no longer be available."
