"""Validators - Input validation for the Spot Form.

Validators return Optional[Message]:
- None if valid
- A Message object if invalid (caller displays it)

Expected failures never raise; the submit button is disabled instead.
"""

from prayerspot_finder.model.message import (
    LocationUnresolvedMessage,
    Message,
    MissingAddressMessage,
    MissingNameMessage,
)
from prayerspot_finder.model.spot_draft import SpotDraft


def validate_draft_name(draft: SpotDraft) -> Message | None:
    if not draft.name.strip():
        return MissingNameMessage()
    return None


def validate_draft_address(draft: SpotDraft) -> Message | None:
    if not draft.address.strip():
        return MissingAddressMessage()
    return None


def validate_draft_location(draft: SpotDraft) -> Message | None:
    """Coordinates must be resolved and not the (0, 0) pair.

    Returns None while the address is still empty; the address validator
    reports that case.
    """
    if draft.address.strip() and not draft.has_location:
        return LocationUnresolvedMessage(address=draft.address.strip())
    return None


def validate_draft(draft: SpotDraft) -> list[Message]:
    """All blocking problems for a draft, in form order."""
    checks = (validate_draft_name, validate_draft_address, validate_draft_location)
    return [msg for msg in (check(draft) for check in checks) if msg is not None]
