"""Data model classes for prayer spot finder.

- PrayerSpot: Shared point of interest (soft-deletable)
- PrayerSpotImage: Image reference owned by one spot
- Profile: Per-user record with admin flag
- Identity: Signed-in actor
- SpotDraft: Typed form draft for a new spot
- GeocodeResult: Resolved address
"""

from prayerspot_finder.model.geocode_result import GeocodeResult
from prayerspot_finder.model.prayer_spot import (
    Identity,
    PrayerSpot,
    PrayerSpotImage,
    Profile,
)
from prayerspot_finder.model.spot_draft import SpotDraft

__all__ = [
    "PrayerSpot",
    "PrayerSpotImage",
    "Profile",
    "Identity",
    "SpotDraft",
    "GeocodeResult",
]
