"""Error taxonomy for prayer spot operations.

Validation of form input is done with validators returning messages; these
exceptions cover failures that cross a remote boundary or a contract check
inside the store.
"""


class PrayerSpotError(Exception):
    """Base class for all application errors."""


class ValidationError(PrayerSpotError):
    """Required field missing or invalid (name, coordinates, creator)."""


class StoreError(PrayerSpotError):
    """Remote read/write against the record store failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GeocodeError(PrayerSpotError):
    """Geocoding provider unreachable or returned an error response.

    An empty result is not an error: geocoders return None instead.
    """


class AuthError(PrayerSpotError):
    """Identity service rejected the credentials or failed."""


class AuthRequired(PrayerSpotError):
    """An action needing an identity was attempted while signed out."""
