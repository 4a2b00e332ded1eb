"""Search filtering over prayer spots.

A spot matches a term when the term is empty, or when it is a case-insensitive
substring of the spot's name, address or description. Order is preserved.
"""

from collections.abc import Iterable

from prayerspot_finder.model.prayer_spot import PrayerSpot


def matches(spot: PrayerSpot, term: str) -> bool:
    needle = term.lower()
    if not needle:
        return True
    return any(needle in field.lower() for field in (spot.name, spot.address, spot.description) if field)


def filter_spots(spots: Iterable[PrayerSpot], term: str) -> list[PrayerSpot]:
    return [spot for spot in spots if matches(spot=spot, term=term)]
