"""Slug builder - public URL identifiers for prayer spots.

Format: ``country/city/name``. Each segment is lower-cased and every maximal
run of characters outside ``[a-z0-9]`` becomes a single hyphen. Leading and
trailing hyphens are kept, so "Al-Noor Mosque!" becomes "al-noor-mosque-".

Slugs are not unique on their own; see unique_slug() for collision handling.
"""

import logging
import re
import secrets
from collections.abc import Callable

from prayerspot_finder.constants import SlugConfig

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(SlugConfig.SEGMENT_PATTERN)


def slug_segment(value: str) -> str:
    """Lower-case value and collapse non-alphanumeric runs to one hyphen."""
    return _NON_ALNUM.sub("-", value.lower())


def build_slug(name: str, city: str, country: str) -> str:
    """Build ``country/city/name`` slug. Pure and deterministic."""
    return SlugConfig.SEPARATOR.join(
        [slug_segment(country), slug_segment(city), slug_segment(name)]
    )


def unique_slug(
    name: str,
    city: str,
    country: str,
    exists: Callable[[str], bool],
    token: Callable[[int], str] = secrets.token_hex,
) -> str:
    """Return the plain slug, or one with a short random suffix if taken.

    Args:
        name: Spot name
        city: Resolved city (or "unknown")
        country: Resolved country (or "unknown")
        exists: Lookup returning True when a slug is already used
        token: Suffix generator, injectable for tests

    Raises:
        RuntimeError: If no free slug is found after MAX_SUFFIX_ATTEMPTS.
    """
    base = build_slug(name=name, city=city, country=country)
    if not exists(base):
        return base

    for _ in range(SlugConfig.MAX_SUFFIX_ATTEMPTS):
        candidate = f"{base}-{token(SlugConfig.SUFFIX_BYTES)}"
        if not exists(candidate):
            logger.info(f"[SLUG] Collision on '{base}', using '{candidate}'")
            return candidate

    raise RuntimeError(f"Could not find a free slug for '{base}'")
