"""Location name normalization and duplicate detection - Pure functions.

Normalization only folds case and whitespace. Qualifiers after the place
name are kept, so "London, City of Westminster" and
"London Apprentice, Cornwall" stay distinct.
"""

import re
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from src.core.subscription import Location


_WHITESPACE = re.compile(r"\s+")


def normalize_location(value: Any) -> Any:
    """Normalize a location name for comparison.

    Pure function. Trims, lowercases and collapses whitespace runs.
    Non-string or empty input is returned unchanged.

    Args:
        value: Location name as submitted

    Returns:
        Normalized location name
    """
    if not value or not isinstance(value, str):
        return value

    return _WHITESPACE.sub(" ", value.strip().lower())


def is_same_location(a: Any, b: Any) -> bool:
    """True if both names normalize to the same string."""
    return normalize_location(a) == normalize_location(b)


def find_duplicate(
    existing: Iterable["Location"],
    candidate: str,
) -> "Location | None":
    """Find a stored location with the same normalized name.

    Args:
        existing: Locations already stored for a contact
        candidate: Raw location name being added

    Returns:
        The first matching Location, or None
    """
    for location in existing:
        if is_same_location(location.raw, candidate):
            return location
    return None
