"""Subscription data models and admission rules - Pure functions.

A subscription is the per-contact record of alert type and locations.
This module defines the models, how they map to the persisted document,
and the duplicate/cap checks applied before a location is added.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from src.core.location import find_duplicate, normalize_location


MAX_LOCATIONS = 5


class AlertType(Enum):
    """Channel the contact receives alerts on."""
    SMS = "sms"
    EMAIL = "email"


@dataclass(frozen=True)
class Location:
    """A registered location, embedded in a subscription.

    Attributes:
        raw: Location name exactly as submitted
        longitude: Longitude of the location
        latitude: Latitude of the location
        created_at: When the location was added (UTC)
    """
    raw: str
    longitude: float
    latitude: float
    created_at: datetime

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (longitude, latitude) tuple, GeoJSON order."""
        return (self.longitude, self.latitude)

    @property
    def normalized(self) -> str:
        """Normalized name, used only for comparison."""
        return normalize_location(self.raw)


@dataclass(frozen=True)
class Provenance:
    """Who and when created a subscription.

    Attributes:
        request_id: Correlation id of the creating request
        created_at: Creation timestamp (UTC)
    """
    request_id: str
    created_at: datetime


@dataclass(frozen=True)
class Subscription:
    """Per-contact alert subscription.

    Attributes:
        subscription_id: Opaque store id, safe to return to callers
        contact_id: Canonical phone number or email
        alert_type: Alert channel set at creation
        locations: Registered locations in insertion order
        created_at: Creation timestamp of the first write
        request_id: Request id of the first write
    """
    subscription_id: str
    contact_id: str
    alert_type: AlertType
    locations: tuple[Location, ...] = field(default_factory=tuple)
    created_at: datetime | None = None
    request_id: str | None = None

    @property
    def location_count(self) -> int:
        return len(self.locations)


class AdmissionRejection(Enum):
    """Reason a new location cannot be added."""
    DUPLICATE = "duplicate"
    LIMIT_REACHED = "limit_reached"


@dataclass(frozen=True)
class AdmissionResult:
    """Result of checking whether a location may be added.

    Attributes:
        allowed: Whether the location may be added
        rejection: Why not (None if allowed)
        location_count: Number of locations already stored
    """
    allowed: bool
    rejection: AdmissionRejection | None
    location_count: int


def subscription_key(contact_id: str) -> str:
    """Derive the store id for a contact.

    Pure function. The id is a SHA-256 digest so it can be returned to
    callers without exposing the contact itself.
    """
    return hashlib.sha256(contact_id.encode("utf-8")).hexdigest()


def check_can_add_location(
    subscription: Subscription | None,
    raw_location: str,
    max_locations: int = MAX_LOCATIONS,
) -> AdmissionResult:
    """Check the duplicate and cap rules for a new location.

    Pure function. Duplicates are reported before the cap, so re-adding an
    existing location to a full subscription is a conflict, not a limit.

    Args:
        subscription: Existing subscription, or None for a new contact
        raw_location: Location name being added
        max_locations: Maximum locations per contact

    Returns:
        AdmissionResult describing the decision
    """
    if subscription is None:
        return AdmissionResult(allowed=True, rejection=None, location_count=0)

    count = subscription.location_count

    if find_duplicate(subscription.locations, raw_location) is not None:
        return AdmissionResult(
            allowed=False,
            rejection=AdmissionRejection.DUPLICATE,
            location_count=count,
        )

    if count >= max_locations:
        return AdmissionResult(
            allowed=False,
            rejection=AdmissionRejection.LIMIT_REACHED,
            location_count=count,
        )

    return AdmissionResult(allowed=True, rejection=None, location_count=count)


def find_invariant_violations(
    subscription: Subscription,
    max_locations: int = MAX_LOCATIONS,
) -> list[str]:
    """List invariant violations in a stored subscription.

    Concurrent requests for the same contact can both pass the admission
    check before either writes; this detects the result after the fact.

    Returns:
        Human-readable descriptions (empty if the subscription is sound)
    """
    violations = []

    if subscription.location_count > max_locations:
        violations.append(
            f"{subscription.location_count} locations stored (max {max_locations})"
        )

    seen: set[str] = set()
    for location in subscription.locations:
        if location.normalized in seen:
            violations.append(f"duplicate location '{location.normalized}'")
        seen.add(location.normalized)

    return violations


def location_to_document(location: Location) -> dict[str, Any]:
    """Convert a Location to its persisted form."""
    return {
        "location": location.raw,
        "coordinates": [location.longitude, location.latitude],
        "createdAt": location.created_at,
    }


def location_from_document(data: dict[str, Any]) -> Location:
    """Parse a persisted location entry."""
    coords = data.get("coordinates") or [0.0, 0.0]
    return Location(
        raw=data.get("location", ""),
        longitude=float(coords[0]),
        latitude=float(coords[1]),
        created_at=data.get("createdAt"),
    )


def new_subscription_document(
    contact_id: str,
    alert_type: AlertType,
    location: Location,
    provenance: Provenance,
) -> dict[str, Any]:
    """Build the document written when a contact is first seen."""
    return {
        "user_contact": contact_id,
        "alertType": alert_type.value,
        "createdAt": provenance.created_at,
        "requestId": provenance.request_id,
        "locations": [location_to_document(location)],
    }


def subscription_from_document(
    subscription_id: str,
    data: dict[str, Any],
) -> Subscription:
    """Parse a persisted subscription document.

    Args:
        subscription_id: Store id of the document
        data: Document fields

    Returns:
        Subscription model
    """
    return Subscription(
        subscription_id=subscription_id,
        contact_id=data["user_contact"],
        alert_type=AlertType(data["alertType"]),
        locations=tuple(
            location_from_document(entry)
            for entry in data.get("locations", [])
        ),
        created_at=data.get("createdAt"),
        request_id=data.get("requestId"),
    )
