"""Subscription Store contract and in-memory store - Imperative Shell.

The orchestrator talks to any object satisfying SubscriptionStore.
FirestoreSubscriptionStore is the durable implementation; the in-memory
store here backs local development and tests.
"""

import logging
import threading
from dataclasses import replace
from typing import Protocol

from src.core.masking import mask_contact
from src.core.subscription import (
    AlertType,
    Location,
    Provenance,
    Subscription,
    subscription_key,
)


logger = logging.getLogger(__name__)


class SubscriptionStore(Protocol):
    """Persistence contract for subscriptions.

    append_location must be a single atomic create-if-absent-else-append.
    It raises UniqueConstraintViolation if a concurrent insert for the same
    contact wins, and StoreError for any other failure.
    """

    def find_by_contact(self, contact_id: str) -> Subscription | None:  # pragma: no cover - Protocol
        ...

    def append_location(
        self,
        contact_id: str,
        alert_type: AlertType,
        location: Location,
        provenance: Provenance,
    ) -> Subscription | None:  # pragma: no cover - Protocol
        ...

    def remove_location(self, contact_id: str, location: Location) -> None:  # pragma: no cover - Protocol
        ...


class InMemorySubscriptionStore:
    """Process-local subscription store.

    Subscriptions are lost on restart. Each operation holds a lock for its
    whole duration, which gives the same per-contact atomicity as the
    durable store.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, Subscription] = {}
        self._lock = threading.Lock()

    def find_by_contact(self, contact_id: str) -> Subscription | None:
        with self._lock:
            return self._subscriptions.get(contact_id)

    def append_location(
        self,
        contact_id: str,
        alert_type: AlertType,
        location: Location,
        provenance: Provenance,
    ) -> Subscription | None:
        """Create the subscription or append to it, atomically."""
        with self._lock:
            existing = self._subscriptions.get(contact_id)

            if existing is None:
                subscription = Subscription(
                    subscription_id=subscription_key(contact_id),
                    contact_id=contact_id,
                    alert_type=alert_type,
                    locations=(location,),
                    created_at=provenance.created_at,
                    request_id=provenance.request_id,
                )
                logger.info("Created subscription for %s", mask_contact(contact_id))
            else:
                subscription = replace(
                    existing,
                    locations=existing.locations + (location,),
                )

            self._subscriptions[contact_id] = subscription
            return subscription

    def remove_location(self, contact_id: str, location: Location) -> None:
        """Remove an exact location entry; no-op if absent."""
        with self._lock:
            existing = self._subscriptions.get(contact_id)
            if existing is None or location not in existing.locations:
                return

            self._subscriptions[contact_id] = replace(
                existing,
                locations=tuple(loc for loc in existing.locations if loc != location),
            )
