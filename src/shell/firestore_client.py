"""Firestore Subscription Store - Imperative Shell.

This module persists subscriptions in Google Cloud Firestore, one document
per contact. The document id is derived from the contact, so the document
key itself enforces contact uniqueness.

All I/O is contained here; admission rules are in the core module.
"""

import logging
from dataclasses import dataclass
from typing import Any

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore

from src.core.errors import StoreError, UniqueConstraintViolation
from src.core.masking import mask_contact
from src.core.subscription import (
    AlertType,
    Location,
    Provenance,
    Subscription,
    location_to_document,
    new_subscription_document,
    subscription_from_document,
    subscription_key,
)


logger = logging.getLogger(__name__)


# Default collection name for subscriptions
DEFAULT_COLLECTION = "USERS"


@dataclass
class FirestoreConfig:
    """Configuration for Firestore store.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        collection: Firestore collection name
    """
    project_id: str | None = None
    database: str | None = None
    collection: str = DEFAULT_COLLECTION


class FirestoreSubscriptionStore:
    """Subscription store backed by Firestore.

    This is part of the imperative shell - it handles database I/O.

    Document structure:
    {
        "user_contact": "+447896543210",
        "alertType": "sms",
        "createdAt": <timestamp>,
        "requestId": "req-...",
        "locations": [
            {"location": "Leeds", "coordinates": [-1.5, 53.8], "createdAt": <timestamp>}
        ]
    }
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore store.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs = {}
            if self.config.project_id:
                kwargs['project'] = self.config.project_id
            if self.config.database:
                kwargs['database'] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _get_doc_ref(self, contact_id: str) -> Any:
        """Get reference to the subscription document for a contact."""
        return (
            self.client
            .collection(self.config.collection)
            .document(subscription_key(contact_id))
        )

    def _read(self, doc_ref: Any) -> Subscription | None:
        snapshot = doc_ref.get()
        if not snapshot.exists:
            return None
        return subscription_from_document(snapshot.id, snapshot.to_dict())

    def find_by_contact(self, contact_id: str) -> Subscription | None:
        """Fetch the subscription for a contact.

        This method performs database I/O.

        Raises:
            StoreError: If Firestore cannot be read
        """
        try:
            return self._read(self._get_doc_ref(contact_id))
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error(
                "Failed to read subscription for %s: %s",
                mask_contact(contact_id),
                str(e),
            )
            raise StoreError(f"Failed to read subscription: {e}") from e

    def append_location(
        self,
        contact_id: str,
        alert_type: AlertType,
        location: Location,
        provenance: Provenance,
    ) -> Subscription | None:
        """Append a location, creating the subscription if absent.

        Each branch is a single atomic write: an ArrayUnion update of an
        existing document, or a create that fails if the document exists.

        Args:
            contact_id: Canonical contact id
            alert_type: Alert type, only written on creation
            location: Location to append
            provenance: Request id and timestamp, only written on creation

        Returns:
            The subscription as stored after the write, or None if it
            could not be read back

        Raises:
            UniqueConstraintViolation: Another request created the contact
            StoreError: Any other Firestore failure
        """
        doc_ref = self._get_doc_ref(contact_id)
        masked = mask_contact(contact_id)

        try:
            try:
                doc_ref.update({
                    "locations": firestore.ArrayUnion([location_to_document(location)]),
                })
                logger.info("Appended location to subscription for %s", masked)
            except gcp_exceptions.NotFound:
                doc_ref.create(new_subscription_document(
                    contact_id, alert_type, location, provenance,
                ))
                logger.info("Created subscription for %s", masked)

            return self._read(doc_ref)

        except gcp_exceptions.AlreadyExists as e:
            logger.warning("Concurrent insert detected for %s", masked)
            raise UniqueConstraintViolation(
                "Subscription was created by a concurrent request"
            ) from e
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error("Failed to append location for %s: %s", masked, str(e))
            raise StoreError(f"Failed to append location: {e}") from e

    def remove_location(self, contact_id: str, location: Location) -> None:
        """Remove an exact location entry from a subscription.

        Idempotent: a missing document or entry is a no-op.

        Raises:
            StoreError: If Firestore rejects the update
        """
        masked = mask_contact(contact_id)

        try:
            self._get_doc_ref(contact_id).update({
                "locations": firestore.ArrayRemove([location_to_document(location)]),
            })
            logger.info("Removed location from subscription for %s", masked)
        except gcp_exceptions.NotFound:
            logger.info("No subscription for %s, nothing to remove", masked)
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error("Failed to remove location for %s: %s", masked, str(e))
            raise StoreError(f"Failed to remove location: {e}") from e
