"""Orchestrator - Wires Functional Core and Imperative Shell.

This module runs the setup-alert workflow: it validates the contact,
checks the per-contact rules against the stored subscription, calls the
notification service and writes the new location. It decides what
happens when the notification and the durable write disagree.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from src.core.config import Config, StoreBackend, WritePolicy
from src.core.contact import validate_contact
from src.core.errors import (
    ConflictError,
    InternalError,
    LocationLimitError,
    NotificationError,
    SetupAlertError,
    StoreError,
    UniqueConstraintViolation,
    UpstreamError,
    ValidationError,
)
from src.core.masking import mask_contact
from src.core.notification import build_notification_payload
from src.core.request import SetupAlertRequest
from src.core.subscription import (
    AdmissionRejection,
    Location,
    Provenance,
    Subscription,
    check_can_add_location,
    find_invariant_violations,
    MAX_LOCATIONS,
)
from src.shell.firestore_client import FirestoreConfig, FirestoreSubscriptionStore
from src.shell.notify_client import NotifyClient
from src.shell.subscription_store import InMemorySubscriptionStore, SubscriptionStore


logger = logging.getLogger(__name__)


SUCCESS_MESSAGE = "Alert setup successful"
DUPLICATE_MESSAGE = "Alert already exists for this location"
LIMIT_MESSAGE = f"Maximum {MAX_LOCATIONS} locations allowed per user"
RACE_MESSAGE = "Location already exists for this user"
UPSTREAM_MESSAGE = "Alert setup failed - notification service unavailable"
NO_RESULT_MESSAGE = "Failed to process user data"
INTERNAL_MESSAGE = "Failed to setup alert"
ROLLBACK_MESSAGE = "Alert setup failed and rollback was incomplete"


@dataclass
class SetupAlertResult:
    """Result of a successful setup-alert request.

    Attributes:
        subscription_id: Store id of the subscription (returned as userId)
        location_count: Locations stored after this request
        is_new_subscription: True if this request created the subscription
        message: Caller-facing message
    """
    subscription_id: str
    location_count: int
    is_new_subscription: bool
    message: str = SUCCESS_MESSAGE


def create_store(config: Config) -> SubscriptionStore:
    """Build the subscription store selected by configuration."""
    if config.store.backend is StoreBackend.MEMORY:
        return InMemorySubscriptionStore()
    return FirestoreSubscriptionStore(
        FirestoreConfig(
            database=config.store.firestore_database,
            collection=config.store.firestore_collection,
        )
    )


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class SetupAlertOrchestrator:
    """Coordinates alert registration.

    This class wires together:
    - Core functions (contact validation, admission rules, payloads)
    - Subscription store (lookup and atomic append)
    - Notification client (set-up confirmation)

    Nothing is retried; every failure is reported to the caller.
    """

    def __init__(
        self,
        config: Config,
        store: SubscriptionStore | None = None,
        notify_client: NotifyClient | None = None,
    ) -> None:
        """Initialize orchestrator with configuration.

        Args:
            config: Application configuration
            store: Subscription store (created if not provided)
            notify_client: Notification client (created if not provided)
        """
        self.config = config
        self.store = store or create_store(config)
        self.notify_client = notify_client or NotifyClient(
            service_url=config.notification.service_url,
            timeout=config.notification.timeout_seconds,
        )

    def setup_alert(
        self,
        request: SetupAlertRequest,
        request_id: str | None = None,
    ) -> SetupAlertResult:
        """Register a location for a contact.

        Args:
            request: Parsed setup-alert request
            request_id: Correlation id (generated if not provided)

        Returns:
            SetupAlertResult on success

        Raises:
            SetupAlertError: Subclass matching the failure
        """
        request_id = request_id or f"req-{uuid.uuid4().hex}"
        start = time.monotonic()

        try:
            result = self._run(request, request_id)
        except SetupAlertError as e:
            logger.warning(
                "Setup alert %s rejected with %d: %s",
                request_id,
                e.status_code,
                e.message,
            )
            raise
        except Exception as e:
            logger.exception("Setup alert %s failed unexpectedly", request_id)
            raise InternalError(INTERNAL_MESSAGE) from e

        logger.info(
            "Setup alert %s completed in %dms: subscription=%s locations=%d new=%s",
            request_id,
            _elapsed_ms(start),
            result.subscription_id,
            result.location_count,
            result.is_new_subscription,
        )
        return result

    def _run(self, request: SetupAlertRequest, request_id: str) -> SetupAlertResult:
        # Step 1: Canonical contact id
        contact = validate_contact(
            request.alert_type.value,
            request.phone_number,
            request.email_address,
        )
        if not contact.valid:
            raise ValidationError(contact.error)

        contact_id = contact.contact_id
        masked = mask_contact(contact_id)

        # Step 2: Duplicate and cap rules against the stored subscription
        self._check_admission(contact_id, request.location, request_id)

        location = Location(
            raw=request.location,
            longitude=request.longitude,
            latitude=request.latitude,
            created_at=datetime.now(timezone.utc),
        )
        provenance = Provenance(request_id=request_id, created_at=location.created_at)
        payload = build_notification_payload(
            request.alert_type,
            contact_id,
            request.location,
            self.config.notification.templates,
        )

        logger.info(
            "Setup alert %s for %s passed admission (policy=%s)",
            request_id,
            masked,
            self.config.write_policy.value,
        )

        # Steps 3-4: Notify and persist in the configured order
        if self.config.write_policy is WritePolicy.PERSIST_THEN_NOTIFY:
            subscription = self._persist(request, contact_id, location, provenance, request_id)
            self._notify_or_compensate(payload, contact_id, location, request_id)
        else:
            self._notify(payload, request_id)
            subscription = self._persist(
                request, contact_id, location, provenance, request_id, notified=True,
            )

        violations = find_invariant_violations(subscription)
        if violations:
            logger.warning(
                "Subscription %s violates invariants after concurrent writes: %s",
                subscription.subscription_id,
                "; ".join(violations),
            )

        return SetupAlertResult(
            subscription_id=subscription.subscription_id,
            location_count=subscription.location_count,
            is_new_subscription=subscription.request_id == request_id,
        )

    def _check_admission(self, contact_id: str, raw_location: str, request_id: str) -> None:
        try:
            existing = self.store.find_by_contact(contact_id)
        except StoreError as e:
            raise InternalError(INTERNAL_MESSAGE) from e

        admission = check_can_add_location(existing, raw_location)

        if admission.rejection is AdmissionRejection.DUPLICATE:
            logger.warning("Setup alert %s: duplicate location detected", request_id)
            raise ConflictError(DUPLICATE_MESSAGE)

        if admission.rejection is AdmissionRejection.LIMIT_REACHED:
            logger.warning(
                "Setup alert %s: location limit reached (%d stored)",
                request_id,
                admission.location_count,
            )
            raise LocationLimitError(LIMIT_MESSAGE)

    def _notify(self, payload: dict, request_id: str) -> None:
        try:
            ack = self.notify_client.send(payload, request_id)
        except NotificationError as e:
            logger.error(
                "Setup alert %s: notification failed (%s)",
                request_id,
                e.category.value,
            )
            raise UpstreamError(UPSTREAM_MESSAGE) from e

        logger.info(
            "Setup alert %s: notification confirmed in %dms",
            request_id,
            ack.duration_ms,
        )

    def _persist(
        self,
        request: SetupAlertRequest,
        contact_id: str,
        location: Location,
        provenance: Provenance,
        request_id: str,
        notified: bool = False,
    ) -> Subscription:
        # A failure here after a confirmed notification means the user has
        # been messaged but nothing is stored; the caller must resubmit.
        suffix = " after notification was sent" if notified else ""
        start = time.monotonic()

        try:
            subscription = self.store.append_location(
                contact_id,
                request.alert_type,
                location,
                provenance,
            )
        except UniqueConstraintViolation as e:
            logger.error(
                "Setup alert %s: concurrent insert for the same contact%s",
                request_id,
                suffix,
            )
            raise ConflictError(RACE_MESSAGE) from e
        except StoreError as e:
            logger.error("Setup alert %s: store write failed%s: %s", request_id, suffix, e)
            raise InternalError(INTERNAL_MESSAGE) from e

        if subscription is None:
            logger.error("Setup alert %s: store returned no result%s", request_id, suffix)
            raise InternalError(NO_RESULT_MESSAGE)

        logger.info(
            "Setup alert %s: stored location %d for subscription %s in %dms",
            request_id,
            subscription.location_count,
            subscription.subscription_id,
            _elapsed_ms(start),
        )
        return subscription

    def _notify_or_compensate(
        self,
        payload: dict,
        contact_id: str,
        location: Location,
        request_id: str,
    ) -> None:
        try:
            self._notify(payload, request_id)
        except UpstreamError:
            try:
                self.store.remove_location(contact_id, location)
            except Exception as rollback_error:
                logger.error(
                    "Setup alert %s: rollback failed, unconfirmed location left stored: %s",
                    request_id,
                    rollback_error,
                )
                raise InternalError(ROLLBACK_MESSAGE) from rollback_error

            logger.info("Setup alert %s: location rollback completed", request_id)
            raise
