"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlparse


class StoreBackend(Enum):
    """Where subscriptions are persisted."""
    FIRESTORE = "firestore"
    MEMORY = "memory"


class WritePolicy(Enum):
    """Ordering of the notification call and the durable write.

    NOTIFY_THEN_PERSIST is the default. PERSIST_THEN_NOTIFY writes first and
    removes the location again if the notification fails.
    """
    NOTIFY_THEN_PERSIST = "notify_then_persist"
    PERSIST_THEN_NOTIFY = "persist_then_notify"


@dataclass(frozen=True)
class NotificationTemplates:
    """Template ids for set-up confirmation messages.

    Attributes:
        sms_setup_confirmation: Template for sms alerts
        email_setup_confirmation: Template for email alerts
    """
    sms_setup_confirmation: str = "73244097-acce-4e7b-84f2-3ddcd0e70fb5"
    email_setup_confirmation: str = "55e3e00c-0401-4f41-bf22-ecbbcf8af412"


@dataclass
class NotificationConfig:
    """Notification gateway settings.

    Attributes:
        service_url: URL the confirmation request is POSTed to
        timeout_seconds: Request timeout (connect and read)
        templates: Confirmation template ids
    """
    service_url: str = "http://localhost:3000/send-notification"
    timeout_seconds: float = 10.0
    templates: NotificationTemplates = field(default_factory=NotificationTemplates)


@dataclass
class StoreConfig:
    """Subscription store settings.

    Attributes:
        backend: Store implementation to use
        firestore_database: Firestore database name (None for default)
        firestore_collection: Collection holding one document per contact
    """
    backend: StoreBackend = StoreBackend.FIRESTORE
    firestore_database: str | None = None
    firestore_collection: str = "USERS"


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects. One instance
    is built at startup and passed to the orchestrator, store and client.

    Attributes:
        notification: Notification gateway settings
        store: Subscription store settings
        write_policy: Ordering of notify and persist
        tracing_header: Inbound header carrying the request id
    """
    notification: NotificationConfig = field(default_factory=NotificationConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    write_policy: WritePolicy = WritePolicy.NOTIFY_THEN_PERSIST
    tracing_header: str = "x-cdp-request-id"


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_service_url(url: str, field_name: str) -> list[ValidationError]:
    """Validate an http(s) URL.

    Pure function.

    Args:
        url: URL to check
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    if not url or url.startswith("${"):
        return [ValidationError(
            field=field_name,
            message="URL not set (missing or unresolved placeholder)",
        )]

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return [ValidationError(
            field=field_name,
            message=f"URL must be http(s) with a host, got '{url}'",
        )]

    return []


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    errors.extend(validate_service_url(
        config.notification.service_url,
        "notification.service_url",
    ))

    if config.notification.timeout_seconds <= 0:
        errors.append(ValidationError(
            field="notification.timeout_seconds",
            message=f"Timeout must be positive, got {config.notification.timeout_seconds}",
        ))

    templates = config.notification.templates
    for name in ("sms_setup_confirmation", "email_setup_confirmation"):
        value = getattr(templates, name)
        if not value or value.startswith("${"):
            errors.append(ValidationError(
                field=f"notification.templates.{name}",
                message="Template id not set (missing or unresolved placeholder)",
            ))

    if config.store.backend is StoreBackend.FIRESTORE and not config.store.firestore_collection:
        errors.append(ValidationError(
            field="store.firestore_collection",
            message="Firestore collection name is empty",
        ))

    if config.store.backend is StoreBackend.MEMORY:
        errors.append(ValidationError(
            field="store.backend",
            message="In-memory store is not durable; subscriptions are lost on restart",
            severity="warning",
        ))

    if config.write_policy is WritePolicy.PERSIST_THEN_NOTIFY:
        errors.append(ValidationError(
            field="write_policy",
            message="persist_then_notify briefly stores unconfirmed locations",
            severity="warning",
        ))

    if not config.tracing_header:
        errors.append(ValidationError(
            field="tracing_header",
            message="Tracing header is empty; only x-request-id will be read",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
