"""Notification payload construction - Pure functions.

Builds the JSON body sent to the notification gateway for a set-up
confirmation. Template ids come from configuration.
"""

from typing import Any

from src.core.config import NotificationTemplates
from src.core.subscription import AlertType


def select_template_id(
    alert_type: AlertType,
    templates: NotificationTemplates,
) -> str:
    """Pick the confirmation template for an alert type."""
    if alert_type is AlertType.SMS:
        return templates.sms_setup_confirmation
    return templates.email_setup_confirmation


def build_notification_payload(
    alert_type: AlertType,
    contact_id: str,
    raw_location: str,
    templates: NotificationTemplates,
) -> dict[str, Any]:
    """Build the set-up confirmation payload.

    Pure function. Only the contact field for the alert type is included;
    the location is passed through verbatim for personalisation.

    Args:
        alert_type: Alert channel of the request
        contact_id: Canonical phone number or email
        raw_location: Location name as submitted
        templates: Configured template ids

    Returns:
        JSON-serializable payload dict
    """
    contact_field = "phoneNumber" if alert_type is AlertType.SMS else "emailAddress"

    return {
        contact_field: contact_id,
        "templateId": select_template_id(alert_type, templates),
        "personalisation": {"location": raw_location},
    }
