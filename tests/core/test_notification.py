"""Unit tests for notification payload construction.

Pure function tests - no mocks needed.
"""

from src.core.config import NotificationTemplates
from src.core.notification import build_notification_payload, select_template_id
from src.core.subscription import AlertType


TEMPLATES = NotificationTemplates(
    sms_setup_confirmation="sms-template-0001",
    email_setup_confirmation="email-template-0002",
)


class TestSelectTemplateId:
    """Tests for select_template_id() function."""

    def test_sms(self):
        assert select_template_id(AlertType.SMS, TEMPLATES) == "sms-template-0001"

    def test_email(self):
        assert select_template_id(AlertType.EMAIL, TEMPLATES) == "email-template-0002"


class TestBuildNotificationPayload:
    """Tests for build_notification_payload() function."""

    def test_sms_payload(self):
        payload = build_notification_payload(
            AlertType.SMS, "+447896543210", "Leeds", TEMPLATES,
        )

        assert payload == {
            "phoneNumber": "+447896543210",
            "templateId": "sms-template-0001",
            "personalisation": {"location": "Leeds"},
        }

    def test_email_payload_has_no_phone(self):
        payload = build_notification_payload(
            AlertType.EMAIL, "someone@example.com", "York", TEMPLATES,
        )

        assert payload["emailAddress"] == "someone@example.com"
        assert "phoneNumber" not in payload
        assert payload["templateId"] == "email-template-0002"

    def test_location_passed_verbatim(self):
        payload = build_notification_payload(
            AlertType.SMS, "+447896543210", "  London,  City of Westminster", TEMPLATES,
        )

        assert payload["personalisation"]["location"] == "  London,  City of Westminster"
