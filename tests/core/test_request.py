"""Unit tests for setup-alert request parsing.

Pure function tests - no mocks needed.
"""

import pytest

from src.core.errors import ValidationError
from src.core.request import (
    ALERT_TYPE_INVALID,
    LOCATION_REQUIRED,
    SetupAlertRequest,
    parse_setup_request,
)
from src.core.subscription import AlertType


@pytest.fixture
def sms_body():
    """A valid sms request body."""
    return {
        "alertType": "sms",
        "phoneNumber": "07896543210",
        "location": "Leeds",
        "lat": 53.8,
        "long": -1.5,
    }


class TestParseSetupRequest:
    """Tests for parse_setup_request() function."""

    def test_valid_sms(self, sms_body):
        result = parse_setup_request(sms_body)

        assert result == SetupAlertRequest(
            alert_type=AlertType.SMS,
            location="Leeds",
            latitude=53.8,
            longitude=-1.5,
            phone_number="07896543210",
        )

    def test_valid_email(self):
        result = parse_setup_request({
            "alertType": "email",
            "emailAddress": "someone@example.com",
            "location": "York",
            "lat": 54,
            "long": -1,
        })

        assert result.alert_type is AlertType.EMAIL
        assert result.email_address == "someone@example.com"
        assert result.latitude == 54.0
        assert isinstance(result.latitude, float)

    def test_location_kept_verbatim(self, sms_body):
        sms_body["location"] = "  London,  City of Westminster "
        assert parse_setup_request(sms_body).location == "  London,  City of Westminster "

    @pytest.mark.parametrize("body", [None, [], "text", 42])
    def test_body_not_object(self, body):
        with pytest.raises(ValidationError, match="JSON object"):
            parse_setup_request(body)

    @pytest.mark.parametrize("alert_type", [None, "", "push", "SMS", ["sms"]])
    def test_invalid_alert_type(self, sms_body, alert_type):
        sms_body["alertType"] = alert_type

        with pytest.raises(ValidationError) as exc_info:
            parse_setup_request(sms_body)

        assert exc_info.value.message == ALERT_TYPE_INVALID
        assert exc_info.value.status_code == 400

    def test_sms_requires_phone(self, sms_body):
        del sms_body["phoneNumber"]

        with pytest.raises(ValidationError, match="phoneNumber is required"):
            parse_setup_request(sms_body)

    def test_email_requires_address(self, sms_body):
        sms_body["alertType"] = "email"

        with pytest.raises(ValidationError, match="emailAddress is required"):
            parse_setup_request(sms_body)

    def test_phone_must_be_string(self, sms_body):
        sms_body["phoneNumber"] = 7896543210

        with pytest.raises(ValidationError, match="phoneNumber must be a string"):
            parse_setup_request(sms_body)

    @pytest.mark.parametrize("field,value", [
        ("location", None),
        ("location", ""),
        ("location", "   "),
        ("location", 12),
        ("lat", None),
        ("long", None),
        ("lat", "53.8"),
        ("long", True),
    ])
    def test_location_fields_required(self, sms_body, field, value):
        sms_body[field] = value

        with pytest.raises(ValidationError) as exc_info:
            parse_setup_request(sms_body)

        assert exc_info.value.message == LOCATION_REQUIRED

    def test_zero_coordinates_accepted(self, sms_body):
        """0 is a valid coordinate, not a missing one."""
        sms_body["lat"] = 0
        sms_body["long"] = 0

        result = parse_setup_request(sms_body)

        assert result.latitude == 0.0
        assert result.longitude == 0.0

    @pytest.mark.parametrize("field,value", [
        ("lat", 91),
        ("lat", -90.5),
        ("long", 181),
        ("long", -180.1),
    ])
    def test_coordinates_out_of_range(self, sms_body, field, value):
        sms_body[field] = value

        with pytest.raises(ValidationError, match="out of range"):
            parse_setup_request(sms_body)
