"""Setup-alert request parsing - Pure functions.

Turns the raw JSON body of POST /setup-alert into a typed request.
Contact format checks live in src/core/contact.py; this module only
checks presence and shape of the fields.
"""

from dataclasses import dataclass
from typing import Any

from src.core.errors import ValidationError
from src.core.subscription import AlertType


ALERT_TYPE_INVALID = "alertType must be sms or email"
LOCATION_REQUIRED = "location, lat, and long are required"


@dataclass(frozen=True)
class SetupAlertRequest:
    """Validated body of a setup-alert request.

    Attributes:
        alert_type: Requested alert channel
        location: Location name exactly as submitted
        latitude: Latitude of the location
        longitude: Longitude of the location
        phone_number: Phone number as submitted (sms alerts)
        email_address: Email address as submitted (email alerts)
    """
    alert_type: AlertType
    location: str
    latitude: float
    longitude: float
    phone_number: str | None = None
    email_address: str | None = None


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a coordinate
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _optional_string(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def parse_setup_request(payload: Any) -> SetupAlertRequest:
    """Parse and validate a setup-alert request body.

    Pure function.

    Args:
        payload: Decoded JSON body

    Returns:
        SetupAlertRequest

    Raises:
        ValidationError: If a field is missing or has the wrong shape
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        alert_type = AlertType(payload.get("alertType"))
    except (ValueError, TypeError):
        raise ValidationError(ALERT_TYPE_INVALID) from None

    phone_number = _optional_string(payload, "phoneNumber")
    email_address = _optional_string(payload, "emailAddress")

    if alert_type is AlertType.SMS and not phone_number:
        raise ValidationError("phoneNumber is required for sms alerts")
    if alert_type is AlertType.EMAIL and not email_address:
        raise ValidationError("emailAddress is required for email alerts")

    location = payload.get("location")
    lat = payload.get("lat")
    lon = payload.get("long")

    if not isinstance(location, str) or not location.strip():
        raise ValidationError(LOCATION_REQUIRED)
    if not _is_number(lat) or not _is_number(lon):
        raise ValidationError(LOCATION_REQUIRED)

    if not -90 <= lat <= 90:
        raise ValidationError(f"lat {lat} out of range [-90, 90]")
    if not -180 <= lon <= 180:
        raise ValidationError(f"long {lon} out of range [-180, 180]")

    return SetupAlertRequest(
        alert_type=alert_type,
        location=location,
        latitude=float(lat),
        longitude=float(lon),
        phone_number=phone_number,
        email_address=email_address,
    )
