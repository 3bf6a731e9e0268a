"""Contact normalization and validation - Pure functions.

Phone numbers are UK mobiles only. The canonical contact id is what the
subscription store keys on, so two spellings of the same mobile number
must normalize to the same string.
"""

import re
from dataclasses import dataclass
from typing import Any


_NON_DIGITS = re.compile(r"\D")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PHONE_REQUIRED = "phoneNumber is required for sms alerts"
PHONE_INVALID = "Invalid phone number format. Please provide a valid UK mobile number"
EMAIL_REQUIRED = "emailAddress is required for email alerts"
EMAIL_INVALID = "Invalid email address format. Please provide a valid email address"


@dataclass(frozen=True)
class ContactValidation:
    """Result of validating the contact fields of a request.

    Attributes:
        valid: True if the contact is usable
        contact_id: Canonical contact id (None if invalid)
        error: Caller-facing error message (None if valid)
    """
    valid: bool
    contact_id: str | None = None
    error: str | None = None


def _digits(value: str) -> str:
    return _NON_DIGITS.sub("", value)


def normalize_phone(value: Any) -> Any:
    """Rewrite a UK mobile number to compact international form.

    Pure function. "07896 543 210" and "+44 7896 543 210" both become
    "+447896543210". Anything that is not a UK mobile is returned unchanged.

    Args:
        value: Phone number as submitted

    Returns:
        Canonical phone number, or the input unchanged
    """
    if not value or not isinstance(value, str):
        return value

    digits = _digits(value)
    if digits.startswith("07") and len(digits) == 11:
        return "+44" + digits[1:]

    if value.strip().startswith("+44") and digits.startswith("447") and len(digits) == 12:
        return "+" + digits

    return value


def is_valid_mobile(value: Any) -> bool:
    """Check that a value is a UK mobile number.

    Separators are ignored. Accepted shapes are 07XXXXXXXXX and
    +447XXXXXXXXX; landlines and other lengths are rejected.
    """
    if not value or not isinstance(value, str):
        return False

    digits = _digits(value)

    if value.strip().startswith("+44"):
        return len(digits) == 12 and digits.startswith("447")

    return len(digits) == 11 and digits.startswith("07")


def is_valid_email(value: Any) -> bool:
    """Light-weight email shape check: local@domain.tld."""
    if not value or not isinstance(value, str):
        return False
    return _EMAIL.match(value.strip()) is not None


def validate_contact(
    alert_type: str,
    phone_number: str | None,
    email_address: str | None,
) -> ContactValidation:
    """Validate the contact field required by the alert type.

    Pure function. Emails are not case-normalized.

    Args:
        alert_type: "sms" or "email"
        phone_number: Phone number from the request (may be None)
        email_address: Email address from the request (may be None)

    Returns:
        ContactValidation with the canonical contact id or an error
    """
    if alert_type == "sms":
        if not phone_number:
            return ContactValidation(valid=False, error=PHONE_REQUIRED)
        if not is_valid_mobile(phone_number):
            return ContactValidation(valid=False, error=PHONE_INVALID)
        return ContactValidation(valid=True, contact_id=normalize_phone(phone_number))

    if alert_type == "email":
        if not email_address:
            return ContactValidation(valid=False, error=EMAIL_REQUIRED)
        if not is_valid_email(email_address):
            return ContactValidation(valid=False, error=EMAIL_INVALID)
        return ContactValidation(valid=True, contact_id=email_address)

    return ContactValidation(valid=False, error="alertType must be sms or email")
