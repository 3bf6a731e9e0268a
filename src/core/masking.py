"""Masking helpers for log output - Pure functions.

Contact values and template ids never appear in logs in full.
"""

from typing import Any


def mask_phone_number(value: Any) -> str | None:
    """"07896543210" -> "****3210"."""
    if not value or not isinstance(value, str):
        return None
    return f"****{value[-4:]}" if len(value) > 4 else "****"


def mask_email(value: Any) -> str | None:
    """"someone@example.com" -> "so****@example.com"."""
    if not value or not isinstance(value, str):
        return None
    local, _, domain = value.partition("@")
    if not domain:
        return "****"
    return f"{local[:2]}****@{domain}"


def mask_template_id(value: Any) -> str | None:
    """Keep only the last four characters of a template id."""
    if not value or not isinstance(value, str):
        return None
    return f"****{value[-4:]}" if len(value) > 8 else "****"


def mask_contact(value: Any) -> str | None:
    """Mask a canonical contact id, phone or email."""
    if isinstance(value, str) and "@" in value:
        return mask_email(value)
    return mask_phone_number(value)


def mask_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a request or notification payload safe to log."""
    masked = dict(payload)
    if "phoneNumber" in masked:
        masked["phoneNumber"] = mask_phone_number(masked["phoneNumber"])
    if "emailAddress" in masked:
        masked["emailAddress"] = mask_email(masked["emailAddress"])
    if "templateId" in masked:
        masked["templateId"] = mask_template_id(masked["templateId"])
    return masked
