"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Contact normalization and validation
- Location normalization and duplicate detection
- Subscription models and admission rules
- Request parsing and notification payloads

All functions here are deterministic and have no I/O.
"""

from src.core.contact import is_valid_email, is_valid_mobile, normalize_phone, validate_contact
from src.core.location import is_same_location, normalize_location
from src.core.request import SetupAlertRequest, parse_setup_request
from src.core.subscription import (
    MAX_LOCATIONS,
    AlertType,
    Location,
    Subscription,
    check_can_add_location,
)

__all__ = [
    # Contact
    "normalize_phone",
    "is_valid_mobile",
    "is_valid_email",
    "validate_contact",
    # Location
    "normalize_location",
    "is_same_location",
    # Request
    "SetupAlertRequest",
    "parse_setup_request",
    # Subscription
    "MAX_LOCATIONS",
    "AlertType",
    "Location",
    "Subscription",
    "check_can_add_location",
]
