"""Custom validation utilities."""

import re

from haulbook.core.exceptions import InvalidCoordinates

SUPPORT_ISSUE_TYPES = frozenset(
    {"technical", "billing", "delivery", "account", "general", "complaint", "feature"}
)


def validate_coordinates(latitude: float, longitude: float) -> bool:
    """Check a latitude/longitude pair is on the globe.

    Args:
        latitude: Must be within [-90, 90]
        longitude: Must be within [-180, 180]

    Returns:
        bool: True if both are in range
    """
    return -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0


def assert_valid_coordinates(latitude: float, longitude: float) -> None:
    """Raise InvalidCoordinates for an out-of-range pair."""
    if not validate_coordinates(latitude, longitude):
        raise InvalidCoordinates(latitude, longitude)


def validate_indian_phone(phone: str) -> bool:
    """Validate an Indian mobile number.

    Accepted formats:
    - +919876543210 (international)
    - 09876543210 (trunk prefix)
    - 9876543210 (ten digits, starts with 6-9)

    Args:
        phone: Phone number to validate

    Returns:
        bool: True if valid Indian mobile format
    """
    cleaned = re.sub(r"[\s\-\(\)]", "", phone)

    if cleaned.startswith("+91"):
        cleaned = cleaned[3:]
    elif cleaned.startswith("0"):
        cleaned = cleaned[1:]

    return bool(re.fullmatch(r"[6-9]\d{9}", cleaned))


def normalize_phone(phone: str) -> str:
    """Normalize an Indian mobile number to +91XXXXXXXXXX.

    Returns the input unchanged when it is not a recognizable number.
    """
    if not validate_indian_phone(phone):
        return phone
    digits = re.sub(r"\D", "", phone)
    return f"+91{digits[-10:]}"
