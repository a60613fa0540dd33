"""
Identifier validation
"""
import re

from .exceptions import InvalidReferenceException

# Firestore auto-IDs and Firebase Auth UIDs both fit this alphabet
IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,128}")


def is_valid_identifier(value) -> bool:
    return isinstance(value, str) and IDENTIFIER_PATTERN.fullmatch(value) is not None


def validate_identifier(value, label: str = "ID") -> str:
    """Return the identifier unchanged or raise InvalidReferenceException"""
    if not is_valid_identifier(value):
        raise InvalidReferenceException(f"Invalid {label}", details={"value": value})
    return value
