"""Domain helpers for member id and password validation."""
from __future__ import annotations

import re

from chat_api.core.errors import ValidationError

MEMBER_ID_PATTERN = re.compile(r"[A-Za-z0-9]{5,15}")
PASSWORD_PATTERN = re.compile(r"(?=.*[A-Z])(?=.*\d)[^\n\r\u0085\u2028\u2029]{8,}", re.ASCII)


def is_valid_member_id(value: str | None) -> bool:
    """Return True when the id is 5-15 ASCII letters or digits."""
    if not value:
        return False
    return bool(MEMBER_ID_PATTERN.fullmatch(value))


def is_valid_password(value: str | None) -> bool:
    """At least 8 characters with one uppercase letter and one digit."""
    if not value:
        return False
    return bool(PASSWORD_PATTERN.fullmatch(value))


def validate_credentials(member_id: str | None, password: str | None) -> None:
    if not is_valid_member_id(member_id):
        raise ValidationError("Invalid member id")
    if not is_valid_password(password):
        raise ValidationError("Invalid member password")


def validate_new_password(password: str | None) -> None:
    if not is_valid_password(password):
        raise ValidationError("Invalid member password")
