from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_FULL_NAME = re.compile(r"^[A-Za-z\s]+$")
_PHONE = re.compile(r"^03[0-9]{9}$")
_USERNAME = re.compile(r"^[A-Za-z0-9]+$")

MIN_PASSWORD_LENGTH = 6


def is_valid_full_name(value: str) -> bool:
    return bool(value) and bool(_FULL_NAME.match(value))


def is_valid_phone(value: str) -> bool:
    return bool(value) and bool(_PHONE.match(value))


def is_valid_username(value: str) -> bool:
    return bool(value) and bool(_USERNAME.match(value))


def is_valid_password(value: str) -> bool:
    return value is not None and len(value) >= MIN_PASSWORD_LENGTH


class FieldErrors:
    """Collects per-field messages, raises them together."""

    def __init__(self):
        self._errors: dict[str, str] = {}

    def check(self, ok: bool, field: str, message: str) -> None:
        if not ok and field not in self._errors:
            self._errors[field] = message

    def raise_if_any(self, message: str = "Please correct the highlighted fields") -> None:
        if self._errors:
            raise ValidationError(message, field_errors=self._errors)
