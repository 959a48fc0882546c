from __future__ import annotations

import pytest

from ems_portal.common.validators import (
    FieldErrors,
    is_valid_full_name,
    is_valid_password,
    is_valid_phone,
    is_valid_username,
)
from ems_portal.core.exceptions import ValidationError


def test_full_name_letters_and_spaces():
    assert is_valid_full_name("Ali Khan")
    assert not is_valid_full_name("Ali2")
    assert not is_valid_full_name("")


def test_phone_format():
    assert is_valid_phone("03001234567")
    assert not is_valid_phone("0300123456")
    assert not is_valid_phone("04001234567")


def test_username_and_password():
    assert is_valid_username("ali01")
    assert not is_valid_username("ali_01")
    assert is_valid_password("secret")
    assert not is_valid_password("12345")


def test_field_errors_keep_first_message_per_field():
    errors = FieldErrors()
    errors.check(False, "email", "first")
    errors.check(False, "email", "second")
    errors.check(True, "phone", "never")

    with pytest.raises(ValidationError) as exc:
        errors.raise_if_any()

    assert exc.value.field_errors == {"email": "first"}


def test_field_errors_silent_when_clean():
    FieldErrors().raise_if_any()
