from __future__ import annotations

import time

import jwt

from ems_portal.auth.claims import get_exp_from_token, get_role_from_token, is_token_expired


def _token(payload: dict) -> str:
    return jwt.encode(payload, "any-key", algorithm="HS256")


def test_role_is_read_without_signature_check():
    token = _token({"role": "manager", "exp": int(time.time()) + 60})
    assert get_role_from_token(token) == "MANAGER"


def test_undecodable_token_has_no_role_and_is_expired():
    assert get_role_from_token("not-a-jwt") is None
    assert get_exp_from_token("not-a-jwt") is None
    assert is_token_expired("not-a-jwt") is True


def test_missing_or_empty_token():
    assert get_role_from_token(None) is None
    assert get_role_from_token("") is None
    assert is_token_expired(None) is True


def test_missing_role_claim():
    token = _token({"exp": int(time.time()) + 60})
    assert get_role_from_token(token) is None


def test_exp_one_second_in_the_past_is_expired():
    now = 1_700_000_000
    token = _token({"role": "ADMIN", "exp": now - 1})
    assert is_token_expired(token, now=now) is True


def test_exp_one_second_ahead_is_not_expired():
    now = 1_700_000_000
    token = _token({"role": "ADMIN", "exp": now + 1})
    assert is_token_expired(token, now=now) is False


def test_non_numeric_exp_fails_closed():
    token = _token({"role": "ADMIN", "exp": "tomorrow"})
    assert get_exp_from_token(token) is None
    assert is_token_expired(token) is True


def test_token_without_exp_is_expired():
    token = _token({"role": "HR"})
    assert is_token_expired(token) is True


def test_claims_come_from_payload_segment_alone():
    middle = _token({"role": "hr", "exp": 1_700_000_060}).split(".")[1]
    token = f"xx.{middle}.sig"
    assert get_role_from_token(token) == "HR"
    assert is_token_expired(token, now=1_700_000_000) is False


def test_payload_that_is_not_json_object():
    assert get_role_from_token("a.bm90LWpzb24.c") is None
    assert get_role_from_token("a.WzFd.c") is None
    assert get_role_from_token("a.!!!.c") is None
