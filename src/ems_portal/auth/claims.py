"""Read claims from the backend's JWT without verifying it.

The signature is checked by the REST API on every call; the values read here
only decide which screens to show.
"""
from __future__ import annotations

import binascii
import json
import logging
import time
from typing import Any, Optional

from jwt.utils import base64url_decode

logger = logging.getLogger(__name__)


def _payload(token: Optional[str]) -> Optional[dict[str, Any]]:
    """Claims from the middle segment; header and signature are left to the API."""
    if not token or not isinstance(token, str):
        return None
    parts = token.split(".")
    if len(parts) < 2 or not parts[1]:
        return None
    try:
        payload = json.loads(base64url_decode(parts[1]))
    except (ValueError, TypeError, binascii.Error) as e:
        logger.debug("Undecodable token: %s", e)
        return None
    return payload if isinstance(payload, dict) else None


def get_role_from_token(token: Optional[str]) -> Optional[str]:
    payload = _payload(token)
    if not payload:
        return None
    role = payload.get("role")
    if not role or not isinstance(role, str):
        return None
    return role.upper()


def get_exp_from_token(token: Optional[str]) -> Optional[float]:
    payload = _payload(token)
    if not payload:
        return None
    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    return float(exp)


def is_token_expired(token: Optional[str], now: Optional[float] = None) -> bool:
    """True once ``now`` (Unix seconds) is past ``exp``; also True when ``exp`` can't be read."""
    exp = get_exp_from_token(token)
    if exp is None:
        return True
    now_ms = (time.time() if now is None else now) * 1000
    return now_ms > exp * 1000
