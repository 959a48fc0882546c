"""Log in against the configured backend and print what the portal would see.

Usage: python scripts/check_api.py <username> <password>
"""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from ems_portal.api.client import ApiClient, ApiConfig
from ems_portal.auth.claims import get_exp_from_token, get_role_from_token
from ems_portal.auth.http_auth_repository import HttpAuthRepository
from ems_portal.core.exceptions import ApiError


def main() -> int:
    if len(sys.argv) != 3:
        print(__doc__.strip().splitlines()[-1])
        return 2

    settings = importlib.import_module(get_settings_module())
    api_config = dict(settings.API_CONFIG)
    token: dict[str, str] = {}
    api = ApiClient(
        ApiConfig(base_url=api_config["base_url"], timeout_seconds=float(api_config.get("timeout_seconds", 15))),
        token_provider=lambda: token.get("value"),
    )
    repo = HttpAuthRepository(api)

    try:
        result = repo.login(sys.argv[1], sys.argv[2])
        token["value"] = result.token
        me = repo.current_user()
    except ApiError as e:
        print(f"FAIL: {e.message}")
        return 1

    print(
        "OK: Logged in -> "
        f"{api_config['base_url']} role={get_role_from_token(result.token) or result.role} "
        f"exp={get_exp_from_token(result.token)} user={me.full_name} employeeId={me.employee_id}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
