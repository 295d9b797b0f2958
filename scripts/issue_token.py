"""Mint a bearer token for local testing.

Usage: python scripts/issue_token.py <employee_id> <ROLE> [hours]
"""

from __future__ import annotations

import importlib
import sys
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.leave_portal.leave_portal.auth.provider import JWTAuthProvider
from src.leave_portal.leave_portal.core.enums import Role


def main(argv: list[str]) -> None:
    if len(argv) < 2:
        raise SystemExit(__doc__)
    settings = importlib.import_module(get_settings_module())
    provider = JWTAuthProvider(settings.JWT_SECRET, getattr(settings, "JWT_ALGORITHM", "HS256"))

    hours = int(argv[2]) if len(argv) > 2 else 8
    print(provider.issue(int(argv[0]), Role(argv[1].upper()), expires_in=timedelta(hours=hours)))


if __name__ == "__main__":
    main(sys.argv[1:])
