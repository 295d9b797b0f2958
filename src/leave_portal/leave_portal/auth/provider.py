from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

import jwt

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import Principal


class AuthProvider(Protocol):
    def verify(self, token: str) -> Principal:
        raise NotImplementedError


class JWTAuthProvider(AuthProvider):
    """Verifies bearer tokens issued by the identity service.

    Expected claims: ``sub`` (employee id) and ``role``.
    """

    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm

    def verify(self, token: str) -> Principal:
        if not token:
            raise AuthenticationError("Missing bearer token")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired", code="TOKEN_EXPIRED")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token", code="INVALID_TOKEN")

        try:
            employee_id = int(payload["sub"])
            role = Role(str(payload["role"]).upper())
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Token is missing the sub or role claim", code="INVALID_TOKEN")
        return Principal(employee_id=employee_id, role=role)

    def issue(self, employee_id: int, role: Role, *, expires_in: Optional[timedelta] = timedelta(hours=8)) -> str:
        """Mint a token; used by scripts and tests, the portal itself never logs anyone in."""

        now = datetime.now(timezone.utc)
        payload = {"sub": str(int(employee_id)), "role": Role(role).value, "iat": now}
        if expires_in is not None:
            payload["exp"] = now + expires_in
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)
