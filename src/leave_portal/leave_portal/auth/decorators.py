from __future__ import annotations

from functools import wraps

from flask import g, request

from ..core.exceptions import AuthenticationError
from .model import Principal
from .provider import AuthProvider


def bearer_required(provider: AuthProvider):
    """Flask view decorator: verifies ``Authorization: Bearer <token>`` and stores the principal on ``g``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            scheme, _, token = header.partition(" ")
            if scheme.lower() != "bearer" or not token.strip():
                raise AuthenticationError("Missing bearer token")
            g.principal = provider.verify(token.strip())
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_principal() -> Principal:
    principal = getattr(g, "principal", None)
    if principal is None:
        raise AuthenticationError("Not authenticated")
    return principal
