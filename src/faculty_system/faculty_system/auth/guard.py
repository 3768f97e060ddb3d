"""Role-based authorization for JSON routes.

One decorator for every role combination: ``@guard.roles_required(Role.PROFESSOR)``.
Course-level checks (does this professor teach that course?) live in the services.
"""
from __future__ import annotations

import logging
from functools import wraps

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .tokens import Identity, TokenService

logger = logging.getLogger(__name__)


def current_identity() -> Identity:
    identity = g.get("identity")
    if identity is None:
        raise AuthenticationError("Unauthorized")
    return identity


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Unauthorized")
    return token.strip()


class AuthGuard:
    def __init__(self, tokens: TokenService):
        self._tokens = tokens

    def authenticate_request(self) -> Identity:
        identity = self._tokens.verify(_bearer_token())
        g.identity = identity
        return identity

    def roles_required(self, *roles: Role):
        allowed = frozenset(roles)

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                identity = self.authenticate_request()
                if allowed and identity.role not in allowed:
                    logger.info(
                        "Denied %s %s for user %s (role=%s)",
                        request.method, request.path, identity.user_id, identity.role.value,
                    )
                    raise AuthorizationError("Forbidden")
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def login_required(self, view):
        return self.roles_required()(view)
