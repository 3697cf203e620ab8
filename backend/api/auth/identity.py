"""Typed, request-scoped handoff of the authenticated identity.

The middleware stores the ``ValidationPair`` in the request's own ASGI scope
state; handlers retrieve it exactly once with ``take_identity``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared.auth.models import ValidationPair

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.types import Scope

_IDENTITY_STATE_KEY = "validation_pair"


class MissingIdentityError(Exception):
    """The handler ran without an identity from the auth middleware, or took it twice."""


def attach_identity(scope: Scope, pair: ValidationPair) -> None:
    scope.setdefault("state", {})[_IDENTITY_STATE_KEY] = pair


def take_identity(request: Request) -> ValidationPair:
    """Remove and return the identity attached by ``BearerTokenMiddleware``."""
    state = request.scope.get("state") or {}
    pair = state.pop(_IDENTITY_STATE_KEY, None)
    if not isinstance(pair, ValidationPair):
        raise MissingIdentityError("No validated identity attached to this request")
    return pair
