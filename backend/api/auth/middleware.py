"""Bearer-token auth middleware for secure API routes.

Requests under a protected prefix must carry ``Authorization: <scheme> <token>``.
The token is verified against the access secret, then cross-checked against the
user-record store. Any failure ends the request with the same opaque 401; the
reason is only logged. The store is never consulted for a token that failed
verification.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.datastructures import Headers
from starlette.responses import JSONResponse

from api.auth.identity import attach_identity
from shared.auth.errors import AUTH_FAILURE_MESSAGE, AuthError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from starlette.types import ASGIApp, Receive, Scope, Send

    from shared.auth.service import AuthService

logger = structlog.get_logger()

DEFAULT_PROTECTED_PREFIXES = ("/api/my",)


class BearerTokenMiddleware:
    """Validate bearer tokens on protected routes and attach the identity."""

    def __init__(
        self,
        app: ASGIApp,
        auth_service: AuthService,
        protected_prefixes: Iterable[str] = DEFAULT_PROTECTED_PREFIXES,
    ) -> None:
        self.app = app
        self._auth_service = auth_service
        self._protected_prefixes = tuple(p.rstrip("/") for p in protected_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope["path"].rstrip("/") or "/"
        if not self._is_protected(path):
            await self.app(scope, receive, send)
            return

        authorization = Headers(scope=scope).get("authorization")
        try:
            claimed = self._auth_service.extract_metadata(authorization)
            pair = await self._auth_service.authenticate_with_store(claimed)
        except AuthError as exc:
            logger.info("authentication failed", path=path, kind=exc.kind, reason=exc.detail)
            response = JSONResponse({"error": AUTH_FAILURE_MESSAGE}, status_code=401)
            await response(scope, receive, send)
            return

        structlog.contextvars.bind_contextvars(username=pair.username)
        attach_identity(scope, pair)
        try:
            await self.app(scope, receive, send)
        finally:
            structlog.contextvars.unbind_contextvars("username")

    def _is_protected(self, path: str) -> bool:
        return any(path == prefix or path.startswith(f"{prefix}/") for prefix in self._protected_prefixes)
