from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from api.auth.middleware import BearerTokenMiddleware
from api.server.settings import ApiServerSettings
from api.views import claim_username, my_account, user_info
from shared.auth import AuthService, AuthSettings, FileUserRecordRepository, load_banned_terms, provision_secret
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.auth import AccessSecret, UserRecordRepository


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def create_app(
    settings: ApiServerSettings | None = None,
    auth_settings: AuthSettings | None = None,
    *,
    secret: AccessSecret | None = None,
    record_repo: UserRecordRepository | None = None,
) -> Starlette:
    """Build the API application.

    The access secret is provisioned here, before the app object exists, so no
    request can ever be served without one. ``SecretStoreError`` propagates to
    the caller and the process must not start. Tests may pass ``secret`` and
    ``record_repo`` directly.
    """
    if settings is None:  # pragma: no cover
        settings = ApiServerSettings()
    if auth_settings is None:  # pragma: no cover
        auth_settings = AuthSettings()

    if secret is None:
        secret = provision_secret(auth_settings)
    if record_repo is None:
        record_repo = FileUserRecordRepository(auth_settings.users_file)
    banned_terms = load_banned_terms(auth_settings.banned_terms_file)

    auth_service = AuthService(record_repo, secret, banned_terms=banned_terms)

    routes = [
        Route("/health", health, methods=["GET"], name="health"),
        Route("/api/users/{username}", user_info, methods=["GET"], name="user_info"),
        Route("/api/users/{username}/claim", claim_username, methods=["POST"], name="claim_username"),
        Route("/api/my/account", my_account, methods=["GET"], name="my_account"),
    ]

    app = Starlette(routes=routes)
    app.add_middleware(
        BearerTokenMiddleware,  # type: ignore[arg-type]
        auth_service=auth_service,
        protected_prefixes=settings.protected_prefixes,
    )
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.state.settings = settings
    app.state.auth_settings = auth_settings
    app.state.auth_service = auth_service

    logger.info("api server ready", protected_prefixes=settings.protected_prefixes)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory api.server.app:get_app."""
    s = ApiServerSettings()
    auth = AuthSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, auth_settings=auth)
