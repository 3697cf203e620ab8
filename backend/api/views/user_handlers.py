"""User endpoints: username claim (account creation) and the caller's own account."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.responses import JSONResponse

from api.auth.identity import MissingIdentityError, take_identity
from shared.auth.errors import TokenIssueError
from shared.auth.service import UsernameClaimError

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.auth.service import AuthService

logger = structlog.get_logger()

STORE_FAILURE_MESSAGE = "Could not access the user store"


async def claim_username(request: Request) -> JSONResponse:
    """POST /api/users/{username}/claim - create an account and return its bearer token."""
    auth_service: AuthService = request.app.state.auth_service
    username = request.path_params["username"]

    try:
        record = await auth_service.claim_username(username)
    except UsernameClaimError as e:
        detail = e.policy_result.detail if e.policy_result is not None else None
        return JSONResponse({"error": str(e), "code": e.code, "detail": detail}, status_code=400)
    except TokenIssueError:
        logger.exception("could not generate token for username claim", username=username)
        return JSONResponse(
            {"error": "Username passed validation but a token could not be generated"},
            status_code=500,
        )
    except OSError:
        logger.exception("user store failed during username claim", username=username)
        return JSONResponse({"error": STORE_FAILURE_MESSAGE}, status_code=500)

    return JSONResponse(record.model_dump(), status_code=201)


async def user_info(request: Request) -> JSONResponse:
    """GET /api/users/{username} - public fields of a claimed account."""
    auth_service: AuthService = request.app.state.auth_service
    username = request.path_params["username"]

    try:
        record = await auth_service.get_public_record(username)
    except TokenIssueError:
        logger.exception("could not derive lookup token for username", username=username)
        return JSONResponse({"error": "Could not convert username to a lookup token"}, status_code=500)
    except OSError:
        logger.exception("user store failed during username lookup", username=username)
        return JSONResponse({"error": STORE_FAILURE_MESSAGE}, status_code=500)

    if record is None:
        return JSONResponse({"error": "User not found"}, status_code=404)
    return JSONResponse({"username": record.username, "user_since": record.user_since})


async def my_account(request: Request) -> JSONResponse:
    """GET /api/my/account - the authenticated caller's stored account."""
    auth_service: AuthService = request.app.state.auth_service

    try:
        pair = take_identity(request)
    except MissingIdentityError:
        logger.error("secure route reached without validated identity", path=request.url.path)
        return JSONResponse({"error": "Could not get validated identity for request"}, status_code=500)

    record = await auth_service.get_record(pair)
    if record is None:
        return JSONResponse({"error": "User not found"}, status_code=404)
    return JSONResponse({"username": record.username, "user_since": record.user_since})
