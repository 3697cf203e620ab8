"""Issue and validate bearer tokens signed with the shared access secret.

Tokens are compact JWS strings (HS256) carrying a single ``username`` claim.
No timestamp, nonce, or expiry is embedded, so issuance is a pure function of
(username, secret): the same name under the same secret always yields the same
token, which is why the user-record store can be keyed by it. Regenerating the
secret invalidates every token at once.

Validation accepts only the HMAC family. A token declaring any other ``alg``
(``none``, RS256, ...) is rejected before the secret is ever used as a key.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import jwt
import structlog

from shared.auth.errors import TokenClaimsError, TokenFormatError, TokenIssueError, TokenSignatureError
from shared.auth.models import ValidationPair

if TYPE_CHECKING:
    from shared.auth.models import AccessSecret

logger = structlog.get_logger()

SIGNING_ALGORITHM = "HS256"
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
USERNAME_CLAIM = "username"

_HEADER_PARTS = 2  # "<scheme> <token>"


@dataclass(frozen=True)
class DecodedToken:
    """Result of a signature check.

    ``verify_and_decode`` raises on every failure, so the instances it returns
    always have ``valid`` set; the flag records that PyJWT verified the token.
    """

    raw: str
    header: dict[str, Any]
    claims: Any
    valid: bool


def generate_token(username: str, secret: AccessSecret) -> str:
    """Sign ``{"username": username.lower()}`` with the access secret."""
    if not secret:
        raise TokenIssueError("Access secret is empty, cannot sign token")
    try:
        return jwt.encode({USERNAME_CLAIM: username.lower()}, secret.as_key(), algorithm=SIGNING_ALGORITHM)
    except jwt.PyJWTError as exc:
        raise TokenIssueError(f"Could not sign token: {exc}") from exc


def extract_token(authorization: str | None) -> str | None:
    """Return the token part of ``"<scheme> <token>"``, or None if the header has another shape.

    The scheme itself is not checked. Segments are split on single spaces, so
    ``"Bearer  x"`` (two spaces) is three segments and rejected.
    """
    if authorization is None:
        return None
    parts = authorization.split(" ")
    if len(parts) != _HEADER_PARTS:
        return None
    return parts[1]


def verify_and_decode(token: str, secret: AccessSecret) -> DecodedToken:
    """Verify an HMAC signature on ``token`` and return its decoded parts."""
    if not secret:
        raise TokenSignatureError("Access secret is not available for verification")

    try:
        decoded = jwt.decode_complete(
            token,
            secret.as_key(),
            algorithms=list(HMAC_ALGORITHMS),
            options={"verify_aud": False},
        )
    except jwt.InvalidAlgorithmError as exc:
        raise TokenSignatureError(f"Unexpected signing method: {exc}") from exc
    except (jwt.InvalidSignatureError, jwt.InvalidKeyError) as exc:
        raise TokenSignatureError(str(exc)) from exc
    except jwt.DecodeError as exc:
        raise TokenFormatError(f"Could not decode token: {exc}") from exc
    except jwt.PyJWTError as exc:
        raise TokenClaimsError(str(exc)) from exc

    return DecodedToken(raw=token, header=decoded["header"], claims=decoded["payload"], valid=True)


def extract_metadata(authorization: str | None, secret: AccessSecret) -> ValidationPair:
    """Extract, verify and decode the bearer token, returning the claimed identity."""
    token = extract_token(authorization)
    if token is None:
        raise TokenFormatError("Token extraction from authorization header failed")

    decoded = verify_and_decode(token, secret)
    if not decoded.valid or not _is_string_keyed_mapping(decoded.claims):
        raise TokenClaimsError("Token invalid or claims are not a string-keyed mapping")

    username = decoded.claims.get(USERNAME_CLAIM)
    if not isinstance(username, str) or not username:
        raise TokenClaimsError("Token has no username claim")

    return ValidationPair(username=username, token=decoded.raw)


def _is_string_keyed_mapping(value: object) -> bool:
    return isinstance(value, Mapping) and all(isinstance(k, str) for k in value)
