"""Exception taxonomy for secret provisioning, token handling, and request auth.

Every per-request authentication failure is an ``AuthError``. Callers outside
this package only ever see ``AUTH_FAILURE_MESSAGE``; the kind and detail are kept
for operational logging so a client cannot learn which stage rejected it.
"""

from enum import StrEnum

AUTH_FAILURE_MESSAGE = (
    "Token was invalid or missing from request. Did you confirm sending the token as an authorization header?"
)


class AuthFailureKind(StrEnum):
    FORMAT = "format"
    SIGNATURE = "signature"
    CLAIMS = "claims"
    STORE = "store"
    NOT_FOUND = "not_found"


class AuthError(Exception):
    """Per-request authentication failure."""

    kind: AuthFailureKind

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    @property
    def public_message(self) -> str:
        return AUTH_FAILURE_MESSAGE


class TokenFormatError(AuthError):
    """Authorization header or compact token is malformed."""

    kind = AuthFailureKind.FORMAT


class TokenSignatureError(AuthError):
    """Signature mismatch, non-HMAC algorithm, or no verification secret."""

    kind = AuthFailureKind.SIGNATURE


class TokenClaimsError(AuthError):
    """Decoded claims do not have the expected shape."""

    kind = AuthFailureKind.CLAIMS


class UserStoreError(AuthError):
    """The user-record store failed while looking up a token."""

    kind = AuthFailureKind.STORE


class UserNotFoundError(AuthError):
    """No user record is keyed by the presented token."""

    kind = AuthFailureKind.NOT_FOUND


class SecretStoreError(Exception):
    """The signing secret could not be provisioned. The service must not start."""


class TokenIssueError(Exception):
    """A token could not be signed for a username."""
