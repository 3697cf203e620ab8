"""Access secret, bearer tokens, and username policy shared by the API service."""

from shared.auth.errors import (
    AUTH_FAILURE_MESSAGE,
    AuthError,
    AuthFailureKind,
    SecretStoreError,
    TokenClaimsError,
    TokenFormatError,
    TokenIssueError,
    TokenSignatureError,
    UserNotFoundError,
    UserStoreError,
)
from shared.auth.file_repository import FileUserRecordRepository
from shared.auth.models import AccessSecret, UserRecord, ValidationPair
from shared.auth.repository import UserRecordRepository
from shared.auth.secret_store import ensure_secret, generate_secure_string, load_secret, provision_secret
from shared.auth.service import AuthService, ClaimFailure, UsernameClaimError
from shared.auth.settings import AuthSettings
from shared.auth.tokens import extract_metadata, extract_token, generate_token, verify_and_decode
from shared.auth.username_policy import (
    UsernamePolicyResult,
    UsernameStatus,
    load_banned_terms,
    validate_username,
)

__all__ = [
    "AUTH_FAILURE_MESSAGE",
    "AccessSecret",
    "AuthError",
    "AuthFailureKind",
    "AuthService",
    "AuthSettings",
    "ClaimFailure",
    "FileUserRecordRepository",
    "SecretStoreError",
    "TokenClaimsError",
    "TokenFormatError",
    "TokenIssueError",
    "TokenSignatureError",
    "UserNotFoundError",
    "UserRecord",
    "UserRecordRepository",
    "UserStoreError",
    "UsernameClaimError",
    "UsernamePolicyResult",
    "UsernameStatus",
    "ValidationPair",
    "ensure_secret",
    "extract_metadata",
    "extract_token",
    "generate_secure_string",
    "generate_token",
    "load_banned_terms",
    "load_secret",
    "provision_secret",
    "validate_username",
    "verify_and_decode",
]
