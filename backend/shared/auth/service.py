"""Auth service coordinating token validation, the store cross-check, and username claims."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from shared.auth.errors import UserNotFoundError, UserStoreError
from shared.auth.models import UserRecord, ValidationPair
from shared.auth.tokens import extract_metadata, generate_token
from shared.auth.username_policy import UsernamePolicyResult, validate_username

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shared.auth.models import AccessSecret
    from shared.auth.repository import UserRecordRepository

logger = structlog.get_logger()


class ClaimFailure(StrEnum):
    POLICY = "USERNAME_POLICY"
    ALREADY_EXISTS = "USER_ALREADY_EXISTS"


class UsernameClaimError(Exception):
    """A username could not be claimed. The message is safe to show to the player."""

    def __init__(self, reason: ClaimFailure, policy_result: UsernamePolicyResult | None = None) -> None:
        self.reason = reason
        self.policy_result = policy_result
        message = policy_result.message if policy_result is not None else str(reason)
        super().__init__(message)

    @property
    def code(self) -> str:
        if self.policy_result is not None:
            return str(self.policy_result.status)
        return str(self.reason)


class AuthService:
    """Validate bearer tokens against the access secret and the user-record store.

    The secret is fixed for the lifetime of the service; build a new service to
    use a different one.
    """

    def __init__(
        self,
        record_repo: UserRecordRepository,
        secret: AccessSecret,
        *,
        banned_terms: Iterable[str] = (),
    ) -> None:
        self._record_repo = record_repo
        self._secret = secret
        self._banned_terms = tuple(banned_terms)

    def extract_metadata(self, authorization: str | None) -> ValidationPair:
        """Verify the Authorization header and return the identity it claims."""
        return extract_metadata(authorization, self._secret)

    async def authenticate_with_store(self, pair: ValidationPair) -> ValidationPair:
        """Confirm a verified token is still backed by a user record.

        Returns the identity as stored, which is what downstream handlers act on.
        """
        try:
            record = await self._record_repo.get_by_token(pair.token)
        except Exception as exc:
            raise UserStoreError(f"Could not look up user record for username {pair.username!r}: {exc}") from exc
        if record is None:
            raise UserNotFoundError(f"No user record found for username {pair.username!r}")
        return ValidationPair(username=record.username, token=record.token)

    async def validate_request(self, authorization: str | None) -> ValidationPair:
        """Run header verification followed by the store cross-check."""
        pair = self.extract_metadata(authorization)
        return await self.authenticate_with_store(pair)

    async def get_record(self, pair: ValidationPair) -> UserRecord | None:
        return await self._record_repo.get_by_token(pair.token)

    async def get_public_record(self, username: str) -> UserRecord | None:
        """Look up the record for ``username`` by deriving its token.

        Letter case is ignored, as for claims. Raises TokenIssueError when the
        lookup token cannot be signed; store failures propagate unchanged.
        """
        token = generate_token(username, self._secret)
        return await self._record_repo.get_by_token(token)

    async def claim_username(self, username: str) -> UserRecord:
        """Create a user record for ``username`` and return it with its token.

        Raises UsernameClaimError when the name is rejected by the policy or is
        already claimed (in any letter case). Token signing and store failures
        propagate unchanged.
        """
        result = validate_username(username, self._banned_terms)
        if not result.ok:
            logger.debug("username rejected by policy", username=username, status=result.status, detail=result.detail)
            raise UsernameClaimError(ClaimFailure.POLICY, result)

        token = generate_token(username, self._secret)
        if await self._record_repo.get_by_token(token) is not None:
            raise UsernameClaimError(ClaimFailure.ALREADY_EXISTS)

        record = UserRecord(username=username, token=token)
        try:
            await self._record_repo.create_record(record)
        except ValueError as e:
            raise UsernameClaimError(ClaimFailure.ALREADY_EXISTS) from e
        logger.info("claimed username", username=username)
        return record
