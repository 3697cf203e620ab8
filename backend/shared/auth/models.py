"""Value objects for the signing secret, request identity, and user records."""

import string
import time
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

SECRET_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase + "-"
SECRET_LENGTH = 64


@dataclass(frozen=True)
class AccessSecret:
    """Shared HMAC key used to sign and verify every bearer token.

    Constructed once at startup and passed explicitly to the issuer and
    validator. The value is excluded from repr so it never ends up in logs.
    """

    value: str = field(repr=False)

    def __bool__(self) -> bool:
        return bool(self.value)

    @property
    def is_well_formed(self) -> bool:
        """True when the value has the generated shape: 64 chars from the secret alphabet."""
        return len(self.value) == SECRET_LENGTH and all(c in SECRET_ALPHABET for c in self.value)

    def as_key(self) -> bytes:
        return self.value.encode("utf-8")


@dataclass(frozen=True)
class ValidationPair:
    """Identity claimed by, and after the store cross-check confirmed for, a request."""

    username: str
    token: str


class UserRecord(BaseModel, frozen=True):
    """User record as persisted in the user-record store, keyed by token."""

    username: str = Field(min_length=1)
    token: str = Field(min_length=1)
    user_since: int = Field(default_factory=lambda: int(time.time()))
