"""Abstract interface for user-record persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.auth.models import UserRecord


class UserRecordRepository(ABC):
    """User records keyed by their bearer token.

    A record's presence is what makes an otherwise well-signed token live;
    deleting it revokes the token. Lookup failures other than "not found"
    must raise rather than return None.
    """

    @abstractmethod
    async def get_by_token(self, token: str) -> UserRecord | None: ...

    @abstractmethod
    async def create_record(self, record: UserRecord) -> None: ...

    @abstractmethod
    async def delete_record(self, token: str) -> bool: ...
