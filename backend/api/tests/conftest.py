"""Shared fixtures for API tests."""

from __future__ import annotations

import pytest

from shared.auth.models import AccessSecret, UserRecord
from shared.auth.repository import UserRecordRepository


class CountingRecordRepository(UserRecordRepository):
    """In-memory record store that counts lookups."""

    def __init__(self) -> None:
        self.records: dict[str, UserRecord] = {}
        self.lookups = 0

    async def get_by_token(self, token: str) -> UserRecord | None:
        self.lookups += 1
        return self.records.get(token)

    async def create_record(self, record: UserRecord) -> None:
        if record.token in self.records:
            raise ValueError(f"Username '{record.username}' already taken")
        self.records[record.token] = record

    async def delete_record(self, token: str) -> bool:
        return self.records.pop(token, None) is not None


@pytest.fixture
def record_repo() -> CountingRecordRepository:
    return CountingRecordRepository()


@pytest.fixture
def secret() -> AccessSecret:
    return AccessSecret("S1")
