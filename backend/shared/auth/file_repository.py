"""File-backed user-record repository storing records as JSON."""

import asyncio
import contextlib
import json
import os
import tempfile
from pathlib import Path

import structlog

from shared.auth.models import UserRecord
from shared.auth.repository import UserRecordRepository

logger = structlog.get_logger()

_FILE_PERMISSIONS = 0o600  # owner read/write only


class FileUserRecordRepository(UserRecordRepository):
    """File-backed user-record repository.

    Stores records as a JSON object keyed by token. Loads into memory on first
    access and writes the whole file back on every mutation. Uses asyncio.Lock
    for write safety within a single process.

    Limitation: only supports a single API instance. The abstract
    UserRecordRepository interface allows swapping in a shared document store.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)
        self._records: dict[str, UserRecord] = {}  # keyed by token
        self._lock = asyncio.Lock()
        self._loaded = False

    async def _ensure_loaded(self) -> None:
        """Load records from file on first access."""
        async with self._lock:
            if self._loaded:
                return
            self._load_from_file()
            self._loaded = True

    def _load_from_file(self) -> None:
        """Load records from the JSON file into memory.

        Starts with an empty store when the file does not exist yet.
        Raises on read/parse failures for an existing file to prevent
        data loss from overwriting a file we could not read.
        """
        self._records = {}

        if not self._file_path.exists():
            return

        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            msg = f"Failed to load user records from {self._file_path}"
            raise OSError(msg) from exc

        if not isinstance(data, dict):
            msg = f"Expected JSON object at root in {self._file_path}"
            raise OSError(msg)

        try:
            self._records = {token: UserRecord.model_validate(raw) for token, raw in data.items()}
        except ValueError as exc:
            msg = f"Failed to parse user records from {self._file_path}"
            raise OSError(msg) from exc

    def _save_to_file(self) -> None:
        """Atomically write all records to the JSON file.

        Records contain live bearer tokens, so the file is owner-only.
        """
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        data = {token: record.model_dump() for token, record in self._records.items()}
        content = json.dumps(data, indent=2).encode("utf-8")

        fd, tmp_path = tempfile.mkstemp(
            dir=self._file_path.parent,
            prefix=".users_",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fchmod(f.fileno(), _FILE_PERMISSIONS)
            Path(tmp_path).replace(self._file_path)
        except BaseException:
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise

    async def get_by_token(self, token: str) -> UserRecord | None:
        await self._ensure_loaded()
        return self._records.get(token)

    async def create_record(self, record: UserRecord) -> None:
        """Add a record. Raises ValueError if the token is already taken."""
        await self._ensure_loaded()
        async with self._lock:
            if record.token in self._records:
                raise ValueError(f"Username '{record.username}' already taken")
            self._records[record.token] = record
            try:
                self._save_to_file()
            except OSError:
                del self._records[record.token]
                raise
        logger.debug("created user record", username=record.username)

    async def delete_record(self, token: str) -> bool:
        """Remove the record keyed by ``token``. Returns False if there was none."""
        await self._ensure_loaded()
        async with self._lock:
            record = self._records.pop(token, None)
            if record is None:
                return False
            try:
                self._save_to_file()
            except OSError:
                self._records[token] = record
                raise
        logger.info("deleted user record", username=record.username)
        return True
