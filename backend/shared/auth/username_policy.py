"""Acceptability rules for player-chosen usernames.

Rules are applied in order and the first failing rule wins:

1. not blank
2. at most ``USERNAME_MAX_LENGTH`` bytes of UTF-8
3. only letters, digits, ``-`` and ``_``
4. the streamlined name (outer ``-``/``_`` stripped, upper-cased) does not start
   with a reserved sequence
5. the streamlined name does not contain a banned term

Rejections are shown to the player, unlike authentication failures.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from shared import env_file

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = structlog.get_logger()

USERNAME_MAX_LENGTH = 32
USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

_CONTACT_SUFFIX = "CONTACT_DEVELOPER_IF_YOU_BELIEVE_THIS_IS_A_MISTAKE"

# Prefixes reserved for NPCs, staff roles and the owner.
RESERVED_SEQUENCES: tuple[str, ...] = (
    "NPC",
    "OWNER",
    "MOD-",
    "MOD_",
    "CONTRIBUTOR",
    "ADMIN-",
    "ADMIN_",
    "ADMINISTRATOR",
    "MODERATOR",
)


class UsernameStatus(StrEnum):
    OK = "OK"
    CANT_BE_BLANK = "CANT_BE_BLANK"
    TOO_LONG = "TOO_LONG"
    INVALID_CHARS = "INVALID_CHARS"
    RESERVED_SEQUENCE = "RESERVED_SEQUENCE"
    CONTAINS_TERM = "CONTAINS_TERM"


@dataclass(frozen=True)
class UsernamePolicyResult:
    status: UsernameStatus
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == UsernameStatus.OK

    @property
    def message(self) -> str:
        """Player-facing diagnostic, e.g. ``RESERVED_SEQUENCE-NAME_CANNOT_BEGIN_WITH_-_NPC_-_...``."""
        if self.status == UsernameStatus.RESERVED_SEQUENCE:
            return f"{self.status}-NAME_CANNOT_BEGIN_WITH_-_{self.detail}_-_{_CONTACT_SUFFIX}"
        if self.status == UsernameStatus.CONTAINS_TERM:
            return f"{self.status}-NAME_CANNOT_CONTAIN_-_{self.detail}_-_{_CONTACT_SUFFIX}"
        return str(self.status)


def streamline(username: str) -> str:
    """Strip leading/trailing ``-`` and ``_`` and upper-case the rest."""
    return username.strip("-_").upper()


def validate_username(
    candidate: str,
    banned_terms: Iterable[str] = (),
    reserved_sequences: Iterable[str] = RESERVED_SEQUENCES,
) -> UsernamePolicyResult:
    if candidate == "":
        return UsernamePolicyResult(UsernameStatus.CANT_BE_BLANK)
    if len(candidate.encode("utf-8")) > USERNAME_MAX_LENGTH:
        return UsernamePolicyResult(UsernameStatus.TOO_LONG)
    if not USERNAME_PATTERN.fullmatch(candidate):
        return UsernamePolicyResult(UsernameStatus.INVALID_CHARS)

    streamlined = streamline(candidate)

    # An exact match is allowed through; only strictly longer names are checked.
    for sequence in reserved_sequences:
        if len(sequence) < len(streamlined) and streamlined.startswith(sequence.upper()):
            return UsernamePolicyResult(UsernameStatus.RESERVED_SEQUENCE, detail=sequence.upper())

    for term in banned_terms:
        normalized = term.strip().upper()
        if normalized and normalized in streamlined:
            return UsernamePolicyResult(UsernameStatus.CONTAINS_TERM, detail=normalized)

    return UsernamePolicyResult(UsernameStatus.OK)


def load_banned_terms(path: str | Path) -> tuple[str, ...]:
    """Load the banned-term list, one term per line, creating an empty file if missing.

    Terms are upper-cased to match the streamlined form. Blank lines are dropped
    since an empty term would match every name.
    """
    env_file.touch(path)
    terms = tuple(line.strip().upper() for line in env_file.read_lines(path) if line.strip())
    logger.info("loaded banned username terms", path=str(path), count=len(terms))
    return terms
