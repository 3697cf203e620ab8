"""Tests for the username acceptability policy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shared.auth.username_policy import (
    RESERVED_SEQUENCES,
    USERNAME_MAX_LENGTH,
    UsernamePolicyResult,
    UsernameStatus,
    load_banned_terms,
    streamline,
    validate_username,
)

if TYPE_CHECKING:
    from pathlib import Path


class TestBasicRules:
    def test_blank_rejected(self):
        assert validate_username("") == UsernamePolicyResult(UsernameStatus.CANT_BE_BLANK)

    def test_too_long_rejected(self):
        assert validate_username("a" * (USERNAME_MAX_LENGTH + 1)).status == UsernameStatus.TOO_LONG

    def test_max_length_accepted(self):
        assert validate_username("a" * USERNAME_MAX_LENGTH).ok

    def test_single_character_accepted(self):
        assert validate_username("a").ok

    @pytest.mark.parametrize("name", ["bad name", "bad.name", "bäd", "bad\n", "name!", "a/b"])
    def test_invalid_chars_rejected(self, name: str):
        assert validate_username(name).status == UsernameStatus.INVALID_CHARS

    def test_length_checked_before_charset(self):
        assert validate_username(" " * (USERNAME_MAX_LENGTH + 1)).status == UsernameStatus.TOO_LONG

    def test_length_counts_utf8_bytes(self):
        assert validate_username("é" * 17).status == UsernameStatus.TOO_LONG
        assert validate_username("é" * 16).status == UsernameStatus.INVALID_CHARS

    def test_valid_name_accepted(self):
        result = validate_username("cool-farmer_1", [])
        assert result.ok
        assert result.detail is None
        assert result.message == "OK"


class TestStreamline:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("npc_Bob", "NPC_BOB"),
            ("-_-npc-_", "NPC"),
            ("__x__", "X"),
            ("---", ""),
        ],
    )
    def test_strips_outer_separators_and_uppercases(self, name: str, expected: str):
        assert streamline(name) == expected


class TestReservedSequences:
    def test_npc_prefix_rejected(self):
        result = validate_username("npc_Bob")
        assert result.status == UsernameStatus.RESERVED_SEQUENCE
        assert result.detail == "NPC"

    def test_prefix_after_stripping_separators_rejected(self):
        result = validate_username("__Owner123")
        assert result.status == UsernameStatus.RESERVED_SEQUENCE
        assert result.detail == "OWNER"

    def test_exact_reserved_word_allowed(self):
        assert validate_username("owner").ok

    def test_reserved_word_not_at_start_allowed(self):
        assert validate_username("TheOwner").ok

    def test_mod_needs_separator(self):
        assert validate_username("modest_farmer").ok
        assert validate_username("mod_farmer").detail == "MOD_"

    def test_message_names_sequence(self):
        result = validate_username("adminstrator", reserved_sequences=["ADMIN"])
        assert result.message == (
            "RESERVED_SEQUENCE-NAME_CANNOT_BEGIN_WITH_-_ADMIN_-_CONTACT_DEVELOPER_IF_YOU_BELIEVE_THIS_IS_A_MISTAKE"
        )

    def test_sequences_are_injectable(self):
        assert validate_username("npc_Bob", reserved_sequences=()).ok
        assert validate_username("guest42", reserved_sequences=["GUEST"]).detail == "GUEST"

    def test_default_list(self):
        assert "NPC" in RESERVED_SEQUENCES
        assert "MODERATOR" in RESERVED_SEQUENCES


class TestBannedTerms:
    def test_contained_term_rejected(self):
        result = validate_username("xxbadwordxx", ["BADWORD"])
        assert result.status == UsernameStatus.CONTAINS_TERM
        assert result.detail == "BADWORD"

    def test_matching_is_case_insensitive(self):
        assert validate_username("XxBaDwOrDxX", ["badword"]).status == UsernameStatus.CONTAINS_TERM

    def test_blank_terms_ignored(self):
        assert validate_username("farmer", ["", "  "]).ok

    def test_reserved_checked_before_banned(self):
        assert validate_username("npc_badword", ["BADWORD"]).status == UsernameStatus.RESERVED_SEQUENCE

    def test_message_names_term(self):
        result = validate_username("xxbadwordxx", ["badword"])
        assert result.message == (
            "CONTAINS_TERM-NAME_CANNOT_CONTAIN_-_BADWORD_-_CONTACT_DEVELOPER_IF_YOU_BELIEVE_THIS_IS_A_MISTAKE"
        )


class TestLoadBannedTerms:
    def test_creates_missing_file(self, tmp_path: Path):
        path = tmp_path / "data" / "banned_terms.txt"
        assert load_banned_terms(path) == ()
        assert path.exists()

    def test_uppercases_and_drops_blank_lines(self, tmp_path: Path):
        path = tmp_path / "banned_terms.txt"
        path.write_text("badword\n\n  Other \n")
        assert load_banned_terms(path) == ("BADWORD", "OTHER")
