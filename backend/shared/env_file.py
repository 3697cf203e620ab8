"""Line-oriented ``KEY=VALUE`` text files (secrets.env, banned term lists).

Files are read as a list of lines split on ``\\n`` and written back in full.
Writes go through a temp file in the same directory followed by a rename, so
readers never observe a half-written file.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

import structlog

logger = structlog.get_logger()

_FILE_PERMISSIONS = 0o600  # owner read/write only


def touch(path: str | Path) -> Path:
    """Ensure the file exists, creating it (and its parent directories) empty if absent."""
    file_path = Path(path)
    if not file_path.exists():
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.touch(mode=_FILE_PERMISSIONS)
        logger.debug("created empty file", path=str(file_path))
    return file_path


def read_lines(path: str | Path) -> list[str]:
    """Read the file into a list of lines.

    An empty file yields ``[""]`` so callers can tell "blank file" apart from
    "file with content" by looking at the first line.
    """
    return Path(path).read_text(encoding="utf-8").split("\n")


def find_key_line(key: str, lines: list[str]) -> int | None:
    """Return the index of the first line that starts with ``KEY=``."""
    prefix = f"{key}="
    return next((i for i, line in enumerate(lines) if line.startswith(prefix)), None)


def write_lines(path: str | Path, lines: list[str]) -> None:
    """Atomically replace the file content with ``lines`` joined by newlines."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = "\n".join(lines).encode("utf-8")

    fd, tmp_path = tempfile.mkstemp(dir=file_path.parent, prefix=f".{file_path.name}_", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
            f.flush()
            os.fchmod(f.fileno(), _FILE_PERMISSIONS)
        Path(tmp_path).replace(file_path)
    except BaseException:
        with contextlib.suppress(OSError):
            Path(tmp_path).unlink()
        raise
