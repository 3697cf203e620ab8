"""Provisioning of the shared token signing secret.

The secret lives in a line-oriented env file (``data/secrets.env`` by default)
under a fixed key. At startup it is either regenerated, which implicitly
invalidates every token issued under the previous value, or loaded as-is.
Failures raise ``SecretStoreError`` so the boot sequence can refuse to start.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

import structlog
from dotenv import dotenv_values

from shared import env_file
from shared.auth.errors import SecretStoreError
from shared.auth.models import SECRET_ALPHABET, SECRET_LENGTH, AccessSecret

if TYPE_CHECKING:
    from pathlib import Path

    from shared.auth.settings import AuthSettings

logger = structlog.get_logger()

SECRET_KEY = "APRICATE_ACCESS_SECRET"


def generate_secure_string(n: int) -> str:
    """Return ``n`` characters drawn uniformly from ``SECRET_ALPHABET``.

    ``secrets.choice`` uses a bounded draw from the OS CSPRNG, so there is no
    modulo bias toward the start of the alphabet.
    """
    if n < 0:
        raise ValueError(f"Length must be non-negative, got {n}")
    return "".join(secrets.choice(SECRET_ALPHABET) for _ in range(n))


def ensure_secret(path: str | Path, key: str = SECRET_KEY) -> AccessSecret:
    """Generate a new secret, write it under ``key`` in ``path`` and return it.

    The file is created if missing. An existing ``KEY=`` line is replaced in
    place; otherwise the secret replaces the first line of an empty file or is
    appended. All other lines are preserved.
    """
    try:
        env_file.touch(path)
        lines = env_file.read_lines(path)
    except OSError as exc:
        raise SecretStoreError(f"Could not read secret file {path}") from exc

    try:
        value = generate_secure_string(SECRET_LENGTH)
    except (OSError, NotImplementedError) as exc:
        raise SecretStoreError("Could not generate secure secret") from exc

    secret_line = f"{key}={value}"
    index = env_file.find_key_line(key, lines)
    if index is not None:
        lines[index] = secret_line
    elif lines[0] == "":
        lines[0] = secret_line
    else:
        lines.append(secret_line)

    try:
        env_file.write_lines(path, lines)
    except OSError as exc:
        raise SecretStoreError(f"Could not write secret file {path}") from exc

    logger.info("wrote new access secret", path=str(path), key=key)
    return AccessSecret(value)


def load_secret(path: str | Path, key: str = SECRET_KEY) -> AccessSecret:
    """Load the existing secret from ``path`` without regenerating it."""
    try:
        values = dotenv_values(path, encoding="utf-8")
    except OSError as exc:
        raise SecretStoreError(f"Could not read secret file {path}") from exc

    value = values.get(key)
    if not value:
        raise SecretStoreError(f"{key} is not set in {path}")
    secret = AccessSecret(value)
    if not secret.is_well_formed:
        raise SecretStoreError(f"{key} in {path} is not a valid access secret")

    logger.info("loaded access secret", path=str(path), key=key)
    return secret


def provision_secret(settings: AuthSettings) -> AccessSecret:
    """Regenerate or load the secret according to ``settings.regenerate_secret``."""
    if settings.regenerate_secret:
        return ensure_secret(settings.secret_file, settings.secret_key)
    return load_secret(settings.secret_file, settings.secret_key)
