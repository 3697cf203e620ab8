"""API server configuration via environment variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import field_validator
from pydantic_settings import BaseSettings

from api.auth.middleware import DEFAULT_PROTECTED_PREFIXES
from shared.validators import StringListEnvSettingsSource, parse_path_prefixes, parse_string_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class ApiServerSettings(BaseSettings):
    model_config = {"env_prefix": "API_"}

    log_dir: str = "backend/logs/api"
    cors_origins: list[str] = []
    # Routes under these prefixes require a bearer token
    protected_prefixes: list[str] = list(DEFAULT_PROTECTED_PREFIXES)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v, allow_empty=True)

    @field_validator("protected_prefixes", mode="before")
    @classmethod
    def validate_protected_prefixes(cls, v: str | list[str]) -> list[str]:
        return parse_path_prefixes(v)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, StringListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings)
