"""Settings for credgate using pydantic-settings.

Values are loaded from (in precedence order):
init kwargs > env vars (``CREDGATE_*``) > .env file > settings.toml > defaults.
"""

from __future__ import annotations

import logging
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from credgate.types.credentials import DEFAULT_ADMIN_TOKEN, DEFAULT_SUPERADMIN_TOKEN


def _toml_settings_source() -> dict[str, Any]:
    """Load settings from ``settings.toml`` if present.

    Accepts either top-level keys or a nested ``[credgate]`` table.
    """

    path = Path("settings.toml")
    if not path.exists():
        return {}

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return {}

    nested = data.get("credgate")
    if isinstance(nested, dict):
        return nested
    return data


class Settings(BaseSettings):
    """Runtime settings for credential resolution and its tooling."""

    model_config = SettingsConfigDict(
        env_prefix="CREDGATE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    # Reserved credential tokens
    superadmin_token: str = Field(
        default=DEFAULT_SUPERADMIN_TOKEN,
        description="Token whose presence in permissions or groups marks the actor as superadmin.",
    )
    admin_token: str = Field(
        default=DEFAULT_ADMIN_TOKEN,
        description="Token whose presence in permissions or groups marks the actor as admin.",
    )

    # Surface discovery
    surfaces_dir: Path | None = Field(
        default=None,
        description="Extra directory searched for <name>.toml / <name>.json surface files.",
    )

    # Logging
    logging_level: str = Field(default="INFO")
    log_format: Literal["text", "ndjson"] = Field(default="text")

    @field_validator("superadmin_token", "admin_token")
    @classmethod
    def _ensure_token_non_empty(cls, v: str) -> str:
        candidate = v.strip()
        if not candidate:
            raise ValueError("reserved tokens must be non-empty")
        return candidate

    @field_validator("logging_level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        candidate = v.strip().upper()
        if not isinstance(logging.getLevelNamesMapping().get(candidate), int):
            raise ValueError(f"Invalid logging level: {v}")
        return candidate

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):  # type: ignore[override]
        toml_source = lambda: _toml_settings_source()
        # Precedence: init > env vars > .env > TOML > defaults
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            toml_source,
            file_secret_settings,
        )


@lru_cache(maxsize=1)
def _build_settings() -> Settings:
    return Settings()


def get_settings() -> Settings:
    return _build_settings()


def reload_settings() -> Settings:
    _build_settings.cache_clear()
    return _build_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]
