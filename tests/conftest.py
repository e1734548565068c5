"""Shared pytest fixtures for credgate tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from credgate.logging import clear_session_context
from credgate.settings import reload_settings
from credgate.types import CredentialSet

_ENV_VARS = (
    "CREDGATE_SUPERADMIN_TOKEN",
    "CREDGATE_ADMIN_TOKEN",
    "CREDGATE_SURFACES_DIR",
    "CREDGATE_LOGGING_LEVEL",
    "CREDGATE_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def reset_settings(tmp_path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from local .env / settings.toml files and env overrides."""

    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    reload_settings()
    yield
    monkeypatch.undo()
    reload_settings()


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo ``setup_logging`` so caplog sees records in later tests."""

    yield
    base_logger = logging.getLogger("credgate")
    base_logger.handlers = []
    base_logger.propagate = True
    base_logger.setLevel(logging.NOTSET)
    if hasattr(base_logger, "_credgate_configured"):
        delattr(base_logger, "_credgate_configured")
    clear_session_context()


@pytest.fixture()
def superadmin() -> CredentialSet:
    return CredentialSet.of("superadmin")


@pytest.fixture()
def anonymous() -> CredentialSet:
    return CredentialSet.anonymous()
