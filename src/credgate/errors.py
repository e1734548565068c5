"""credgate error hierarchy.

Resolution itself never raises; these cover the edges where external data
enters the library (surface declaration files and credential payloads).
"""

from __future__ import annotations


class CredgateError(Exception):
    """Base class for credgate-specific exceptions."""


class SchemaError(CredgateError):
    """Raised when a surface declaration file cannot be read or validated."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class CredentialSourceError(CredgateError):
    """Raised when a credential source payload is structurally invalid."""


__all__ = [
    "CredentialSourceError",
    "CredgateError",
    "SchemaError",
]
