"""Non-fatal integrity issues collected during resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class IssueCode(str, Enum):
    SCHEMA_INTEGRITY = "SchemaIntegrityWarning"
    MISSING_ENTITY_FIELD = "MissingEntityFieldWarning"


@dataclass(frozen=True)
class IntegrityIssue:
    """A problem with schema data or an entity snapshot that resolution worked around."""

    code: IssueCode
    message: str
    element_id: str | None = None
    severity: Severity = Severity.WARNING
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code.value,
            "severity": self.severity.value,
            "element_id": self.element_id,
            "message": self.message,
        }
        if self.details:
            payload["details"] = dict(self.details)
        return payload


__all__ = ["IntegrityIssue", "IssueCode", "Severity"]
