"""Core types used across credgate."""

from credgate.types.credentials import (
    DEFAULT_ADMIN_TOKEN,
    DEFAULT_SUPERADMIN_TOKEN,
    CredentialExpr,
    CredentialGroup,
    CredentialSet,
)
from credgate.types.decisions import (
    CompiledCapabilitySet,
    ElementCapability,
    ToggleDecision,
    ToggleVariant,
)
from credgate.types.issues import IntegrityIssue, IssueCode, Severity
from credgate.types.rules import CapabilityKind, ElementSpec, GateRule, Hide, Show
from credgate.types.surface import ColumnSpec, SurfaceSchema, ToggleActionSpec

__all__ = [
    "CapabilityKind",
    "ColumnSpec",
    "CompiledCapabilitySet",
    "CredentialExpr",
    "CredentialGroup",
    "CredentialSet",
    "DEFAULT_ADMIN_TOKEN",
    "DEFAULT_SUPERADMIN_TOKEN",
    "ElementCapability",
    "ElementSpec",
    "GateRule",
    "Hide",
    "IntegrityIssue",
    "IssueCode",
    "Severity",
    "Show",
    "SurfaceSchema",
    "ToggleActionSpec",
    "ToggleDecision",
    "ToggleVariant",
]
