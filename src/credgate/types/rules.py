"""Gate rules and element declarations."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

from credgate.types.credentials import CredentialExpr, CredentialGroup


class CapabilityKind(str, enum.Enum):
    """Capabilities a rule can gate on a single element."""

    VISIBLE = "visible"
    EDITABLE = "editable"


@dataclass(frozen=True)
class Show:
    """Grant the capability when the actor holds any token of ``group``.

    Superadmin bypasses this gate.
    """

    group: CredentialGroup

    @classmethod
    def of(cls, expr: CredentialExpr) -> "Show":
        return cls(group=CredentialGroup.parse(expr))


@dataclass(frozen=True)
class Hide:
    """Revoke the capability when ``token`` is in the actor's raw permissions.

    Superadmin does not bypass this gate.
    """

    token: str


GateRule = Union[Show, Hide]


@dataclass(frozen=True)
class ElementSpec:
    """One gated capability of a field, column, or action."""

    id: str
    rule: GateRule | None = None
    kind: CapabilityKind = CapabilityKind.VISIBLE
    default_when_no_rule: bool = True
    label: str | None = None

    @property
    def key(self) -> tuple[str, CapabilityKind]:
        return (self.id, self.kind)


__all__ = ["CapabilityKind", "ElementSpec", "GateRule", "Hide", "Show"]
