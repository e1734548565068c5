"""Toggle actions, list columns, and the per-surface schema aggregate."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from credgate.types.credentials import CredentialGroup
from credgate.types.rules import ElementSpec


@dataclass(frozen=True)
class ToggleActionSpec:
    """A pair of mutually exclusive actions selected by an entity flag.

    ``enter_gate`` is checked while ``state_field`` is falsy (turning the state
    on); ``leave_gate`` is checked while it is truthy (turning it back off).
    """

    id: str
    state_field: str
    enter_gate: CredentialGroup
    leave_gate: CredentialGroup | None = None
    off_label: str = ""
    on_label: str = ""
    off_icon: str | None = None
    on_icon: str | None = None
    dim_when: str | None = None
    off_action: str | None = None
    on_action: str | None = None

    @property
    def effective_leave_gate(self) -> CredentialGroup:
        return self.leave_gate if self.leave_gate is not None else self.enter_gate

    @property
    def effective_off_action(self) -> str:
        return self.off_action or self.id

    @property
    def effective_on_action(self) -> str:
        return self.on_action or f"un{self.id}"


@dataclass(frozen=True)
class ColumnSpec:
    """A list column, optionally keyed to a server-side permitted field."""

    id: str
    label: str = ""
    permission_key: str | None = None
    credential: CredentialGroup | None = None
    default_visible: bool = True


@dataclass(frozen=True)
class SurfaceSchema:
    """Everything declared for one surface (wizard, edit dialog, list, action menu)."""

    name: str
    version: str = "1"
    elements: tuple[ElementSpec, ...] = field(default_factory=tuple)
    toggles: tuple[ToggleActionSpec, ...] = field(default_factory=tuple)
    columns: tuple[ColumnSpec, ...] = field(default_factory=tuple)
    description: str | None = None
    extra: Mapping[str, Any] | None = None

    def element_ids(self) -> list[str]:
        return list(dict.fromkeys(spec.id for spec in self.elements))

    def toggle(self, toggle_id: str) -> ToggleActionSpec | None:
        for spec in self.toggles:
            if spec.id == toggle_id:
                return spec
        return None


__all__ = ["ColumnSpec", "SurfaceSchema", "ToggleActionSpec"]
