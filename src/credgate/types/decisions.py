"""Resolution results handed to the rendering layer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal

from credgate.types.issues import IntegrityIssue

ToggleVariant = Literal["on", "off"]


@dataclass(frozen=True)
class ElementCapability:
    visible: bool = True
    editable: bool = True

    def to_dict(self) -> dict[str, bool]:
        return {"visible": self.visible, "editable": self.editable}


@dataclass(frozen=True)
class ToggleDecision:
    """Which side of a toggle applies to an entity and whether the actor may use it.

    ``dimmed`` is a presentation hint only; it never changes ``available``.
    """

    available: bool
    variant: ToggleVariant
    dimmed: bool
    label: str
    action: str
    icon: str | None = None
    credential: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "available": self.available,
            "variant": self.variant,
            "dimmed": self.dimmed,
            "label": self.label,
            "action": self.action,
            "icon": self.icon,
            "credential": self.credential,
        }


def _freeze(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class CompiledCapabilitySet:
    """Per-element and per-toggle decisions for one surface evaluation."""

    elements: Mapping[str, ElementCapability] = field(default_factory=dict)
    toggles: Mapping[str, ToggleDecision] = field(default_factory=dict)
    issues: tuple[IntegrityIssue, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", _freeze(self.elements))
        object.__setattr__(self, "toggles", _freeze(self.toggles))
        object.__setattr__(self, "issues", tuple(self.issues))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompiledCapabilitySet):
            return NotImplemented
        return (
            dict(self.elements) == dict(other.elements)
            and dict(self.toggles) == dict(other.toggles)
            and self.issues == other.issues
        )

    def capability(self, element_id: str) -> ElementCapability:
        # Elements the surface never declared are unrestricted.
        return self.elements.get(element_id, ElementCapability())

    def is_visible(self, element_id: str) -> bool:
        return self.capability(element_id).visible

    def is_editable(self, element_id: str) -> bool:
        return self.capability(element_id).editable

    def hidden_ids(self) -> frozenset[str]:
        return frozenset(key for key, value in self.elements.items() if not value.visible)

    def to_dict(self) -> dict[str, Any]:
        return {
            "elements": {key: value.to_dict() for key, value in sorted(self.elements.items())},
            "toggles": {key: value.to_dict() for key, value in sorted(self.toggles.items())},
            "issues": [issue.to_dict() for issue in self.issues],
        }


__all__ = [
    "CompiledCapabilitySet",
    "ElementCapability",
    "ToggleDecision",
    "ToggleVariant",
]
