"""Resolve toggle actions (confirm/unconfirm, hold/unhold, ...) for one entity."""

from __future__ import annotations

from typing import Any

from credgate.diagnostics import record_issue
from credgate.entity import read_flag
from credgate.evaluator import evaluate, matching_credential
from credgate.types.credentials import CredentialSet
from credgate.types.decisions import ToggleDecision
from credgate.types.issues import IntegrityIssue, IssueCode
from credgate.types.rules import Show
from credgate.types.surface import ToggleActionSpec


def _read(
    entity: Any,
    field_name: str,
    *,
    spec: ToggleActionSpec,
    role: str,
    surface: str | None,
    issues: list[IntegrityIssue] | None,
) -> bool:
    value, present = read_flag(entity, field_name)
    if not present:
        record_issue(
            issues,
            code=IssueCode.MISSING_ENTITY_FIELD,
            event="toggle.missing_field",
            message=f"Entity has no '{field_name}' field; treated as falsy",
            surface=surface,
            toggle_id=spec.id,
            field=field_name,
            role=role,
        )
    return value


def resolve_toggle(
    spec: ToggleActionSpec,
    credentials: CredentialSet,
    entity: Any,
    *,
    surface: str | None = None,
    issues: list[IntegrityIssue] | None = None,
) -> ToggleDecision:
    """Pick the applicable side of ``spec`` for ``entity`` and gate it.

    While the state flag is off, the "enter" gate decides availability of the
    off-side action (e.g. *confirm*); while it is on, the independent "leave"
    gate decides the on-side action (e.g. *unconfirm*). Dimming is read from
    ``spec.dim_when`` and never affects availability.
    """

    is_on = _read(entity, spec.state_field, spec=spec, role="state", surface=surface, issues=issues)
    dimmed = False
    if spec.dim_when:
        dimmed = _read(entity, spec.dim_when, spec=spec, role="dim", surface=surface, issues=issues)

    gate = spec.effective_leave_gate if is_on else spec.enter_gate
    available = evaluate(Show(gate), credentials, element_id=spec.id, surface=surface, issues=issues)

    if is_on:
        return ToggleDecision(
            available=available,
            variant="on",
            dimmed=dimmed,
            label=spec.on_label,
            icon=spec.on_icon,
            action=spec.effective_on_action,
            credential=matching_credential(gate, credentials) if available else None,
        )
    return ToggleDecision(
        available=available,
        variant="off",
        dimmed=dimmed,
        label=spec.off_label,
        icon=spec.off_icon,
        action=spec.effective_off_action,
        credential=matching_credential(gate, credentials) if available else None,
    )


__all__ = ["resolve_toggle"]
