"""Compile a surface schema into the capability set consumed by rendering."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from credgate.diagnostics import record_issue
from credgate.evaluator import grants
from credgate.logging import log_context
from credgate.toggles import resolve_toggle
from credgate.types.credentials import CredentialSet
from credgate.types.decisions import CompiledCapabilitySet, ElementCapability, ToggleDecision
from credgate.types.issues import IntegrityIssue, IssueCode
from credgate.types.rules import CapabilityKind, ElementSpec
from credgate.types.surface import SurfaceSchema

logger = logging.getLogger(__name__)


def _element_decision(
    spec: ElementSpec,
    credentials: CredentialSet,
    *,
    surface: str | None,
    issues: list[IntegrityIssue],
) -> bool:
    if spec.rule is None:
        return spec.default_when_no_rule
    return grants(spec.rule, credentials, element_id=spec.id, surface=surface, issues=issues)


def _fold_sub_elements(
    decisions: dict[tuple[str, CapabilityKind], bool],
    element_ids: list[str],
) -> None:
    """AND each ``<parent>.<suffix>`` decision into its declared parent.

    Deepest ids fold first so chains collapse onto the top-level field.
    """

    declared = set(element_ids)
    for element_id in sorted(element_ids, key=lambda value: value.count("."), reverse=True):
        parent, sep, _ = element_id.rpartition(".")
        if not sep or parent not in declared:
            continue
        for kind in CapabilityKind:
            child = decisions.get((element_id, kind))
            if child is not None:
                decisions[(parent, kind)] = decisions.get((parent, kind), True) and child


def compile_capabilities(
    schema: SurfaceSchema | Sequence[ElementSpec],
    credentials: CredentialSet,
    entity: Any = None,
) -> CompiledCapabilitySet:
    """Evaluate every element (and, given an entity, every toggle) of ``schema``.

    Decisions are keyed by ``(id, kind)``; a kind an element never declares is
    granted. A ``(id, kind)`` pair declared more than once is reported and
    granted only if every declaration grants it. An element declared as
    ``<parent>.<suffix>`` (for example ``total_price_with_taxe.template``)
    also gates its declared parent: the parent keeps a capability only if the
    sub-element grants it too.
    """

    if isinstance(schema, SurfaceSchema):
        surface: str | None = schema.name
        elements = schema.elements
        toggles = schema.toggles
    else:
        surface = None
        elements = tuple(schema)
        toggles = ()

    issues: list[IntegrityIssue] = []
    decisions: dict[tuple[str, CapabilityKind], bool] = {}

    for spec in elements:
        allowed = _element_decision(spec, credentials, surface=surface, issues=issues)
        if spec.key in decisions:
            record_issue(
                issues,
                code=IssueCode.SCHEMA_INTEGRITY,
                event="compiler.duplicate_rule",
                message=f"'{spec.id}' declares '{spec.kind.value}' more than once",
                surface=surface,
                element_id=spec.id,
                kind=spec.kind.value,
            )
            decisions[spec.key] = decisions[spec.key] and allowed
            continue
        decisions[spec.key] = allowed

    element_ids = list(dict.fromkeys(spec.id for spec in elements))
    _fold_sub_elements(decisions, element_ids)

    capabilities: dict[str, ElementCapability] = {}
    for element_id in element_ids:
        capabilities[element_id] = ElementCapability(
            visible=decisions.get((element_id, CapabilityKind.VISIBLE), True),
            editable=decisions.get((element_id, CapabilityKind.EDITABLE), True),
        )

    toggle_decisions: dict[str, ToggleDecision] = {}
    if entity is not None:
        for toggle in toggles:
            toggle_decisions[toggle.id] = resolve_toggle(
                toggle,
                credentials,
                entity,
                surface=surface,
                issues=issues,
            )

    logger.debug(
        "compiler.compiled",
        extra=log_context(
            surface=surface,
            elements=len(capabilities),
            hidden=sum(1 for value in capabilities.values() if not value.visible),
            toggles=len(toggle_decisions),
            issues=len(issues),
        ),
    )

    return CompiledCapabilitySet(
        elements=capabilities,
        toggles=toggle_decisions,
        issues=tuple(issues),
    )


__all__ = ["compile_capabilities"]
