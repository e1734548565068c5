"""Evaluate SHOW and HIDE gate rules against a credential set.

The two gate kinds are deliberately asymmetric:

* ``Show(group)`` passes when the actor holds any token of the group, and
  always passes for a superadmin.
* ``Hide(token)`` fires when ``token`` is in the actor's *raw* permissions.
  Superadmin status is ignored, so a superadmin explicitly granted a hide
  token loses the capability like anyone else.

Malformed rules (an empty group, a blank hide token, or an object that is
neither variant) never raise; they deny the capability and are reported as
``SchemaIntegrityWarning`` issues.
"""

from __future__ import annotations

from typing import Any

from credgate.diagnostics import record_issue
from credgate.types.credentials import CredentialGroup, CredentialSet
from credgate.types.issues import IntegrityIssue, IssueCode
from credgate.types.rules import Hide, Show

# Marker for decisions granted only by the superadmin bypass; never a real token.
SUPERADMIN_BYPASS = "<superadmin>"


def matching_credential(group: CredentialGroup, credentials: CredentialSet) -> str | None:
    """Return the credential under which ``group`` is satisfied.

    The first held token wins; a superadmin holding none of them is reported
    as :data:`SUPERADMIN_BYPASS`. ``None`` means the group is not satisfied.
    """

    for token in group.tokens:
        if credentials.holds(token):
            return token
    if credentials.is_superadmin and not group.is_empty:
        return SUPERADMIN_BYPASS
    return None


def evaluate(
    rule: Any,
    credentials: CredentialSet,
    *,
    element_id: str | None = None,
    surface: str | None = None,
    issues: list[IntegrityIssue] | None = None,
) -> bool:
    """Evaluate ``rule`` for ``credentials``.

    Returns True when a ``Show`` gate is satisfied, or when a ``Hide`` gate
    fires (the element is hidden). Use :func:`grants` for the positive
    capability regardless of variant.
    """

    if isinstance(rule, Show):
        if rule.group.is_empty:
            record_issue(
                issues,
                code=IssueCode.SCHEMA_INTEGRITY,
                event="evaluator.empty_group",
                message="Show rule has an empty credential group; capability denied",
                surface=surface,
                element_id=element_id,
            )
            return False
        if credentials.is_superadmin:
            return True
        return any(credentials.holds(token) for token in rule.group.tokens)

    if isinstance(rule, Hide):
        if not rule.token or not rule.token.strip():
            record_issue(
                issues,
                code=IssueCode.SCHEMA_INTEGRITY,
                event="evaluator.blank_hide_token",
                message="Hide rule has a blank token; element treated as hidden",
                surface=surface,
                element_id=element_id,
            )
            return True
        return rule.token in credentials.raw

    record_issue(
        issues,
        code=IssueCode.SCHEMA_INTEGRITY,
        event="evaluator.unknown_rule",
        message=f"Unrecognized gate rule {type(rule).__name__}; capability denied",
        surface=surface,
        element_id=element_id,
        rule_type=type(rule).__name__,
    )
    return False


def grants(
    rule: Any,
    credentials: CredentialSet,
    *,
    element_id: str | None = None,
    surface: str | None = None,
    issues: list[IntegrityIssue] | None = None,
) -> bool:
    """Return True when ``rule`` leaves the capability in place."""

    outcome = evaluate(
        rule,
        credentials,
        element_id=element_id,
        surface=surface,
        issues=issues,
    )
    if isinstance(rule, Show):
        return outcome
    if isinstance(rule, Hide):
        return not outcome
    return False


__all__ = ["SUPERADMIN_BYPASS", "evaluate", "grants", "matching_credential"]
