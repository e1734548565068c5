"""Recording non-fatal integrity issues."""

from __future__ import annotations

import logging
from typing import Any

from credgate.logging import log_context
from credgate.types.issues import IntegrityIssue, IssueCode

logger = logging.getLogger(__name__)


def record_issue(
    issues: list[IntegrityIssue] | None,
    *,
    code: IssueCode,
    event: str,
    message: str,
    surface: str | None = None,
    element_id: str | None = None,
    toggle_id: str | None = None,
    **details: Any,
) -> IntegrityIssue:
    """Log an integrity issue and append it to ``issues`` when a sink is given."""

    issue = IntegrityIssue(
        code=code,
        message=message,
        element_id=element_id or toggle_id,
        details=dict(details) or None,
    )
    logger.warning(
        event,
        extra=log_context(
            surface=surface,
            element_id=element_id,
            toggle_id=toggle_id,
            code=code.value,
            **details,
        ),
    )
    if issues is not None:
        issues.append(issue)
    return issue


__all__ = ["record_issue"]
