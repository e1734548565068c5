"""List-column filtering against the server-supplied permitted-fields set."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from credgate.evaluator import grants
from credgate.types.credentials import CredentialSet
from credgate.types.issues import IntegrityIssue
from credgate.types.rules import Show
from credgate.types.surface import ColumnSpec


def filter_permitted(
    columns: Iterable[ColumnSpec],
    permitted_ids: Collection[str],
) -> list[ColumnSpec]:
    """Keep the columns the permitted-fields set allows, in declaration order.

    An empty ``permitted_ids`` means the set has not loaded yet and every
    column passes. Once non-empty it is authoritative: a column whose
    ``permission_key`` is absent is dropped. Columns without a
    ``permission_key`` always pass.
    """

    columns = list(columns)
    if not permitted_ids:
        return columns
    return [
        column
        for column in columns
        if not column.permission_key or column.permission_key in permitted_ids
    ]


def resolve_columns(
    columns: Iterable[ColumnSpec],
    permitted_ids: Collection[str],
    credentials: CredentialSet,
    *,
    surface: str | None = None,
    issues: list[IntegrityIssue] | None = None,
) -> list[ColumnSpec]:
    """Apply :func:`filter_permitted`, then each column's own credential gate."""

    return [
        column
        for column in filter_permitted(columns, permitted_ids)
        if column.credential is None
        or grants(
            Show(column.credential),
            credentials,
            element_id=column.id,
            surface=surface,
            issues=issues,
        )
    ]


__all__ = ["filter_permitted", "resolve_columns"]
