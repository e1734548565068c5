"""Reading boolean flags off entity snapshots.

Entities come from an external data layer as mappings (decoded JSON) or as
plain objects. Flags arrive in several encodings; ``"YES"``/``"Y"``, ``True``
and ``1`` are truthy, everything else is falsy.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_TRUTHY_STRINGS = frozenset({"YES", "Y"})

MISSING = object()


def is_truthy(value: Any) -> bool:
    if value is True:
        return True
    if isinstance(value, str):
        return value in _TRUTHY_STRINGS
    if isinstance(value, int) and not isinstance(value, bool):
        return value == 1
    return False


def lookup(entity: Any, field_name: str) -> Any:
    """Return the raw value of ``field_name`` or the ``MISSING`` sentinel."""

    if entity is None:
        return MISSING
    if isinstance(entity, Mapping):
        return entity.get(field_name, MISSING)
    return getattr(entity, field_name, MISSING)


def read_flag(entity: Any, field_name: str) -> tuple[bool, bool]:
    """Return ``(value, present)`` for a boolean flag on ``entity``.

    Missing fields read as falsy; ``present`` lets callers report them.
    """

    raw = lookup(entity, field_name)
    if raw is MISSING:
        return False, False
    return is_truthy(raw), True


__all__ = ["MISSING", "is_truthy", "lookup", "read_flag"]
