"""Credential sets and credential groups.

Credential expressions follow the Symfony 1 ``hasCredential()`` conventions used
by the surfaces this library serves:

* ``"token"``: a single credential,
* ``["a", "b"]``: any of the listed credentials (or all of them with
  ``require_all=True``),
* ``[["a", "b"], ["c"]]``: nested form, any credential from any inner list.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from credgate.errors import CredentialSourceError

DEFAULT_SUPERADMIN_TOKEN = "superadmin"
DEFAULT_ADMIN_TOKEN = "admin"

CredentialExpr = Union[str, Sequence[str], Sequence[Sequence[str]]]


def _flatten_expr(expr: Any) -> list[str]:
    if isinstance(expr, str):
        return [expr]
    if not isinstance(expr, Iterable):
        raise TypeError(f"Credential expression must be a string or a list, got {type(expr).__name__}")

    tokens: list[str] = []
    for item in expr:
        if isinstance(item, str):
            tokens.append(item)
        elif isinstance(item, Iterable):
            for nested in item:
                if not isinstance(nested, str):
                    raise TypeError(f"Credential tokens must be strings, got {type(nested).__name__}")
                tokens.append(nested)
        else:
            raise TypeError(f"Credential tokens must be strings, got {type(item).__name__}")
    return tokens


@dataclass(frozen=True)
class CredentialGroup:
    """Ordered "any of" list of credential tokens."""

    tokens: tuple[str, ...]

    @classmethod
    def parse(cls, expr: CredentialExpr) -> "CredentialGroup":
        """Normalize a credential expression into a single group.

        Blank tokens are dropped and duplicates removed while preserving order.
        """

        normalized = (token.strip() for token in _flatten_expr(expr))
        return cls(tokens=tuple(dict.fromkeys(token for token in normalized if token)))

    @classmethod
    def of(cls, *tokens: str) -> "CredentialGroup":
        return cls.parse(list(tokens))

    @property
    def is_empty(self) -> bool:
        return not self.tokens

    def __iter__(self):
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)


def _coerce_tokens(value: Any, *, key: str) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise CredentialSourceError(f"Credential source field '{key}' must be a list of strings")

    tokens: set[str] = set()
    for item in value:
        if not isinstance(item, str):
            raise CredentialSourceError(
                f"Credential source field '{key}' contains a non-string token: {item!r}"
            )
        candidate = item.strip()
        if candidate:
            tokens.add(candidate)
    return frozenset(tokens)


def _coerce_flag(value: Any, *, key: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise CredentialSourceError(
            f"Credential source field '{key}' must be a boolean, got {type(value).__name__}"
        )
    return value


def _reserved_tokens(superadmin_token: str | None, admin_token: str | None) -> tuple[str, str]:
    if superadmin_token is not None and admin_token is not None:
        return superadmin_token, admin_token

    # Imported here: settings itself depends on this module's defaults.
    from credgate.settings import get_settings

    settings = get_settings()
    return (
        superadmin_token if superadmin_token is not None else settings.superadmin_token,
        admin_token if admin_token is not None else settings.admin_token,
    )


@dataclass(frozen=True)
class CredentialSet:
    """Immutable credentials held by the current actor for one request/session.

    ``permissions`` is the raw permission list from the credential source.
    ``groups`` are the actor's group memberships, which count as credentials for
    SHOW checks but never for HIDE checks.
    """

    permissions: frozenset[str] = field(default_factory=frozenset)
    groups: frozenset[str] = field(default_factory=frozenset)
    is_superadmin: bool = False
    is_admin: bool = False

    @classmethod
    def anonymous(cls) -> "CredentialSet":
        return cls()

    @classmethod
    def of(
        cls,
        *permissions: str,
        groups: Iterable[str] = (),
        superadmin_token: str | None = None,
        admin_token: str | None = None,
    ) -> "CredentialSet":
        """Build a set from tokens, deriving the superadmin/admin markers."""

        return cls.from_source(
            {"permissions": list(permissions), "groups": list(groups)},
            superadmin_token=superadmin_token,
            admin_token=admin_token,
        )

    @classmethod
    def from_source(
        cls,
        source: Mapping[str, Any],
        *,
        superadmin_token: str | None = None,
        admin_token: str | None = None,
    ) -> "CredentialSet":
        """Build a set from a credential-source payload.

        Expected shape: ``{"permissions": [...], "groups": [...],
        "is_superadmin": bool, "is_admin": bool}``; every key is optional.
        The superadmin marker is set when the payload flags it or when the
        reserved ``superadmin_token`` is held as a permission or group. Reserved
        tokens left as ``None`` come from the configured settings.
        """

        if not isinstance(source, Mapping):
            raise CredentialSourceError("Credential source must be a mapping")

        permissions = _coerce_tokens(source.get("permissions"), key="permissions")
        groups = _coerce_tokens(source.get("groups"), key="groups")
        held = permissions | groups

        superadmin_token, admin_token = _reserved_tokens(superadmin_token, admin_token)
        is_superadmin = _coerce_flag(source.get("is_superadmin"), key="is_superadmin") or superadmin_token in held
        is_admin = _coerce_flag(source.get("is_admin"), key="is_admin") or admin_token in held or is_superadmin

        return cls(
            permissions=permissions,
            groups=groups,
            is_superadmin=is_superadmin,
            is_admin=is_admin,
        )

    @property
    def raw(self) -> frozenset[str]:
        """Permission tokens exactly as granted, without groups or superadmin expansion."""
        return self.permissions

    @property
    def is_empty(self) -> bool:
        return not self.permissions and not self.groups and not self.is_superadmin

    def holds(self, token: str) -> bool:
        """Return True when ``token`` is held as a permission or a group."""
        return token in self.permissions or token in self.groups

    def has_group(self, token: str) -> bool:
        return token in self.groups

    def has_credential(self, credential: CredentialExpr, *, require_all: bool = False) -> bool:
        """Symfony-style credential check with superadmin bypass.

        Nested expressions are always "any of". An empty expression denies.
        """

        if self.is_superadmin:
            return True
        if self.is_empty:
            return False

        if isinstance(credential, str):
            return self.holds(credential)

        items = list(credential)
        if not items:
            return False
        if any(not isinstance(item, str) for item in items):
            return any(self.holds(token) for token in _flatten_expr(items))
        if require_all:
            return all(self.holds(token) for token in items)
        return any(self.holds(token) for token in items)


__all__ = [
    "CredentialExpr",
    "CredentialGroup",
    "CredentialSet",
    "DEFAULT_ADMIN_TOKEN",
    "DEFAULT_SUPERADMIN_TOKEN",
]
