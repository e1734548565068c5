"""Load and lint surface declaration files."""

from __future__ import annotations

import json
import logging
import tomllib
from collections import Counter
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from credgate.errors import SchemaError
from credgate.logging import log_context
from credgate.schemas.surface import SurfaceManifestV1
from credgate.settings import Settings, get_settings
from credgate.types.issues import IntegrityIssue, IssueCode
from credgate.types.rules import Hide, Show
from credgate.types.surface import SurfaceSchema

logger = logging.getLogger(__name__)

_SURFACE_SUFFIXES = (".toml", ".json")
_BUNDLED_PACKAGE = "credgate.surfaces"


def _read_document(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Unable to read surface file '{path}'", source=str(path)) from exc

    try:
        if path.suffix.lower() == ".toml":
            data = tomllib.loads(text)
        else:
            data = json.loads(text)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise SchemaError(f"Surface file '{path}' is not valid TOML/JSON: {exc}", source=str(path)) from exc

    if not isinstance(data, dict):
        raise SchemaError(f"Surface file '{path}' must contain a table/object at the top level", source=str(path))
    return data


def parse_surface(data: dict[str, Any], *, source: str | None = None) -> SurfaceSchema:
    """Validate a decoded surface document and convert it to domain types."""

    try:
        manifest = SurfaceManifestV1.model_validate(data)
    except ValidationError as exc:
        label = source or "<memory>"
        raise SchemaError(f"Surface validation failed for '{label}': {exc}", source=source) from exc
    return manifest.to_schema()


def _bundled_path(name: str) -> Path | None:
    root = resources.files(_BUNDLED_PACKAGE)
    for suffix in _SURFACE_SUFFIXES:
        candidate = root / f"{name}{suffix}"
        if candidate.is_file():
            return Path(str(candidate))
    return None


def resolve_surface_path(ref: str | Path, *, settings: Settings | None = None) -> Path:
    """Resolve a file path or a surface name to a declaration file.

    Names are looked up in ``settings.surfaces_dir`` first (the configured
    settings when none are passed), then among the surfaces bundled with the
    package.
    """

    candidate = Path(ref)
    if candidate.is_file():
        return candidate

    name = str(ref)
    surfaces_dir = (settings or get_settings()).surfaces_dir
    if surfaces_dir is not None:
        for suffix in _SURFACE_SUFFIXES:
            local = Path(surfaces_dir) / f"{name}{suffix}"
            if local.is_file():
                return local

    bundled = _bundled_path(name)
    if bundled is not None:
        return bundled

    raise SchemaError(f"Surface '{name}' not found as a file or a known surface name", source=name)


def load_surface(ref: str | Path, *, settings: Settings | None = None) -> SurfaceSchema:
    """Load a surface declaration by path or name."""

    path = resolve_surface_path(ref, settings=settings)
    schema = parse_surface(_read_document(path), source=str(path))
    logger.debug(
        "loader.surface_loaded",
        extra=log_context(
            surface=schema.name,
            path=str(path),
            elements=len(schema.elements),
            toggles=len(schema.toggles),
            columns=len(schema.columns),
        ),
    )
    return schema


def list_surfaces(*, settings: Settings | None = None) -> list[str]:
    """Return the names of bundled surfaces plus any in ``settings.surfaces_dir``.

    Without explicit ``settings`` the configured ones are used.
    """

    names: set[str] = set()
    for entry in resources.files(_BUNDLED_PACKAGE).iterdir():
        path = Path(str(entry))
        if path.suffix in _SURFACE_SUFFIXES:
            names.add(path.stem)

    surfaces_dir = (settings or get_settings()).surfaces_dir
    if surfaces_dir is not None and Path(surfaces_dir).is_dir():
        for path in Path(surfaces_dir).iterdir():
            if path.is_file() and path.suffix in _SURFACE_SUFFIXES:
                names.add(path.stem)

    return sorted(names)


def lint_surface(schema: SurfaceSchema) -> list[IntegrityIssue]:
    """Report integrity problems in ``schema`` without evaluating credentials."""

    issues: list[IntegrityIssue] = []

    def _issue(message: str, element_id: str | None) -> None:
        issues.append(IntegrityIssue(code=IssueCode.SCHEMA_INTEGRITY, message=message, element_id=element_id))

    for spec in schema.elements:
        if isinstance(spec.rule, Show) and spec.rule.group.is_empty:
            _issue(f"'{spec.id}' has an empty show group for '{spec.kind.value}'", spec.id)
        elif isinstance(spec.rule, Hide) and not spec.rule.token:
            _issue(f"'{spec.id}' has a blank hide token for '{spec.kind.value}'", spec.id)

    for key, count in Counter(spec.key for spec in schema.elements).items():
        if count > 1:
            element_id, kind = key
            _issue(f"'{element_id}' declares '{kind.value}' {count} times", element_id)

    for toggle_id, count in Counter(toggle.id for toggle in schema.toggles).items():
        if count > 1:
            _issue(f"toggle '{toggle_id}' is declared {count} times", toggle_id)

    for toggle in schema.toggles:
        if toggle.enter_gate.is_empty:
            _issue(f"toggle '{toggle.id}' has an empty enter gate", toggle.id)
        if toggle.leave_gate is not None and toggle.leave_gate.is_empty:
            _issue(f"toggle '{toggle.id}' has an empty leave gate", toggle.id)

    for column_id, count in Counter(column.id for column in schema.columns).items():
        if count > 1:
            _issue(f"column '{column_id}' is declared {count} times", column_id)

    for column in schema.columns:
        if column.credential is not None and column.credential.is_empty:
            _issue(f"column '{column.id}' has an empty credential group", column.id)

    return issues


__all__ = [
    "lint_surface",
    "list_surfaces",
    "load_surface",
    "parse_surface",
    "resolve_surface_path",
]
