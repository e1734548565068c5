"""Public API for :mod:`credgate`."""

from importlib import metadata
from pathlib import Path
from typing import TYPE_CHECKING
import tomllib

if TYPE_CHECKING:
    from credgate.columns import filter_permitted, resolve_columns
    from credgate.compiler import compile_capabilities
    from credgate.evaluator import evaluate, grants
    from credgate.loader import load_surface
    from credgate.settings import Settings
    from credgate.toggles import resolve_toggle
    from credgate.types import (
        CapabilityKind,
        ColumnSpec,
        CompiledCapabilitySet,
        CredentialGroup,
        CredentialSet,
        ElementSpec,
        Hide,
        Show,
        SurfaceSchema,
        ToggleActionSpec,
        ToggleDecision,
    )


def _pyproject_version() -> str | None:
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    try:
        parsed = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        version = parsed.get("project", {}).get("version")
        if isinstance(version, str) and version:
            return version
    except (FileNotFoundError, OSError, tomllib.TOMLDecodeError):
        return None
    return None


def _resolve_version() -> str:
    # Prefer the local pyproject when running from a source checkout/editable install.
    version = _pyproject_version()
    if version is not None:
        return version

    try:
        return metadata.version("credgate")
    except metadata.PackageNotFoundError:  # pragma: no cover
        return "unknown"


__version__ = _resolve_version()

_EXPORTS = {
    "CapabilityKind": ("credgate.types", "CapabilityKind"),
    "ColumnSpec": ("credgate.types", "ColumnSpec"),
    "CompiledCapabilitySet": ("credgate.types", "CompiledCapabilitySet"),
    "CredentialGroup": ("credgate.types", "CredentialGroup"),
    "CredentialSet": ("credgate.types", "CredentialSet"),
    "ElementSpec": ("credgate.types", "ElementSpec"),
    "Hide": ("credgate.types", "Hide"),
    "Settings": ("credgate.settings", "Settings"),
    "Show": ("credgate.types", "Show"),
    "SurfaceSchema": ("credgate.types", "SurfaceSchema"),
    "ToggleActionSpec": ("credgate.types", "ToggleActionSpec"),
    "ToggleDecision": ("credgate.types", "ToggleDecision"),
    "compile_capabilities": ("credgate.compiler", "compile_capabilities"),
    "evaluate": ("credgate.evaluator", "evaluate"),
    "filter_permitted": ("credgate.columns", "filter_permitted"),
    "grants": ("credgate.evaluator", "grants"),
    "load_surface": ("credgate.loader", "load_surface"),
    "resolve_columns": ("credgate.columns", "resolve_columns"),
    "resolve_toggle": ("credgate.toggles", "resolve_toggle"),
}


def __getattr__(name: str):
    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    module = __import__(module_name, fromlist=[attr_name])
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))


__all__ = sorted([*_EXPORTS, "__version__"])
