"""CLI entrypoint for :mod:`credgate`.

Exposes the credgate CLI with:

- `resolve`   Compile a surface for a credential payload (and optional entity).
- `validate`  Lint a surface declaration.
- `surfaces`  List known surface names.
- `version`   Print the package version.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import typer

from credgate import __version__
from credgate.columns import resolve_columns
from credgate.compiler import compile_capabilities
from credgate.errors import CredentialSourceError, CredgateError
from credgate.loader import lint_surface, list_surfaces, load_surface
from credgate.logging import bind_session_context, clear_session_context, setup_logging
from credgate.settings import Settings, get_settings
from credgate.types.credentials import CredentialSet
from credgate.types.issues import IntegrityIssue

app = typer.Typer(
    help=(
        "Credential-based capability resolver.\n\n"
        "- **resolve** - compile a surface for a credential payload\n"
        "- **validate** - lint a surface declaration\n"
        "- **surfaces** - list known surfaces\n"
        "- **version** - show package version"
    ),
    no_args_is_help=True,
    rich_markup_mode="markdown",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _configure(debug: bool = False) -> Settings:
    settings = get_settings()
    if debug:
        settings = settings.model_copy(update={"logging_level": "DEBUG"})
    setup_logging(settings)
    return settings


def _read_json(path: Path, *, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CredentialSourceError(f"Unable to read {what} file '{path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CredentialSourceError(f"{what.capitalize()} file '{path}' is not valid JSON: {exc}") from exc


def _fail(exc: CredgateError) -> NoReturn:
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("resolve")
def resolve_command(
    surface: str = typer.Option(
        ...,
        "--surface",
        help="Surface name (bundled or under CREDGATE_SURFACES_DIR) or path to a surface file.",
    ),
    credentials: Path = typer.Option(
        ...,
        "--credentials",
        "-c",
        dir_okay=False,
        help='JSON credential payload: {"permissions": [...], "groups": [...], "is_superadmin": false}.',
    ),
    entity: Optional[Path] = typer.Option(
        None,
        "--entity",
        "-e",
        dir_okay=False,
        help="JSON object with the entity state used to resolve toggles.",
    ),
    permitted: List[str] = typer.Option(
        [],
        "--permitted",
        "-p",
        help="Permitted field key from the server. Repeatable; none means not loaded yet.",
    ),
    session_id: Optional[str] = typer.Option(
        None,
        "--session-id",
        help="Session identifier attached to log records.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
) -> None:
    """Compile a surface for a credential payload and print the result as JSON."""

    settings = _configure(debug)
    bind_session_context(session_id)
    try:
        try:
            schema = load_surface(surface, settings=settings)
            creds = CredentialSet.from_source(
                _read_json(credentials, what="credentials"),
                superadmin_token=settings.superadmin_token,
                admin_token=settings.admin_token,
            )
            entity_data = _read_json(entity, what="entity") if entity is not None else None
        except CredgateError as exc:
            _fail(exc)

        compiled = compile_capabilities(schema, creds, entity_data)
        column_issues: list[IntegrityIssue] = []
        columns = resolve_columns(
            schema.columns,
            frozenset(permitted),
            creds,
            surface=schema.name,
            issues=column_issues,
        )
    finally:
        clear_session_context()

    payload = compiled.to_dict()
    payload["surface"] = schema.name
    payload["columns"] = [
        {"id": column.id, "label": column.label, "default_visible": column.default_visible}
        for column in columns
    ]
    payload["issues"].extend(issue.to_dict() for issue in column_issues)
    typer.echo(json.dumps(payload, indent=2))


@app.command("validate")
def validate_command(
    surface: str = typer.Option(
        ...,
        "--surface",
        help="Surface name or path to a surface file.",
    ),
) -> None:
    """Lint a surface declaration; exits with code 1 when issues are found."""

    settings = _configure()
    try:
        schema = load_surface(surface, settings=settings)
    except CredgateError as exc:
        _fail(exc)

    issues = lint_surface(schema)
    for issue in issues:
        typer.echo(f"{issue.code.value}: {issue.message}")

    if issues:
        raise typer.Exit(code=1)

    typer.echo(
        f"ok: {schema.name} ({len(schema.elements)} elements, "
        f"{len(schema.toggles)} toggles, {len(schema.columns)} columns)"
    )


@app.command("surfaces")
def surfaces_command() -> None:
    """List bundled surfaces and those found in CREDGATE_SURFACES_DIR."""

    settings = _configure()
    for name in list_surfaces(settings=settings):
        typer.echo(name)


@app.command("version")
def version_command() -> None:
    """Print the package version."""
    typer.echo(__version__)


# ---------------------------------------------------------------------------
# Module entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    """Entrypoint used by console scripts and `python -m credgate`."""
    app()


__all__ = ["app", "main"]
