from __future__ import annotations

import json
from pathlib import Path

import pytest

from credgate.compiler import compile_capabilities
from credgate.errors import SchemaError
from credgate.loader import lint_surface, list_surfaces, load_surface, parse_surface
from credgate.settings import Settings, reload_settings
from credgate.types import CapabilityKind, CredentialSet, Hide, Show
from credgate.types.issues import IssueCode

BUNDLED = ["contract_actions", "contract_edit", "contract_list", "contract_wizard"]


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_list_surfaces_includes_bundled() -> None:
    assert list_surfaces() == BUNDLED


@pytest.mark.parametrize("name", BUNDLED)
def test_bundled_surfaces_load_and_lint_clean(name: str) -> None:
    schema = load_surface(name)

    assert schema.name == name
    assert lint_surface(schema) == []


def test_parse_surface_builds_domain_types() -> None:
    schema = parse_surface(
        {
            "schema": "credgate.surface.v1",
            "name": "demo",
            "elements": [
                {"id": "reference", "hide": " contract_new_reference_remove "},
                {"id": "remarks", "kind": "editable", "show": [["superadmin", "contract_modify_remarks"]]},
                {"id": "notes", "default": False},
            ],
            "toggles": [
                {"id": "hold", "state_field": "is_hold", "gate": "contract_list_hold"},
            ],
            "columns": [{"id": "phone", "permission_key": "customer_phone", "credential": "contract_view_phone"}],
        }
    )

    reference, remarks, notes = schema.elements
    assert reference.rule == Hide("contract_new_reference_remove")
    assert remarks.kind is CapabilityKind.EDITABLE
    assert remarks.rule == Show.of(["superadmin", "contract_modify_remarks"])
    assert notes.rule is None and notes.default_when_no_rule is False

    toggle = schema.toggle("hold")
    assert toggle is not None
    assert toggle.enter_gate.tokens == ("contract_list_hold",)
    assert toggle.effective_leave_gate == toggle.enter_gate
    assert schema.columns[0].credential.tokens == ("contract_view_phone",)


def test_show_and_hide_on_one_element_is_rejected() -> None:
    with pytest.raises(SchemaError):
        parse_surface({"name": "demo", "elements": [{"id": "x", "show": "a", "hide": "b"}]})


@pytest.mark.parametrize(
    "document",
    [
        {"schema": "credgate.surface.v2", "name": "demo"},
        {"name": ""},
        {"name": "demo", "unknown": True},
        {"name": "demo", "elements": [{"id": "x", "kind": "deletable"}]},
        {"name": "demo", "toggles": [{"id": "t", "state_field": "is_hold"}]},
    ],
)
def test_invalid_documents_raise_schema_error(document: dict) -> None:
    with pytest.raises(SchemaError):
        parse_surface(document)


def test_load_surface_from_json_path(tmp_path: Path) -> None:
    path = _write(tmp_path / "custom.json", json.dumps({"name": "custom", "elements": [{"id": "a", "show": "x"}]}))

    schema = load_surface(path)

    assert schema.name == "custom"
    assert schema.element_ids() == ["a"]


def test_load_surface_from_surfaces_dir(tmp_path: Path) -> None:
    surfaces_dir = tmp_path / "surfaces"
    surfaces_dir.mkdir()
    _write(surfaces_dir / "extra.toml", 'name = "extra"\n')
    settings = Settings(surfaces_dir=surfaces_dir)

    assert load_surface("extra", settings=settings).name == "extra"
    assert "extra" in list_surfaces(settings=settings)


def test_local_surface_shadows_bundled_one(tmp_path: Path) -> None:
    _write(tmp_path / "contract_list.toml", 'name = "local_list"\n')

    assert load_surface("contract_list", settings=Settings(surfaces_dir=tmp_path)).name == "local_list"


def test_unknown_surface_raises() -> None:
    with pytest.raises(SchemaError) as excinfo:
        load_surface("no_such_surface")
    assert excinfo.value.source == "no_such_surface"


def test_malformed_files_raise(tmp_path: Path) -> None:
    with pytest.raises(SchemaError):
        load_surface(_write(tmp_path / "broken.toml", "name = \n"))
    with pytest.raises(SchemaError):
        load_surface(_write(tmp_path / "list.json", "[1, 2]"))


def test_lint_reports_integrity_problems() -> None:
    schema = parse_surface(
        {
            "name": "demo",
            "elements": [
                {"id": "a", "show": []},
                {"id": "b", "hide": "  "},
                {"id": "c", "show": "x"},
                {"id": "c", "show": "y"},
            ],
            "toggles": [
                {"id": "t", "state_field": "s", "enter": "x", "leave": []},
                {"id": "t", "state_field": "s", "enter": "x"},
            ],
            "columns": [{"id": "k"}, {"id": "k", "credential": []}],
        }
    )

    issues = lint_surface(schema)

    assert {issue.code for issue in issues} == {IssueCode.SCHEMA_INTEGRITY}
    assert sorted(issue.element_id for issue in issues) == ["a", "b", "c", "k", "k", "t", "t"]


def test_bundled_actions_confirm_needs_credential() -> None:
    schema = load_surface("contract_actions")
    entity = {
        "is_confirmed": False,
        "is_hold": "NO",
        "is_hold_admin": "NO",
        "is_hold_quote": "NO",
        "is_canceled": "NO",
        "is_blowing": "NO",
        "is_placement": "NO",
    }

    compiled = compile_capabilities(schema, CredentialSet.of("contract_view"), entity)

    assert compiled.toggles["confirm"].available is False
    assert compiled.toggles["hold_admin"].action == "hold-admin"
    assert compiled.is_visible("view") is True
    assert compiled.is_visible("delete") is False
    assert compiled.issues == ()


def test_bundled_wizard_splits_template_gate() -> None:
    schema = load_surface("contract_wizard")
    creds = CredentialSet.of("contract_new_total_price_with_taxe_remove")

    compiled = compile_capabilities(schema, creds)

    assert compiled.is_visible("total_price_with_taxe") is False
    assert compiled.is_visible("total_price_with_taxe.template") is False
    assert compiled.is_visible("tax_id") is False
    assert compiled.is_visible("reference") is True
    assert compiled.issues == ()


def test_bundled_wizard_template_gate_hides_parent_field() -> None:
    schema = load_surface("contract_wizard")

    compiled = compile_capabilities(schema, CredentialSet.of("contract_view"))

    assert compiled.is_visible("total_price_with_taxe") is False
    assert compiled.is_visible("total_price_without_taxe") is False
    assert compiled.is_visible("tax_id") is False
    assert {"total_price_with_taxe", "total_price_without_taxe", "tax_id"} <= compiled.hidden_ids()


def test_bundled_wizard_template_gate_passes_with_show_credentials() -> None:
    schema = load_surface("contract_wizard")
    creds = CredentialSet.of("contract_new_total_price_with_taxe", "contract_new_tva")

    compiled = compile_capabilities(schema, creds)

    assert compiled.is_visible("total_price_with_taxe") is True
    assert compiled.is_visible("tax_id") is True
    assert compiled.is_visible("total_price_without_taxe") is False
    assert compiled.is_visible("customer.company") is False


def test_bundled_edit_remove_token_hides_turnover() -> None:
    schema = load_surface("contract_edit")

    compiled = compile_capabilities(schema, CredentialSet.of("contract_turnover_ht_remove"))

    assert compiled.is_visible("total_price_without_taxe") is False
    assert compiled.is_visible("total_price_with_taxe") is True


def test_load_surface_uses_configured_surfaces_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    surfaces_dir = tmp_path / "surfaces"
    surfaces_dir.mkdir()
    _write(surfaces_dir / "custom.toml", 'name = "custom"\n')
    monkeypatch.setenv("CREDGATE_SURFACES_DIR", str(surfaces_dir))
    reload_settings()

    assert load_surface("custom").name == "custom"
    assert "custom" in list_surfaces()


def test_element_label_and_extra_are_carried() -> None:
    schema = parse_surface(
        {
            "name": "demo",
            "extra": {"owner": "contracts"},
            "elements": [{"id": "remarks", "show": "x", "label": "Remarks"}],
        }
    )

    assert schema.elements[0].label == "Remarks"
    assert schema.extra == {"owner": "contracts"}


def test_blank_permission_key_means_no_key() -> None:
    schema = parse_surface({"name": "demo", "columns": [{"id": "date", "permission_key": "  "}]})

    assert schema.columns[0].permission_key is None
