from __future__ import annotations

import pytest

from credgate.errors import CredentialSourceError
from credgate.settings import reload_settings
from credgate.types import CredentialGroup, CredentialSet


def test_group_parse_flattens_nested_expressions() -> None:
    group = CredentialGroup.parse([["superadmin", "admin", "contract_modify"], ["contract_view"]])

    assert group.tokens == ("superadmin", "admin", "contract_modify", "contract_view")


def test_group_parse_drops_blanks_and_duplicates() -> None:
    group = CredentialGroup.parse(["  contract_view ", "", "contract_view", "admin"])

    assert group.tokens == ("contract_view", "admin")
    assert len(group) == 2
    assert list(group) == ["contract_view", "admin"]


def test_group_parse_single_token() -> None:
    assert CredentialGroup.parse("contract_copy").tokens == ("contract_copy",)
    assert CredentialGroup.parse([]).is_empty


def test_group_parse_rejects_non_string_tokens() -> None:
    with pytest.raises(TypeError):
        CredentialGroup.parse([["contract_view", 3]])  # type: ignore[list-item]


def test_from_source_reads_payload() -> None:
    creds = CredentialSet.from_source(
        {"permissions": ["contract_view", " contract_copy "], "groups": ["sales"]}
    )

    assert creds.permissions == frozenset({"contract_view", "contract_copy"})
    assert creds.groups == frozenset({"sales"})
    assert creds.is_superadmin is False
    assert creds.is_admin is False


def test_superadmin_derived_from_token_or_flag() -> None:
    assert CredentialSet.from_source({"groups": ["superadmin"]}).is_superadmin
    assert CredentialSet.from_source({"permissions": ["superadmin"]}).is_superadmin
    assert CredentialSet.from_source({"is_superadmin": True}).is_superadmin


def test_superadmin_implies_admin() -> None:
    creds = CredentialSet.of("superadmin")

    assert creds.is_admin is True


def test_custom_reserved_tokens() -> None:
    creds = CredentialSet.of("root", groups=["ops"], superadmin_token="root", admin_token="ops")

    assert creds.is_superadmin
    assert creds.is_admin
    assert not CredentialSet.of("superadmin", superadmin_token="root").is_superadmin


@pytest.mark.parametrize(
    "payload",
    [
        ["contract_view"],
        {"permissions": "contract_view"},
        {"permissions": ["contract_view", 42]},
        {"groups": 5},
        {"is_superadmin": "false"},
        {"is_superadmin": "0"},
        {"is_admin": 1},
    ],
)
def test_from_source_rejects_malformed_payloads(payload) -> None:
    with pytest.raises(CredentialSourceError):
        CredentialSet.from_source(payload)


def test_raw_excludes_groups() -> None:
    creds = CredentialSet.of("contract_view", groups=["admin"])

    assert creds.raw == frozenset({"contract_view"})
    assert creds.holds("admin")
    assert creds.has_group("admin")
    assert not creds.has_group("contract_view")


def test_has_credential_expressions() -> None:
    creds = CredentialSet.of("contract_view", "contract_copy")

    assert creds.has_credential("contract_view")
    assert not creds.has_credential("contract_modify")
    assert creds.has_credential(["contract_modify", "contract_copy"])
    assert not creds.has_credential(["contract_modify", "contract_copy"], require_all=True)
    assert creds.has_credential(["contract_view", "contract_copy"], require_all=True)
    assert creds.has_credential([["superadmin", "admin", "contract_view"]])
    assert not creds.has_credential([])


def test_has_credential_superadmin_and_anonymous(superadmin, anonymous) -> None:
    assert superadmin.has_credential("anything_at_all")
    assert not anonymous.has_credential("contract_view")
    assert anonymous.is_empty


def test_credential_set_is_immutable() -> None:
    creds = CredentialSet.of("contract_view")

    with pytest.raises(AttributeError):
        creds.is_superadmin = True  # type: ignore[misc]


def test_boolean_flags_are_honoured() -> None:
    assert CredentialSet.from_source({"is_superadmin": False, "is_admin": None}).is_superadmin is False
    assert CredentialSet.from_source({"is_admin": True}).is_admin is True


def test_reserved_tokens_default_to_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CREDGATE_SUPERADMIN_TOKEN", "root")
    monkeypatch.setenv("CREDGATE_ADMIN_TOKEN", "ops")
    reload_settings()

    assert CredentialSet.from_source({"permissions": ["root"]}).is_superadmin is True
    assert CredentialSet.from_source({"permissions": ["superadmin"]}).is_superadmin is False
    assert CredentialSet.of(groups=["ops"]).is_admin is True
