"""Pydantic models for surface declaration files."""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from credgate.types.credentials import CredentialGroup
from credgate.types.rules import CapabilityKind, ElementSpec, GateRule, Hide, Show
from credgate.types.surface import ColumnSpec, SurfaceSchema, ToggleActionSpec

SURFACE_SCHEMA_ID = "credgate.surface.v1"

CredentialField = Union[str, list[str], list[list[str]]]


class ElementConfig(BaseModel):
    """One gated capability of a field or action.

    At most one of ``show`` / ``hide`` may be set; with neither, ``default``
    decides the capability.
    """

    id: str = Field(min_length=1)
    kind: Literal["visible", "editable"] = "visible"
    show: CredentialField | None = None
    hide: str | None = None
    default: bool = True
    label: str | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _single_rule(self) -> "ElementConfig":
        if self.show is not None and self.hide is not None:
            raise ValueError(f"element '{self.id}' declares both 'show' and 'hide' for '{self.kind}'")
        return self

    def to_rule(self) -> GateRule | None:
        if self.show is not None:
            return Show(group=CredentialGroup.parse(self.show))
        if self.hide is not None:
            return Hide(token=self.hide.strip())
        return None

    def to_spec(self) -> ElementSpec:
        return ElementSpec(
            id=self.id,
            kind=CapabilityKind(self.kind),
            rule=self.to_rule(),
            default_when_no_rule=self.default,
            label=self.label,
        )


class ToggleConfig(BaseModel):
    """A confirm/unconfirm style action pair."""

    id: str = Field(min_length=1)
    state_field: str = Field(min_length=1)
    enter: CredentialField = Field(validation_alias=AliasChoices("enter", "gate"))
    leave: CredentialField | None = None
    off_label: str = ""
    on_label: str = ""
    off_icon: str | None = None
    on_icon: str | None = None
    dim_when: str | None = None
    off_action: str | None = None
    on_action: str | None = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_spec(self) -> ToggleActionSpec:
        return ToggleActionSpec(
            id=self.id,
            state_field=self.state_field,
            enter_gate=CredentialGroup.parse(self.enter),
            leave_gate=CredentialGroup.parse(self.leave) if self.leave is not None else None,
            off_label=self.off_label,
            on_label=self.on_label,
            off_icon=self.off_icon,
            on_icon=self.on_icon,
            dim_when=self.dim_when,
            off_action=self.off_action,
            on_action=self.on_action,
        )


class ColumnConfig(BaseModel):
    """A list column definition."""

    id: str = Field(min_length=1)
    label: str = ""
    permission_key: str | None = None
    credential: CredentialField | None = None
    default_visible: bool = True

    model_config = ConfigDict(extra="forbid")

    @field_validator("permission_key")
    @classmethod
    def _blank_key_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    def to_spec(self) -> ColumnSpec:
        return ColumnSpec(
            id=self.id,
            label=self.label,
            permission_key=self.permission_key,
            credential=CredentialGroup.parse(self.credential) if self.credential is not None else None,
            default_visible=self.default_visible,
        )


class SurfaceManifestV1(BaseModel):
    """Top-level surface declaration."""

    schema_id: Literal["credgate.surface.v1"] = Field(
        default=SURFACE_SCHEMA_ID,
        alias="schema",
        validation_alias=AliasChoices("schema", "schema_id"),
    )
    name: str = Field(min_length=1)
    version: str = "1"
    description: str | None = None
    elements: list[ElementConfig] = Field(default_factory=list)
    toggles: list[ToggleConfig] = Field(default_factory=list)
    columns: list[ColumnConfig] = Field(default_factory=list)
    extra: dict[str, Any] | None = Field(default=None, description="Free-form metadata carried onto the schema")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_schema(self) -> SurfaceSchema:
        return SurfaceSchema(
            name=self.name,
            version=self.version,
            description=self.description,
            elements=tuple(element.to_spec() for element in self.elements),
            toggles=tuple(toggle.to_spec() for toggle in self.toggles),
            columns=tuple(column.to_spec() for column in self.columns),
            extra=dict(self.extra) if self.extra else None,
        )


__all__ = [
    "ColumnConfig",
    "CredentialField",
    "ElementConfig",
    "SURFACE_SCHEMA_ID",
    "SurfaceManifestV1",
    "ToggleConfig",
]
