"""Pydantic models describing JSON import and export documents."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SpreadsheetBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ImportDocument(SpreadsheetBaseModel):
    """Envelope around raw member rows.

    Rows are kept as loose values; per-row problems are reported by the
    importer instead of failing validation of the whole document.
    """

    family_name: str | None = Field(default=None, alias="familyName")
    description: str | None = None
    is_public: bool = Field(default=False, alias="isPublic")
    members: list[Any] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_rows(cls, value: object) -> object:
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            return {"members": list(cast(Sequence[object], value))}
        if isinstance(value, Mapping):
            data: dict[str, object] = dict(cast(Mapping[str, object], value))
            if "members" not in data:
                for key in ("rows", "data"):
                    if key in data:
                        data["members"] = data.pop(key)
                        break
            return data
        return value

    _normalize_family_name = field_validator("family_name", mode="before")(_blank_to_none)
    _normalize_description = field_validator("description", mode="before")(_blank_to_none)


class ExportDocument(SpreadsheetBaseModel):
    family_name: str = Field(alias="familyName")
    description: str | None = None
    is_public: bool = Field(default=False, alias="isPublic")
    members: list[dict[str, Any]]
