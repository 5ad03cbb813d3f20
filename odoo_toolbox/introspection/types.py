"""Descriptors for rows of ``ir.model`` and ``ir.model.fields``."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


# Odoo returns False for unset char columns.
def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


@dataclass(frozen=True)
class ModelDescriptor:
    """Snapshot of one ``ir.model`` row."""

    model: str
    name: str
    transient: bool = False
    modules: str = ""
    info: str | None = None
    id: int | None = None

    @property
    def module_list(self) -> list[str]:
        return [m.strip() for m in self.modules.split(",") if m.strip()]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> ModelDescriptor:
        return cls(
            model=record["model"],
            name=record.get("name") or record["model"],
            transient=bool(record.get("transient")),
            modules=_str_or_none(record.get("modules")) or "",
            info=_str_or_none(record.get("info")),
            id=record.get("id"),
        )


@dataclass(frozen=True)
class FieldDescriptor:
    """Snapshot of one ``ir.model.fields`` row."""

    name: str
    label: str
    type: str
    required: bool = False
    readonly: bool = False
    relation: str | None = None
    help: str | None = None
    selection: str | None = None
    compute: str | None = None
    model: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> FieldDescriptor:
        return cls(
            name=record["name"],
            label=_str_or_none(record.get("field_description")) or record["name"],
            type=record.get("ttype") or "",
            required=bool(record.get("required")),
            readonly=bool(record.get("readonly")),
            relation=_str_or_none(record.get("relation")),
            help=_str_or_none(record.get("help")),
            selection=_str_or_none(record.get("selection")),
            compute=_str_or_none(record.get("compute")),
            model=_str_or_none(record.get("model")),
        )


@dataclass(frozen=True)
class ModelMetadata:
    model: ModelDescriptor
    fields: list[FieldDescriptor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model.to_dict(),
            "fields": [f.to_dict() for f in self.fields],
        }
