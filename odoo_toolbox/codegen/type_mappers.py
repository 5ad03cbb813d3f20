"""Mapping of Odoo field metadata to Python type expressions."""

from __future__ import annotations

from odoo_toolbox.introspection.types import FieldDescriptor

FIELD_TYPE_MAP: dict[str, str] = {
    "char": "str",
    "text": "str",
    "html": "str",
    "integer": "int",
    "float": "float",
    "monetary": "float",
    "boolean": "bool",
    # ISO 8601 strings
    "date": "str",
    "datetime": "str",
    # Written as a bare id; read back as [id, display_name]
    "many2one": "int",
    "one2many": "list[int]",
    "many2many": "list[int]",
    "selection": "str",
    # base64
    "binary": "str",
}

RELATIONAL_TYPES = frozenset({"many2one", "one2many", "many2many"})

SYSTEM_FIELDS = frozenset({
    "id",
    "create_date",
    "create_uid",
    "write_date",
    "write_uid",
    "__last_update",
})


def map_field_type(field: FieldDescriptor) -> str:
    return FIELD_TYPE_MAP.get(field.type, "Any")


def get_field_type_expression(field: FieldDescriptor) -> str:
    """Annotation for ``field`` inside a TypedDict.

    Optional fields are ``NotRequired`` and may hold ``False``, which is how
    Odoo represents an empty value.
    """
    base = map_field_type(field)
    if field.required:
        return base
    if base in ("Any", "bool"):
        return f"NotRequired[{base}]"
    return f"NotRequired[{base} | Literal[False]]"


def is_writable_field(field: FieldDescriptor) -> bool:
    if field.name in SYSTEM_FIELDS:
        return False
    return not field.readonly


def _single_line(text: str | None) -> str:
    return " ".join((text or "").split())


def generate_field_doc(field: FieldDescriptor, indent: str = "    ") -> str:
    """``#:`` comment block documenting a field."""
    lines: list[str] = []
    label = _single_line(field.label)
    if label:
        lines.append(label)
    if field.help:
        help_text = _single_line(field.help)
        if help_text:
            lines.extend(["", help_text])

    tags: list[str] = []
    if field.required:
        tags.append("@required")
    if field.readonly:
        tags.append("@readonly")
    if field.relation and field.type in RELATIONAL_TYPES:
        tags.append(f"@relation {field.relation}")
    if tags:
        lines.append("")
        lines.extend(tags)

    return "\n".join(f"{indent}#: {line}".rstrip() for line in lines)


def model_name_to_class_name(model: str) -> str:
    """``res.partner`` -> ``ResPartner``."""
    parts = model.replace("_", ".").split(".")
    return "".join(part[:1].upper() + part[1:] for part in parts if part)
