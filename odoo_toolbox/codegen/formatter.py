"""Rendering of model metadata as a Python module of TypedDict classes."""

from __future__ import annotations

import keyword
from datetime import datetime, timezone

from odoo_toolbox.codegen.type_mappers import (
    generate_field_doc,
    get_field_type_expression,
    is_writable_field,
    model_name_to_class_name,
)
from odoo_toolbox.introspection.types import FieldDescriptor, ModelMetadata

FILE_HEADER = '''"""Auto-generated typed declarations for Odoo models.

DO NOT edit manually. Regenerate with: odoo-toolbox generate
Generated at: {timestamp}
"""

from typing import Any, Literal, NotRequired, TypedDict
'''


def _is_declarable(name: str) -> bool:
    # Keywords cannot be class attributes; "__x" names would be mangled.
    return name.isidentifier() and not keyword.iskeyword(name) and not name.startswith("__")


def _render_fields(fields: list[FieldDescriptor]) -> list[str]:
    lines: list[str] = []
    for field in fields:
        if not _is_declarable(field.name):
            lines.append(f"    # skipped {field.name!r}: not a valid attribute name")
            continue
        lines.append(generate_field_doc(field))
        lines.append(f"    {field.name}: {get_field_type_expression(field)}")
        lines.append("")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def generate_model_interface(metadata: ModelMetadata) -> str:
    """Render the record and writable-values classes for one model."""
    model = metadata.model
    class_name = model_name_to_class_name(model.model)
    values_name = f"{class_name}Values"

    lines = [
        f"class {class_name}(TypedDict):",
        f'    """{model.name} (``{model.model}``)."""',
        "",
    ]
    lines.extend(_render_fields(metadata.fields))
    lines.extend([
        "",
        "    # Model methods:",
        "    # search(domain: list[Any]) -> list[int]",
        f"    # read(ids: list[int], fields: list[str] | None = None) -> list[{class_name}]",
        f"    # create(values: {values_name}) -> int",
        f"    # write(ids: list[int], values: {values_name}) -> bool",
        "    # unlink(ids: list[int]) -> bool",
        "",
        "",
        f"class {values_name}(TypedDict, total=False):",
        f'    """Writable fields of ``{model.model}``."""',
        "",
    ])

    writable = [f for f in metadata.fields if is_writable_field(f)]
    declared = [f for f in writable if _is_declarable(f.name)]
    if declared:
        for field in declared:
            base = get_field_type_expression(field)
            # total=False already makes every key optional
            if base.startswith("NotRequired[") and base.endswith("]"):
                base = base[len("NotRequired["):-1]
            lines.append(f"    {field.name}: {base}")
    else:
        lines.append("    pass")

    return "\n".join(lines) + "\n"


def generate_helper_types() -> str:
    return '''class SearchOptions(TypedDict, total=False):
    domain: list[Any]
    offset: int
    limit: int
    order: str
    context: dict[str, Any]


class ReadOptions(TypedDict, total=False):
    fields: list[str]
    context: dict[str, Any]


class CreateOptions(TypedDict, total=False):
    context: dict[str, Any]


class WriteOptions(TypedDict, total=False):
    context: dict[str, Any]


class UnlinkOptions(TypedDict, total=False):
    context: dict[str, Any]
'''


HELPER_NAMES = ["SearchOptions", "ReadOptions", "CreateOptions", "WriteOptions", "UnlinkOptions"]


def generate_complete_file(
    metadatas: list[ModelMetadata],
    timestamp: datetime | None = None,
) -> str:
    """Render a full module: header, helper types, one block per model, ``__all__``."""
    timestamp = timestamp or datetime.now(timezone.utc)
    parts = [
        FILE_HEADER.format(timestamp=timestamp.isoformat(timespec="seconds")),
        generate_helper_types(),
    ]

    exported = list(HELPER_NAMES)
    for metadata in sorted(metadatas, key=lambda m: m.model.model):
        parts.append(generate_model_interface(metadata))
        class_name = model_name_to_class_name(metadata.model.model)
        exported.extend([class_name, f"{class_name}Values"])

    all_lines = ["__all__ = ["] + [f'    "{name}",' for name in exported] + ["]"]
    parts.append("\n".join(all_lines) + "\n")
    return "\n\n".join(parts)
