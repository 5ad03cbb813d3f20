"""Conversion between the properties read format and write format.

Writing a properties field replaces the entire set: any name missing from
the written map is reset server side. Updates must read the current entries,
convert them with ``properties_to_write_format``, overlay the changed keys
and write the merged map back.
"""

from __future__ import annotations

from typing import Any

from odoo_toolbox.properties.types import (
    PropertiesDefinition,
    PropertiesReadFormat,
    PropertiesWriteFormat,
    PropertyDefinition,
)

# Model -> name of its properties field
PROPERTY_FIELD_MAPPINGS: dict[str, str] = {
    "crm.lead": "lead_properties",
    "project.task": "task_properties",
    "project.project": "project_properties",
    "sale.order": "order_properties",
    "product.template": "product_properties",
}

# Model -> (parent model, field holding the definitions)
PROPERTY_DEFINITION_SOURCES: dict[str, tuple[str, str]] = {
    "crm.lead": ("crm.team", "lead_properties_definition"),
    "project.task": ("project.project", "task_properties_definition"),
}


def get_property_value(properties: PropertiesReadFormat, name: str) -> Any:
    """Return the value of property ``name``, or None when absent."""
    for prop in properties:
        if prop.get("name") == name:
            return prop.get("value")
    return None


def properties_to_write_format(properties: PropertiesReadFormat) -> PropertiesWriteFormat:
    return {prop["name"]: prop.get("value") for prop in properties}


def get_property_definition(
    definitions: PropertiesDefinition, name: str
) -> PropertyDefinition | None:
    for definition in definitions:
        if definition.get("name") == name:
            return definition
    return None


def merge_write_format(
    current: PropertiesReadFormat, changes: PropertiesWriteFormat
) -> PropertiesWriteFormat:
    """Overlay ``changes`` on the write-format projection of ``current``."""
    merged = properties_to_write_format(current)
    merged.update(changes)
    return merged
