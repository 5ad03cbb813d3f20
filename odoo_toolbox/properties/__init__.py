"""Properties field types and codec."""

from odoo_toolbox.properties.codec import (
    PROPERTY_DEFINITION_SOURCES,
    PROPERTY_FIELD_MAPPINGS,
    get_property_definition,
    get_property_value,
    merge_write_format,
    properties_to_write_format,
)
from odoo_toolbox.properties.types import (
    PROPERTY_TYPES,
    PropertiesDefinition,
    PropertiesReadFormat,
    PropertiesWriteFormat,
    PropertyDefinition,
    PropertyValue,
)
