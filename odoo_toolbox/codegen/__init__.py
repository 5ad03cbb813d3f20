"""Generation of typed Python declarations from model metadata."""

from odoo_toolbox.codegen.formatter import (
    generate_complete_file,
    generate_helper_types,
    generate_model_interface,
)
from odoo_toolbox.codegen.generator import CodeGenerator
from odoo_toolbox.codegen.type_mappers import (
    FIELD_TYPE_MAP,
    generate_field_doc,
    get_field_type_expression,
    is_writable_field,
    map_field_type,
    model_name_to_class_name,
)
