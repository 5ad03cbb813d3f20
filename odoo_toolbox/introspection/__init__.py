"""Model and field introspection."""

from odoo_toolbox.introspection.cache import IntrospectionCache
from odoo_toolbox.introspection.introspector import Introspector, filter_models
from odoo_toolbox.introspection.types import FieldDescriptor, ModelDescriptor, ModelMetadata
