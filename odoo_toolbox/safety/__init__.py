"""
Safety module for odoo-toolbox.

Classifies outgoing operations and enforces an optional confirmation policy.
"""

from odoo_toolbox.safety.guard import (
    DEFAULT_SAFETY,
    DELETE_METHODS,
    READ_METHODS,
    OperationInfo,
    SafetyLevel,
    SafetyPolicy,
    build_operation,
    check_operation,
    get_default_safety_policy,
    infer_safety_level,
    resolve_safety_policy,
    set_default_safety_policy,
)
