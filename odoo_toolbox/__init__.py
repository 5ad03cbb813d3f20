"""odoo-toolbox: async Odoo JSON-RPC client, introspection and docs tooling."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("odoo-toolbox")
except PackageNotFoundError:
    __version__ = "0.1.0"

from odoo_toolbox.client import ModuleManager, OdooClient, create_client  # noqa: E402
from odoo_toolbox.config import OdooConfig, config_from_env  # noqa: E402
from odoo_toolbox.connection import OdooSession  # noqa: E402
from odoo_toolbox.errors import ErrorKind, OdooError  # noqa: E402
from odoo_toolbox.introspection import Introspector  # noqa: E402
from odoo_toolbox.safety import (  # noqa: E402
    DEFAULT_SAFETY,
    OperationInfo,
    SafetyLevel,
    SafetyPolicy,
    set_default_safety_policy,
)
