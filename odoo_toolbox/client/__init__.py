"""Core client and module management."""

from odoo_toolbox.client.module_manager import ModuleManager
from odoo_toolbox.client.odoo_client import OdooClient, create_client

__all__ = ["ModuleManager", "OdooClient", "create_client"]
