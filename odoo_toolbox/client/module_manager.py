"""Install, uninstall, upgrade and query Odoo modules (``ir.module.module``)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from odoo_toolbox.errors import OdooError

if TYPE_CHECKING:
    from odoo_toolbox.client.odoo_client import OdooClient

logger = logging.getLogger("odoo_toolbox.modules")

MODULE_MODEL = "ir.module.module"

MODULE_STATES = (
    "uninstalled",
    "installed",
    "to install",
    "to upgrade",
    "to remove",
    "uninstallable",
)

_STATE_FIELDS = ["id", "name", "state"]
_SUMMARY_FIELDS = [
    "id", "name", "state", "shortdesc", "summary", "installed_version", "application",
]
_LIST_FIELDS = [
    "id", "name", "state", "shortdesc", "summary", "author", "website",
    "installed_version", "latest_version", "license", "application", "category_id",
]
_INFO_FIELDS = _LIST_FIELDS[:5] + ["description"] + _LIST_FIELDS[5:]


class ModuleManager:
    """Module lifecycle operations. Invalidate introspection caches afterwards."""

    def __init__(self, client: OdooClient) -> None:
        self._client = client

    async def _find(self, name: str) -> dict[str, Any]:
        modules = await self._client.search_read(
            MODULE_MODEL, [["name", "=", name]], fields=_STATE_FIELDS, limit=1
        )
        if not modules:
            raise OdooError.missing(f"Module '{name}' not found")
        return modules[0]

    async def _refresh(self, module_id: int) -> dict[str, Any]:
        modules = await self._client.search_read(
            MODULE_MODEL, [["id", "=", module_id]], fields=_SUMMARY_FIELDS
        )
        return modules[0]

    async def install_module(self, name: str) -> dict[str, Any]:
        module = await self._find(name)
        if module["state"] == "installed":
            logger.info("Module %s is already installed", name)
            return module
        if module["state"] == "uninstallable":
            raise OdooError.validation(
                f"Module '{name}' is not installable (state: {module['state']})"
            )

        logger.info("Installing module %s (id=%d)", name, module["id"])
        await self._client.call(MODULE_MODEL, "button_immediate_install", [[module["id"]]])
        return await self._refresh(module["id"])

    async def uninstall_module(self, name: str) -> dict[str, Any]:
        module = await self._find(name)
        if module["state"] == "uninstalled":
            logger.info("Module %s is already uninstalled", name)
            return module
        if module["state"] != "installed":
            raise OdooError.validation(
                f"Module '{name}' cannot be uninstalled (current state: {module['state']})"
            )

        logger.info("Uninstalling module %s (id=%d)", name, module["id"])
        await self._client.call(MODULE_MODEL, "button_immediate_uninstall", [[module["id"]]])
        return await self._refresh(module["id"])

    async def upgrade_module(self, name: str) -> dict[str, Any]:
        module = await self._find(name)
        if module["state"] != "installed":
            raise OdooError.validation(
                f"Module '{name}' must be installed to upgrade (current state: {module['state']})"
            )

        logger.info("Upgrading module %s (id=%d)", name, module["id"])
        await self._client.call(MODULE_MODEL, "button_immediate_upgrade", [[module["id"]]])
        return await self._refresh(module["id"])

    async def list_modules(
        self,
        state: str | None = None,
        application: bool | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        domain: list = []
        if state:
            domain.append(["state", "=", state])
        if application is not None:
            domain.append(["application", "=", application])
        return await self._client.search_read(
            MODULE_MODEL, domain, fields=_LIST_FIELDS, limit=limit, offset=offset
        )

    async def get_module_info(self, name: str) -> dict[str, Any]:
        modules = await self._client.search_read(
            MODULE_MODEL, [["name", "=", name]], fields=_INFO_FIELDS, limit=1
        )
        if not modules:
            raise OdooError.missing(f"Module '{name}' not found")
        return modules[0]

    async def is_module_installed(self, name: str) -> bool:
        modules = await self._client.search_read(
            MODULE_MODEL,
            [["name", "=", name], ["state", "=", "installed"]],
            fields=["id"],
            limit=1,
        )
        return bool(modules)
