"""
High-level async client for an Odoo instance.

Every typed method shapes its parameters and funnels into ``call()``, which
enforces authentication and the safety policy before touching the network.
"""

from __future__ import annotations

import logging
from typing import Any

from odoo_toolbox.client.module_manager import ModuleManager
from odoo_toolbox.config import DEFAULT_ENV_PREFIX, OdooConfig, config_from_env
from odoo_toolbox.connection.jsonrpc_adapter import JsonRpcTransport
from odoo_toolbox.connection.protocol import OdooProtocol, OdooSession
from odoo_toolbox.errors import OdooError
from odoo_toolbox.safety.guard import (
    DEFAULT_SAFETY,
    SafetyPolicy,
    build_operation,
    check_operation,
    resolve_safety_policy,
)
from odoo_toolbox.services.activities import ActivityService
from odoo_toolbox.services.followers import FollowerService
from odoo_toolbox.services.mail import MailService
from odoo_toolbox.services.properties import PropertiesService

logger = logging.getLogger("odoo_toolbox.client")

NOT_AUTHENTICATED = "Client not authenticated. Call authenticate() first."


def _as_id_list(ids: int | list[int]) -> list[int]:
    if isinstance(ids, (list, tuple)):
        return list(ids)
    return [ids]


class OdooClient:
    """Authenticated access to Odoo models and domain services."""

    def __init__(
        self,
        config: OdooConfig,
        *,
        safety: Any = DEFAULT_SAFETY,
        transport: OdooProtocol | None = None,
    ) -> None:
        self._config = config
        self._transport = transport or JsonRpcTransport(
            config.url,
            config.database,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
        )
        self._safety: SafetyPolicy | None = resolve_safety_policy(safety)
        self._authenticated = False

        self.mail = MailService(self)
        self.activities = ActivityService(self)
        self.followers = FollowerService(self)
        self.properties = PropertiesService(self)
        self.modules = ModuleManager(self)

    async def __aenter__(self) -> OdooClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def config(self) -> OdooConfig:
        return self._config

    @property
    def safety(self) -> SafetyPolicy | None:
        return self._safety

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    async def authenticate(self) -> OdooSession:
        """Log in with the configured credentials. Required before any call."""
        session = await self._transport.authenticate(
            self._config.username, self._config.password
        )
        self._authenticated = True
        logger.info("Authenticated as uid=%d on %s", session.uid, session.database)
        return session

    def get_session(self) -> OdooSession | None:
        return self._transport.session

    def logout(self) -> None:
        self._transport.logout()
        self._authenticated = False

    async def close(self) -> None:
        self._authenticated = False
        await self._transport.close()

    # --- Raw call ---

    async def call(
        self,
        model: str,
        method: str,
        args: list[Any] | None = None,
        kwargs: dict[str, Any] | None = None,
    ) -> Any:
        """Call ``model.method(*args, **kwargs)`` through ``execute_kw``."""
        if not self._authenticated:
            raise OdooError.auth(NOT_AUTHENTICATED)

        args = list(args or [])
        kwargs = dict(kwargs or {})
        if self._safety is not None:
            operation = build_operation(
                model, method, args, kwargs, target=self._transport.url
            )
            await check_operation(self._safety, operation)

        return await self._transport.execute_kw(model, method, args, kwargs)

    # --- CRUD ---

    async def search(
        self,
        model: str,
        domain: list | None = None,
        *,
        offset: int | None = None,
        limit: int | None = None,
        order: str | None = None,
    ) -> list[int]:
        kwargs: dict[str, Any] = {}
        if offset is not None:
            kwargs["offset"] = offset
        if limit is not None:
            kwargs["limit"] = limit
        if order is not None:
            kwargs["order"] = order
        return await self.call(model, "search", [domain or []], kwargs)

    async def search_count(self, model: str, domain: list | None = None) -> int:
        return await self.call(model, "search_count", [domain or []])

    async def read(
        self,
        model: str,
        ids: int | list[int],
        fields: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Read records. A single id is accepted; the result is always a list."""
        return await self.call(model, "read", [_as_id_list(ids), fields or []])

    async def search_read(
        self,
        model: str,
        domain: list | None = None,
        *,
        fields: list[str] | None = None,
        offset: int | None = None,
        limit: int | None = None,
        order: str | None = None,
    ) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {}
        if fields:
            kwargs["fields"] = fields
        if offset is not None:
            kwargs["offset"] = offset
        if limit is not None:
            kwargs["limit"] = limit
        if order is not None:
            kwargs["order"] = order
        return await self.call(model, "search_read", [domain or []], kwargs)

    async def create(
        self,
        model: str,
        values: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> int:
        return await self.call(model, "create", [values], {"context": context or {}})

    async def write(
        self,
        model: str,
        ids: int | list[int],
        values: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        return await self.call(
            model, "write", [_as_id_list(ids), values], {"context": context or {}}
        )

    async def unlink(self, model: str, ids: int | list[int]) -> bool:
        return await self.call(model, "unlink", [_as_id_list(ids)])


async def create_client(
    prefix: str = DEFAULT_ENV_PREFIX,
    *,
    safety: Any = DEFAULT_SAFETY,
) -> OdooClient:
    """Build a client from ``{prefix}_*`` environment variables and log in."""
    client = OdooClient(config_from_env(prefix), safety=safety)
    try:
        await client.authenticate()
    except BaseException:
        await client.close()
        raise
    return client
