"""MCP server exposing an authenticated Odoo client as tools over stdio."""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable

from mcp.server.fastmcp import FastMCP
from mcp.server.stdio import stdio_server

from odoo_toolbox import __version__
from odoo_toolbox.client.odoo_client import OdooClient, create_client
from odoo_toolbox.config import DEFAULT_ENV_PREFIX
from odoo_toolbox.errors import OdooError
from odoo_toolbox.errors.classifier import log_error
from odoo_toolbox.introspection.introspector import Introspector

logger = logging.getLogger("odoo_toolbox.server")

DOMAIN_SYNTAX_HELP = (
    "Domain syntax: a list of [field, operator, value] triples, "
    "e.g. [[\"is_company\", \"=\", true]]. Use \"&\" / \"|\" prefixes for explicit AND/OR."
)


def make_annotations(
    *,
    title: str,
    read_only: bool = False,
    destructive: bool = False,
    idempotent: bool = False,
) -> dict[str, Any]:
    return {
        "title": title,
        "readOnlyHint": read_only,
        "destructiveHint": destructive,
        "idempotentHint": idempotent,
        "openWorldHint": True,
    }


def _dump(value: Any) -> str:
    return json.dumps(value, default=str)


async def run_tool(name: str, action: Callable[[], Awaitable[Any]]) -> str:
    """Run a tool body, returning errors as structured JSON."""
    try:
        return _dump(await action())
    except OdooError as e:
        log_error(e, method=name)
        return e.to_json()


def register_tools(server: FastMCP, client: OdooClient, introspector: Introspector) -> list[str]:
    """Register every tool on ``server`` and return their names."""
    registered: list[str] = []

    def tool(name: str, description: str, **annotations: bool):
        def decorator(handler):
            server.tool(
                name=name,
                description=description,
                annotations=make_annotations(title=name, **annotations),
            )(handler)
            registered.append(name)
            return handler
        return decorator

    @tool("odoo_search_read", f"Search records and return field values.\n\n{DOMAIN_SYNTAX_HELP}",
          read_only=True, idempotent=True)
    async def search_read(
        model: str,
        domain: list | None = None,
        fields: list[str] | None = None,
        limit: int = 80,
        offset: int = 0,
        order: str | None = None,
    ) -> str:
        return await run_tool("odoo_search_read", lambda: client.search_read(
            model, domain, fields=fields, limit=limit, offset=offset, order=order
        ))

    @tool("odoo_read", "Read specific records by ID.", read_only=True, idempotent=True)
    async def read(model: str, ids: list[int], fields: list[str] | None = None) -> str:
        return await run_tool("odoo_read", lambda: client.read(model, ids, fields))

    @tool("odoo_create", "Create a record and return its ID.")
    async def create(model: str, values: dict) -> str:
        return await run_tool("odoo_create", lambda: client.create(model, values))

    @tool("odoo_write", "Update records with the given values.", idempotent=True)
    async def write(model: str, ids: list[int], values: dict) -> str:
        return await run_tool("odoo_write", lambda: client.write(model, ids, values))

    @tool("odoo_unlink", "Delete records. This cannot be undone.", destructive=True)
    async def unlink(model: str, ids: list[int]) -> str:
        return await run_tool("odoo_unlink", lambda: client.unlink(model, ids))

    @tool("odoo_list_models", "List models, optionally restricted to modules.",
          read_only=True, idempotent=True)
    async def list_models(modules: list[str] | None = None, include_transient: bool = False) -> str:
        async def action() -> Any:
            models = await introspector.get_models(
                include_transient=include_transient, modules=modules
            )
            return [m.to_dict() for m in models]
        return await run_tool("odoo_list_models", action)

    @tool("odoo_get_fields", "List the fields of a model with type and constraints.",
          read_only=True, idempotent=True)
    async def get_fields(model: str) -> str:
        async def action() -> Any:
            return [f.to_dict() for f in await introspector.get_fields(model)]
        return await run_tool("odoo_get_fields", action)

    @tool("odoo_post_note", "Post an internal note (employees only) on a record's chatter.")
    async def post_note(model: str, res_id: int, body: str) -> str:
        return await run_tool(
            "odoo_post_note", lambda: client.mail.post_internal_note(model, res_id, body)
        )

    @tool("odoo_post_message", "Post a message visible to all followers on a record's chatter.")
    async def post_message(model: str, res_id: int, body: str) -> str:
        return await run_tool(
            "odoo_post_message", lambda: client.mail.post_open_message(model, res_id, body)
        )

    @tool("odoo_read_properties", "Read the properties field of a record.",
          read_only=True, idempotent=True)
    async def read_properties(model: str, res_id: int) -> str:
        return await run_tool("odoo_read_properties", lambda: client.properties.read(model, res_id))

    @tool("odoo_update_properties",
          "Update properties on a record. Other properties keep their values.",
          idempotent=True)
    async def update_properties(model: str, res_id: int, values: dict) -> str:
        async def action() -> Any:
            await client.properties.update(model, res_id, values)
            return {"status": "ok"}
        return await run_tool("odoo_update_properties", action)

    return registered


async def run_server(prefix: str = DEFAULT_ENV_PREFIX) -> None:
    """Authenticate from the environment and serve tools over stdio."""
    logger.info("odoo-toolbox v%s starting MCP server", __version__)

    client = await create_client(prefix)
    server = FastMCP("odoo-toolbox")
    names = register_tools(server, client, Introspector(client))
    logger.info("Registered %d tools", len(names))

    low = server._mcp_server
    try:
        async with stdio_server() as (read_stream, write_stream):
            await low.run(read_stream, write_stream, low.create_initialization_options())
    finally:
        logger.info("Shutting down...")
        await client.close()
