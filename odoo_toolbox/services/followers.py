"""Record followers (``mail.followers``)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from odoo_toolbox.client.odoo_client import OdooClient

logger = logging.getLogger("odoo_toolbox.followers")

FOLLOWER_FIELDS = ["id", "partner_id", "res_model", "res_id", "name", "email"]


class FollowerService:
    def __init__(self, client: OdooClient) -> None:
        self._client = client

    async def list(self, model: str, res_id: int) -> list[dict[str, Any]]:
        return await self._client.search_read(
            "mail.followers",
            [["res_model", "=", model], ["res_id", "=", res_id]],
            fields=FOLLOWER_FIELDS,
        )

    async def add(
        self,
        model: str,
        res_id: int,
        partner_ids: list[int],
        context: dict[str, Any] | None = None,
    ) -> None:
        if not partner_ids:
            return
        logger.debug("Adding %d followers to %s/%d", len(partner_ids), model, res_id)
        await self._client.call(
            model,
            "message_subscribe",
            [[res_id]],
            {"partner_ids": list(partner_ids), "context": context or {}},
        )

    async def remove(
        self,
        model: str,
        res_id: int,
        partner_ids: list[int],
        context: dict[str, Any] | None = None,
    ) -> None:
        if not partner_ids:
            return
        logger.debug("Removing %d followers from %s/%d", len(partner_ids), model, res_id)
        await self._client.call(
            model,
            "message_unsubscribe",
            [[res_id]],
            {"partner_ids": list(partner_ids), "context": context or {}},
        )
