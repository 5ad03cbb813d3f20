"""Scheduling and completing ``mail.activity`` records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from odoo_toolbox.errors import OdooError

if TYPE_CHECKING:
    from odoo_toolbox.client.odoo_client import OdooClient

logger = logging.getLogger("odoo_toolbox.activities")

# Short names for the activity types shipped with the mail module
ACTIVITY_TYPE_ALIASES: dict[str, str] = {
    "email": "mail.mail_activity_data_email",
    "call": "mail.mail_activity_data_call",
    "meeting": "mail.mail_activity_data_meeting",
    "todo": "mail.mail_activity_data_todo",
    "upload_document": "mail.mail_activity_data_upload_document",
}

ACTIVITY_FIELDS = [
    "id",
    "activity_type_id",
    "summary",
    "note",
    "date_deadline",
    "user_id",
    "res_model",
    "res_id",
    "res_name",
    "state",
]


async def get_model_id(client: OdooClient, model: str) -> int:
    """Return the ``ir.model`` id for a technical model name."""
    records = await client.search_read(
        "ir.model", [["model", "=", model]], fields=["id"], limit=1
    )
    if not records:
        raise OdooError.missing(f"Model '{model}' not found in Odoo instance")
    return records[0]["id"]


async def resolve_activity_type_id(client: OdooClient, activity_type: int | str) -> int:
    """Resolve an activity type given as id, XML id, alias or name."""
    if isinstance(activity_type, int):
        return activity_type

    ref = ACTIVITY_TYPE_ALIASES.get(activity_type, activity_type)
    if "." in ref:
        module, _, name = ref.partition(".")
        records = await client.search_read(
            "ir.model.data",
            [["module", "=", module], ["name", "=", name], ["model", "=", "mail.activity.type"]],
            fields=["res_id"],
            limit=1,
        )
        if records:
            logger.debug("Resolved XML id %s to activity type %d", ref, records[0]["res_id"])
            return records[0]["res_id"]

    records = await client.search_read(
        "mail.activity.type",
        [["name", "=ilike", activity_type]],
        fields=["id", "name"],
        limit=1,
    )
    if records:
        logger.debug("Resolved name %s to activity type %d", activity_type, records[0]["id"])
        return records[0]["id"]

    raise OdooError.validation(f"Unable to resolve activity type: {activity_type}")


class ActivityService:
    def __init__(self, client: OdooClient) -> None:
        self._client = client

    async def schedule(
        self,
        model: str,
        res_id: int,
        activity_type: int | str,
        *,
        summary: str | None = None,
        note: str | None = None,
        date_deadline: str | None = None,
        user_id: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> int:
        """Schedule an activity on a record. Returns the activity id."""
        type_id = await resolve_activity_type_id(self._client, activity_type)
        values: dict[str, Any] = {
            "res_model": model,
            "res_model_id": await get_model_id(self._client, model),
            "res_id": res_id,
            "activity_type_id": type_id,
        }
        if summary:
            values["summary"] = summary
        if note:
            values["note"] = note
        if date_deadline:
            values["date_deadline"] = date_deadline
        if user_id:
            values["user_id"] = user_id

        activity_id = await self._client.create("mail.activity", values, context)
        logger.info("Scheduled activity %d on %s/%d", activity_id, model, res_id)
        return activity_id

    async def complete(
        self,
        activity_ids: list[int],
        feedback: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Mark activities done, one ``action_feedback`` call per activity."""
        for activity_id in activity_ids:
            kwargs: dict[str, Any] = {"context": context or {}}
            if feedback:
                kwargs["feedback"] = feedback
            await self._client.call("mail.activity", "action_feedback", [[activity_id]], kwargs)
            logger.debug("Completed activity %d", activity_id)

    async def cancel(self, activity_ids: list[int]) -> None:
        await self._client.unlink("mail.activity", activity_ids)

    async def get_activities(
        self,
        model: str | None = None,
        res_id: int | None = None,
        *,
        activity_type_id: int | None = None,
        user_id: int | None = None,
        state: str | None = None,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        domain: list = []
        if model:
            domain.append(["res_model", "=", model])
        if res_id is not None:
            domain.append(["res_id", "=", res_id])
        if activity_type_id:
            domain.append(["activity_type_id", "=", activity_type_id])
        if user_id:
            domain.append(["user_id", "=", user_id])
        if state:
            domain.append(["state", "=", state])
        return await self._client.search_read(
            "mail.activity", domain, fields=ACTIVITY_FIELDS, limit=limit
        )
