"""
Posting chatter messages.

Messages are created directly on ``mail.message`` rather than through
``message_post``, which does not reliably honour these parameters over
external RPC. Internal notes and open messages differ only in subtype and
the ``is_internal`` flag.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from odoo_toolbox.errors import OdooError

if TYPE_CHECKING:
    from odoo_toolbox.client.odoo_client import OdooClient

logger = logging.getLogger("odoo_toolbox.mail")

# mail.message.subtype ids shipped with the mail module
SUBTYPE_COMMENT = 1  # mail.mt_comment, visible to followers
SUBTYPE_NOTE = 2  # mail.mt_note, internal only

MESSAGE_FIELDS = [
    "id",
    "body",
    "author_id",
    "date",
    "message_type",
    "subtype_id",
    "is_internal",
    "record_name",
    "model",
    "res_id",
]

EMPTY_BODY_MESSAGE = (
    "Message body must not be empty. "
    "Provide HTML (e.g. '<p>Called the customer, they want a callback.</p>') "
    "or plain text (auto-wrapped in <p> tags)."
)


def ensure_html_body(body: str) -> str:
    """Return ``body`` as HTML, wrapping plain text in a single ``<p>``.

    Raises VALIDATION_ERROR for empty or whitespace-only input.
    """
    if not body or not body.strip():
        raise OdooError.validation(EMPTY_BODY_MESSAGE)

    trimmed = body.strip()
    if trimmed.startswith("<"):
        return trimmed
    return f"<p>{trimmed}</p>"


def build_message_values(
    model: str,
    res_id: int,
    body: str,
    subtype_id: int,
    is_internal: bool,
    partner_ids: list[int] | None = None,
    attachment_ids: list[int] | None = None,
) -> dict[str, Any]:
    values: dict[str, Any] = {
        "model": model,
        "res_id": res_id,
        "body": ensure_html_body(body),
        "message_type": "comment",
        "subtype_id": subtype_id,
        "is_internal": is_internal,
    }
    if partner_ids:
        values["partner_ids"] = [[6, 0, list(partner_ids)]]
    if attachment_ids:
        values["attachment_ids"] = [[6, 0, list(attachment_ids)]]
    return values


async def post_internal_note(
    client: OdooClient,
    model: str,
    res_id: int,
    body: str,
    *,
    partner_ids: list[int] | None = None,
    attachment_ids: list[int] | None = None,
) -> int:
    """Post a note visible to internal users only. Returns the message id."""
    values = build_message_values(
        model, res_id, body, SUBTYPE_NOTE, True, partner_ids, attachment_ids
    )
    message_id = await client.create("mail.message", values)
    logger.debug("Posted internal note %d on %s/%d", message_id, model, res_id)
    return message_id


async def post_open_message(
    client: OdooClient,
    model: str,
    res_id: int,
    body: str,
    *,
    partner_ids: list[int] | None = None,
    attachment_ids: list[int] | None = None,
) -> int:
    """Post a message visible to followers, portal users included."""
    values = build_message_values(
        model, res_id, body, SUBTYPE_COMMENT, False, partner_ids, attachment_ids
    )
    message_id = await client.create("mail.message", values)
    logger.debug("Posted open message %d on %s/%d", message_id, model, res_id)
    return message_id


async def get_messages(
    client: OdooClient,
    model: str,
    res_id: int,
    *,
    message_type: str | None = None,
    limit: int = 100,
    offset: int = 0,
    order: str = "id DESC",
) -> list[dict[str, Any]]:
    domain: list = [["model", "=", model], ["res_id", "=", res_id]]
    if message_type:
        domain.append(["message_type", "=", message_type])
    return await client.search_read(
        "mail.message",
        domain,
        fields=MESSAGE_FIELDS,
        limit=limit,
        offset=offset,
        order=order,
    )


class MailService:
    """Chatter operations bound to one client."""

    def __init__(self, client: OdooClient) -> None:
        self._client = client

    async def post_internal_note(
        self,
        model: str,
        res_id: int,
        body: str,
        *,
        partner_ids: list[int] | None = None,
        attachment_ids: list[int] | None = None,
    ) -> int:
        return await post_internal_note(
            self._client, model, res_id, body,
            partner_ids=partner_ids, attachment_ids=attachment_ids,
        )

    async def post_open_message(
        self,
        model: str,
        res_id: int,
        body: str,
        *,
        partner_ids: list[int] | None = None,
        attachment_ids: list[int] | None = None,
    ) -> int:
        return await post_open_message(
            self._client, model, res_id, body,
            partner_ids=partner_ids, attachment_ids=attachment_ids,
        )

    async def get_messages(
        self,
        model: str,
        res_id: int,
        *,
        message_type: str | None = None,
        limit: int = 100,
        offset: int = 0,
        order: str = "id DESC",
    ) -> list[dict[str, Any]]:
        return await get_messages(
            self._client, model, res_id,
            message_type=message_type, limit=limit, offset=offset, order=order,
        )
