"""
Classification of raw Odoo failures into ``OdooError`` kinds.

Different server versions expose different levels of structure in their
JSON-RPC error payloads, so classification checks the structured
``exception_type`` tag first and falls back to the exception class name.
"""

from __future__ import annotations

import logging
from typing import Any

from odoo_toolbox.errors import ErrorKind, OdooError

logger = logging.getLogger("odoo_toolbox.errors")

# data.exception_type -> kind
EXCEPTION_TYPE_MAP: dict[str, ErrorKind] = {
    "access_denied": ErrorKind.AUTH,
    "access_error": ErrorKind.ACCESS,
    "validation_error": ErrorKind.VALIDATION,
    "user_error": ErrorKind.VALIDATION,
    "missing_error": ErrorKind.MISSING,
}

# data.name substring -> kind, first match wins
EXCEPTION_NAME_MAP: list[tuple[str, ErrorKind]] = [
    ("AccessDenied", ErrorKind.AUTH),
    ("AccessError", ErrorKind.ACCESS),
    ("ValidationError", ErrorKind.VALIDATION),
    ("UserError", ErrorKind.VALIDATION),
    ("MissingError", ErrorKind.MISSING),
]

_WARNING_KINDS = frozenset({
    ErrorKind.VALIDATION,
    ErrorKind.MISSING,
    ErrorKind.SAFETY_BLOCKED,
})


def classify_kind(data: Any) -> ErrorKind:
    """Return the error kind for the ``data`` member of a JSON-RPC error."""
    if not isinstance(data, dict):
        return ErrorKind.RPC

    exception_type = data.get("exception_type")
    if isinstance(exception_type, str) and exception_type in EXCEPTION_TYPE_MAP:
        return EXCEPTION_TYPE_MAP[exception_type]

    name = data.get("name")
    if isinstance(name, str):
        for keyword, kind in EXCEPTION_NAME_MAP:
            if keyword in name:
                return kind

    return ErrorKind.RPC


def classify_jsonrpc_error(error: Any) -> OdooError:
    """Build an ``OdooError`` from the ``error`` object of a JSON-RPC response.

    Never raises: unrecognized shapes become a generic RPC_ERROR.
    """
    if not isinstance(error, dict):
        return OdooError.rpc(str(error) if error else "Unknown RPC error", data=error)

    code = error.get("code")
    data = error.get("data")
    message = None
    if isinstance(data, dict):
        message = data.get("message")
    if not message:
        message = error.get("message") or "Unknown RPC error"

    return OdooError(str(message), classify_kind(data), {"code": code, "data": data})


def log_error(exc: OdooError, model: str | None = None, method: str | None = None) -> None:
    """Log an error at the level matching its kind."""
    msg = "[%s] %s | model=%s method=%s"
    args = (exc.kind.value, exc.message, model or "", method or "")
    if exc.kind in _WARNING_KINDS:
        logger.warning(msg, *args)
    else:
        logger.error(msg, *args)
