"""
Client-side safety guard for mutating Odoo operations.

Each outgoing ``execute_kw`` call is classified READ, WRITE or DELETE. When a
``SafetyPolicy`` is in effect, non-READ operations must be approved by its
``confirm`` callback before they reach the network. This is a local
interlock, unrelated to the server's own access rights.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

from odoo_toolbox.errors import OdooError

logger = logging.getLogger("odoo_toolbox.safety")


class SafetyLevel(str, Enum):
    READ = "READ"
    WRITE = "WRITE"
    DELETE = "DELETE"


READ_METHODS: frozenset[str] = frozenset({
    "search",
    "read",
    "search_read",
    "search_count",
    "fields_get",
    "name_get",
    "name_search",
    "default_get",
    "onchange",
    "load_views",
    "check_access_rights",
    "check_access_rule",
    "read_group",
})

DELETE_METHODS: frozenset[str] = frozenset({"unlink"})


def infer_safety_level(method: str) -> SafetyLevel:
    """READ for known read methods, DELETE for unlink, WRITE otherwise."""
    if method in READ_METHODS:
        return SafetyLevel.READ
    if method in DELETE_METHODS:
        return SafetyLevel.DELETE
    return SafetyLevel.WRITE


@dataclass(frozen=True)
class OperationInfo:
    """Description of one guarded operation, handed to ``confirm``."""

    name: str
    level: SafetyLevel
    model: str
    description: str
    target: str | None = None
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result = asdict(self)
        result["level"] = self.level.value
        return {k: v for k, v in result.items() if v is not None}


ConfirmCallback = Callable[[OperationInfo], Awaitable[bool]]


@dataclass(frozen=True)
class SafetyPolicy:
    """Confirmation policy applied to WRITE and DELETE operations."""

    confirm: ConfirmCallback


class _DefaultSafety:
    """Marker meaning "use the process-wide default policy"."""

    def __repr__(self) -> str:
        return "DEFAULT_SAFETY"


DEFAULT_SAFETY: Any = _DefaultSafety()

_default_policy: SafetyPolicy | None = None


def set_default_safety_policy(policy: SafetyPolicy | None) -> None:
    """Configure the process-wide policy. Call once at startup."""
    global _default_policy
    _default_policy = policy


def get_default_safety_policy() -> SafetyPolicy | None:
    return _default_policy


def resolve_safety_policy(policy: SafetyPolicy | None | _DefaultSafety) -> SafetyPolicy | None:
    """Resolve a client's ``safety`` argument.

    ``DEFAULT_SAFETY`` falls back to the process-wide default; ``None``
    explicitly disables the guard even when a default is configured.
    """
    if isinstance(policy, _DefaultSafety):
        return _default_policy
    return policy


def _record_ids(args: list[Any]) -> list[int]:
    if not args:
        return []
    first = args[0]
    if isinstance(first, int) and not isinstance(first, bool):
        return [first]
    if isinstance(first, (list, tuple)) and all(
        isinstance(i, int) and not isinstance(i, bool) for i in first
    ):
        return list(first)
    return []


def describe_operation(model: str, method: str, args: list[Any]) -> str:
    ids = _record_ids(args)
    if method == "create":
        return f"Create record in {model}"
    if method == "write":
        return f"Update {len(ids)} record(s) in {model}"
    if method == "unlink":
        return f"Delete {len(ids)} record(s) from {model}"
    return f"Call {method} on {model}"


def build_operation(
    model: str,
    method: str,
    args: list[Any] | None = None,
    kwargs: dict[str, Any] | None = None,
    target: str | None = None,
) -> OperationInfo:
    args = list(args or [])
    details: dict[str, Any] = {"method": method}
    ids = _record_ids(args)
    if ids:
        details["ids"] = ids
    if kwargs:
        details["kwargs"] = sorted(kwargs)
    return OperationInfo(
        name=f"odoo.{method}",
        level=infer_safety_level(method),
        model=model,
        description=describe_operation(model, method, args),
        target=target,
        details=details,
    )


async def check_operation(policy: SafetyPolicy | None, operation: OperationInfo) -> None:
    """Ask ``policy`` to approve ``operation``; raise SAFETY_BLOCKED if refused."""
    if policy is None or operation.level is SafetyLevel.READ:
        return

    approved = await policy.confirm(operation)
    if not approved:
        logger.warning(
            "Blocked %s %s on %s", operation.level.value, operation.name, operation.model
        )
        raise OdooError.safety_blocked(operation)

    logger.info(
        "Confirmed %s %s on %s", operation.level.value, operation.name, operation.model
    )
