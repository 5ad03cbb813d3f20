"""
Error taxonomy for odoo-toolbox.

Every failure raised by the library is an ``OdooError`` carrying a machine
readable ``kind``. Callers match on the kind instead of on exception classes.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from odoo_toolbox.safety.guard import OperationInfo


class ErrorKind(str, Enum):
    """Stable error tags exposed through ``to_structured()``."""

    ODOO = "ODOO_ERROR"
    RPC = "RPC_ERROR"
    AUTH = "AUTH_ERROR"
    NETWORK = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT_ERROR"
    VALIDATION = "VALIDATION_ERROR"
    ACCESS = "ACCESS_ERROR"
    MISSING = "MISSING_ERROR"
    SAFETY_BLOCKED = "SAFETY_BLOCKED"


# Kinds produced by the RPC layer (the server answered badly, or not at all).
RPC_KINDS: frozenset[ErrorKind] = frozenset({
    ErrorKind.RPC,
    ErrorKind.AUTH,
    ErrorKind.NETWORK,
    ErrorKind.TIMEOUT,
    ErrorKind.VALIDATION,
    ErrorKind.ACCESS,
    ErrorKind.MISSING,
})

# Kinds where the server was never reached or never answered.
NETWORK_KINDS: frozenset[ErrorKind] = frozenset({
    ErrorKind.NETWORK,
    ErrorKind.TIMEOUT,
})


class OdooError(Exception):
    """Single exception type for every odoo-toolbox failure."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.ODOO,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.details = details

    def __repr__(self) -> str:
        return f"OdooError({self.kind.value}, {self.message!r})"

    @property
    def is_rpc(self) -> bool:
        return self.kind in RPC_KINDS

    @property
    def is_network(self) -> bool:
        return self.kind in NETWORK_KINDS

    def to_structured(self) -> dict[str, Any]:
        """Serialize to a dictionary, omitting empty details."""
        result: dict[str, Any] = {
            "error": self.kind.value,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_structured(), default=str)

    # --- Constructors ---

    @classmethod
    def rpc(cls, message: str, code: Any = None, data: Any = None) -> OdooError:
        return cls(message, ErrorKind.RPC, {"code": code, "data": data})

    @classmethod
    def auth(cls, message: str = "Authentication failed", details: dict[str, Any] | None = None) -> OdooError:
        return cls(message, ErrorKind.AUTH, details)

    @classmethod
    def network(cls, message: str, cause: BaseException | None = None) -> OdooError:
        details = {"cause": str(cause)} if cause is not None else None
        return cls(message, ErrorKind.NETWORK, details)

    @classmethod
    def timeout(cls, message: str, cause: BaseException | None = None) -> OdooError:
        details = {"cause": str(cause)} if cause is not None else None
        return cls(message, ErrorKind.TIMEOUT, details)

    @classmethod
    def validation(cls, message: str, details: dict[str, Any] | None = None) -> OdooError:
        return cls(message, ErrorKind.VALIDATION, details)

    @classmethod
    def access(cls, message: str, details: dict[str, Any] | None = None) -> OdooError:
        return cls(message, ErrorKind.ACCESS, details)

    @classmethod
    def missing(cls, message: str, details: dict[str, Any] | None = None) -> OdooError:
        return cls(message, ErrorKind.MISSING, details)

    @classmethod
    def safety_blocked(cls, operation: OperationInfo) -> OdooError:
        return cls(
            f"Operation blocked: {operation.description}",
            ErrorKind.SAFETY_BLOCKED,
            {"operation": operation.to_dict()},
        )


__all__ = [
    "ErrorKind",
    "NETWORK_KINDS",
    "OdooError",
    "RPC_KINDS",
]
