"""Abstract transport interface and the session it produces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OdooSession:
    """Result of a successful ``common.login``. Held in memory only."""

    uid: int
    database: str


class OdooProtocol(ABC):
    """Abstract interface for Odoo RPC communication."""

    @property
    @abstractmethod
    def url(self) -> str:
        """Base URL of the Odoo instance."""
        ...

    @property
    @abstractmethod
    def session(self) -> OdooSession | None:
        ...

    @abstractmethod
    async def authenticate(self, username: str, password: str) -> OdooSession:
        """Log in and return the session."""
        ...

    @abstractmethod
    async def execute_kw(
        self,
        model: str,
        method: str,
        args: list[Any],
        kwargs: dict[str, Any] | None = None,
    ) -> Any:
        """Execute an Odoo model method."""
        ...

    @abstractmethod
    def logout(self) -> None:
        """Forget the session. No network call is made."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the connection and release resources."""
        ...

    def is_authenticated(self) -> bool:
        return self.session is not None
