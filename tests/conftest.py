"""Shared test fixtures for odoo-toolbox tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from odoo_toolbox.client.odoo_client import OdooClient
from odoo_toolbox.config import OdooConfig
from odoo_toolbox.connection.protocol import OdooProtocol, OdooSession
from odoo_toolbox.safety.guard import set_default_safety_policy


# ---------------------------------------------------------------------------
# Minimal valid config for tests
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> OdooConfig:
    return OdooConfig(
        url="https://test.odoo.com",
        database="testdb",
        username="admin",
        password="admin",
    )


# ---------------------------------------------------------------------------
# Mock transport
# ---------------------------------------------------------------------------

class MockProtocol(OdooProtocol):
    """Mock Odoo transport for unit tests.

    ``execute_kw_mock`` receives ``(model, method, args, kwargs)``; set its
    ``return_value`` or ``side_effect`` to script server answers.
    """

    def __init__(self) -> None:
        self._session: OdooSession | None = None
        self.execute_kw_mock = AsyncMock()
        self.closed = False

    @property
    def url(self) -> str:
        return "https://test.odoo.com"

    @property
    def session(self) -> OdooSession | None:
        return self._session

    async def authenticate(self, username: str, password: str) -> OdooSession:
        self._session = OdooSession(uid=2, database="testdb")
        return self._session

    async def execute_kw(
        self,
        model: str,
        method: str,
        args: list[Any],
        kwargs: dict[str, Any] | None = None,
    ) -> Any:
        return await self.execute_kw_mock(model, method, args, kwargs or {})

    def logout(self) -> None:
        self._session = None

    async def close(self) -> None:
        self.closed = True
        self._session = None


@pytest.fixture
def mock_protocol() -> MockProtocol:
    return MockProtocol()


@pytest.fixture
def client(config, mock_protocol) -> OdooClient:
    """Unauthenticated client over the mock transport, without a safety policy."""
    return OdooClient(config, safety=None, transport=mock_protocol)


@pytest_asyncio.fixture
async def auth_client(client) -> OdooClient:
    await client.authenticate()
    return client


@pytest.fixture(autouse=True)
def _reset_default_safety():
    yield
    set_default_safety_policy(None)
