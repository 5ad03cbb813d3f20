"""Tests for OdooClient parameter shaping and call guards."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from odoo_toolbox.client.odoo_client import NOT_AUTHENTICATED, OdooClient, create_client
from odoo_toolbox.errors import ErrorKind, OdooError
from odoo_toolbox.safety.guard import SafetyLevel, SafetyPolicy


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_call_before_authenticate(self, client, mock_protocol):
        with pytest.raises(OdooError) as exc_info:
            await client.search("res.partner")

        assert exc_info.value.kind is ErrorKind.AUTH
        assert exc_info.value.message == NOT_AUTHENTICATED
        mock_protocol.execute_kw_mock.assert_not_called()

    @pytest.mark.asyncio
    async def test_auth_checked_before_safety(self, config, mock_protocol):
        confirm = AsyncMock(return_value=True)
        client = OdooClient(config, safety=SafetyPolicy(confirm), transport=mock_protocol)
        with pytest.raises(OdooError) as exc_info:
            await client.unlink("res.partner", 1)

        assert exc_info.value.kind is ErrorKind.AUTH
        confirm.assert_not_called()

    @pytest.mark.asyncio
    async def test_authenticate_and_session(self, client):
        session = await client.authenticate()
        assert client.is_authenticated
        assert session.uid == 2
        assert client.get_session() == session

    @pytest.mark.asyncio
    async def test_logout(self, auth_client, mock_protocol):
        auth_client.logout()
        assert not auth_client.is_authenticated
        assert auth_client.get_session() is None
        with pytest.raises(OdooError):
            await auth_client.read("res.partner", 1)
        mock_protocol.execute_kw_mock.assert_not_called()

    @pytest.mark.asyncio
    async def test_async_context_closes(self, config, mock_protocol):
        async with OdooClient(config, safety=None, transport=mock_protocol) as client:
            await client.authenticate()
        assert mock_protocol.closed
        assert not client.is_authenticated

    def test_services_attached(self, client):
        assert client.mail is not None
        assert client.activities is not None
        assert client.followers is not None
        assert client.properties is not None
        assert client.modules is not None


class TestParameterShaping:

    @pytest.mark.asyncio
    async def test_search_omits_unset_options(self, auth_client, mock_protocol):
        mock_protocol.execute_kw_mock.return_value = [1, 2]
        assert await auth_client.search("res.partner", [["is_company", "=", True]]) == [1, 2]
        mock_protocol.execute_kw_mock.assert_awaited_once_with(
            "res.partner", "search", [[["is_company", "=", True]]], {},
        )

    @pytest.mark.asyncio
    async def test_search_options(self, auth_client, mock_protocol):
        mock_protocol.execute_kw_mock.return_value = []
        await auth_client.search("res.partner", offset=0, limit=5, order="name")
        mock_protocol.execute_kw_mock.assert_awaited_once_with(
            "res.partner", "search", [[]], {"offset": 0, "limit": 5, "order": "name"},
        )

    @pytest.mark.asyncio
    async def test_read_accepts_single_id(self, auth_client, mock_protocol):
        mock_protocol.execute_kw_mock.return_value = [{"id": 7, "name": "Acme"}]
        records = await auth_client.read("res.partner", 7, ["name"])
        assert records == [{"id": 7, "name": "Acme"}]
        mock_protocol.execute_kw_mock.assert_awaited_once_with(
            "res.partner", "read", [[7], ["name"]], {},
        )

    @pytest.mark.asyncio
    async def test_search_read_fields(self, auth_client, mock_protocol):
        mock_protocol.execute_kw_mock.return_value = []
        await auth_client.search_read("res.partner", [], fields=["name"], limit=10)
        mock_protocol.execute_kw_mock.assert_awaited_once_with(
            "res.partner", "search_read", [[]], {"fields": ["name"], "limit": 10},
        )

    @pytest.mark.asyncio
    async def test_search_count(self, auth_client, mock_protocol):
        mock_protocol.execute_kw_mock.return_value = 42
        assert await auth_client.search_count("res.partner") == 42

    @pytest.mark.asyncio
    async def test_create_sends_context(self, auth_client, mock_protocol):
        mock_protocol.execute_kw_mock.return_value = 11
        new_id = await auth_client.create("res.partner", {"name": "New"}, {"lang": "en_US"})
        assert new_id == 11
        mock_protocol.execute_kw_mock.assert_awaited_once_with(
            "res.partner", "create", [{"name": "New"}], {"context": {"lang": "en_US"}},
        )

    @pytest.mark.asyncio
    async def test_write_and_unlink(self, auth_client, mock_protocol):
        mock_protocol.execute_kw_mock.return_value = True
        assert await auth_client.write("res.partner", [1, 2], {"active": False})
        assert await auth_client.unlink("res.partner", 3)
        calls = mock_protocol.execute_kw_mock.await_args_list
        assert calls[0].args == ("res.partner", "write", [[1, 2], {"active": False}], {"context": {}})
        assert calls[1].args == ("res.partner", "unlink", [[3]], {})

    @pytest.mark.asyncio
    async def test_errors_propagate(self, auth_client, mock_protocol):
        mock_protocol.execute_kw_mock.side_effect = OdooError.access("denied")
        with pytest.raises(OdooError) as exc_info:
            await auth_client.search("res.partner")
        assert exc_info.value.kind is ErrorKind.ACCESS


class TestSafetyIntegration:

    @pytest.mark.asyncio
    async def test_blocked_before_transport(self, config, mock_protocol):
        confirm = AsyncMock(return_value=False)
        client = OdooClient(config, safety=SafetyPolicy(confirm), transport=mock_protocol)
        await client.authenticate()

        with pytest.raises(OdooError) as exc_info:
            await client.unlink("res.partner", [1, 2])

        assert exc_info.value.kind is ErrorKind.SAFETY_BLOCKED
        mock_protocol.execute_kw_mock.assert_not_called()
        op = confirm.await_args.args[0]
        assert op.level is SafetyLevel.DELETE
        assert op.target == "https://test.odoo.com"

    @pytest.mark.asyncio
    async def test_reads_bypass_confirm(self, config, mock_protocol):
        confirm = AsyncMock(return_value=False)
        client = OdooClient(config, safety=SafetyPolicy(confirm), transport=mock_protocol)
        await client.authenticate()
        mock_protocol.execute_kw_mock.return_value = []

        await client.search_read("res.partner")
        confirm.assert_not_called()

    @pytest.mark.asyncio
    async def test_approved_write_proceeds(self, config, mock_protocol):
        confirm = AsyncMock(return_value=True)
        client = OdooClient(config, safety=SafetyPolicy(confirm), transport=mock_protocol)
        await client.authenticate()
        mock_protocol.execute_kw_mock.return_value = 5

        assert await client.create("res.partner", {"name": "x"}) == 5
        confirm.assert_awaited_once()


class TestCreateClient:

    @pytest.fixture
    def env(self, monkeypatch):
        monkeypatch.setenv("ODOO_URL", "https://test.odoo.com")
        monkeypatch.setenv("ODOO_DB", "testdb")
        monkeypatch.setenv("ODOO_USER", "admin")
        monkeypatch.setenv("ODOO_PASSWORD", "wrong")

    @pytest.mark.asyncio
    async def test_returns_authenticated_client(self, env, mock_protocol):
        with patch("odoo_toolbox.client.odoo_client.JsonRpcTransport", return_value=mock_protocol):
            client = await create_client(safety=None)
        assert client.is_authenticated
        assert not mock_protocol.closed

    @pytest.mark.asyncio
    async def test_failed_login_closes_transport(self, env, mock_protocol):
        mock_protocol.authenticate = AsyncMock(
            side_effect=OdooError.auth("Authentication failed: invalid credentials or database"),
        )
        with patch("odoo_toolbox.client.odoo_client.JsonRpcTransport", return_value=mock_protocol):
            with pytest.raises(OdooError) as exc_info:
                await create_client(safety=None)

        assert exc_info.value.kind is ErrorKind.AUTH
        assert mock_protocol.closed
