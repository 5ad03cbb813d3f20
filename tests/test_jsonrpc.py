"""Tests for the JSON-RPC transport."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from odoo_toolbox.connection.jsonrpc_adapter import JsonRpcTransport
from odoo_toolbox.errors import ErrorKind, OdooError


@pytest.fixture
def transport():
    return JsonRpcTransport(url="https://test.odoo.com/", database="testdb", timeout=10)


def _make_response(json_data=None, status_code: int = 200, content: bytes | None = None) -> httpx.Response:
    request = httpx.Request("POST", "https://test.odoo.com/jsonrpc")
    if content is not None:
        return httpx.Response(status_code=status_code, content=content, request=request)
    return httpx.Response(status_code=status_code, json=json_data, request=request)


def _sent_payload(mock_post: AsyncMock, call_index: int = -1) -> dict:
    return mock_post.call_args_list[call_index].kwargs["json"]


class TestAuthenticate:

    @pytest.mark.asyncio
    async def test_success(self, transport):
        response = _make_response({"jsonrpc": "2.0", "id": 1, "result": 2})
        with patch.object(transport._client, "post", new_callable=AsyncMock, return_value=response) as mock_post:
            session = await transport.authenticate("admin", "secret")

        assert session.uid == 2
        assert session.database == "testdb"
        assert transport.is_authenticated()

        payload = _sent_payload(mock_post)
        assert mock_post.call_args.args[0] == "/jsonrpc"
        assert payload["jsonrpc"] == "2.0"
        assert payload["method"] == "call"
        assert payload["params"] == {
            "service": "common",
            "method": "login",
            "args": ["testdb", "admin", "secret"],
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("result", [False, 0, None, "2"])
    async def test_rejected_credentials(self, transport, result):
        response = _make_response({"jsonrpc": "2.0", "id": 1, "result": result})
        with patch.object(transport._client, "post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(OdooError) as exc_info:
                await transport.authenticate("admin", "wrong")

        assert exc_info.value.kind is ErrorKind.AUTH
        assert "invalid credentials" in exc_info.value.message
        assert not transport.is_authenticated()

    @pytest.mark.asyncio
    async def test_server_error_becomes_auth(self, transport):
        response = _make_response({
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": 200, "message": "Odoo Server Error", "data": {"message": "database \"nope\" does not exist"}},
        })
        with patch.object(transport._client, "post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(OdooError) as exc_info:
                await transport.authenticate("admin", "admin")

        assert exc_info.value.kind is ErrorKind.AUTH
        assert exc_info.value.message.startswith("Failed to authenticate:")

    @pytest.mark.asyncio
    async def test_network_failure_keeps_kind(self, transport):
        with patch.object(
            transport._client, "post", new_callable=AsyncMock,
            side_effect=httpx.ConnectError("connection refused"),
        ):
            with pytest.raises(OdooError) as exc_info:
                await transport.authenticate("admin", "admin")

        assert exc_info.value.kind is ErrorKind.NETWORK


class TestCallRpc:

    @pytest.mark.asyncio
    async def test_request_ids_increment(self, transport):
        response = _make_response({"jsonrpc": "2.0", "id": 1, "result": True})
        with patch.object(transport._client, "post", new_callable=AsyncMock, return_value=response) as mock_post:
            await transport.call_rpc({"service": "common", "method": "version", "args": []})
            await transport.call_rpc({"service": "common", "method": "version", "args": []})

        first = _sent_payload(mock_post, 0)["id"]
        second = _sent_payload(mock_post, 1)["id"]
        assert second == first + 1

    @pytest.mark.asyncio
    async def test_http_error_status(self, transport):
        response = _make_response({}, status_code=500)
        with patch.object(transport._client, "post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(OdooError) as exc_info:
                await transport.call_rpc({})

        assert exc_info.value.kind is ErrorKind.NETWORK
        assert exc_info.value.message == "HTTP 500: Internal Server Error"
        assert exc_info.value.details == {"status": 500}

    @pytest.mark.asyncio
    async def test_timeout(self, transport):
        with patch.object(
            transport._client, "post", new_callable=AsyncMock,
            side_effect=httpx.ReadTimeout("timed out"),
        ):
            with pytest.raises(OdooError) as exc_info:
                await transport.call_rpc({})

        assert exc_info.value.kind is ErrorKind.TIMEOUT
        assert exc_info.value.message == "Request to https://test.odoo.com timed out"

    @pytest.mark.asyncio
    async def test_missing_result(self, transport):
        response = _make_response({"jsonrpc": "2.0", "id": 1})
        with patch.object(transport._client, "post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(OdooError, match="missing result field") as exc_info:
                await transport.call_rpc({})

        assert exc_info.value.kind is ErrorKind.RPC

    @pytest.mark.asyncio
    async def test_invalid_json(self, transport):
        response = _make_response(content=b"<html>proxy error</html>")
        with patch.object(transport._client, "post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(OdooError, match="Invalid RPC response") as exc_info:
                await transport.call_rpc({})

        assert exc_info.value.kind is ErrorKind.RPC

    @pytest.mark.asyncio
    async def test_null_result_is_returned(self, transport):
        response = _make_response({"jsonrpc": "2.0", "id": 1, "result": None})
        with patch.object(transport._client, "post", new_callable=AsyncMock, return_value=response):
            assert await transport.call_rpc({}) is None

    @pytest.mark.asyncio
    async def test_classified_error(self, transport):
        response = _make_response({
            "jsonrpc": "2.0",
            "id": 1,
            "error": {
                "code": 200,
                "message": "Odoo Server Error",
                "data": {"name": "odoo.exceptions.AccessError", "message": "Not allowed"},
            },
        })
        with patch.object(transport._client, "post", new_callable=AsyncMock, return_value=response):
            with pytest.raises(OdooError) as exc_info:
                await transport.call_rpc({})

        assert exc_info.value.kind is ErrorKind.ACCESS
        assert exc_info.value.message == "Not allowed"


class TestExecuteKw:

    @pytest.mark.asyncio
    async def test_requires_session(self, transport):
        with patch.object(transport._client, "post", new_callable=AsyncMock) as mock_post:
            with pytest.raises(OdooError) as exc_info:
                await transport.execute_kw("res.partner", "search", [[]])

        assert exc_info.value.kind is ErrorKind.AUTH
        mock_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_envelope(self, transport):
        login = _make_response({"jsonrpc": "2.0", "id": 1, "result": 7})
        result = _make_response({"jsonrpc": "2.0", "id": 2, "result": [1, 2, 3]})
        with patch.object(
            transport._client, "post", new_callable=AsyncMock, side_effect=[login, result],
        ) as mock_post:
            await transport.authenticate("admin", "secret")
            ids = await transport.execute_kw(
                "res.partner", "search", [[["is_company", "=", True]]], {"limit": 3},
            )

        assert ids == [1, 2, 3]
        params = _sent_payload(mock_post)["params"]
        assert params["service"] == "object"
        assert params["method"] == "execute_kw"
        assert params["args"] == [
            "testdb", 7, "secret", "res.partner", "search",
            [[["is_company", "=", True]]], {"limit": 3},
        ]

    @pytest.mark.asyncio
    async def test_logout_forgets_session(self, transport):
        login = _make_response({"jsonrpc": "2.0", "id": 1, "result": 7})
        with patch.object(transport._client, "post", new_callable=AsyncMock, return_value=login):
            await transport.authenticate("admin", "secret")

        transport.logout()
        assert transport.session is None
        with pytest.raises(OdooError) as exc_info:
            await transport.execute_kw("res.partner", "search", [[]])
        assert exc_info.value.kind is ErrorKind.AUTH
