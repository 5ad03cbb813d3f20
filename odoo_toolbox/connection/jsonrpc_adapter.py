"""JSON-RPC 2.0 transport posting to Odoo's ``/jsonrpc`` endpoint."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from odoo_toolbox.connection.protocol import OdooProtocol, OdooSession
from odoo_toolbox.errors import ErrorKind, OdooError
from odoo_toolbox.errors.classifier import classify_jsonrpc_error

logger = logging.getLogger("odoo_toolbox.rpc")

RPC_ENDPOINT = "/jsonrpc"


class JsonRpcTransport(OdooProtocol):
    """Executes ``common.login`` and ``object.execute_kw`` over JSON-RPC."""

    def __init__(
        self,
        url: str,
        database: str,
        timeout: float | None = None,
        verify_ssl: bool = True,
    ) -> None:
        self._url = url.rstrip("/")
        self._db = database
        self._request_id: int = 0
        self._session: OdooSession | None = None
        self._password: str = ""

        self._client = httpx.AsyncClient(
            base_url=self._url,
            timeout=timeout,
            verify=verify_ssl,
            headers={"Content-Type": "application/json"},
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def database(self) -> str:
        return self._db

    @property
    def session(self) -> OdooSession | None:
        return self._session

    def _next_id(self) -> int:
        self._request_id += 1
        return self._request_id

    async def call_rpc(self, params: dict[str, Any]) -> Any:
        """Post one JSON-RPC request and return its ``result``."""
        payload = {
            "jsonrpc": "2.0",
            "method": "call",
            "params": params,
            "id": self._next_id(),
        }

        try:
            response = await self._client.post(RPC_ENDPOINT, json=payload)
        except httpx.TimeoutException as e:
            raise OdooError.timeout(f"Request to {self._url} timed out", e) from e
        except httpx.HTTPError as e:
            raise OdooError.network(f"RPC call failed: {e}", e) from e

        if not response.is_success:
            raise OdooError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                ErrorKind.NETWORK,
                {"status": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise OdooError.rpc(f"Invalid RPC response: {e}") from e

        if not isinstance(data, dict):
            raise OdooError.rpc("Invalid RPC response: expected a JSON object")
        if data.get("error") is not None:
            raise classify_jsonrpc_error(data["error"])
        if "result" not in data:
            raise OdooError.rpc("Invalid RPC response: missing result field")

        return data["result"]

    async def authenticate(self, username: str, password: str) -> OdooSession:
        logger.debug("authenticate %s@%s", username, self._db)
        start = time.monotonic()
        try:
            uid = await self.call_rpc({
                "service": "common",
                "method": "login",
                "args": [self._db, username, password],
            })
        except OdooError as e:
            logger.debug("auth failed %s@%s: %s", username, self._db, e.message)
            if e.is_network or e.kind is ErrorKind.AUTH:
                raise
            raise OdooError.auth(f"Failed to authenticate: {e.message}", e.details) from e

        if not isinstance(uid, int) or isinstance(uid, bool) or uid == 0:
            logger.debug("auth failed %s@%s: login returned %r", username, self._db, uid)
            raise OdooError.auth("Authentication failed: invalid credentials or database")

        self._password = password
        self._session = OdooSession(uid=uid, database=self._db)
        logger.debug(
            "authenticated %s@%s uid=%d (%.0fms)",
            username, self._db, uid, (time.monotonic() - start) * 1000,
        )
        return self._session

    async def execute_kw(
        self,
        model: str,
        method: str,
        args: list[Any],
        kwargs: dict[str, Any] | None = None,
    ) -> Any:
        if self._session is None:
            raise OdooError.auth("Not authenticated")

        logger.debug("-> %s.%s()", model, method)
        start = time.monotonic()
        try:
            result = await self.call_rpc({
                "service": "object",
                "method": "execute_kw",
                "args": [
                    self._db,
                    self._session.uid,
                    self._password,
                    model,
                    method,
                    list(args),
                    dict(kwargs or {}),
                ],
            })
        except OdooError as e:
            logger.debug(
                "x %s.%s() [%.0fms]: %s",
                model, method, (time.monotonic() - start) * 1000, e.message,
            )
            raise

        logger.debug("<- %s.%s() [%.0fms]", model, method, (time.monotonic() - start) * 1000)
        return result

    def logout(self) -> None:
        self._session = None
        self._password = ""

    async def close(self) -> None:
        self.logout()
        await self._client.aclose()
