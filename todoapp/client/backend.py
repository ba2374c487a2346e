from typing import Any, Optional
from urllib.parse import quote

import httpx

from todoapp.client.auth import AuthClient
from todoapp.client.http import send


class BackendClient:
    """Async client for the hosted backend: ``auth`` plus row access per table.

    Rows are plain JSON dicts. Every method raises BackendError on failure.
    """

    def __init__(self, base_url: str = "http://backend", transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 10.0):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.auth = AuthClient(self._http)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    def _row_path(self, table: str, row_id: str) -> str:
        return f"/{table}/{quote(str(row_id), safe='')}"

    async def select_all(self, table: str, order_by: str = "created_at", ascending: bool = False) -> list[dict[str, Any]]:
        params = {"order": order_by, "ascending": "true" if ascending else "false"}
        return await send(self._http, "GET", f"/{table}/", token=self.auth.access_token, params=params)

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        return await send(self._http, "POST", f"/{table}/", token=self.auth.access_token, json=record)

    async def update(self, table: str, fields: dict[str, Any], row_id: str) -> dict[str, Any]:
        return await send(self._http, "PATCH", self._row_path(table, row_id), token=self.auth.access_token, json=fields)

    async def delete(self, table: str, row_id: str) -> None:
        await send(self._http, "DELETE", self._row_path(table, row_id), token=self.auth.access_token)
