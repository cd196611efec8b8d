"""Async client for the quotation REST API."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from app.core.config import get_settings


class ServerUnreachableError(Exception):
    """The API could not be reached (refused, DNS, timeout)."""


class ApiError(Exception):
    """The API answered with a failure envelope."""

    def __init__(self, status_code: int, message: str, error: str | None = None) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.error = error


class QuotationClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=settings.SAVE_TIMEOUT if timeout is None else timeout,
            transport=transport,
        )

    async def __aenter__(self) -> QuotationClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = await self._http.request(method, path, **kwargs)
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ServerUnreachableError(str(exc) or exc.__class__.__name__) from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.is_error or not body.get("success", False):
            raise ApiError(
                resp.status_code,
                body.get("message") or resp.reason_phrase,
                body.get("error"),
            )
        return body

    async def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        body = await self._request("POST", "/quotations", json=payload)
        return body["data"]

    async def list_all(self) -> list[dict[str, Any]]:
        body = await self._request("GET", "/quotations")
        return body["data"]

    async def get(self, quotation_id: int) -> dict[str, Any]:
        body = await self._request("GET", f"/quotations/{quotation_id}")
        return body["data"]

    async def get_by_number(self, quotation_number: str) -> dict[str, Any]:
        body = await self._request("GET", f"/quotations/number/{quote(quotation_number, safe='')}")
        return body["data"]

    async def update(self, quotation_id: int, changes: dict[str, Any]) -> dict[str, Any]:
        body = await self._request("PUT", f"/quotations/{quotation_id}", json=changes)
        return body["data"]

    async def delete(self, quotation_id: int) -> None:
        await self._request("DELETE", f"/quotations/{quotation_id}")

    async def search(self, client_name: str) -> list[dict[str, Any]]:
        body = await self._request("GET", f"/quotations/search/{quote(client_name, safe='')}")
        return body["data"]

    async def health(self) -> dict[str, Any]:
        return await self._request("GET", "/health")
