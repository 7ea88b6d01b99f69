"""
Async HTTP client for the nooklet JSON API.

Used by the auto-save controller; mirrors the requests the journal page makes.
"""

from typing import Any

import httpx

from nooklet.logging import get_logger

logger = get_logger('client.api')

SerializedNooklet = dict[str, Any]


class ApiError(Exception):
    """A request failed at the transport level or returned a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None

    detail = data.get("detail") if isinstance(data, dict) else None
    if isinstance(detail, dict):
        detail = detail.get("message")
    if isinstance(detail, str) and detail:
        return detail
    return f"Request failed (HTTP {response.status_code})"


class NookletApiClient:
    """Bearer-authenticated client for /home and /api/v1/nooklets."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.headers = headers

    async def _request(self, method: str, url: str, json: Any = None, key: str = "data") -> Any:
        """Send one request and return ``body[key]``; every failure becomes ApiError."""
        try:
            response = await self.client.request(method, url, json=json, headers=self.headers)
        except httpx.HTTPError as exc:
            logger.warning(f"{method} {url} failed: {exc}")
            raise ApiError(0, str(exc)) from exc

        if response.is_redirect:
            # /home sends anonymous callers to the login page
            raise ApiError(401, "Not authenticated")
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError(response.status_code, "Invalid JSON response") from exc
        if not isinstance(body, dict) or key not in body:
            raise ApiError(response.status_code, f"Response is missing '{key}'")
        return body[key]

    async def list_entries(self) -> list[SerializedNooklet]:
        return list(await self._request("GET", "/home", key="nooklets"))

    async def create(self, content: str, type: str = "journal") -> SerializedNooklet:
        return await self._request("POST", "/api/v1/nooklets", {"content": content, "type": type})

    async def update(self, nooklet_id: str, **fields: Any) -> SerializedNooklet:
        return await self._request("PUT", f"/api/v1/nooklets/{nooklet_id}", fields)

    async def archive(self, nooklet_id: str) -> SerializedNooklet:
        return await self._request("DELETE", f"/api/v1/nooklets/{nooklet_id}")

    async def restore(self, nooklet_id: str) -> SerializedNooklet:
        return await self._request("POST", f"/api/v1/nooklets/{nooklet_id}/restore")

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
