from __future__ import annotations

from typing import Any, Dict, Optional, Type
from types import TracebackType

import httpx

from ...domain.errors import LedgerRequestError


class AsyncHttpClient:
    """Thin asynchronous client for a node's ``/nxt?requestType=...`` API.

    - Normalizes the base URL.
    - Applies a default timeout.
    - Raises ``LedgerRequestError`` for transport failures, non-successful
      responses, non-JSON bodies and node-level ``errorCode`` replies.
    """

    API_PATH = "/nxt"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def _url(self) -> str:
        return f"{self._base_url}{self.API_PATH}"

    async def get(self, request_type: str, **params: Any) -> Dict[str, Any]:
        return await self._request("GET", request_type, params)

    async def post(self, request_type: str, **params: Any) -> Dict[str, Any]:
        return await self._request("POST", request_type, params)

    async def _request(
        self, method: str, request_type: str, params: Dict[str, Any]
    ) -> Dict[str, Any]:
        query = {"requestType": request_type}
        fields = {k: _encode(v) for k, v in params.items() if v is not None}
        try:
            if method == "GET":
                resp = await self._client.get(self._url(), params={**query, **fields})
            else:
                resp = await self._client.post(self._url(), params=query, data=fields)
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            raise LedgerRequestError(request_type, f"timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise LedgerRequestError(
                request_type, f"HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise LedgerRequestError(request_type, f"could not connect: {e}") from e

        try:
            body = resp.json()
        except ValueError as e:
            raise LedgerRequestError(request_type, "response is not JSON") from e
        if not isinstance(body, dict):
            raise LedgerRequestError(request_type, "response is not a JSON object")
        if "errorCode" in body:
            raise LedgerRequestError(
                request_type,
                str(body.get("errorDescription", "unknown error")),
                error_code=_error_code(body["errorCode"]),
            )
        return body

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error_code(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
