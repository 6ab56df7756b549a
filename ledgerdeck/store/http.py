"""
HTTP ledger gateway client.

Talks to a gateway that fronts the on-chain key/value contract:

- ``GET  {base}/entries/{key}``  raw bytes, 404 or empty body when absent
- ``PUT  {base}/entries/{key}``  raw bytes body, returns ``{"revision": n}``
- ``GET  {base}/status``         returns ``{"available": bool}``
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ledgerdeck.config import settings
from ledgerdeck.models.failure import StoreTransportError, is_user_rejection
from ledgerdeck.store.base import WriteReceipt

logger = logging.getLogger(__name__)


def _json_object(response: httpx.Response, what: str) -> dict[str, Any]:
    """
    Parse a gateway response body that must be a JSON object.

    Raises:
        StoreTransportError: If the body is not JSON or not an object
    """
    try:
        data = response.json()
    except ValueError as e:
        logger.error("Malformed ledger %s: %r", what, response.text[:200])
        raise StoreTransportError("Malformed ledger response", detail=f"{what}: not JSON") from e
    if not isinstance(data, dict):
        logger.error("Malformed ledger %s: %r", what, response.text[:200])
        raise StoreTransportError(
            "Malformed ledger response", detail=f"{what}: expected an object"
        )
    return data


class HttpLedgerStore:
    """
    Ledger store backed by the HTTP gateway.

    Every ``httpx.HTTPError`` is converted into ``StoreTransportError``.
    Timeouts belong to this adapter, not to the synchronizer.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """
        Initialize the gateway client.

        Args:
            base_url: Gateway base URL. Defaults to settings.store_url.
            timeout: Request timeout in seconds. Defaults to settings.store_timeout_seconds.
        """
        self.base_url = (base_url or settings.store_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.store_timeout_seconds

    def _entry_url(self, key: str) -> str:
        return f"{self.base_url}/entries/{quote(key, safe='')}"

    async def get(self, key: str) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self._entry_url(key))
                if response.status_code == httpx.codes.NOT_FOUND:
                    return b""
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            logger.error("Ledger read failed for %s: %s", key, e)
            raise StoreTransportError(f"Failed to read {key} from the ledger", detail=str(e)) from e

    async def set(self, key: str, value: bytes) -> WriteReceipt:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.put(
                    self._entry_url(key),
                    content=value,
                    headers={"Content-Type": "application/octet-stream"},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Ledger write rejected for %s: %s", key, e)
            if is_user_rejection(e.response.text):
                raise StoreTransportError(
                    "Transaction rejected by user", detail=e.response.text
                ) from e
            raise StoreTransportError(f"Failed to write {key} to the ledger", detail=str(e)) from e
        except httpx.HTTPError as e:
            logger.error("Ledger write failed for %s: %s", key, e)
            raise StoreTransportError(f"Failed to write {key} to the ledger", detail=str(e)) from e

        data = _json_object(response, f"write confirmation for {key}") if response.content else {}
        try:
            revision = int(data.get("revision", 0))
        except (TypeError, ValueError) as e:
            raise StoreTransportError(
                "Malformed ledger response", detail=f"revision: {data.get('revision')!r}"
            ) from e
        return WriteReceipt(key=key, revision=revision)

    async def is_available(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}/status")
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Ledger availability check failed: %s", e)
            raise StoreTransportError("Availability check failed", detail=str(e)) from e

        return bool(_json_object(response, "status").get("available", False))
