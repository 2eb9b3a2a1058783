from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .config import config
from .errors import NetworkRequestFailure

logger = logging.getLogger(__name__)


class NodeRestClient:
    """Read-only access to an Aptos fullnode REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = float(config.HTTP.TIMEOUT_SEC) if timeout is None else timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def get_account_resource(self, address: str, resource_type: str) -> dict[str, Any] | None:
        """`{type, data}` of a resource, or None when the account or resource does not exist."""
        encoded = quote(resource_type, safe="")
        return self._get_json(f"/v1/accounts/{address}/resource/{encoded}", allow_missing=True)

    def get_transaction_by_hash(self, transaction_hash: str) -> dict[str, Any]:
        payload = self._get_json(f"/v1/transactions/by_hash/{transaction_hash}")
        if payload is None:
            raise NetworkRequestFailure(self._url(f"/v1/transactions/by_hash/{transaction_hash}"), "not found", 404)
        return payload

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _get_json(self, path: str, *, allow_missing: bool = False) -> dict[str, Any] | None:
        url = self._url(path)
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(url)
        except httpx.HTTPError as exc:
            raise NetworkRequestFailure(url, str(exc) or type(exc).__name__) from exc
        if response.status_code == 404 and allow_missing:
            logger.debug("GET %s -> 404", url)
            return None
        if response.status_code >= 400:
            raise NetworkRequestFailure(
                url,
                f"{response.status_code} {response.reason_phrase}: {_extract_error_detail(response)}",
                response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError are both ValueError.
            raise NetworkRequestFailure(url, "response is not JSON", response.status_code) from exc
        if not isinstance(payload, dict):
            raise NetworkRequestFailure(url, "response is not a JSON object", response.status_code)
        return payload


def _extract_error_detail(response: httpx.Response) -> Any:
    try:
        payload = response.json()
    except ValueError:
        return response.content.decode("utf-8", "replace")
    if isinstance(payload, dict):
        message = payload.get("message")
        return message if message is not None else payload
    return payload
