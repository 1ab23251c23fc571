"""Shopify Admin GraphQL adapter.

Implements the core CatalogPort. GraphQL error payloads are returned as
decoded JSON so the pipeline can report them; only transport failures and
unreadable bodies raise.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from core.errors import CatalogError

LOGGER = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2025-10"


class ShopifyCatalog:
    """Catalog adapter that posts GraphQL queries to a Shopify store."""

    def __init__(
        self,
        store_url: str,
        access_token: str,
        *,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not store_url or not access_token:
            raise RuntimeError("SHOPIFY_STORE_URL and SHOPIFY_ACCESS_TOKEN are required")
        self._store_url = store_url
        self._access_token = access_token
        self._api_version = api_version
        self._timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        # Accept both "shop.myshopify.com" and a full https:// URL in the env.
        host = self._store_url.removeprefix("https://").removeprefix("http://").rstrip("/")
        return f"https://{host}/admin/api/{self._api_version}/graphql.json"

    async def execute(self, query: str) -> Mapping[str, Any]:
        """Post the query and return the decoded JSON payload."""

        headers = {
            "X-Shopify-Access-Token": self._access_token,
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint, json={"query": query}, headers=headers)
        except httpx.HTTPError as e:
            raise CatalogError(f"Shopify request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            body = response.text[:200]
            raise CatalogError(f"Shopify API error {response.status_code}: {body}") from e

        if not isinstance(payload, dict):
            raise CatalogError(f"Unexpected Shopify payload: {payload!r}")
        if response.is_error:
            LOGGER.warning("Shopify returned HTTP %s", response.status_code)
            payload.setdefault("errors", [{"message": f"HTTP {response.status_code}"}])
        return payload
