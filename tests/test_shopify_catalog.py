from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from adapters.shopify_catalog import ShopifyCatalog
from core.errors import CatalogError


def _catalog(handler, store_url: str = "cards.myshopify.com") -> ShopifyCatalog:
    return ShopifyCatalog(store_url, "shpat_test", transport=httpx.MockTransport(handler))


def test_posts_query_with_token_header() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"products": {"edges": []}}})

    payload = asyncio.run(_catalog(handler).execute("query { shop { name } }"))

    assert payload == {"data": {"products": {"edges": []}}}
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://cards.myshopify.com/admin/api/2025-10/graphql.json"
    assert request.headers["X-Shopify-Access-Token"] == "shpat_test"
    assert json.loads(request.content) == {"query": "query { shop { name } }"}


def test_endpoint_accepts_full_url() -> None:
    catalog = ShopifyCatalog("https://cards.myshopify.com/", "token", api_version="2024-07")
    assert catalog.endpoint == "https://cards.myshopify.com/admin/api/2024-07/graphql.json"


def test_graphql_errors_are_returned_not_raised() -> None:
    errors = [{"message": "Field 'totalCount' doesn't exist on type 'ProductConnection'"}]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errors": errors})

    payload = asyncio.run(_catalog(handler).execute("query { products { totalCount } }"))
    assert payload["errors"] == errors


def test_http_error_with_json_body_keeps_upstream_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"errors": "[API] Invalid API key or access token"})

    payload = asyncio.run(_catalog(handler).execute("query { shop { name } }"))
    assert payload["errors"] == "[API] Invalid API key or access token"


def test_http_error_without_errors_field_gets_one() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"data": None})

    payload = asyncio.run(_catalog(handler).execute("query { shop { name } }"))
    assert payload["errors"] == [{"message": "HTTP 503"}]


def test_non_json_body_raises_catalog_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(CatalogError, match="502"):
        asyncio.run(_catalog(handler).execute("query { shop { name } }"))


def test_transport_failure_raises_catalog_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CatalogError, match="connection refused"):
        asyncio.run(_catalog(handler).execute("query { shop { name } }"))


def test_missing_credentials_fail_fast() -> None:
    with pytest.raises(RuntimeError):
        ShopifyCatalog("", "token")
