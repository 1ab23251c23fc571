"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the language model, the catalog and
the chat status sink so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from core.models import RequestContext


class QueryGeneratorPort(Protocol):
    """Turns a user message into catalog query text."""

    async def generate_query(self, text: str) -> str:
        ...


class CatalogPort(Protocol):
    """Executes query text and returns the decoded payload.

    The payload may carry an ``errors`` field; that is not raised.
    """

    async def execute(self, query: str) -> Mapping[str, Any]:
        ...


class ResponseFormatterPort(Protocol):
    """Turns a catalog payload into a chat-ready message."""

    async def format_response(self, text: str, data: Any) -> str:
        ...


class StatusPort(Protocol):
    """Progress and outcome sink for one conversation.

    ``start`` returns an opaque handle that is later updated or cleared.
    ``post`` sends a standalone message to the conversation.
    """

    async def start(self, context: RequestContext, text: str) -> Any:
        ...

    async def update(self, handle: Any, text: str) -> None:
        ...

    async def clear(self, handle: Any) -> None:
        ...

    async def post(self, context: RequestContext, text: str) -> None:
        ...
