"""Exception taxonomy shared by the core pipeline and its adapters."""

from __future__ import annotations

from typing import Any


class PolicyRejection(Exception):
    """A guardrail refused the request. Expected and user-caused."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class UpstreamError(Exception):
    """The catalog answered with a structured error list."""

    def __init__(self, errors: Any) -> None:
        super().__init__(f"Catalog returned errors: {errors!r}")
        self.errors = errors


class CatalogError(RuntimeError):
    """The catalog could not be reached or answered with an unreadable body."""


class LLMError(RuntimeError):
    """The language model provider failed or returned no usable text."""
