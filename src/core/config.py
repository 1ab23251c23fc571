"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Tuple

DEFAULT_WRITE_KEYWORDS: Tuple[str, ...] = (
    "update",
    "delete",
    "create",
    "modify",
    "set",
    "remove",
    "add new",
)
DEFAULT_READ_MARKERS: Tuple[str, ...] = ("what", "show", "tell", "how")
DEFAULT_MUTATION_KEYWORDS: Tuple[str, ...] = ("mutation", "update", "delete", "create")
DEFAULT_SENSITIVE_KEYWORDS: Tuple[str, ...] = (
    "delete",
    "remove",
    "update price",
    "change price",
    "bulk update",
)


@dataclass(frozen=True)
class AccessConfig:
    """Static access policy. An empty allowed_users set means allow everyone."""

    allowed_users: frozenset[str] = frozenset()
    admin_users: frozenset[str] = frozenset()
    allowed_operations: Mapping[str, bool] = field(
        default_factory=lambda: {"read": True, "update": False, "create": False, "delete": False}
    )


@dataclass(frozen=True)
class RateLimitConfig:
    """Sliding-window limit applied per user."""

    max_requests: int = 10
    window_ms: int = 60_000


@dataclass(frozen=True)
class ClassifierConfig:
    """Keyword lists for the operation classifier (matched case-insensitively)."""

    write_keywords: Tuple[str, ...] = DEFAULT_WRITE_KEYWORDS
    read_markers: Tuple[str, ...] = DEFAULT_READ_MARKERS
    mutation_keywords: Tuple[str, ...] = DEFAULT_MUTATION_KEYWORDS
    sensitive_keywords: Tuple[str, ...] = DEFAULT_SENSITIVE_KEYWORDS


@dataclass(frozen=True)
class PipelineMessages:
    """User-facing texts emitted by the guardrail pipeline."""

    analyzing: str = "🔍 Analyzing your request..."
    generating: str = "🤖 Generating catalog query..."
    fetching: str = "📦 Fetching data from the catalog..."
    formatting: str = "✨ Formatting your results..."
    not_authorized: str = "❌ Sorry, you are not authorized to use this bot."
    rate_limited: str = "⏳ Rate limit exceeded. Wait a minute. (Limit: {max_requests}/min)"
    writes_disabled: str = "❌ Write operations are disabled. Read-only queries only."
    admin_required: str = "❌ Only administrators can perform updates."
    sensitive_warning: str = '⚠️ This is a sensitive operation. Type "CONFIRM" or "CANCEL"'
    mutation_blocked: str = "❌ This query would modify data. Mutations not allowed."
    upstream_error: str = "❌ Catalog API error: {errors}"
    fault: str = "❌ Error: {error}"
