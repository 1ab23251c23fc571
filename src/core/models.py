"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

_USER_TOKEN_RE = re.compile(r"<@[A-Z0-9]+>")


class Intent(str, Enum):
    READ = "read"
    WRITE = "write"


class QueryKind(str, Enum):
    READ = "read"
    MUTATION = "mutation"


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    UPSTREAM_ERROR = "upstream_error"
    FAULT = "fault"
    DROPPED = "dropped"


@dataclass(frozen=True)
class RequestContext:
    """Normalized inbound message handed to the guardrail pipeline.

    raw_text may be None or a non-text payload; the pipeline drops those.
    """

    raw_text: Any
    clean_text: str
    user_id: str
    channel_id: Any
    source: str = "direct"


@dataclass(frozen=True)
class PipelineOutcome:
    """The single terminal result produced for one request."""

    kind: OutcomeKind
    message: Optional[str] = None
    reason: Optional[str] = None
    query: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


def strip_mentions(text: str, bot_username: Optional[str] = None) -> str:
    """Remove bot mention tokens and trim surrounding whitespace.

    Both ``<@U123>`` user tokens and ``@botname`` handles are removed.
    """

    cleaned = _USER_TOKEN_RE.sub("", text)
    if bot_username:
        handle = re.escape(bot_username.lstrip("@"))
        cleaned = re.sub(rf"@{handle}\b", "", cleaned, flags=re.IGNORECASE)
    return cleaned.strip()


def build_request_context(
    raw_text: Any,
    user_id: str,
    channel_id: Any,
    *,
    source: str = "direct",
    bot_username: Optional[str] = None,
) -> RequestContext:
    """Build a RequestContext, deriving clean_text from the raw message."""

    clean_text = strip_mentions(raw_text, bot_username) if isinstance(raw_text, str) else ""
    return RequestContext(
        raw_text=raw_text,
        clean_text=clean_text,
        user_id=user_id,
        channel_id=channel_id,
        source=source,
    )
