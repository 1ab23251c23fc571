"""Telegram-to-core request mapping adapter.

This keeps Telethon-specific details out of the core pipeline. Two inbound
triggers reach the pipeline: private messages to the bot, and group messages
that mention it. Both produce the same RequestContext.
"""

from __future__ import annotations

from typing import Optional

from telethon.tl.custom import Message

from core.models import RequestContext, build_request_context

SOURCE_DIRECT = "direct"
SOURCE_MENTION = "mention"


def trigger_source(message: Message) -> Optional[str]:
    """Return the trigger kind for a message, or None when the bot should ignore it."""

    if getattr(message, "is_private", False):
        return SOURCE_DIRECT
    if getattr(message, "mentioned", False):
        return SOURCE_MENTION
    return None


def build_request(message: Message, bot_username: Optional[str] = None) -> Optional[RequestContext]:
    """Build a core RequestContext from a Telethon Message, if it is a trigger."""

    source = trigger_source(message)
    if source is None:
        return None
    return build_request_context(
        message.raw_text,
        str(message.sender_id),
        message.chat_id,
        source=source,
        bot_username=bot_username,
    )
