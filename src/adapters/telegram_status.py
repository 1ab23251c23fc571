"""Telegram status sink adapter.

Implements the core StatusPort with Telethon: the status handle is the
Message object of the progress message, edited in place and deleted on
success. Long replies are split to fit Telegram's message size limit.
"""

from __future__ import annotations

from typing import Iterator, Optional

from telethon.tl.custom import Message

from core.models import RequestContext

MAX_MESSAGE_CHARS = 4096
EMPTY_REPLY = "🤷 Nothing to show for that request."

_MARKDOWN_MARKERS = ("**", "__", "```")


def split_message(text: str, limit: int = MAX_MESSAGE_CHARS) -> Iterator[str]:
    """Yield chunks no longer than limit, preferring to break on newlines."""

    remaining = text
    while len(remaining) > limit:
        cut = remaining.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        yield remaining[:cut]
        remaining = remaining[cut:].lstrip("\n")
    if remaining:
        yield remaining


def markdown_balanced(chunk: str) -> bool:
    """True when every Markdown marker in chunk is opened and closed."""

    for marker in _MARKDOWN_MARKERS:
        if chunk.count(marker) % 2:
            return False
    # Inline code; fences were counted above and hold three backticks each.
    return (chunk.count("`") - 3 * chunk.count("```")) % 2 == 0


class TelegramStatusReporter:
    """Status sink that sends, edits and deletes messages in the request chat."""

    def __init__(self, client, parse_mode: str = "md") -> None:
        self._client = client
        self._parse_mode = parse_mode

    async def start(self, context: RequestContext, text: str) -> Message:
        return await self._client.send_message(context.channel_id, text)

    async def update(self, handle: Message, text: str) -> None:
        await self._client.edit_message(handle.chat_id, handle.id, text)

    async def clear(self, handle: Message) -> None:
        await self._client.delete_messages(handle.chat_id, [handle.id])

    async def post(self, context: RequestContext, text: str) -> None:
        if not text or not text.strip():
            text = EMPTY_REPLY
        chunks = list(split_message(text))
        for chunk in chunks:
            parse_mode = self._chunk_parse_mode(chunks, chunk)
            await self._client.send_message(context.channel_id, chunk, parse_mode=parse_mode)

    def _chunk_parse_mode(self, chunks: list[str], chunk: str) -> Optional[str]:
        # A split can land inside an entity; Telegram rejects or garbles those.
        if len(chunks) == 1 or markdown_balanced(chunk):
            return self._parse_mode
        return None
