"""Telethon client for the catalog bot account.

The client is created unconnected; ``app._run`` signs it in as a bot with
``BOT_TOKEN`` and keeps it running until Telegram disconnects. The session
file (``session_name`` in config.json) caches the bot's auth key so restarts
skip the token exchange.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from telethon import TelegramClient


def build_client(session_name: str) -> TelegramClient:
    """Create the bot's Telethon client from API_ID and API_HASH.

    Bots still need an application id and hash to open an MTProto session;
    the bot token only selects the account.
    """

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")

    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")
    if not api_id.isdigit():
        raise RuntimeError(f"API_ID must be numeric, got {api_id!r}")

    logging.getLogger(__name__).info("Initializing bot session %s", session_name)

    return TelegramClient(session_name, int(api_id), api_hash)
