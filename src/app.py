"""Application entry point for the catalog bot."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from telethon import events

import settings
from adapters.anthropic_llm import AnthropicLLM
from adapters.prompts import FORMAT_SYSTEM_PROMPT, QUERY_SYSTEM_PROMPT, load_prompt
from adapters.shopify_catalog import ShopifyCatalog
from adapters.telegram_mapper import build_request
from adapters.telegram_status import TelegramStatusReporter
from client import build_client
from core.access import AccessPolicy
from core.classifier import OperationClassifier
from core.pipeline import GuardrailPipeline
from core.rate_limiter import RateLimiter

NAME = "CATALOG BOT"
FONT = "small"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    # Secrets are always masked; config can add more variable names.
    redact_cfg = config.get("redact", {}) if config else {}
    names = set(settings.REQUIRED_ENV) - {"API_ID"}
    names.update(redact_cfg.get("patterns", []))
    values = [os.getenv(name) for name in names]
    return sorted({value for value in values if value}, key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", True):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/catalog_bot.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _check_environment() -> None:
    missing = [name for name in settings.REQUIRED_ENV if not os.getenv(name)]
    for name in settings.REQUIRED_ENV:
        logging.getLogger(__name__).info("%s: %s", name, "missing" if name in missing else "set")
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")


def _policy_summary(access: AccessPolicy, rate_limiter: RateLimiter) -> list[str]:
    window_seconds = rate_limiter.config.window_ms / 1000
    return [
        f"User whitelist: {'Yes' if access.whitelist_enabled else 'No (all allowed)'}",
        f"Admin users: {access.admin_count}",
        f"Write operations: {'Enabled' if access.updates_enabled else 'Disabled'}",
        f"Rate limit: {rate_limiter.config.max_requests} requests per {window_seconds:g} seconds",
    ]


def _build_pipeline(client, access: AccessPolicy, rate_limiter: RateLimiter) -> GuardrailPipeline:
    llm = AnthropicLLM(
        os.getenv("ANTHROPIC_API_KEY"),
        model=settings.LLM_MODEL,
        query_system_prompt=load_prompt(settings.QUERY_PROMPT_FILE, QUERY_SYSTEM_PROMPT, settings.PROJECT_ROOT),
        format_system_prompt=load_prompt(settings.FORMAT_PROMPT_FILE, FORMAT_SYSTEM_PROMPT, settings.PROJECT_ROOT),
        query_max_tokens=settings.LLM_QUERY_MAX_TOKENS,
        format_max_tokens=settings.LLM_FORMAT_MAX_TOKENS,
    )
    catalog = ShopifyCatalog(
        os.getenv("SHOPIFY_STORE_URL", ""),
        os.getenv("SHOPIFY_ACCESS_TOKEN", ""),
        api_version=settings.SHOPIFY_API_VERSION,
        timeout=settings.SHOPIFY_TIMEOUT_SECONDS,
    )
    return GuardrailPipeline(
        access=access,
        rate_limiter=rate_limiter,
        classifier=OperationClassifier(settings.CLASSIFIER),
        generator=llm,
        catalog=catalog,
        formatter=llm,
        status=TelegramStatusReporter(client),
        messages=settings.MESSAGES,
    )


def _run() -> None:
    _print_banner()
    load_dotenv()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting catalog bot")
    _check_environment()

    client = build_client(settings.SESSION_NAME)
    access = AccessPolicy(settings.ACCESS)
    rate_limiter = RateLimiter(settings.RATE_LIMIT)
    pipeline = _build_pipeline(client, access, rate_limiter)
    client.start(bot_token=os.getenv("BOT_TOKEN"))
    me = client.loop.run_until_complete(client.get_me())
    bot_username = getattr(me, "username", None)

    # Mentions and private messages share one handler and one pipeline entry
    # point; everything else is dropped here.
    @client.on(events.NewMessage(incoming=True))
    async def handler(event) -> None:
        try:
            sender = await event.get_sender()
            if sender and getattr(sender, "bot", False):
                return
            context = build_request(event.message, bot_username)
            if context is None:
                return
            outcome = await pipeline.handle(context)
            logger.info("Request from %s finished: %s", context.user_id, outcome.kind.value)
        except Exception:
            logger.exception("Error while processing message")

    logger.info("Guardrails enabled:")
    for line in _policy_summary(access, rate_limiter):
        logger.info("  - %s", line)
    logger.info("Bot @%s connected. Listening for messages...", bot_username)
    client.run_until_disconnected()


def _policy() -> None:
    for line in _policy_summary(AccessPolicy(settings.ACCESS), RateLimiter(settings.RATE_LIMIT)):
        print(line)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="catalog-bot")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the bot")
    subparsers.add_parser("policy", help="Print the configured guardrails and exit")

    args = parser.parse_args(argv)
    if args.command == "policy":
        _policy()
        return
    _run()


if __name__ == "__main__":
    main()
