"""Static configuration for the catalog bot.

All user-editable guardrail settings (users, operations, rate limit, keyword
lists, prompts, logging) live in a single JSON file. Secrets stay in the
environment and are read by the app at startup.
"""

import json
import os
from dataclasses import replace

from core.config import AccessConfig, ClassifierConfig, PipelineMessages, RateLimitConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Guardrails and surface settings are loaded from config.json so operators can
# edit the whitelist or the limits without editing code.
CONFIG_PATH = os.getenv("CATALOG_BOT_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))

# Environment variables that must be present before the bot starts.
REQUIRED_ENV = (
    "API_ID",
    "API_HASH",
    "BOT_TOKEN",
    "ANTHROPIC_API_KEY",
    "SHOPIFY_STORE_URL",
    "SHOPIFY_ACCESS_TOKEN",
)

_OPERATION_KINDS = ("read", "update", "create", "delete")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _positive_int(raw, name: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _user_ids(raw) -> frozenset:
    # Entries may be plain ids or {"id": ..., "name": ...} objects for readability.
    ids = set()
    for entry in raw or []:
        if isinstance(entry, dict):
            entry = entry.get("id")
        if entry is None or entry == "":
            continue
        ids.add(str(entry))
    return frozenset(ids)


def build_access_config(raw: dict) -> AccessConfig:
    """Build the static access policy from the ``access`` section."""

    raw_operations = raw.get("allowed_operations", {})
    operations = {kind: bool(raw_operations.get(kind, kind == "read")) for kind in _OPERATION_KINDS}
    return AccessConfig(
        allowed_users=_user_ids(raw.get("allowed_users")),
        admin_users=_user_ids(raw.get("admin_users")),
        allowed_operations=operations,
    )


def build_rate_limit_config(raw: dict) -> RateLimitConfig:
    return RateLimitConfig(
        max_requests=_positive_int(raw.get("max_requests", 10), "rate_limit.max_requests"),
        window_ms=_positive_int(raw.get("window_ms", 60_000), "rate_limit.window_ms"),
    )


def build_classifier_config(raw: dict) -> ClassifierConfig:
    """Override individual keyword lists; missing lists keep their defaults."""

    defaults = ClassifierConfig()
    overrides = {}
    for name in ("write_keywords", "read_markers", "mutation_keywords", "sensitive_keywords"):
        if name in raw:
            overrides[name] = tuple(str(k) for k in raw[name])
    return replace(defaults, **overrides)


# Sample values for the placeholders each formatted message accepts.
_MESSAGE_PLACEHOLDERS = {
    "rate_limited": {"max_requests": 10, "window_seconds": 60},
    "upstream_error": {"errors": "[]"},
    "fault": {"error": "timeout"},
}


def build_messages(raw: dict) -> PipelineMessages:
    """Build user-facing texts, checking overridden templates at load time."""

    known = PipelineMessages.__dataclass_fields__
    unknown = set(raw) - set(known)
    if unknown:
        raise ValueError(f"Unknown message keys: {', '.join(sorted(unknown))}")
    for name, sample in _MESSAGE_PLACEHOLDERS.items():
        if name not in raw:
            continue
        try:
            str(raw[name]).format(**sample)
        except (AttributeError, IndexError, KeyError, ValueError) as exc:
            allowed = ", ".join("{%s}" % key for key in sample)
            raise ValueError(f"messages.{name} is not a valid template (placeholders: {allowed}): {exc}") from None
    return PipelineMessages(**raw)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Static policy: whitelist, admins, and globally enabled operation kinds.
# An empty allowed_users list means everyone may use the bot.
ACCESS = build_access_config(_CONFIG.get("access", {}))

# Per-user sliding window, in-memory only.
RATE_LIMIT = build_rate_limit_config(_CONFIG.get("rate_limit", {}))

# Keyword lists for intent, mutation, and sensitive-operation checks.
CLASSIFIER = build_classifier_config(_CONFIG.get("classifier", {}))

# User-facing pipeline texts (optional overrides).
MESSAGES = build_messages(_CONFIG.get("messages", {}))

# Language model settings.
_llm = _CONFIG.get("llm", {})
LLM_MODEL = _llm.get("model", "claude-3-5-haiku-latest")
LLM_QUERY_MAX_TOKENS = _positive_int(_llm.get("query_max_tokens", 1500), "llm.query_max_tokens")
LLM_FORMAT_MAX_TOKENS = _positive_int(_llm.get("format_max_tokens", 2048), "llm.format_max_tokens")

# Prompt files replace the built-in prompts when set (paths relative to the project root).
_prompts = _CONFIG.get("prompts", {})
QUERY_PROMPT_FILE = _prompts.get("query_system_file")
FORMAT_PROMPT_FILE = _prompts.get("format_system_file")

# Catalog settings.
_shopify = _CONFIG.get("shopify", {})
SHOPIFY_API_VERSION = _shopify.get("api_version", "2025-10")
SHOPIFY_TIMEOUT_SECONDS = float(_shopify.get("timeout_seconds", 30))

# Telethon session file name for the bot account.
SESSION_NAME = _CONFIG.get("session_name", "catalog_bot")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
