from __future__ import annotations

import pytest

import settings
from core.config import DEFAULT_READ_MARKERS, PipelineMessages


def test_shipped_config_loads() -> None:
    assert settings.ACCESS.allowed_users == frozenset()
    assert settings.RATE_LIMIT.max_requests == 10
    assert settings.RATE_LIMIT.window_ms == 60_000
    assert settings.MESSAGES == PipelineMessages()


def test_build_access_config_accepts_named_entries() -> None:
    config = settings.build_access_config(
        {
            "allowed_users": [{"id": "U1", "name": "Ryan"}, "U2", 3, ""],
            "admin_users": ["U1"],
            "allowed_operations": {"update": True},
        }
    )
    assert config.allowed_users == frozenset({"U1", "U2", "3"})
    assert config.admin_users == frozenset({"U1"})
    assert config.allowed_operations == {"read": True, "update": True, "create": False, "delete": False}


def test_build_access_config_defaults_to_read_only() -> None:
    config = settings.build_access_config({})
    assert config.allowed_users == frozenset()
    assert config.allowed_operations["read"] is True
    assert config.allowed_operations["update"] is False


@pytest.mark.parametrize("raw", [{"max_requests": 0}, {"window_ms": -5}, {"max_requests": "ten"}])
def test_rate_limit_must_be_positive(raw: dict) -> None:
    with pytest.raises(ValueError):
        settings.build_rate_limit_config(raw)


def test_classifier_overrides_single_list() -> None:
    config = settings.build_classifier_config({"write_keywords": ["restock"]})
    assert config.write_keywords == ("restock",)
    assert config.read_markers == DEFAULT_READ_MARKERS


def test_unknown_message_keys_are_rejected() -> None:
    with pytest.raises(ValueError, match="bogus"):
        settings.build_messages({"bogus": "x"})
    assert settings.build_messages({"admin_required": "Admins only"}).admin_required == "Admins only"


@pytest.mark.parametrize(
    "raw",
    [
        {"fault": "❌ {err}"},
        {"rate_limited": "Slow down ({limit}/min)"},
        {"upstream_error": "Catalog said {0}"},
        {"upstream_error": "Catalog said {errors"},
    ],
)
def test_broken_message_templates_fail_at_load(raw: dict) -> None:
    name = next(iter(raw))
    with pytest.raises(ValueError, match=f"messages.{name}"):
        settings.build_messages(raw)


def test_message_templates_with_known_placeholders_load() -> None:
    messages = settings.build_messages(
        {
            "rate_limited": "Max {max_requests} per {window_seconds}s",
            "fault": "Oops: {error}",
            "not_authorized": "Literal {braces} are fine here",
        }
    )
    assert messages.rate_limited.format(max_requests=3, window_seconds=30) == "Max 3 per 30s"
    assert messages.fault == "Oops: {error}"
