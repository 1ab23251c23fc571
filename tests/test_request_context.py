from __future__ import annotations

from core.models import OutcomeKind, PipelineOutcome, build_request_context, strip_mentions


def test_strip_user_tokens() -> None:
    assert strip_mentions("<@U082519ACD8> show me sealed boxes ") == "show me sealed boxes"


def test_strip_bot_handle_case_insensitive() -> None:
    assert strip_mentions("@CatalogBot what's in stock?", "catalogbot") == "what's in stock?"
    assert strip_mentions("hey @catalogbot, count cases", "@CatalogBot") == "hey , count cases"


def test_other_handles_are_kept() -> None:
    assert strip_mentions("@CatalogBotter hello", "catalogbot") == "@CatalogBotter hello"
    assert strip_mentions("ask @alice", "catalogbot") == "ask @alice"


def test_build_request_context_cleans_text() -> None:
    context = build_request_context("<@U1>  list jerseys  ", "U2", 123, source="mention")
    assert context.raw_text == "<@U1>  list jerseys  "
    assert context.clean_text == "list jerseys"
    assert context.user_id == "U2"
    assert context.channel_id == 123
    assert context.source == "mention"


def test_build_request_context_with_non_text_payload() -> None:
    context = build_request_context(None, "U2", 123)
    assert context.raw_text is None
    assert context.clean_text == ""


def test_outcome_ok_flag() -> None:
    assert PipelineOutcome(kind=OutcomeKind.SUCCESS, message="hi").ok
    assert not PipelineOutcome(kind=OutcomeKind.REJECTED, message="no").ok
