"""Guardrail pipeline around LLM-generated catalog queries.

The pipeline enforces a strict order:
1) Validate the inbound text (malformed input is dropped silently)
2) Authorize the user against the whitelist
3) Throttle with the per-user sliding window
4) Pre-classify the message intent; writes need an admin
5) Warn (without blocking) on sensitive keywords
6) Generate the query with the language model
7) Post-classify the generated query; mutations need an admin and updates enabled
8) Execute the query against the catalog
9) Format the payload for chat
10) Emit the result

Steps 2-4 are synchronous, so two concurrent messages from one user can never
interleave between the rate-limit check and its record. Every request ends
in exactly one PipelineOutcome and nothing is raised to the transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from core.access import AccessPolicy
from core.classifier import OperationClassifier
from core.config import PipelineMessages
from core.errors import PolicyRejection, UpstreamError
from core.models import Intent, OutcomeKind, PipelineOutcome, QueryKind, RequestContext
from core.ports import CatalogPort, QueryGeneratorPort, ResponseFormatterPort, StatusPort
from core.rate_limiter import RateLimiter

LOGGER = logging.getLogger(__name__)


class GuardrailPipeline:
    """Runs one chat request through the guardrails and the external calls."""

    def __init__(
        self,
        access: AccessPolicy,
        rate_limiter: RateLimiter,
        classifier: OperationClassifier,
        generator: QueryGeneratorPort,
        catalog: CatalogPort,
        formatter: ResponseFormatterPort,
        status: StatusPort,
        messages: Optional[PipelineMessages] = None,
    ) -> None:
        self._access = access
        self._rate_limiter = rate_limiter
        self._classifier = classifier
        self._generator = generator
        self._catalog = catalog
        self._formatter = formatter
        self._status = status
        self._messages = messages or PipelineMessages()

    async def handle(self, context: RequestContext) -> PipelineOutcome:
        """Process one request and return its terminal outcome."""

        if not isinstance(context.raw_text, str) or not context.clean_text:
            LOGGER.warning("Dropping malformed message from %s: %r", context.user_id, context.raw_text)
            return PipelineOutcome(kind=OutcomeKind.DROPPED, reason="malformed_input")

        handle = await self._start_status(context)
        query: Optional[str] = None
        try:
            self._authorize(context)
            self._throttle(context)
            self._check_intent(context)
            await self._warn_if_sensitive(context)

            await self._update_status(handle, self._messages.generating)
            query = await self._generator.generate_query(context.clean_text)

            self._check_query(context, query)
            await self._update_status(handle, self._messages.fetching)
            LOGGER.info("User %s query: %s", context.user_id, query)
            payload = await self._catalog.execute(query)

            await self._update_status(handle, self._messages.formatting)
            errors = payload.get("errors")
            if errors:
                raise UpstreamError(errors)
            formatted = await self._formatter.format_response(context.clean_text, payload.get("data"))
        except PolicyRejection as exc:
            # Audit trail only: rejections are expected, user-caused outcomes.
            LOGGER.info("Guardrail %s rejected user %s", exc.reason, context.user_id)
            await self._finish(context, handle, exc.message)
            return PipelineOutcome(
                kind=OutcomeKind.REJECTED,
                message=exc.message,
                reason=exc.reason,
                query=query,
            )
        except UpstreamError as exc:
            serialized = json.dumps(exc.errors, ensure_ascii=False)
            LOGGER.warning("Catalog returned errors for user %s: %s", context.user_id, serialized)
            message = self._messages.upstream_error.format(errors=serialized)
            await self._finish(context, handle, message)
            return PipelineOutcome(
                kind=OutcomeKind.UPSTREAM_ERROR,
                message=message,
                reason="upstream_error",
                query=query,
            )
        except Exception as exc:
            LOGGER.exception("Error while handling request from %s", context.user_id)
            message = self._messages.fault.format(error=exc)
            await self._finish(context, handle, message)
            return PipelineOutcome(kind=OutcomeKind.FAULT, message=message, reason="fault", query=query)

        await self._clear_status(handle)
        await self._post(context, formatted)
        return PipelineOutcome(kind=OutcomeKind.SUCCESS, message=formatted, query=query)

    # Guardrail stages

    def _authorize(self, context: RequestContext) -> None:
        if not self._access.is_allowed(context.user_id):
            raise PolicyRejection("not_authorized", self._messages.not_authorized)

    def _throttle(self, context: RequestContext) -> None:
        if not self._rate_limiter.check_and_record(context.user_id):
            message = self._messages.rate_limited.format(
                max_requests=self._rate_limiter.config.max_requests,
                window_seconds=self._rate_limiter.config.window_ms // 1000,
            )
            raise PolicyRejection("rate_limited", message)

    def _check_intent(self, context: RequestContext) -> None:
        if self._classifier.classify_intent(context.clean_text) is not Intent.WRITE:
            return
        is_admin = self._access.is_admin(context.user_id)
        if not self._access.updates_enabled and not is_admin:
            raise PolicyRejection("writes_disabled", self._messages.writes_disabled)
        if not is_admin:
            raise PolicyRejection("admin_required", self._messages.admin_required)

    async def _warn_if_sensitive(self, context: RequestContext) -> None:
        # The warning asks for CONFIRM/CANCEL but the request continues
        # immediately; no reply is awaited.
        if self._classifier.contains_sensitive_keyword(context.clean_text):
            LOGGER.info(
                "Sensitive keywords from %s: %s",
                context.user_id,
                ", ".join(self._classifier.sensitive_hits(context.clean_text)),
            )
            await self._post(context, self._messages.sensitive_warning)

    def _check_query(self, context: RequestContext, query: str) -> None:
        # Checked independently of the intent stage: the generated query can
        # diverge from what the message looked like.
        if self._classifier.classify_query(query) is not QueryKind.MUTATION:
            return
        if not self._access.updates_enabled or not self._access.is_admin(context.user_id):
            LOGGER.info(
                "Blocked mutation for %s (keywords: %s)",
                context.user_id,
                ", ".join(self._classifier.mutation_hits(query)),
            )
            raise PolicyRejection("mutation_blocked", self._messages.mutation_blocked)

    # Status sink helpers. Sink failures are logged and never escalated.

    async def _start_status(self, context: RequestContext) -> Any:
        try:
            return await self._status.start(context, self._messages.analyzing)
        except Exception:
            LOGGER.exception("Failed to create status message for %s", context.user_id)
            return None

    async def _update_status(self, handle: Any, text: str) -> None:
        if handle is None:
            return
        try:
            await self._status.update(handle, text)
        except Exception as exc:
            LOGGER.error("Failed to update status: %s", exc)

    async def _clear_status(self, handle: Any) -> None:
        if handle is None:
            return
        try:
            await self._status.clear(handle)
        except Exception as exc:
            LOGGER.error("Failed to delete status: %s", exc)

    async def _post(self, context: RequestContext, text: str) -> None:
        try:
            await self._status.post(context, text)
        except Exception as exc:
            LOGGER.error("Failed to post message to %s: %s", context.channel_id, exc)

    async def _finish(self, context: RequestContext, handle: Any, text: str) -> None:
        """Replace the status message with a failure text, or post it without one.

        If the status message cannot take the text (too long, deleted), it is
        cleared and the failure is posted as a new message instead.
        """

        if handle is None:
            await self._post(context, text)
            return
        try:
            await self._status.update(handle, text)
            return
        except Exception as exc:
            LOGGER.error("Failed to update status, posting instead: %s", exc)
        await self._clear_status(handle)
        await self._post(context, text)
