"""Keyword heuristics that label requests and generated queries (core domain).

Matching is case-insensitive substring search, not parsing. Two known
imprecisions are part of the policy:
- A read marker wins over write keywords, so "how do I update inventory"
  is a read.
- A read query whose filter value contains a write verb (``title:*update*``)
  is labelled a mutation. A false positive costs a refusal, never a write.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from core.config import ClassifierConfig
from core.models import Intent, QueryKind


def _normalize(keywords: Iterable[str]) -> Tuple[str, ...]:
    return tuple(k.lower() for k in keywords if k)


def _hits(lowered: str, keywords: Iterable[str]) -> List[str]:
    return [k for k in keywords if k in lowered]


class OperationClassifier:
    """Read/write/mutation/sensitive labelling over fixed keyword lists."""

    def __init__(self, config: ClassifierConfig) -> None:
        self._write_keywords = _normalize(config.write_keywords)
        self._read_markers = _normalize(config.read_markers)
        self._mutation_keywords = _normalize(config.mutation_keywords)
        self._sensitive_keywords = _normalize(config.sensitive_keywords)

    def classify_intent(self, text: str) -> Intent:
        """Label a user message as a read or a write request."""

        lowered = text.lower()
        # Questions are always reads, even when they mention a write verb.
        if _hits(lowered, self._read_markers):
            return Intent.READ
        if _hits(lowered, self._write_keywords):
            return Intent.WRITE
        return Intent.READ

    def classify_query(self, query: str) -> QueryKind:
        """Label a generated query as a read or a mutation."""

        if self.mutation_hits(query):
            return QueryKind.MUTATION
        return QueryKind.READ

    def mutation_hits(self, query: str) -> List[str]:
        return sorted(set(_hits(query.lower(), self._mutation_keywords)))

    def contains_sensitive_keyword(self, text: str) -> bool:
        return bool(self.sensitive_hits(text))

    def sensitive_hits(self, text: str) -> List[str]:
        return sorted(set(_hits(text.lower(), self._sensitive_keywords)))
