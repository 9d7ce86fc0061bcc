"""Feedback and latency analytics for the chat widget.

One aggregator instance is created by the composition root (see
``portfolio_assistant.chat.service.build_service``) and handed to whatever
records messages or feedback. State is restored from storage when the
instance is built and written back before every mutator returns.

``most_used_language`` is the true mode of recorded message languages, ties
going to the most recently recorded language. Blobs written before per-language
counts existed carry none, so the first message recorded after loading one
sets the language, matching the earlier last-write rule.
"""

from __future__ import annotations

import logging
from typing import List

from pydantic import TypeAdapter

from portfolio_assistant.analytics.models import AnalyticsSnapshot, FeedbackRecord
from portfolio_assistant.storage.kv import KeyValueStore
from portfolio_assistant.storage.schemas import ANALYTICS_KEY, FEEDBACK_KEY, PersistedValue

logger = logging.getLogger(__name__)

ANALYTICS_ADAPTER: TypeAdapter[AnalyticsSnapshot] = TypeAdapter(AnalyticsSnapshot)
FEEDBACK_ADAPTER: TypeAdapter[List[FeedbackRecord]] = TypeAdapter(List[FeedbackRecord])


class AnalyticsAggregator:
    """Counters, running mean response time and an append-only feedback log.

    Example:
        >>> analytics = AnalyticsAggregator(InMemoryStore())
        >>> analytics.record_message("en", 120.0)
        >>> analytics.snapshot().average_response_time_ms
        120.0
    """

    def __init__(self, kv_store: KeyValueStore) -> None:
        self._analytics = PersistedValue(
            kv_store, ANALYTICS_KEY, ANALYTICS_ADAPTER, AnalyticsSnapshot
        )
        self._feedback_log = PersistedValue(kv_store, FEEDBACK_KEY, FEEDBACK_ADAPTER, list)
        self._snapshot: AnalyticsSnapshot = self._analytics.load()
        self._feedback: List[FeedbackRecord] = list(self._feedback_log.load())
        logger.info(
            "Analytics restored: %d messages, %d feedback records",
            self._snapshot.total_messages,
            len(self._feedback),
        )

    def snapshot(self) -> AnalyticsSnapshot:
        """Copy of the current counters."""
        return self._snapshot.model_copy(deep=True)

    def feedback(self) -> List[FeedbackRecord]:
        """Copy of the feedback log, oldest first."""
        return list(self._feedback)

    def record_message(self, language: str, response_time_ms: float) -> None:
        """Count one assistant response and fold its latency into the mean.

        Raises:
            ValueError: If ``response_time_ms`` is negative
        """
        if response_time_ms < 0:
            raise ValueError(f"response_time_ms must be >= 0, got {response_time_ms}")

        snap = self._snapshot
        snap.total_messages += 1
        n = snap.total_messages
        snap.average_response_time_ms = (
            snap.average_response_time_ms * (n - 1) + response_time_ms
        ) / n

        counts = snap.language_counts
        counts[language] = counts.get(language, 0) + 1
        if counts[language] >= counts.get(snap.most_used_language, 0):
            snap.most_used_language = language

        self._save_analytics()

    def record_feedback(self, record: FeedbackRecord) -> None:
        """Append a feedback vote and bump the helpful/unhelpful counter."""
        self._feedback.append(record)
        if record.is_helpful:
            self._snapshot.helpful_responses += 1
        else:
            self._snapshot.unhelpful_responses += 1
        self._feedback_log.save(self._feedback)
        self._save_analytics()

    def clear(self) -> None:
        """Reset every counter and the feedback log."""
        self._snapshot = AnalyticsSnapshot()
        self._feedback = []
        self._feedback_log.save(self._feedback)
        self._save_analytics()
        logger.info("Analytics cleared")

    def _save_analytics(self) -> None:
        self._analytics.save(self._snapshot)
