"""Analytics data models.

Field aliases match the keys the widget has always written to
``analyticsData`` and ``feedbackData``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class FeedbackRecord(BaseModel):
    """One helpful/unhelpful vote. Append-only."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    message_index: int = Field(alias="messageId", ge=0)
    is_helpful: bool = Field(alias="isHelpful")
    timestamp: datetime = Field(default_factory=_utc_now)
    language: str = "en"


class AnalyticsSnapshot(BaseModel):
    """Aggregate counters for the lifetime of the widget.

    ``average_response_time_ms`` is the running mean over exactly
    ``total_messages`` observations.
    """

    model_config = ConfigDict(populate_by_name=True)

    total_messages: int = Field(0, alias="totalMessages", ge=0)
    helpful_responses: int = Field(0, alias="helpfulResponses", ge=0)
    unhelpful_responses: int = Field(0, alias="unhelpfulResponses", ge=0)
    most_used_language: str = Field("en", alias="mostUsedLanguage")
    average_response_time_ms: float = Field(0.0, alias="averageResponseTime", ge=0.0)
    language_counts: Dict[str, int] = Field(default_factory=dict, alias="languageCounts")

    @property
    def feedback_total(self) -> int:
        return self.helpful_responses + self.unhelpful_responses

    @property
    def helpful_ratio(self) -> float:
        """Share of feedback votes that were helpful (0.0 with no votes)."""
        if self.feedback_total == 0:
            return 0.0
        return self.helpful_responses / self.feedback_total
