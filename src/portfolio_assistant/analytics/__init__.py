"""Analytics - feedback votes and response-time statistics.

Example:
    >>> from portfolio_assistant.analytics import AnalyticsAggregator
    >>> from portfolio_assistant.storage import InMemoryStore
    >>> analytics = AnalyticsAggregator(InMemoryStore())
    >>> analytics.record_message("en", 250.0)
"""

from portfolio_assistant.analytics.aggregator import AnalyticsAggregator
from portfolio_assistant.analytics.models import AnalyticsSnapshot, FeedbackRecord

__all__ = [
    "AnalyticsAggregator",
    "AnalyticsSnapshot",
    "FeedbackRecord",
]
