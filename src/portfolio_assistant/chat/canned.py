"""Fuzzy lookup of pre-authored answers.

Phrasings are matched approximately with rapidfuzz, so "tech stack please"
still finds "tech stack". Scores are normalized edit-distance dissimilarity:
0.0 for identical text, 1.0 for unrelated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

from rapidfuzz import fuzz, process, utils

from portfolio_assistant.chat.content import PREDEFINED_RESPONSES
from portfolio_assistant.chat.models import CannedEntry

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.3


@dataclass(frozen=True)
class CannedMatch:
    """Best phrasing for an input and how far it is from it."""

    phrasing: str
    answer: str
    score: float


class CannedAnswerIndex:
    """Search index over phrasing -> answer pairs.

    Example:
        >>> index = CannedAnswerIndex()
        >>> index.lookup("Tell me about Emmanuella")
        "I'm Emmanuella, a passionate frontend developer ..."
        >>> index.lookup("what's the weather in Lagos") is None
        True
    """

    def __init__(
        self,
        responses: Optional[Mapping[str, str]] = None,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> None:
        """Build the index.

        Args:
            responses: Phrasing -> answer mapping (default: portfolio content)
            threshold: Matches must score strictly below this dissimilarity
        """
        if not 0.0 < threshold <= 1.0:
            raise ValueError(f"threshold must be in (0, 1], got {threshold}")
        source = PREDEFINED_RESPONSES if responses is None else responses
        self._entries: List[CannedEntry] = [
            CannedEntry(phrasing=phrasing, answer=answer)
            for phrasing, answer in source.items()
        ]
        self._choices = [entry.phrasing.lower() for entry in self._entries]
        self.threshold = threshold

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[CannedEntry]:
        return list(self._entries)

    def match(self, text: str) -> Optional[CannedMatch]:
        """Return the closest phrasing regardless of threshold.

        The whole query is compared against the whole phrasing, so a single
        shared word is not enough for a close score. Ties go to the phrasing
        that appears first in the mapping.
        """
        query = text.lower()
        if not self._choices or not utils.default_process(query):
            return None

        best = process.extractOne(
            query,
            self._choices,
            scorer=fuzz.ratio,
            processor=utils.default_process,
        )
        if best is None:
            return None

        _, similarity, position = best
        entry = self._entries[position]
        return CannedMatch(
            phrasing=entry.phrasing,
            answer=entry.answer,
            score=1.0 - similarity / 100.0,
        )

    def lookup(self, text: str) -> Optional[str]:
        """Return the canned answer for ``text``, or None below confidence."""
        found = self.match(text)
        if found is None or found.score >= self.threshold:
            return None
        logger.debug("Canned hit %r (score %.3f)", found.phrasing, found.score)
        return found.answer
