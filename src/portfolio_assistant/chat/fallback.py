"""Randomized redirect messages for off-topic questions."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from portfolio_assistant.chat.content import FALLBACK_RESPONSES


class FallbackSelector:
    """Pick a redirect message uniformly at random from a fixed pool."""

    def __init__(
        self,
        pool: Sequence[str] = FALLBACK_RESPONSES,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not pool:
            raise ValueError("Fallback pool must not be empty")
        self._pool = tuple(pool)
        self._rng = rng or random.Random()

    @property
    def pool(self) -> tuple[str, ...]:
        return self._pool

    def pick(self) -> str:
        return self._rng.choice(self._pool)
