"""Best-effort avoidance of replaying the previous question set.

The selector retries the sampler a bounded number of times looking for a set
that differs from the last one the player saw. When every attempt collides it
accepts one more draw as-is, so an exact repeat is still possible for small
pools. Exhaustion is never reported as an error.
"""

from __future__ import annotations

from collections import Counter
import logging
from typing import Sequence

from trivia_app.constants.quiz_constants import MAX_SAMPLE_ATTEMPTS
from trivia_app.core.models import Question
from trivia_app.core.services.sampler import QuestionSampler

logger = logging.getLogger(__name__)


def is_same_set(a: Sequence[str] | None, b: Sequence[str] | None) -> bool:
    """Order-insensitive, size-sensitive comparison of two id collections."""
    if a is None or b is None:
        return False
    if len(a) != len(b):
        return False
    return Counter(a) == Counter(b)


class NonRepeatSelector:
    """Wraps a sampler with a bounded retry policy."""

    def __init__(self, sampler: QuestionSampler, max_attempts: int = MAX_SAMPLE_ATTEMPTS) -> None:
        self._sampler = sampler
        self._max_attempts = max_attempts

    def select(self, n: int, last_set_ids: Sequence[str] | None) -> list[Question]:
        for attempt in range(1, self._max_attempts + 1):
            questions = self._sampler.sample(n)
            if not is_same_set([question.id for question in questions], last_set_ids):
                return questions
            logger.debug("Sample attempt %d repeated the previous set.", attempt)

        logger.debug(
            "All %d attempts repeated the previous set; accepting a fallback draw.",
            self._max_attempts,
        )
        return self._sampler.sample(n)
