"""Uniform random sampling of questions without replacement."""

from __future__ import annotations

import logging
import random

from trivia_app.core.errors import ValidationError
from trivia_app.core.models import Question
from trivia_app.core.question_pool import QuestionPool

logger = logging.getLogger(__name__)


class QuestionSampler:
    """Draws distinct questions from the pool in random order."""

    def __init__(self, pool: QuestionPool, rng: random.Random | None = None) -> None:
        self._pool = pool
        self._rng = rng or random.Random()

    def sample(self, n: int) -> list[Question]:
        """Return ``n`` distinct questions, clamped to the pool size."""
        if n <= 0:
            raise ValidationError("Number of questions must be a positive integer.")

        questions = self._pool.questions()
        if n > len(questions):
            logger.warning(
                "Requested %d questions but the pool only holds %d; clamping.",
                n,
                len(questions),
            )
            n = len(questions)

        # Fisher-Yates over the index space; the list is local to this call.
        indices = list(range(len(questions)))
        for i in range(len(indices) - 1, 0, -1):
            j = self._rng.randint(0, i)
            indices[i], indices[j] = indices[j], indices[i]
        return [questions[index] for index in indices[:n]]
