"""Service owning the lifecycle of a single quiz attempt.

A session is Active from ``start`` until ``finish``; finishing is a one-way
transition after which the session no longer accepts answers.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from typing import Callable
from uuid import uuid4

from trivia_app.constants.quiz_constants import OPTION_LABELS
from trivia_app.core.errors import (
    ConflictError,
    NotFoundError,
    SourceNotImplementedError,
    ValidationError,
)
from trivia_app.core.models import Answer, GameSession, PlayedSetRecord, Question, QuestionSource
from trivia_app.core.persistence import SESSIONS, DocumentStore
from trivia_app.core.question_pool import QuestionPool
from trivia_app.core.services.history_tracker import HistoryTracker
from trivia_app.core.services.non_repeat_selector import NonRepeatSelector

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_source(source: QuestionSource | str) -> QuestionSource:
    try:
        return QuestionSource(source)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in QuestionSource)
        raise ValidationError(f"source must be one of: {allowed}") from exc


class GameSessionService:
    """Starts sessions, records answers and scores finished games."""

    def __init__(
        self,
        pool: QuestionPool,
        store: DocumentStore,
        selector: NonRepeatSelector,
        history: HistoryTracker,
        clock: Clock = utc_now,
    ) -> None:
        self._pool = pool
        self._store = store
        self._selector = selector
        self._history = history
        self._clock = clock

    def start(
        self,
        user_id: str,
        num_questions: int,
        source: QuestionSource | str = QuestionSource.LOCAL,
        category: str | None = None,
    ) -> tuple[GameSession, list[Question]]:
        """Create an Active session and return it with its questions."""
        parsed_source = parse_source(source)
        if parsed_source is not QuestionSource.LOCAL:
            raise SourceNotImplementedError("OpenTDB not implemented yet")
        if category is not None:
            logger.debug("Ignoring category %r for the local question source.", category)

        last_set = self._history.last_played_set(user_id, QuestionSource.LOCAL)
        last_ids = last_set.question_ids if last_set is not None else None
        questions = self._selector.select(num_questions, last_ids)

        session = GameSession(
            id=uuid4().hex,
            user_id=user_id,
            source=parsed_source,
            question_ids=[question.id for question in questions],
            num_questions=len(questions),
            started_at=self._clock(),
        )
        self._save(session)
        logger.info(
            "Started session %s for user %s with %d questions",
            session.id,
            user_id,
            session.num_questions,
        )
        return session, questions

    def get(self, session_id: str, user_id: str | None = None) -> GameSession:
        """Return the session, hiding sessions that belong to another user."""
        document = self._store.get(SESSIONS, session_id)
        if document is None:
            raise NotFoundError("session not found")
        session = GameSession.from_document(document)
        if user_id is not None and session.user_id != user_id:
            raise NotFoundError("session not found")
        return session

    def record_answer(
        self,
        session_id: str,
        question_id: str,
        selected_answer: str,
        user_id: str | None = None,
    ) -> bool:
        """Validate and store one answer; return whether it was correct."""
        session = self.get(session_id, user_id)
        question = self._pool.get(question_id)

        selected = selected_answer.strip().upper()
        if selected not in OPTION_LABELS:
            raise ValidationError(
                f"selected_answer must be one of {', '.join(OPTION_LABELS)}."
            )
        if session.is_finished:
            raise ConflictError("session already finished")
        if question_id not in session.question_ids:
            raise ValidationError("question is not part of this session")
        if session.has_answered(question_id):
            raise ConflictError("question already answered")

        # The correct answer always comes from the pool, never from the client.
        is_correct = selected == question.answer
        session.answers.append(
            Answer(
                question_id=question_id,
                correct_answer=question.answer,
                selected_answer=selected,
                is_correct=is_correct,
            )
        )
        self._save(session)
        return is_correct

    def finish(self, session_id: str, user_id: str | None = None) -> GameSession:
        """Score the session and push its question set into the owner's history."""
        session = self.get(session_id, user_id)
        if session.is_finished:
            raise ConflictError("session already finished")

        finished_at = self._clock()
        session.score = sum(1 for answer in session.answers if answer.is_correct)
        session.finished_at = finished_at
        session.duration_ms = max(0, (finished_at - session.started_at) // timedelta(milliseconds=1))
        self._save(session)

        record = PlayedSetRecord(
            source=session.source,
            question_ids=list(session.question_ids),
            played_at=finished_at,
        )
        try:
            self._history.record_played(session.user_id, record)
        except NotFoundError:
            logger.warning("Owner %s of session %s no longer exists.", session.user_id, session.id)

        logger.info(
            "Finished session %s: %d/%d correct",
            session.id,
            session.score,
            session.num_questions,
        )
        return session

    def _save(self, session: GameSession) -> None:
        self._store.put(SESSIONS, session.id, session.to_document())
