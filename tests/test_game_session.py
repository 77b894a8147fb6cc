from __future__ import annotations

from datetime import timedelta
import random

import pytest

from fixtures import FakeClock, wrong_label
from trivia_app.core.errors import (
    ConflictError,
    NotFoundError,
    SourceNotImplementedError,
    ValidationError,
)
from trivia_app.core.models import GameSession, QuestionSource, User
from trivia_app.core.persistence import SESSIONS, USERS, InMemoryDocumentStore
from trivia_app.core.question_pool import QuestionPool
from trivia_app.core.services.game_session import GameSessionService
from trivia_app.core.services.history_tracker import HistoryTracker
from trivia_app.core.services.non_repeat_selector import NonRepeatSelector, is_same_set
from trivia_app.core.services.sampler import QuestionSampler


@pytest.fixture
def service(pool: QuestionPool, store: InMemoryDocumentStore, clock: FakeClock) -> GameSessionService:
    for user_id in ("alice", "bob"):
        user = User(
            id=user_id,
            email=f"{user_id}@example.com",
            password_hash="unused",
            display_name=user_id.title(),
            created_at=clock.now,
        )
        store.put(USERS, user.id, user.to_document())
    selector = NonRepeatSelector(QuestionSampler(pool, random.Random(99)))
    return GameSessionService(pool, store, selector, HistoryTracker(store), clock=clock)


def _answer_all(service: GameSessionService, pool: QuestionPool, session: GameSession, correct: int) -> None:
    for index, question_id in enumerate(session.question_ids):
        answer = pool.get(question_id).answer
        service.record_answer(session.id, question_id, answer if index < correct else wrong_label(answer))


def test_start_creates_active_session(service: GameSessionService, store: InMemoryDocumentStore) -> None:
    session, questions = service.start("alice", 5)

    assert len(questions) == 5
    assert len({q.id for q in questions}) == 5
    assert session.question_ids == [q.id for q in questions]
    assert session.num_questions == 5
    assert session.source is QuestionSource.LOCAL
    assert not session.is_finished
    assert session.score is None
    assert store.get(SESSIONS, session.id) is not None


def test_start_rejects_unknown_and_unsupported_sources(service: GameSessionService) -> None:
    with pytest.raises(SourceNotImplementedError):
        service.start("alice", 5, source="opentdb")
    with pytest.raises(ValidationError):
        service.start("alice", 5, source="trivia-api")


def test_start_requires_existing_user(service: GameSessionService) -> None:
    with pytest.raises(NotFoundError):
        service.start("nobody", 3)


def test_start_requires_positive_question_count(service: GameSessionService) -> None:
    with pytest.raises(ValidationError):
        service.start("alice", 0)


def test_start_clamps_to_pool_size(service: GameSessionService, pool: QuestionPool) -> None:
    session, questions = service.start("alice", len(pool) + 10)

    assert len(questions) == len(pool)
    assert session.num_questions == len(pool)


def test_record_answer_uses_pool_answer(service: GameSessionService, pool: QuestionPool) -> None:
    session, questions = service.start("alice", 3)
    first, second = questions[0], questions[1]

    assert service.record_answer(session.id, first.id, first.answer) is True
    assert service.record_answer(session.id, second.id, wrong_label(second.answer).lower()) is False

    stored = service.get(session.id)
    assert [answer.is_correct for answer in stored.answers] == [True, False]
    assert stored.answers[0].correct_answer == first.answer
    assert stored.answers[1].correct_answer == second.answer
    assert stored.answers[1].selected_answer == wrong_label(second.answer)


def test_record_answer_unknown_session_or_question(service: GameSessionService) -> None:
    session, _ = service.start("alice", 3)

    with pytest.raises(NotFoundError):
        service.record_answer("missing", "0", "A")
    with pytest.raises(NotFoundError):
        service.record_answer(session.id, "999", "A")


def test_record_answer_rejects_questions_outside_the_session(
    service: GameSessionService, pool: QuestionPool
) -> None:
    session, _ = service.start("alice", 3)
    outsider = next(q for q in pool.questions() if q.id not in session.question_ids)

    with pytest.raises(ValidationError):
        service.record_answer(session.id, outsider.id, outsider.answer)
    assert service.get(session.id).answers == []


def test_record_answer_rejects_duplicates_and_bad_labels(service: GameSessionService) -> None:
    session, questions = service.start("alice", 3)
    question = questions[0]

    with pytest.raises(ValidationError):
        service.record_answer(session.id, question.id, "E")
    service.record_answer(session.id, question.id, question.answer)
    with pytest.raises(ConflictError):
        service.record_answer(session.id, question.id, question.answer)
    assert len(service.get(session.id).answers) == 1


def test_finish_scores_correct_answers(service: GameSessionService, pool: QuestionPool) -> None:
    session, _ = service.start("alice", 5)
    _answer_all(service, pool, session, correct=3)

    finished = service.finish(session.id)

    assert finished.score == 3
    assert finished.num_questions == 5
    assert finished.finished_at is not None
    assert finished.duration_ms == (finished.finished_at - finished.started_at) // timedelta(milliseconds=1)
    assert finished.duration_ms >= 0


def test_score_is_independent_of_answer_order(service: GameSessionService, pool: QuestionPool) -> None:
    session, questions = service.start("alice", 4)
    for index, question in enumerate(reversed(questions)):
        label = question.answer if index % 2 else wrong_label(question.answer)
        service.record_answer(session.id, question.id, label)

    assert service.finish(session.id).score == 2


def test_finish_is_one_way(service: GameSessionService, pool: QuestionPool) -> None:
    session, questions = service.start("alice", 2)
    first = service.finish(session.id)

    with pytest.raises(ConflictError):
        service.finish(session.id)
    with pytest.raises(ConflictError):
        service.record_answer(session.id, questions[0].id, questions[0].answer)

    stored = service.get(session.id)
    assert stored.finished_at == first.finished_at
    assert stored.score == 0


def test_finish_unknown_session(service: GameSessionService) -> None:
    with pytest.raises(NotFoundError):
        service.finish("missing")


def test_finish_records_played_set(service: GameSessionService, store: InMemoryDocumentStore) -> None:
    session, _ = service.start("alice", 4)
    service.finish(session.id)

    last = HistoryTracker(store).last_played_set("alice", QuestionSource.LOCAL)

    assert last is not None
    assert last.question_ids == session.question_ids


def test_six_finishes_keep_five_most_recent_sets(
    service: GameSessionService, store: InMemoryDocumentStore
) -> None:
    finished_sets = []
    for _ in range(6):
        session, _ = service.start("alice", 3)
        service.finish(session.id)
        finished_sets.append(session.question_ids)

    played = HistoryTracker(store).played_sets("alice")

    assert len(played) == 5
    assert [record.question_ids for record in played] == list(reversed(finished_sets[1:]))


def test_next_start_avoids_previous_set(service: GameSessionService) -> None:
    for _ in range(10):
        session, _ = service.start("alice", 4)
        service.finish(session.id)
        follow_up, _ = service.start("alice", 4)
        assert not is_same_set(follow_up.question_ids, session.question_ids)
        service.finish(follow_up.id)


def test_sessions_are_private_to_their_owner(service: GameSessionService) -> None:
    session, questions = service.start("alice", 2)

    with pytest.raises(NotFoundError):
        service.get(session.id, user_id="bob")
    with pytest.raises(NotFoundError):
        service.record_answer(session.id, questions[0].id, "A", user_id="bob")
    with pytest.raises(NotFoundError):
        service.finish(session.id, user_id="bob")
    assert service.get(session.id, user_id="alice").id == session.id
