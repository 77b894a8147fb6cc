"""Business logic facade shared by the API layer."""

from __future__ import annotations

import random
from threading import Lock

from trivia_app.core.models import GameSession, Question, QuestionSource, User
from trivia_app.core.persistence import DocumentStore, InMemoryDocumentStore
from trivia_app.core.question_pool import QuestionPool
from trivia_app.core.services.game_session import Clock, GameSessionService, utc_now
from trivia_app.core.services.history_tracker import HistoryTracker
from trivia_app.core.services.non_repeat_selector import NonRepeatSelector
from trivia_app.core.services.sampler import QuestionSampler
from trivia_app.core.services.scoreboard import LeaderboardRow, Scoreboard
from trivia_app.core.services.user_accounts import UserAccounts


class QuizManager:
    """Facade for quiz services: Accounts, GameSession, History and Scoreboard.

    Every operation runs under one lock, so concurrent requests against the
    same session or user never interleave inside a process. Deployments with
    several worker processes only get the store's single-document atomicity.
    """

    def __init__(
        self,
        pool: QuestionPool,
        store: DocumentStore | None = None,
        rng: random.Random | None = None,
        clock: Clock = utc_now,
        bcrypt_rounds: int = 12,
    ) -> None:
        self._lock = Lock()
        self._pool = pool
        self._store = store if store is not None else InMemoryDocumentStore()

        # Services
        self._accounts = UserAccounts(self._store, bcrypt_rounds=bcrypt_rounds)
        self._history = HistoryTracker(self._store)
        self._selector = NonRepeatSelector(QuestionSampler(pool, rng))
        self._sessions = GameSessionService(
            pool, self._store, self._selector, self._history, clock=clock
        )
        self._scoreboard = Scoreboard(self._store)

    @property
    def pool(self) -> QuestionPool:
        return self._pool

    # --- Accounts Delegation ---

    def sign_up(self, email: str, password: str, display_name: str) -> User:
        with self._lock:
            return self._accounts.signup(email, password, display_name)

    def log_in(self, email: str, password: str) -> User:
        # Read-only; kept outside the lock so password checks do not stall games.
        return self._accounts.authenticate(email, password)

    def get_user(self, user_id: str) -> User:
        with self._lock:
            return self._accounts.get(user_id)

    # --- Game Session Delegation ---

    def start_game(
        self,
        user_id: str,
        num_questions: int,
        source: QuestionSource | str = QuestionSource.LOCAL,
        category: str | None = None,
    ) -> tuple[GameSession, list[Question]]:
        with self._lock:
            return self._sessions.start(user_id, num_questions, source, category)

    def submit_answer(
        self,
        user_id: str,
        session_id: str,
        question_id: str,
        selected_answer: str,
    ) -> bool:
        with self._lock:
            return self._sessions.record_answer(
                session_id, question_id, selected_answer, user_id=user_id
            )

    def finish_game(self, user_id: str, session_id: str) -> GameSession:
        with self._lock:
            return self._sessions.finish(session_id, user_id=user_id)

    def get_session(self, user_id: str, session_id: str) -> GameSession:
        with self._lock:
            return self._sessions.get(session_id, user_id=user_id)

    # --- History & Scoreboard Delegation ---

    def get_history(self, user_id: str) -> list[GameSession]:
        with self._lock:
            return self._scoreboard.history(user_id)

    def get_leaderboard(self) -> list[LeaderboardRow]:
        with self._lock:
            return self._scoreboard.get_top_scorers()
