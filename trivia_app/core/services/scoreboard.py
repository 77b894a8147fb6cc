"""Service for the leaderboard and per-user game history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from trivia_app.constants.quiz_constants import (
    ANONYMOUS_DISPLAY_NAME,
    HISTORY_PAGE_SIZE,
    LEADERBOARD_SIZE,
)
from trivia_app.core.models import GameSession
from trivia_app.core.persistence import SESSIONS, USERS, DocumentStore


@dataclass(slots=True)
class LeaderboardRow:
    """Immutable snapshot returned to consumers."""

    display_name: str
    score: int
    num_questions: int
    finished_at: datetime | None


class Scoreboard:
    """Read-only queries over finished and in-progress sessions."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def history(self, user_id: str, limit: int = HISTORY_PAGE_SIZE) -> list[GameSession]:
        """Return the user's most recently started sessions, newest first."""
        documents = self._store.find(
            SESSIONS,
            where=lambda doc: doc["user_id"] == user_id,
            sort=[("started_at", True)],
            limit=limit,
        )
        return [GameSession.from_document(doc) for doc in documents]

    def get_top_scorers(self, limit: int = LEADERBOARD_SIZE) -> list[LeaderboardRow]:
        """Return scored sessions by score, ties broken by the latest finish."""
        documents = self._store.find(
            SESSIONS,
            where=lambda doc: doc.get("score") is not None,
            sort=[("score", True), ("finished_at", True)],
            limit=limit,
        )
        return [
            LeaderboardRow(
                display_name=self._display_name(doc["user_id"]),
                score=doc["score"],
                num_questions=doc["num_questions"],
                finished_at=doc.get("finished_at"),
            )
            for doc in documents
        ]

    def _display_name(self, user_id: str) -> str:
        user = self._store.get(USERS, user_id)
        if user is None or not user.get("display_name"):
            return ANONYMOUS_DISPLAY_NAME
        return user["display_name"]
