"""Service for the per-user rolling history of played question sets."""

from __future__ import annotations

from trivia_app.constants.quiz_constants import RECENT_PLAYED_SETS_LIMIT
from trivia_app.core.errors import NotFoundError
from trivia_app.core.models import PlayedSetRecord, QuestionSource, User
from trivia_app.core.persistence import USERS, DocumentStore


class HistoryTracker:
    """Keeps at most a handful of recent sets per user, most recent first."""

    def __init__(self, store: DocumentStore, limit: int = RECENT_PLAYED_SETS_LIMIT) -> None:
        self._store = store
        self._limit = limit

    def played_sets(self, user_id: str) -> list[PlayedSetRecord]:
        return list(self._load_user(user_id).recent_played_sets)

    def last_played_set(self, user_id: str, source: QuestionSource) -> PlayedSetRecord | None:
        return next(
            (record for record in self.played_sets(user_id) if record.source == source),
            None,
        )

    def record_played(self, user_id: str, record: PlayedSetRecord) -> None:
        """Prepend ``record`` and evict the oldest entries beyond the limit."""
        user = self._load_user(user_id)
        user.recent_played_sets = [record, *user.recent_played_sets][: self._limit]
        self._store.put(USERS, user.id, user.to_document())

    def _load_user(self, user_id: str) -> User:
        document = self._store.get(USERS, user_id)
        if document is None:
            raise NotFoundError("user not found")
        return User.from_document(document)
