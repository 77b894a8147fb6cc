"""Domain models for the trivia service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class QuestionSource(str, Enum):
    """Where the questions of a game session come from."""

    LOCAL = "local"
    OPENTDB = "opentdb"


@dataclass(frozen=True, slots=True)
class QuestionOption:
    """One labeled choice of a multiple-choice question."""

    key: str
    text: str


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question with exactly four options labeled A-D."""

    id: str
    prompt: str
    options: tuple[QuestionOption, ...]
    answer: str

    def option_keys(self) -> list[str]:
        return [option.key for option in self.options]


@dataclass(slots=True)
class Answer:
    """A submitted response together with the answer that was correct at the time."""

    question_id: str
    correct_answer: str
    selected_answer: str
    is_correct: bool

    def to_document(self) -> dict[str, Any]:
        return {
            "question_id": self.question_id,
            "correct_answer": self.correct_answer,
            "selected_answer": self.selected_answer,
            "is_correct": self.is_correct,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Answer":
        return cls(
            question_id=document["question_id"],
            correct_answer=document["correct_answer"],
            selected_answer=document["selected_answer"],
            is_correct=document["is_correct"],
        )


@dataclass(slots=True)
class PlayedSetRecord:
    """A question set a user has already played."""

    source: QuestionSource
    question_ids: list[str]
    played_at: datetime

    def to_document(self) -> dict[str, Any]:
        return {
            "source": self.source.value,
            "question_ids": list(self.question_ids),
            "played_at": self.played_at,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "PlayedSetRecord":
        return cls(
            source=QuestionSource(document["source"]),
            question_ids=list(document["question_ids"]),
            played_at=document["played_at"],
        )


@dataclass(slots=True)
class GameSession:
    """One quiz attempt. Active until ``finished_at`` is set."""

    id: str
    user_id: str
    source: QuestionSource
    question_ids: list[str]
    num_questions: int
    started_at: datetime
    answers: list[Answer] = field(default_factory=list)
    score: int | None = None
    finished_at: datetime | None = None
    duration_ms: int | None = None

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None

    def has_answered(self, question_id: str) -> bool:
        return any(answer.question_id == question_id for answer in self.answers)

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "source": self.source.value,
            "question_ids": list(self.question_ids),
            "answers": [answer.to_document() for answer in self.answers],
            "num_questions": self.num_questions,
            "score": self.score,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "duration_ms": self.duration_ms,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "GameSession":
        return cls(
            id=document["id"],
            user_id=document["user_id"],
            source=QuestionSource(document["source"]),
            question_ids=list(document["question_ids"]),
            num_questions=document["num_questions"],
            started_at=document["started_at"],
            answers=[Answer.from_document(item) for item in document.get("answers", [])],
            score=document.get("score"),
            finished_at=document.get("finished_at"),
            duration_ms=document.get("duration_ms"),
        )


@dataclass(slots=True)
class User:
    """A registered player."""

    id: str
    email: str
    password_hash: str
    display_name: str
    created_at: datetime
    recent_played_sets: list[PlayedSetRecord] = field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "password_hash": self.password_hash,
            "display_name": self.display_name,
            "created_at": self.created_at,
            "recent_played_sets": [record.to_document() for record in self.recent_played_sets],
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "User":
        return cls(
            id=document["id"],
            email=document["email"],
            password_hash=document["password_hash"],
            display_name=document["display_name"],
            created_at=document["created_at"],
            recent_played_sets=[
                PlayedSetRecord.from_document(item)
                for item in document.get("recent_played_sets", [])
            ],
        )
