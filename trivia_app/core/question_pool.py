"""The immutable catalog of local trivia questions.

Catalog format: a JSON list where each entry looks like

    {"question": "...", "A": "...", "B": "...", "C": "...", "D": "...", "answer": "B"}

Questions are identified by their position in the file (stringified), so the
ids stay stable for as long as the process runs with the same catalog.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from trivia_app.constants.quiz_constants import OPTION_LABELS
from trivia_app.core.errors import NotFoundError, QuestionCatalogError
from trivia_app.core.models import Question, QuestionOption

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "questions.json"


class QuestionPool:
    """Read-only lookup of questions by id. Safe to share between threads."""

    def __init__(self, questions: Iterable[Question]) -> None:
        self._questions: tuple[Question, ...] = tuple(questions)
        if not self._questions:
            raise QuestionCatalogError("Question catalog must contain at least one question.")
        self._by_id: dict[str, Question] = {question.id: question for question in self._questions}

    @classmethod
    def load(cls, path: Path = DEFAULT_CATALOG_PATH) -> "QuestionPool":
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise QuestionCatalogError(f"Unable to read question catalog {path}: {exc}") from exc
        pool = cls.from_records(raw)
        logger.info("Loaded %d questions from %s", len(pool), path)
        return pool

    @classmethod
    def from_records(cls, records: Any) -> "QuestionPool":
        if not isinstance(records, list):
            raise QuestionCatalogError("Question catalog must be a list of question records.")
        return cls(_parse_record(index, record) for index, record in enumerate(records))

    def get(self, question_id: str) -> Question:
        question = self._by_id.get(question_id)
        if question is None:
            raise NotFoundError("question not found")
        return question

    def contains(self, question_id: str) -> bool:
        return question_id in self._by_id

    def questions(self) -> tuple[Question, ...]:
        return self._questions

    def __len__(self) -> int:
        return len(self._questions)


def _parse_record(index: int, record: Any) -> Question:
    if not isinstance(record, dict):
        raise QuestionCatalogError(f"Question #{index} must be an object.")

    prompt = _required_text(record, "question", index)
    options = tuple(
        QuestionOption(key=label, text=_required_text(record, label, index))
        for label in OPTION_LABELS
    )
    answer = _required_text(record, "answer", index).upper()
    if answer not in OPTION_LABELS:
        raise QuestionCatalogError(
            f"Question #{index} answer must be one of {', '.join(OPTION_LABELS)}."
        )
    return Question(id=str(index), prompt=prompt, options=options, answer=answer)


def _required_text(record: dict[str, Any], key: str, index: int) -> str:
    value = record.get(key)
    if not isinstance(value, str) or not value.strip():
        raise QuestionCatalogError(f"Question #{index} is missing the '{key}' field.")
    return value.strip()
