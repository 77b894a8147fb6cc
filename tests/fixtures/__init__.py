"""Shared testing helpers for the trivia_app test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

LABELS = "ABCD"


def make_records(count: int) -> list[dict[str, str]]:
    """Build catalog records whose answers cycle through A-D."""
    return [
        {
            "question": f"Question number {index}?",
            "A": f"alpha {index}",
            "B": f"bravo {index}",
            "C": f"charlie {index}",
            "D": f"delta {index}",
            "answer": LABELS[index % 4],
        }
        for index in range(count)
    ]


def wrong_label(correct: str) -> str:
    return next(label for label in LABELS if label != correct)


class FakeClock:
    """Deterministic clock advancing a fixed step on every call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current


__all__ = ["FakeClock", "LABELS", "make_records", "wrong_label"]
