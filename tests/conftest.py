from __future__ import annotations

import random
import sys
from pathlib import Path

from fastapi.testclient import TestClient
import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from fixtures import FakeClock, make_records  # noqa: E402
from trivia_app.config import Settings  # noqa: E402
from trivia_app.core.persistence import InMemoryDocumentStore  # noqa: E402
from trivia_app.core.question_pool import QuestionPool  # noqa: E402
from trivia_app.core.quiz_manager import QuizManager  # noqa: E402
from trivia_app.server.api_server import create_api_app  # noqa: E402


@pytest.fixture
def pool() -> QuestionPool:
    return QuestionPool.from_records(make_records(12))


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(pool: QuestionPool, store: InMemoryDocumentStore, clock: FakeClock) -> QuizManager:
    return QuizManager(pool, store=store, rng=random.Random(1234), clock=clock, bcrypt_rounds=4)


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret="test-secret-0123456789abcdef0123456789", bcrypt_rounds=4, _env_file=None)


@pytest.fixture
def client(manager: QuizManager, settings: Settings) -> TestClient:
    return TestClient(create_api_app(manager, settings))
