"""Application entry point for the TriviaHub service."""

from __future__ import annotations

import random

from trivia_app.config import get_settings
from trivia_app.constants.about import APP_NAME
from trivia_app.core.question_pool import QuestionPool
from trivia_app.core.quiz_manager import QuizManager
from trivia_app.server.api_server import run_api_server
from trivia_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, load the question catalog, and serve the API."""
    settings = get_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting %s…", APP_NAME)

    # A malformed catalog is fatal: QuestionCatalogError propagates and stops startup.
    pool = QuestionPool.load(settings.questions_path)
    rng = random.Random(settings.random_seed)
    quiz_manager = QuizManager(pool, rng=rng, bcrypt_rounds=settings.bcrypt_rounds)

    logger.info("API available at http://%s:%d/", settings.host, settings.port)
    run_api_server(quiz_manager, settings)


if __name__ == "__main__":
    main()
