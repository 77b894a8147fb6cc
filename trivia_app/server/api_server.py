"""FastAPI server that exposes the account, game and leaderboard endpoints."""

from __future__ import annotations

from datetime import datetime
import logging

from fastapi import Depends, FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import uvicorn

from trivia_app.config import Settings
from trivia_app.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from trivia_app.constants.quiz_constants import DEFAULT_NUM_QUESTIONS
from trivia_app.core.errors import TriviaError
from trivia_app.core.markdown_renderer import renderer
from trivia_app.core.models import GameSession, Question, User
from trivia_app.core.quiz_manager import QuizManager
from trivia_app.server.auth import TokenCodec

logger = logging.getLogger(__name__)


class SignupPayload(BaseModel):
    """Payload schema for account creation."""

    email: str
    password: str
    display_name: str


class LoginPayload(BaseModel):
    """Payload schema for logging in."""

    email: str
    password: str


class StartGamePayload(BaseModel):
    """Payload schema for starting a game."""

    num_questions: int = DEFAULT_NUM_QUESTIONS
    source: str = "local"
    category: str | None = None


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    game_session_id: str
    question_id: str
    selected_answer: str


class FinishPayload(BaseModel):
    game_session_id: str


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _user_payload(user: User) -> dict[str, object]:
    return {"email": user.email, "display_name": user.display_name}


def _question_payload(question: Question) -> dict[str, object]:
    # The correct answer stays on the server.
    return {
        "id": question.id,
        "question": question.prompt,
        "question_html": renderer.render_fragment(question.prompt),
        "options": [{"key": option.key, "text": option.text} for option in question.options],
    }


def _session_payload(session: GameSession) -> dict[str, object]:
    return {
        "id": session.id,
        "user_id": session.user_id,
        "source": session.source.value,
        "question_ids": list(session.question_ids),
        "answers": [answer.to_document() for answer in session.answers],
        "num_questions": session.num_questions,
        "score": session.score,
        "started_at": _iso(session.started_at),
        "finished_at": _iso(session.finished_at),
        "duration_ms": session.duration_ms,
    }


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_api_app(quiz_manager: QuizManager, settings: Settings) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, description=APP_ABOUT_TEXT)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)
    tokens = TokenCodec(settings)

    @app.exception_handler(TriviaError)
    async def handle_trivia_error(request: Request, exc: TriviaError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    def current_user_id(request: Request) -> str:
        return tokens.current_user_id(request)

    @app.get("/health")
    def health(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return {"status": "ok", "questions": len(manager.pool)}

    # --- Auth ---

    @app.post("/api/auth/signup", status_code=201)
    def signup(
        payload: SignupPayload,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        user = manager.sign_up(payload.email, payload.password, payload.display_name)
        tokens.set_cookie(response, user.id)
        return _user_payload(user)

    @app.post("/api/auth/login")
    def login(
        payload: LoginPayload,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        user = manager.log_in(payload.email, payload.password)
        tokens.set_cookie(response, user.id)
        return _user_payload(user)

    @app.post("/api/auth/logout")
    def logout(response: Response) -> dict[str, object]:
        tokens.clear_cookie(response)
        return {"ok": True}

    @app.get("/api/auth/me")
    def me(
        user_id: str = Depends(current_user_id),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        return _user_payload(manager.get_user(user_id))

    # --- Game ---

    @app.post("/api/game/start")
    def start_game(
        payload: StartGamePayload,
        user_id: str = Depends(current_user_id),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        session, questions = manager.start_game(
            user_id,
            payload.num_questions,
            source=payload.source,
            category=payload.category,
        )
        return {
            "game_session_id": session.id,
            "questions": [_question_payload(question) for question in questions],
        }

    @app.post("/api/game/answer")
    def submit_answer(
        payload: AnswerPayload,
        user_id: str = Depends(current_user_id),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        is_correct = manager.submit_answer(
            user_id,
            payload.game_session_id,
            payload.question_id,
            payload.selected_answer,
        )
        return {"is_correct": is_correct}

    @app.post("/api/game/finish")
    def finish_game(
        payload: FinishPayload,
        user_id: str = Depends(current_user_id),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        session = manager.finish_game(user_id, payload.game_session_id)
        return {"score": session.score, "num_questions": session.num_questions}

    @app.get("/api/game/session/{session_id}")
    def get_session(
        session_id: str,
        user_id: str = Depends(current_user_id),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        return _session_payload(manager.get_session(user_id, session_id))

    # --- Profile & Leaderboard ---

    @app.get("/api/user/history")
    def get_history(
        user_id: str = Depends(current_user_id),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[dict[str, object]]:
        return [_session_payload(session) for session in manager.get_history(user_id)]

    @app.get("/api/leaderboard")
    def get_leaderboard(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, object]]:
        return [
            {
                "display_name": row.display_name,
                "score": row.score,
                "num_questions": row.num_questions,
                "finished_at": _iso(row.finished_at),
            }
            for row in manager.get_leaderboard()
        ]

    return app


def run_api_server(quiz_manager: QuizManager, settings: Settings) -> None:
    """Serve the API with uvicorn until interrupted."""
    app = create_api_app(quiz_manager, settings)
    config = uvicorn.Config(
        app=app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    uvicorn.Server(config).run()
