"""Static metadata describing TriviaHub."""

APP_NAME = "TriviaHub"
APP_VERSION = "0.1.0"
APP_ABOUT_TEXT = (
    "TriviaHub is a small multiple-choice quiz service built with FastAPI. "
    "Players sign up, play randomized question sets that avoid repeating their "
    "previous game, and compare scores on a shared leaderboard."
)
