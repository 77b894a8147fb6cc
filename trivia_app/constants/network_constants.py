"""Network configuration constants for the trivia service."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8080
TOKEN_COOKIE_NAME: str = "token"
