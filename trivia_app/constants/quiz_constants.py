"""Quiz-related constants shared across the core and API layers."""

DEFAULT_NUM_QUESTIONS: int = 10
MAX_SAMPLE_ATTEMPTS: int = 10
RECENT_PLAYED_SETS_LIMIT: int = 5
HISTORY_PAGE_SIZE: int = 20
LEADERBOARD_SIZE: int = 10
OPTION_LABELS: tuple[str, ...] = ("A", "B", "C", "D")
ANONYMOUS_DISPLAY_NAME: str = "Anonymous"
