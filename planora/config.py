import os

SECRET_KEY = os.environ.get("SECRET_KEY", "TU_SECRET_KEY_TEMPORAL")
ALGORITHM = os.environ.get("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = float(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

# Default to local SQLite for dev/tests; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./planora.db")

# Day boundaries ("today", "tomorrow") are computed in this zone
TIMEZONE = os.environ.get("PLANORA_TIMEZONE", "UTC")

POMODORO_FOCUS_MINUTES = int(os.environ.get("POMODORO_FOCUS_MINUTES", 25))
POMODORO_BREAK_MINUTES = int(os.environ.get("POMODORO_BREAK_MINUTES", 5))

NOTIFICATION_LIMIT = int(os.environ.get("NOTIFICATION_LIMIT", 5))
UPCOMING_WINDOW_DAYS = int(os.environ.get("UPCOMING_WINDOW_DAYS", 7))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
