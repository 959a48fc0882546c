import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://localhost:8080"),
    "timeout_seconds": float(os.getenv("API_TIMEOUT", "15")),
}

# Backend timestamps without an offset are in this zone
DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "Asia/Karachi")

DEFAULT_PAGE_SIZE = 10
SESSION_DAYS = 1

DEBUG = bool(int(os.getenv("DEBUG", "1")))
