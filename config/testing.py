import os

SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://api.test"),
    "timeout_seconds": 5.0,
}

DISPLAY_TIMEZONE = "Asia/Karachi"

DEFAULT_PAGE_SIZE = 10
SESSION_DAYS = 1

DEBUG = False
TESTING = True
