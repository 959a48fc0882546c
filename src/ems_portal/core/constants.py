"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

from datetime import time

from .enums import Role

SESSION_TOKEN_KEY = "token"
SESSION_ROLE_KEY = "role"
SESSION_NAME_KEY = "name"

LOGIN_ROUTE = "/login"

LANDING_ROUTES = {
    Role.ADMIN: "/admin",
    Role.HR: "/hr",
    Role.MANAGER: "/manager",
    Role.EMPLOYEE: "/employee",
}

PAGE_SIZE_OPTIONS = (10, 15, 25, 50, "All")
DEFAULT_PAGE_SIZE = 10

# Attendance "day" runs 08:00 to 06:00 the next morning
SHIFT_DAY_START = time(8, 0)

DEFAULT_DISPLAY_TIMEZONE = "Asia/Karachi"
RECENT_HISTORY_LIMIT = 5
