"""EMS portal package.

Server-rendered front-end for the EMS REST backend, organized by feature
(auth, employees, shifts, attendance, leaves, work sessions, dashboards)
with thin Flask controllers over service/repository layers.
"""

from .main import create_app

__all__ = ["create_app"]
