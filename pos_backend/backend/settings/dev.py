# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS
- sqlite unless DATABASE_URL says otherwise
- ledger loggers at DEBUG (code allocation retries, category propagation)
- a short code-retry budget so allocation conflicts surface quickly
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1"])

CORS_ALLOWED_ORIGINS = env.list(
    "CORS_ALLOWED_ORIGINS", default=["http://localhost:3000"]
)

CSRF_TRUSTED_ORIGINS = env.list(
    "CSRF_TRUSTED_ORIGINS", default=["http://localhost:3000"]
)

for _name in ("accounting", "store"):
    LOGGING["loggers"][_name]["level"] = "DEBUG"

JOURNAL_CODE_MAX_RETRIES = env.int("JOURNAL_CODE_MAX_RETRIES", default=3)
