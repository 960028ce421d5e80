"""Central configuration constants for the repository insight retrieval layer."""

from __future__ import annotations

from typing import Tuple

USER_AGENT = "repo-insights/1.0"
BASE_URL = "https://api.github.com"
RAW_BASE_URL = "https://raw.githubusercontent.com"
WEB_BASE_URL = "https://github.com"
PER_PAGE = 100
REQUEST_TIMEOUT = 30
MAX_ATTEMPTS = 5
BACKOFF_BASE_SEC = 2
MAX_RATE_LIMIT_WAIT_SEC = 60 * 60
MIN_RATE_LIMIT_WAIT_SEC = 1
DEFAULT_BRANCH = "main"
FALLBACK_BRANCH = "master"
DEFAULT_MAX_WORKERS = 8
SORT_KEYS: Tuple[str, ...] = ("created_at", "updated_at")

__all__ = [
    "USER_AGENT",
    "BASE_URL",
    "RAW_BASE_URL",
    "WEB_BASE_URL",
    "PER_PAGE",
    "REQUEST_TIMEOUT",
    "MAX_ATTEMPTS",
    "BACKOFF_BASE_SEC",
    "MAX_RATE_LIMIT_WAIT_SEC",
    "MIN_RATE_LIMIT_WAIT_SEC",
    "DEFAULT_BRANCH",
    "FALLBACK_BRANCH",
    "DEFAULT_MAX_WORKERS",
    "SORT_KEYS",
]
