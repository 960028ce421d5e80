"""Construction-time configuration for an insight aggregation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from repo_insights.retrieval.config import (
    DEFAULT_BRANCH,
    DEFAULT_MAX_WORKERS,
    FALLBACK_BRANCH,
    MAX_ATTEMPTS,
    MAX_RATE_LIMIT_WAIT_SEC,
    SORT_KEYS,
)
from repo_insights.retrieval.http_client import EventHook


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class InsightsConfig:
    """Immutable settings for GitHubInsights.

    `repository_name` switches to single-repository mode; an empty `filename`
    disables file fetching; `token` adds an Authorization header.
    """

    username: str
    filename: Optional[str] = None
    repository_name: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)
    branch: str = DEFAULT_BRANCH
    fallback_branch: Optional[str] = FALLBACK_BRANCH
    sort_key: str = "created_at"
    retries_enabled: bool = True
    max_attempts: int = MAX_ATTEMPTS
    max_rate_limit_wait: float = MAX_RATE_LIMIT_WAIT_SEC
    terminal_statuses: FrozenSet[int] = field(default_factory=frozenset)
    include_repository_details: bool = False
    max_workers: int = DEFAULT_MAX_WORKERS
    on_event: Optional[EventHook] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        username = _blank_to_none(self.username)
        if not username:
            raise ValueError("username must be a non-empty string")
        branch = _blank_to_none(self.branch)
        if not branch:
            raise ValueError("branch must be a non-empty string")
        if self.sort_key not in SORT_KEYS:
            raise ValueError(f"sort_key must be one of {', '.join(SORT_KEYS)}; got {self.sort_key!r}")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.max_rate_limit_wait < 0:
            raise ValueError("max_rate_limit_wait must not be negative")

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "username", username)
        object.__setattr__(self, "branch", branch)
        object.__setattr__(self, "filename", _blank_to_none(self.filename))
        object.__setattr__(self, "repository_name", _blank_to_none(self.repository_name))
        object.__setattr__(self, "token", _blank_to_none(self.token))
        object.__setattr__(self, "fallback_branch", _blank_to_none(self.fallback_branch))
        object.__setattr__(self, "terminal_statuses", frozenset(self.terminal_statuses))

    @property
    def single_repository(self) -> bool:
        return self.repository_name is not None


__all__ = ["InsightsConfig"]
