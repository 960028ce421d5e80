"""Records produced by the retrieval layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


def _count(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, number)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class RepositorySummary:
    """Immutable metadata record for one repository of a user."""

    name: str
    description: Optional[str] = None
    topics: Tuple[str, ...] = ()
    language: Optional[str] = None
    repo_url: Optional[str] = None
    live_url: Optional[str] = None
    star_count: int = 0
    fork_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "RepositorySummary":
        """Map a GitHub repository object onto a summary; raise ValueError without a name."""
        if not isinstance(raw, dict):
            raise ValueError(f"repository record must be an object, got {type(raw).__name__}")
        name = _optional_str(raw.get("name"))
        if not name:
            raise ValueError("repository record has no name")
        topics = raw.get("topics") or []
        return cls(
            name=name,
            description=raw.get("description"),
            topics=tuple(str(topic) for topic in topics if topic),
            language=raw.get("language"),
            repo_url=_optional_str(raw.get("html_url")),
            live_url=_optional_str(raw.get("homepage")),
            star_count=_count(raw.get("stargazers_count")),
            fork_count=_count(raw.get("forks_count")),
            created_at=_optional_str(raw.get("created_at")),
            updated_at=_optional_str(raw.get("updated_at")),
        )

    def timestamp(self, key: str) -> Optional[str]:
        """Return the `created_at` or `updated_at` value used for ordering."""
        if key == "created_at":
            return self.created_at
        if key == "updated_at":
            return self.updated_at
        raise ValueError(f"unknown timestamp key: {key}")

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with snake_case keys; topics become a list."""
        return {
            "name": self.name,
            "description": self.description,
            "topics": list(self.topics),
            "language": self.language,
            "repo_url": self.repo_url,
            "live_url": self.live_url,
            "star_count": self.star_count,
            "fork_count": self.fork_count,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class FetchEvent:
    """Diagnostic delivered to the `on_event` hook when a fetch degrades or fails."""

    name: str
    url: str = ""
    detail: Dict[str, Any] = field(default_factory=dict)


__all__ = ["RepositorySummary", "FetchEvent"]
