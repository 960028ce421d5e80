"""Collectors for a user's repository listing and per-repository file contents."""

from __future__ import annotations

import logging
from typing import Any, List, Optional
from urllib.parse import quote

from .config import BASE_URL, DEFAULT_BRANCH, FALLBACK_BRANCH, PER_PAGE, RAW_BASE_URL, WEB_BASE_URL
from .http_client import HttpClient, emit_event
from .models import FetchEvent, RepositorySummary

logger = logging.getLogger(__name__)


def repos_url(username: str) -> str:
    """Listing endpoint for a user's repositories (first page only)."""
    return f"{BASE_URL}/users/{quote(username)}/repos?per_page={PER_PAGE}"


def repo_url(username: str, repo: str) -> str:
    """REST endpoint for a single repository's metadata."""
    return f"{BASE_URL}/repos/{quote(username)}/{quote(repo)}"


def web_url(username: str, repo: str) -> str:
    """Browser URL of a repository on github.com."""
    return f"{WEB_BASE_URL}/{quote(username)}/{quote(repo)}"


def raw_file_url(username: str, repo: str, branch: str, filename: str) -> str:
    """Raw-content URL for `filename` on `branch`; nested paths keep their slashes."""
    return f"{RAW_BASE_URL}/{quote(username)}/{quote(repo)}/{quote(branch)}/{quote(filename.lstrip('/'))}"


def list_repositories(client: HttpClient, username: str) -> List[RepositorySummary]:
    """Return the user's repositories in API order; [] when the listing is unavailable."""
    url = repos_url(username)
    data = client.get_json(url)
    if not isinstance(data, list):
        if data is not None:
            logger.warning("[warn] %s returned %s instead of a list", url, type(data).__name__)
        return []

    summaries: List[RepositorySummary] = []
    for index, raw in enumerate(data):
        try:
            summaries.append(RepositorySummary.from_api(raw))
        except ValueError as exc:
            logger.info("[skip] repository record %d for %s: %s", index, username, exc)
            emit_event(
                client.on_event,
                FetchEvent("listing.skipped_record", url, {"index": index, "error": str(exc)}),
            )
    return summaries


def get_repository(client: HttpClient, username: str, repo: str) -> Optional[RepositorySummary]:
    """Fetch a single repository's metadata, or None when unavailable."""
    data = client.get_json(repo_url(username, repo))
    if not isinstance(data, dict):
        return None
    try:
        return RepositorySummary.from_api(data)
    except ValueError as exc:
        logger.info("[skip] repository %s/%s: %s", username, repo, exc)
        return None


def fetch_repository_file(
    client: HttpClient,
    username: str,
    repo: str,
    filename: str,
    *,
    branch: str = DEFAULT_BRANCH,
    fallback_branch: Optional[str] = FALLBACK_BRANCH,
) -> Optional[Any]:
    """Return the parsed JSON content of `filename` in `repo`, or None if it cannot be read."""
    content = client.get_json(raw_file_url(username, repo, branch, filename))
    if content is not None or not fallback_branch or fallback_branch == branch:
        return content

    fallback_url = raw_file_url(username, repo, fallback_branch, filename)
    logger.debug("[fallback] %s/%s: %s not found on %s, trying %s", username, repo, filename, branch, fallback_branch)
    emit_event(
        client.on_event,
        FetchEvent("file.fallback_branch", fallback_url, {"repo": repo, "branch": branch, "fallback": fallback_branch}),
    )
    return client.get_json(fallback_url)


__all__ = [
    "repos_url",
    "repo_url",
    "web_url",
    "raw_file_url",
    "list_repositories",
    "get_repository",
    "fetch_repository_file",
]
