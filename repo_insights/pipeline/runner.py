"""Entry point that aggregates repository files and metadata for a GitHub user."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Dict, Iterable, List, Optional

from repo_insights.retrieval.collectors import (
    fetch_repository_file,
    get_repository,
    list_repositories,
    web_url,
)
from repo_insights.retrieval.http_client import HttpClient, emit_event
from repo_insights.retrieval.models import FetchEvent, RepositorySummary

from .config import InsightsConfig

logger = logging.getLogger(__name__)

REPOSITORY_INFO_KEY = "repository_info"


def merge_content(content: Any, info: Dict[str, Any]) -> Dict[str, Any]:
    """Combine file content with repository info; non-object content lands under `content`."""
    if isinstance(content, dict):
        merged = dict(content)
    else:
        merged = {"content": content}
    merged[REPOSITORY_INFO_KEY] = info
    return merged


def _timestamp_of(entry: Dict[str, Any], key: str) -> Optional[str]:
    info = entry.get(REPOSITORY_INFO_KEY)
    if not isinstance(info, dict):
        info = entry
    value = info.get(key)
    return str(value) if value else None


def sort_by_recency(results: Iterable[Dict[str, Any]], key: str = "created_at") -> List[Dict[str, Any]]:
    """Stable sort, newest `key` first; entries without a timestamp go last."""
    def sort_key(entry: Dict[str, Any]):
        ts = _timestamp_of(entry, key)
        return (ts is not None, ts or "")

    return sorted(results, key=sort_key, reverse=True)


class GitHubInsights:
    """Fetches a configured file from one or all of a user's repositories.

    Example:
        with GitHubInsights.create("octocat", filename="project.json") as insights:
            for entry in insights.fetch_insights():
                print(entry["repository_info"]["name"])
    """

    def __init__(self, config: InsightsConfig, *, client: Optional[HttpClient] = None) -> None:
        self.config = config
        self._owns_client = client is None
        self.client = client or HttpClient(
            config.token,
            max_attempts=config.max_attempts,
            retries_enabled=config.retries_enabled,
            max_rate_limit_wait=config.max_rate_limit_wait,
            terminal_statuses=config.terminal_statuses,
            on_event=config.on_event,
        )

    def close(self) -> None:
        """Release the HTTP session when this instance built its own client."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "GitHubInsights":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @classmethod
    def create(
        cls,
        username: str,
        filename: Optional[str] = None,
        repository_name: Optional[str] = None,
        token: Optional[str] = None,
        **options: Any,
    ) -> "GitHubInsights":
        return cls(
            InsightsConfig(
                username=username,
                filename=filename,
                repository_name=repository_name,
                token=token,
                **options,
            )
        )

    def fetch_insights(self) -> List[Dict[str, Any]]:
        """Return merged file/metadata entries; never raises, degrades to [] on failure."""
        try:
            if self.config.single_repository:
                return self._fetch_single()
            return self._fetch_all()
        except Exception as exc:
            logger.exception("[error] insight aggregation for %s failed", self.config.username)
            emit_event(
                self.config.on_event,
                FetchEvent("insights.failed", "", {"username": self.config.username, "error": str(exc)}),
            )
            return []

    fetch_repository_files = fetch_insights

    def _fetch_file(self, repo_name: str) -> Optional[Any]:
        cfg = self.config
        return fetch_repository_file(
            self.client,
            cfg.username,
            repo_name,
            cfg.filename,
            branch=cfg.branch,
            fallback_branch=cfg.fallback_branch,
        )

    def _fetch_single(self) -> List[Dict[str, Any]]:
        cfg = self.config
        repo_name = cfg.repository_name
        if not cfg.filename:
            logger.info("[skip] %s/%s: no filename configured", cfg.username, repo_name)
            return []

        content = self._fetch_file(repo_name)
        if content is None:
            logger.info("[absent] %s/%s: %s not available", cfg.username, repo_name, cfg.filename)
            return []

        info: Dict[str, Any] = {"name": repo_name, "url": web_url(cfg.username, repo_name)}
        if cfg.include_repository_details:
            summary = get_repository(self.client, cfg.username, repo_name)
            if summary is not None:
                info = summary.to_dict()
        return [merge_content(content, info)]

    def _fetch_all(self) -> List[Dict[str, Any]]:
        cfg = self.config
        repos = list_repositories(self.client, cfg.username)
        logger.info("[listing] %s: %d repositories", cfg.username, len(repos))
        if not cfg.filename:
            return [repo.to_dict() for repo in repos]
        if not repos:
            return []

        contents = self._fetch_files(repos)
        merged = [
            merge_content(content, repo.to_dict())
            for repo, content in zip(repos, contents)
            if content is not None
        ]
        logger.info("[done] %s: %d/%d repositories carry %s", cfg.username, len(merged), len(repos), cfg.filename)
        return sort_by_recency(merged, cfg.sort_key)

    def _fetch_files(self, repos: List[RepositorySummary]) -> List[Optional[Any]]:
        """Fetch every repository's file, waiting for all of them; failures become None."""
        workers = min(self.config.max_workers, len(repos))
        if workers <= 1:
            return [self._settle(repo.name, self._fetch_file, repo.name) for repo in repos]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._fetch_file, repo.name) for repo in repos]
            wait(futures)
        return [self._settle(repo.name, fut.result) for repo, fut in zip(repos, futures)]

    def _settle(self, repo_name: str, fn, *args: Any) -> Optional[Any]:
        try:
            return fn(*args)
        except Exception as exc:
            logger.warning("[error] %s/%s: file fetch raised %s", self.config.username, repo_name, exc)
            emit_event(
                self.config.on_event,
                FetchEvent("request.error", "", {"repo": repo_name, "error": str(exc)}),
            )
            return None


__all__ = ["GitHubInsights", "merge_content", "sort_by_recency", "REPOSITORY_INFO_KEY"]
