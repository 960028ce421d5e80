"""Fetch a JSON file from a GitHub user's repositories and merge it with repository metadata."""

from .pipeline import GitHubInsights, InsightsConfig, sort_by_recency
from .retrieval import FetchEvent, HttpClient, RepositorySummary

__all__ = [
    "GitHubInsights",
    "InsightsConfig",
    "sort_by_recency",
    "FetchEvent",
    "HttpClient",
    "RepositorySummary",
]
