"""Retrieval layer: rate-limit-aware HTTP client and GitHub collectors."""

from .collectors import fetch_repository_file, get_repository, list_repositories
from .http_client import HttpClient
from .models import FetchEvent, RepositorySummary

__all__ = [
    "HttpClient",
    "FetchEvent",
    "RepositorySummary",
    "list_repositories",
    "get_repository",
    "fetch_repository_file",
]
