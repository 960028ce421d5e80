"""Insight aggregation over a user's repositories."""

from .config import InsightsConfig
from .runner import GitHubInsights, sort_by_recency

__all__ = ["GitHubInsights", "InsightsConfig", "sort_by_recency"]
