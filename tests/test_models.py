"""Tests for repo_insights.retrieval.models ensuring API records map onto summaries.

Run with:
    pytest tests/test_models.py --maxfail=1 -v --cov=repo_insights.retrieval.models --cov-report=term-missing
"""

import dataclasses

import pytest

from repo_insights.retrieval.models import RepositorySummary

RAW = {
    "name": "proj-a",
    "description": "A project",
    "topics": ["cli", "json"],
    "language": "Python",
    "html_url": "https://github.com/alice/proj-a",
    "homepage": "https://alice.dev/proj-a",
    "stargazers_count": 12,
    "forks_count": 2,
    "created_at": "2023-01-01T00:00:00Z",
    "updated_at": "2024-02-01T00:00:00Z",
    "private": False,
}


def test_from_api_renames_fields():
    summary = RepositorySummary.from_api(RAW)
    assert summary.to_dict() == {
        "name": "proj-a",
        "description": "A project",
        "topics": ["cli", "json"],
        "language": "Python",
        "repo_url": "https://github.com/alice/proj-a",
        "live_url": "https://alice.dev/proj-a",
        "star_count": 12,
        "fork_count": 2,
        "created_at": "2023-01-01T00:00:00Z",
        "updated_at": "2024-02-01T00:00:00Z",
    }


def test_mapping_twice_yields_identical_records():
    assert RepositorySummary.from_api(RAW) == RepositorySummary.from_api(RAW)
    assert RepositorySummary.from_api(RAW).to_dict() == RepositorySummary.from_api(RAW).to_dict()


def test_summary_is_immutable():
    summary = RepositorySummary.from_api(RAW)
    with pytest.raises(dataclasses.FrozenInstanceError):
        summary.name = "other"


def test_nullable_and_bad_counts_are_normalised():
    summary = RepositorySummary.from_api(
        {"name": "x", "topics": None, "homepage": "  ", "stargazers_count": None, "forks_count": -4}
    )
    assert summary.topics == ()
    assert summary.live_url is None
    assert summary.star_count == 0
    assert summary.fork_count == 0
    assert summary.created_at is None


@pytest.mark.parametrize("raw", [{}, {"name": ""}, {"name": "   "}, ["not", "a", "dict"]])
def test_from_api_rejects_records_without_name(raw):
    with pytest.raises(ValueError):
        RepositorySummary.from_api(raw)


def test_timestamp_selects_key():
    summary = RepositorySummary.from_api(RAW)
    assert summary.timestamp("created_at") == "2023-01-01T00:00:00Z"
    assert summary.timestamp("updated_at") == "2024-02-01T00:00:00Z"
    with pytest.raises(ValueError):
        summary.timestamp("pushed_at")
