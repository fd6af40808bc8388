"""Reviewer scoring and ranking.

    score = 0.3 × 1 / (pending_reviews + 1)      # availability
          + 0.4 × related_file_changes / 10      # familiarity with the files
          + 0.3 × total_reviews / 50             # overall review experience

The availability term is bounded by 0.3 and never divides by zero. The two
linear terms are not capped: a reviewer with more than 10
related changes or 50 reviews can exceed the nominal 0.4 / 0.3 share.
"""

from __future__ import annotations

from typing import Iterable

from pullbuddy_core.models import ReviewerCandidate

PENDING_WEIGHT = 0.3
RELATED_FILES_WEIGHT = 0.4
REVIEW_VOLUME_WEIGHT = 0.3

RELATED_FILES_SCALE = 10
REVIEW_VOLUME_SCALE = 50

DEFAULT_RECOMMEND_COUNT = 10
MAX_RECENT_COMMENTS = 10


def score_reviewer(pending_reviews: int, related_file_changes: int, total_reviews: int) -> float:
    return (
        PENDING_WEIGHT * (1 / (pending_reviews + 1))
        + RELATED_FILES_WEIGHT * (related_file_changes / RELATED_FILES_SCALE)
        + REVIEW_VOLUME_WEIGHT * (total_reviews / REVIEW_VOLUME_SCALE)
    )


def select_candidates(members: Iterable[dict], author: str | None, requested: Iterable[str]) -> list[dict]:
    """Drop the PR author and anyone already requested to review. Order is preserved."""
    excluded = set(requested)
    if author:
        excluded.add(author)
    return [m for m in members if m["login"] not in excluded]


def rank_candidates(candidates: list[ReviewerCandidate], count: int = DEFAULT_RECOMMEND_COUNT) -> list[ReviewerCandidate]:
    """Highest score first; equal scores keep their input order."""
    ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
    return ranked[: max(count, 0)]
