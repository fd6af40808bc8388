"""Per-reviewer review history for a single repository."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from pullbuddy_core.models import ReviewComment, ReviewEntry, ReviewHistory, ReviewStats

if TYPE_CHECKING:
    from pullbuddy_core.accessor import GitHubDataAccessor

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DAYS = 30


def _author(record: dict) -> str | None:
    user = record.get("user")
    return user.get("login") if user else None


def _to_comment(raw: dict, pr_number: int) -> ReviewComment:
    return ReviewComment(
        id=raw["id"],
        pr_number=pr_number,
        author=_author(raw) or "",
        body=raw.get("body") or "",
        created_at=raw.get("created_at"),
        path=raw.get("path"),
        line=raw.get("line"),
        commit_id=raw.get("commit_id"),
    )


async def get_review_history(
    accessor: GitHubDataAccessor,
    owner: str,
    repo: str,
    reviewer: str,
    since: datetime | None = None,
    name: str | None = None,
) -> ReviewHistory:
    """Build ``reviewer``'s history on pull requests opened since ``since``.

    ``since`` defaults to 30 days ago. Pull requests are walked in the order
    the accessor returns them (most recently updated first), which only
    affects the order of ``reviews``, never the stats.

    A review without ``submitted_at`` (still pending) counts towards
    ``total_reviews`` but is left out of the response-time average instead
    of being treated as an instant response.
    """
    if since is None:
        since = datetime.now(timezone.utc) - timedelta(days=DEFAULT_HISTORY_DAYS)

    pull_requests = await accessor.fetch_pull_requests(owner, repo)

    reviews: list[ReviewEntry] = []
    total_comments = 0
    total_response_ms = 0.0
    timed_reviews = 0
    last_review_at: datetime | None = None

    for pr in pull_requests:
        created_at = pr["created_at"]
        if created_at < since:
            continue

        pr_reviews = await accessor.fetch_reviews(owner, repo, pr["number"])
        for review in pr_reviews:
            if _author(review) != reviewer:
                continue

            raw_comments = await accessor.fetch_review_comments(owner, repo, pr["number"], review["id"])
            comments = [_to_comment(c, pr["number"]) for c in raw_comments]
            submitted_at = review.get("submitted_at")

            reviews.append(ReviewEntry(pr_number=pr["number"], submitted_at=submitted_at, comments=comments))
            total_comments += len(comments)

            if submitted_at is not None:
                total_response_ms += (submitted_at - created_at).total_seconds() * 1000
                timed_reviews += 1
                if last_review_at is None or submitted_at > last_review_at:
                    last_review_at = submitted_at

    stats = ReviewStats(
        total_reviews=len(reviews),
        total_comments=total_comments,
        average_response_time_ms=total_response_ms / timed_reviews if timed_reviews else 0.0,
        last_review_at=last_review_at,
        related_file_changes=0,
    )
    logger.debug(
        "%s: %d review(s), %d comment(s) in %s/%s since %s",
        reviewer,
        stats.total_reviews,
        stats.total_comments,
        owner,
        repo,
        since.date(),
    )
    return ReviewHistory(login=reviewer, name=name, reviews=reviews, stats=stats)
