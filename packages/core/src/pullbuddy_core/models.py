"""Value objects produced by the recommendation pipeline.

Upstream records (pull requests, reviews, files) stay plain dicts as
returned by the GitHub client; everything pullbuddy derives from them is a
dataclass here. None of these outlive a single call.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class PullRequestReference:
    owner: str
    repo: str
    pr_number: int

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.pr_number}"


@dataclass
class ReviewComment:
    """A single line-level comment left as part of a review."""

    id: int
    pr_number: int
    author: str
    body: str
    created_at: datetime | None
    path: str | None = None
    line: int | None = None
    commit_id: str | None = None


@dataclass
class ReviewEntry:
    pr_number: int
    submitted_at: datetime | None
    comments: list[ReviewComment] = field(default_factory=list)


@dataclass
class ReviewStats:
    total_reviews: int = 0
    total_comments: int = 0
    average_response_time_ms: float = 0.0
    last_review_at: datetime | None = None
    related_file_changes: int = 0


@dataclass
class ReviewHistory:
    """A reviewer's activity in one repository over a time window."""

    login: str
    name: str | None
    reviews: list[ReviewEntry] = field(default_factory=list)
    stats: ReviewStats = field(default_factory=ReviewStats)

    def comment_bodies(self, limit: int) -> list[str]:
        """Return up to ``limit`` comment bodies, in review order."""
        bodies = [c.body for r in self.reviews for c in r.comments]
        return bodies[:limit]

    def to_dict(self) -> dict:
        return {
            "reviewer": {"login": self.login, "name": self.name},
            "reviews": [asdict(r) for r in self.reviews],
            "stats": asdict(self.stats),
        }


@dataclass
class ReviewerCandidate:
    """A scored reviewer for one pull request. ``score`` keeps full precision."""

    login: str
    name: str | None
    pending_reviews: int
    stats: ReviewStats
    recent_comments: list[str] = field(default_factory=list)
    score: float = 0.0

    def to_dict(self) -> dict:
        return {
            "login": self.login,
            "name": self.name,
            "score": f"{self.score:.2f}",
            "stats": {
                "pending_reviews": self.pending_reviews,
                "related_file_changes": self.stats.related_file_changes,
                "total_reviews": self.stats.total_reviews,
                "recent_comments": self.recent_comments,
            },
        }


@dataclass
class Recommendation:
    reference: PullRequestReference
    considered: int  # candidates scored before truncation
    candidates: list[ReviewerCandidate] = field(default_factory=list)


@dataclass
class PullRequestDetails:
    pr: dict
    files: list[dict]
    reviewers: list[dict]

    def to_dict(self) -> dict:
        return {"pr": self.pr, "files": self.files, "reviewers": self.reviewers}


@dataclass
class RateLimitSnapshot:
    limit: int
    remaining: int
    reset_at: datetime
    used: int

    def to_dict(self) -> dict:
        return {
            "limit": self.limit,
            "remaining": self.remaining,
            "reset_at": self.reset_at.isoformat(),
            "used": self.used,
        }
