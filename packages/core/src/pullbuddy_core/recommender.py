"""Reviewer recommendation operations.

These are the functions the MCP server and the CLI call. Each takes the
shared GitHubDataAccessor explicitly so that one cache serves every request
made during the process lifetime.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from pullbuddy_core.exceptions import UpstreamError, UpstreamNotFoundError
from pullbuddy_core.experience import calculate_related_file_experience
from pullbuddy_core.history import DEFAULT_HISTORY_DAYS, get_review_history
from pullbuddy_core.models import (
    PullRequestDetails,
    PullRequestReference,
    RateLimitSnapshot,
    Recommendation,
    ReviewerCandidate,
)
from pullbuddy_core.scoring import (
    DEFAULT_RECOMMEND_COUNT,
    MAX_RECENT_COMMENTS,
    rank_candidates,
    score_reviewer,
    select_candidates,
)

if TYPE_CHECKING:
    from pullbuddy_core.accessor import GitHubDataAccessor

logger = logging.getLogger(__name__)


async def get_pull_requests_for_owner(accessor: GitHubDataAccessor, owner: str) -> list[dict]:
    return await accessor.fetch_org_pull_requests(owner)


async def get_review_request_load(accessor: GitHubDataAccessor, owner: str) -> dict[str, int]:
    """Number of open review requests per user across the organisation."""
    load: Counter[str] = Counter()
    for pr in await accessor.fetch_org_pull_requests(owner):
        for reviewer in pr.get("requested_reviewers") or []:
            load[reviewer["login"]] += 1
    return dict(load)


async def _with_display_name(accessor: GitHubDataAccessor, member: dict) -> dict:
    try:
        user = await accessor.fetch_user(member["login"])
    except UpstreamError as e:
        logger.warning("Could not fetch details for user %s: %s", member["login"], e)
        return {**member, "name": None}
    return {**member, "name": user.get("name")}


async def get_candidate_reviewers(accessor: GitHubDataAccessor, owner: str) -> list[dict]:
    """Organisation members, each enriched with a display name where available."""
    members = await accessor.fetch_org_members(owner)
    return list(await asyncio.gather(*(_with_display_name(accessor, m) for m in members)))


async def get_pull_request_details(accessor: GitHubDataAccessor, ref: PullRequestReference) -> PullRequestDetails | None:
    """Fetch a pull request with its changed files, or None if it does not exist.

    Authentication and rate-limit failures still propagate.
    """
    try:
        pr = await accessor.fetch_pull_request(ref.owner, ref.repo, ref.pr_number)
        files = await accessor.fetch_files(ref.owner, ref.repo, ref.pr_number)
    except UpstreamNotFoundError as e:
        logger.warning("Could not fetch pull request %s: %s", ref, e)
        return None
    return PullRequestDetails(pr=pr, files=files, reviewers=list(pr.get("requested_reviewers") or []))


async def _evaluate_candidate(
    accessor: GitHubDataAccessor,
    ref: PullRequestReference,
    member: dict,
    pending_reviews: int,
    since: datetime,
    exclude_target: bool,
) -> ReviewerCandidate:
    login = member["login"]
    history, related = await asyncio.gather(
        get_review_history(accessor, ref.owner, ref.repo, login, since=since, name=member.get("name")),
        calculate_related_file_experience(
            accessor, ref.owner, ref.repo, ref.pr_number, login, exclude_target=exclude_target
        ),
    )
    history.stats.related_file_changes = related
    return ReviewerCandidate(
        login=login,
        name=member.get("name"),
        pending_reviews=pending_reviews,
        stats=history.stats,
        recent_comments=history.comment_bodies(MAX_RECENT_COMMENTS),
        score=score_reviewer(pending_reviews, related, history.stats.total_reviews),
    )


async def recommend_reviewers(
    accessor: GitHubDataAccessor,
    ref: PullRequestReference,
    count: int = DEFAULT_RECOMMEND_COUNT,
    history_days: int = DEFAULT_HISTORY_DAYS,
    exclude_target: bool = False,
) -> Recommendation:
    """Rank the organisation's members as reviewers for ``ref``.

    Raises UpstreamNotFoundError if the pull request does not exist. A
    failure while scoring any single candidate fails the whole call.
    """
    details = await get_pull_request_details(accessor, ref)
    if details is None:
        raise UpstreamNotFoundError(f"Pull request {ref} not found.", 404)

    members, load = await asyncio.gather(
        get_candidate_reviewers(accessor, ref.owner),
        get_review_request_load(accessor, ref.owner),
    )

    author = (details.pr.get("user") or {}).get("login")
    requested = [r["login"] for r in details.reviewers]
    eligible = select_candidates(members, author, requested)
    since = datetime.now(timezone.utc) - timedelta(days=history_days)

    logger.info("Scoring %d candidate(s) for %s", len(eligible), ref)
    candidates = await asyncio.gather(
        *(
            _evaluate_candidate(accessor, ref, m, load.get(m["login"], 0), since, exclude_target)
            for m in eligible
        )
    )

    return Recommendation(reference=ref, considered=len(candidates), candidates=rank_candidates(list(candidates), count))


async def get_rate_limit_snapshot(accessor: GitHubDataAccessor) -> RateLimitSnapshot:
    return RateLimitSnapshot(**await accessor.fetch_rate_limit())
