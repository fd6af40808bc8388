"""Related-file experience: how often a reviewer has reviewed the same files before."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pullbuddy_core.accessor import GitHubDataAccessor

logger = logging.getLogger(__name__)


def _reviewed_by(reviews: list[dict], reviewer: str) -> bool:
    return any((r.get("user") or {}).get("login") == reviewer for r in reviews)


async def calculate_related_file_experience(
    accessor: GitHubDataAccessor,
    owner: str,
    repo: str,
    pr_number: int,
    reviewer: str,
    exclude_target: bool = False,
) -> int:
    """Count pull requests reviewed by ``reviewer`` that share a file with ``pr_number``.

    Every pull request in the accessor's listing is considered, regardless of
    age. Each counts at most once, however many files overlap. The target PR
    itself is part of the scan unless ``exclude_target`` is set, so a reviewer
    who already reviewed it gets credit for that review.
    """
    target_files = {f["filename"] for f in await accessor.fetch_files(owner, repo, pr_number)}
    if not target_files:
        return 0

    pull_requests = await accessor.fetch_pull_requests(owner, repo)

    related = 0
    for pr in pull_requests:
        number = pr["number"]
        if exclude_target and number == pr_number:
            continue

        reviews = await accessor.fetch_reviews(owner, repo, number)
        if not _reviewed_by(reviews, reviewer):
            continue

        files = await accessor.fetch_files(owner, repo, number)
        if any(f["filename"] in target_files for f in files):
            related += 1

    logger.debug("%s: %d related pull request(s) for %s/%s#%d", reviewer, related, owner, repo, pr_number)
    return related
