from __future__ import annotations

import re

from pullbuddy_core.exceptions import InvalidReferenceError
from pullbuddy_core.models import PullRequestReference

_PR_URL_RE = re.compile(r"https?://github\.com/([^/]+)/([^/]+)/pull/(\d+)")


def parse_pull_request_reference(url: str) -> PullRequestReference | None:
    """Return the owner/repo/number a GitHub PR URL points at, or None.

    Trailing segments (``/files``, ``#discussion_r1``) are ignored. Never raises.
    """
    if not isinstance(url, str):
        return None
    match = _PR_URL_RE.search(url)
    if not match:
        return None
    return PullRequestReference(owner=match.group(1), repo=match.group(2), pr_number=int(match.group(3)))


def require_pull_request_reference(url: str) -> PullRequestReference:
    """Like parse_pull_request_reference, but raise InvalidReferenceError on failure."""
    ref = parse_pull_request_reference(url)
    if ref is None:
        raise InvalidReferenceError(url)
    return ref


def pull_request_cache_key(owner: str, repo: str) -> str:
    return f"pr:{owner}:{repo}"


def reviews_cache_key(owner: str, repo: str, pr_number: int) -> str:
    return f"review:{owner}:{repo}:{pr_number}"


def files_cache_key(owner: str, repo: str, pr_number: int) -> str:
    return f"files:{owner}:{repo}:{pr_number}"
