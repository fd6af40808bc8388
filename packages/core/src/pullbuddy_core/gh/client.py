"""Thin read-only wrapper around PyGithub.

Every method returns plain dicts (or lists of dicts) so the rest of
pullbuddy never touches PyGithub objects: they can be cached, compared and
serialised freely, and tests can stand in for GitHub with literal data.

Only attributes present in GitHub's *list* responses are read from listed
objects. Touching anything else (e.g. ``changed_files`` on a listed pull
request) would make PyGithub lazily re-fetch the full object, one extra
API call per record.

The client holds no per-record state. PyGithub runs in lazy mode, so a
repository or pull request handle is a URL until an attribute outside the
list payload is read; handles are built per call and dropped with it.

All methods block; the async accessor runs them in worker threads.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone

import requests
from github import (
    Auth,
    BadCredentialsException,
    Github,
    GithubException,
    RateLimitExceededException,
    UnknownObjectException,
)

from pullbuddy_core.config import require_github_token
from pullbuddy_core.exceptions import (
    UpstreamAuthError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamRateLimitError,
)

logger = logging.getLogger(__name__)


@contextmanager
def _translate_errors(what: str):
    """Re-raise PyGithub exceptions as pullbuddy's upstream taxonomy."""
    try:
        yield
    except BadCredentialsException as e:
        raise UpstreamAuthError(f"GitHub rejected the token while fetching {what}.", e.status) from e
    except RateLimitExceededException as e:
        raise UpstreamRateLimitError(f"GitHub rate limit exceeded while fetching {what}.", e.status) from e
    except UnknownObjectException as e:
        raise UpstreamNotFoundError(f"Not found on GitHub: {what}.", e.status) from e
    except GithubException as e:
        raise UpstreamError(f"GitHub API error while fetching {what}: {e.status} {e.data}", e.status) from e
    except requests.exceptions.RequestException as e:
        # Timeouts and dropped connections from PyGithub's transport.
        raise UpstreamError(f"Network error while fetching {what}: {e}") from e


def _user(user) -> dict | None:
    if user is None:
        return None
    return {"login": user.login}


def _pull_to_dict(pr, detailed: bool = False) -> dict:
    record = {
        "number": pr.number,
        "title": pr.title,
        "body": pr.body,
        "state": pr.state,
        "draft": pr.draft,
        "html_url": pr.html_url,
        "created_at": pr.created_at,
        "updated_at": pr.updated_at,
        "user": _user(pr.user),
        "requested_reviewers": [_user(u) for u in pr.requested_reviewers or []],
    }
    if detailed:
        # Only present on a single-PR fetch, never on list responses.
        record["changed_files"] = pr.changed_files
        record["additions"] = pr.additions
        record["deletions"] = pr.deletions
    return record


def _review_to_dict(review) -> dict:
    return {
        "id": review.id,
        "user": _user(review.user),
        "state": review.state,
        "submitted_at": review.submitted_at,
        "body": review.body,
    }


def _file_to_dict(f) -> dict:
    return {
        "filename": f.filename,
        "status": f.status,
        "additions": f.additions,
        "deletions": f.deletions,
        "changes": f.changes,
    }


def _comment_to_dict(c) -> dict:
    return {
        "id": c.id,
        "user": _user(c.user),
        "body": c.body,
        "created_at": c.created_at,
        "path": c.path,
        "line": c.line,
        "commit_id": c.commit_id,
    }


class GitHubClient:
    """Read-only GitHub REST client returning plain dicts."""

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        page_size: int = 100,
        timeout: int = 15,
        gh: Github | None = None,
    ):
        self._page_size = page_size
        if gh is not None:
            self._gh = gh
        else:
            kwargs = {"auth": Auth.Token(token), "per_page": page_size, "timeout": timeout, "lazy": True}
            if base_url:
                kwargs["base_url"] = base_url.rstrip("/")
            self._gh = Github(**kwargs)

    @classmethod
    def from_config(cls, config: dict) -> GitHubClient:
        """Build a client from a loaded config. Raises ConfigurationError without a token."""
        return cls(
            token=require_github_token(config),
            base_url=config.get("base_url"),
            page_size=config.get("page_size", 100),
            timeout=config.get("request_timeout", 15),
        )

    # ------------------------------------------------------------------ #
    # Internal handles                                                     #
    # ------------------------------------------------------------------ #

    def _repo(self, owner: str, repo: str):
        return self._gh.get_repo(f"{owner}/{repo}")

    def _pull(self, owner: str, repo: str, pr_number: int):
        return self._repo(owner, repo).get_pull(pr_number)

    # ------------------------------------------------------------------ #
    # Organisation                                                         #
    # ------------------------------------------------------------------ #

    def list_org_repos(self, owner: str) -> list[dict]:
        with _translate_errors(f"repositories of {owner}"):
            return [
                {"name": r.name, "full_name": r.full_name, "private": r.private, "archived": r.archived}
                for r in self._gh.get_organization(owner).get_repos()
            ]

    def list_org_members(self, owner: str) -> list[dict]:
        with _translate_errors(f"members of {owner}"):
            return [
                {"login": m.login, "id": m.id, "html_url": m.html_url, "avatar_url": m.avatar_url}
                for m in self._gh.get_organization(owner).get_members()
            ]

    def get_user(self, login: str) -> dict:
        with _translate_errors(f"user {login}"):
            user = self._gh.get_user(login)
            return {"login": user.login, "name": user.name, "html_url": user.html_url}

    # ------------------------------------------------------------------ #
    # Pull requests                                                        #
    # ------------------------------------------------------------------ #

    def list_pull_requests(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        sort: str = "created",
        direction: str = "desc",
        max_pages: int | None = None,
    ) -> list[dict]:
        """List pull requests, reading at most ``max_pages`` pages (None = all)."""
        with _translate_errors(f"pull requests of {owner}/{repo}"):
            paginated = self._repo(owner, repo).get_pulls(state=state, sort=sort, direction=direction)
            if max_pages is None:
                pulls = list(paginated)
            else:
                pulls = []
                for page in range(max_pages):
                    batch = paginated.get_page(page)
                    pulls.extend(batch)
                    if len(batch) < self._page_size:
                        break

            logger.debug("Listed %d %s pull request(s) in %s/%s", len(pulls), state, owner, repo)
            return [_pull_to_dict(pr) for pr in pulls]

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> dict:
        with _translate_errors(f"pull request {owner}/{repo}#{pr_number}"):
            return _pull_to_dict(self._pull(owner, repo, pr_number), detailed=True)

    def list_pull_request_files(self, owner: str, repo: str, pr_number: int) -> list[dict]:
        with _translate_errors(f"files of {owner}/{repo}#{pr_number}"):
            return [_file_to_dict(f) for f in self._pull(owner, repo, pr_number).get_files()]

    def list_pull_request_reviews(self, owner: str, repo: str, pr_number: int) -> list[dict]:
        with _translate_errors(f"reviews of {owner}/{repo}#{pr_number}"):
            return [_review_to_dict(r) for r in self._pull(owner, repo, pr_number).get_reviews()]

    def list_review_comments(self, owner: str, repo: str, pr_number: int, review_id: int) -> list[dict]:
        with _translate_errors(f"comments of review {review_id} on {owner}/{repo}#{pr_number}"):
            pr = self._pull(owner, repo, pr_number)
            return [_comment_to_dict(c) for c in pr.get_single_review_comments(review_id)]

    # ------------------------------------------------------------------ #
    # Rate limit                                                           #
    # ------------------------------------------------------------------ #

    def get_rate_limit(self) -> dict:
        """Return the core REST quota as of this call."""
        with _translate_errors("rate limit"):
            # GET /rate_limit is free and refreshes the client's quota headers.
            self._gh.get_rate_limit()
            remaining, limit = self._gh.rate_limiting
            reset = self._gh.rate_limiting_resettime
        return {
            "limit": limit,
            "remaining": remaining,
            "reset_at": datetime.fromtimestamp(reset, tz=timezone.utc),
            "used": limit - remaining,
        }
