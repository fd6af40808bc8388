"""Shared fixtures for pullbuddy-core tests.

StubGitHubClient has the same method signatures as GitHubClient but serves
literal dicts, counts calls per method, and raises pullbuddy's upstream
errors for anything it has not been told about.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone

import pytest

from pullbuddy_core.accessor import GitHubDataAccessor
from pullbuddy_core.exceptions import UpstreamNotFoundError
from pullbuddy_store.memory import TTLStore

NOW = datetime.now(timezone.utc)


class StubGitHubClient:
    def __init__(self):
        self.repos: dict[str, list[dict]] = {}
        self.pulls: dict[tuple[str, str], list[dict]] = {}
        self.open_pulls: dict[tuple[str, str], list[dict]] = {}
        self.pull_details: dict[tuple[str, str, int], dict] = {}
        self.reviews: dict[tuple[str, str, int], list[dict]] = {}
        self.files: dict[tuple[str, str, int], list[dict]] = {}
        self.comments: dict[tuple[str, str, int, int], list[dict]] = {}
        self.members: dict[str, list[dict]] = {}
        self.users: dict[str, dict] = {}
        self.rate_limit: dict = {}
        self.calls: Counter[str] = Counter()

    def list_org_repos(self, owner):
        self.calls["list_org_repos"] += 1
        return self.repos.get(owner, [])

    def list_pull_requests(self, owner, repo, state="open", sort="created", direction="desc", max_pages=None):
        self.calls["list_pull_requests"] += 1
        if state == "open":
            return self.open_pulls.get((owner, repo), [])
        return self.pulls.get((owner, repo), [])

    def get_pull_request(self, owner, repo, pr_number):
        self.calls["get_pull_request"] += 1
        try:
            return self.pull_details[(owner, repo, pr_number)]
        except KeyError:
            raise UpstreamNotFoundError(f"{owner}/{repo}#{pr_number}", 404)

    def list_pull_request_files(self, owner, repo, pr_number):
        self.calls["list_pull_request_files"] += 1
        return self.files.get((owner, repo, pr_number), [])

    def list_pull_request_reviews(self, owner, repo, pr_number):
        self.calls["list_pull_request_reviews"] += 1
        return self.reviews.get((owner, repo, pr_number), [])

    def list_review_comments(self, owner, repo, pr_number, review_id):
        self.calls["list_review_comments"] += 1
        return self.comments.get((owner, repo, pr_number, review_id), [])

    def list_org_members(self, owner):
        self.calls["list_org_members"] += 1
        return self.members.get(owner, [])

    def get_user(self, login):
        self.calls["get_user"] += 1
        try:
            return self.users[login]
        except KeyError:
            raise UpstreamNotFoundError(f"user {login}", 404)

    def get_rate_limit(self):
        self.calls["get_rate_limit"] += 1
        return self.rate_limit


def make_pr(number, created_days_ago=1, author="author", requested=(), title="Change", body="Body"):
    return {
        "number": number,
        "title": title,
        "body": body,
        "state": "open",
        "draft": False,
        "html_url": f"https://github.com/acme/widgets/pull/{number}",
        "created_at": NOW - timedelta(days=created_days_ago),
        "updated_at": NOW,
        "user": {"login": author},
        "requested_reviewers": [{"login": login} for login in requested],
    }


def make_review(review_id, login, submitted_at):
    return {"id": review_id, "user": {"login": login}, "state": "COMMENTED", "submitted_at": submitted_at, "body": ""}


def make_files(*names):
    return [{"filename": n, "status": "modified", "additions": 1, "deletions": 0, "changes": 1} for n in names]


def make_comment(comment_id, login, body, path="src/app.py", line=1):
    return {
        "id": comment_id,
        "user": {"login": login},
        "body": body,
        "created_at": NOW,
        "path": path,
        "line": line,
        "commit_id": "c" * 40,
    }


@pytest.fixture
def github():
    return StubGitHubClient()


@pytest.fixture
def store():
    return TTLStore()


@pytest.fixture
def accessor(github, store):
    return GitHubDataAccessor(github, store)


@pytest.fixture
def records():
    """Record builders, exposed as a fixture so test modules need not import conftest."""

    class Records:
        now = NOW
        pr = staticmethod(make_pr)
        review = staticmethod(make_review)
        files = staticmethod(make_files)
        comment = staticmethod(make_comment)

    return Records
