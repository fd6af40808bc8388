"""Exception hierarchy for pullbuddy.

Upstream errors are raised by the GitHub client with PyGithub's exception
chained as ``__cause__``, so callers never need to import PyGithub to tell
a missing repository from an exhausted rate limit.
"""

from __future__ import annotations


class PullBuddyError(Exception):
    """Base class for every error raised by pullbuddy."""


class ConfigurationError(PullBuddyError):
    """A required setting (the GitHub token) is missing or invalid."""


class InvalidReferenceError(PullBuddyError):
    """A string could not be parsed as a GitHub pull request URL."""

    def __init__(self, url: str):
        super().__init__(f"Not a GitHub pull request URL: {url!r}")
        self.url = url


class UpstreamError(PullBuddyError):
    """The GitHub API call failed."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class UpstreamAuthError(UpstreamError):
    """The token is missing, invalid or lacks the required scope."""


class UpstreamRateLimitError(UpstreamError):
    """The GitHub API rate limit (primary or secondary) was hit."""


class UpstreamNotFoundError(UpstreamError):
    """The owner, repository, pull request or user does not exist."""
