"""Tests for pull request URL parsing and cache key helpers."""

import pytest

from pullbuddy_core.exceptions import InvalidReferenceError
from pullbuddy_core.gh.pull_request import (
    files_cache_key,
    parse_pull_request_reference,
    pull_request_cache_key,
    require_pull_request_reference,
    reviews_cache_key,
)
from pullbuddy_core.models import PullRequestReference


class TestParsePullRequestReference:
    def test_parses_standard_url(self):
        ref = parse_pull_request_reference("https://github.com/acme/widgets/pull/42")
        assert ref == PullRequestReference(owner="acme", repo="widgets", pr_number=42)

    def test_parses_http_and_trailing_segments(self):
        ref = parse_pull_request_reference("http://github.com/acme/widgets/pull/7/files#diff-1")
        assert ref == PullRequestReference("acme", "widgets", 7)

    def test_repo_names_with_dots_and_dashes(self):
        ref = parse_pull_request_reference("https://github.com/my-org/my.repo-name/pull/1")
        assert (ref.owner, ref.repo) == ("my-org", "my.repo-name")

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/acme/widgets/issues/42",
            "https://github.com/acme/widgets/pull/",
            "https://github.com/acme/widgets/pull/abc",
            "https://gitlab.com/acme/widgets/pull/42",
            "acme/widgets#42",
            "",
        ],
    )
    def test_non_matching_input_returns_none(self, url):
        assert parse_pull_request_reference(url) is None

    def test_non_string_returns_none(self):
        assert parse_pull_request_reference(None) is None

    def test_str_renders_short_form(self):
        assert str(PullRequestReference("acme", "widgets", 42)) == "acme/widgets#42"


class TestRequirePullRequestReference:
    def test_returns_reference(self):
        assert require_pull_request_reference("https://github.com/a/b/pull/3").pr_number == 3

    def test_raises_invalid_reference(self):
        with pytest.raises(InvalidReferenceError) as exc_info:
            require_pull_request_reference("https://github.com/a/b/issues/3")
        assert exc_info.value.url == "https://github.com/a/b/issues/3"


def test_cache_keys():
    assert pull_request_cache_key("acme", "widgets") == "pr:acme:widgets"
    assert reviews_cache_key("acme", "widgets", 42) == "review:acme:widgets:42"
    assert files_cache_key("acme", "widgets", 42) == "files:acme:widgets:42"
