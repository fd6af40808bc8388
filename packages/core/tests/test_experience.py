"""Tests for the related-file experience calculator."""

import asyncio

from pullbuddy_core.experience import calculate_related_file_experience

OWNER, REPO = "acme", "widgets"


def _experience(accessor, pr_number=1, reviewer="alice", **kwargs):
    return asyncio.run(calculate_related_file_experience(accessor, OWNER, REPO, pr_number, reviewer, **kwargs))


def _setup(github, records, target_files, other_files, reviewer="alice"):
    """PR #1 is the target; PR #2 was reviewed by ``reviewer``."""
    github.pulls[(OWNER, REPO)] = [records.pr(1), records.pr(2)]
    github.files[(OWNER, REPO, 1)] = records.files(*target_files)
    github.files[(OWNER, REPO, 2)] = records.files(*other_files)
    github.reviews[(OWNER, REPO, 2)] = [records.review(20, reviewer, records.now)]


def test_overlapping_files_count_once(accessor, github, records):
    _setup(github, records, ["x.ts", "y.ts"], ["y.ts", "z.ts"])
    assert _experience(accessor) == 1


def test_disjoint_files_count_zero(accessor, github, records):
    _setup(github, records, ["x.ts", "y.ts"], ["a.ts", "b.ts"])
    assert _experience(accessor) == 0


def test_multiple_overlapping_files_still_count_once(accessor, github, records):
    _setup(github, records, ["x.ts", "y.ts"], ["x.ts", "y.ts"])
    assert _experience(accessor) == 1


def test_pull_requests_reviewed_by_someone_else_ignored(accessor, github, records):
    _setup(github, records, ["x.ts"], ["x.ts"], reviewer="bob")

    assert _experience(accessor) == 0
    # Files are only fetched for PRs the reviewer actually reviewed (plus the target).
    assert github.calls["list_pull_request_files"] == 1


def test_each_matching_pull_request_counted(accessor, github, records):
    github.pulls[(OWNER, REPO)] = [records.pr(1), records.pr(2), records.pr(3), records.pr(4)]
    github.files[(OWNER, REPO, 1)] = records.files("core.py")
    for number in (2, 3, 4):
        github.files[(OWNER, REPO, number)] = records.files("core.py" if number != 4 else "other.py")
        github.reviews[(OWNER, REPO, number)] = [
            records.review(number * 10, "alice", records.now),
            records.review(number * 10 + 1, "alice", records.now),
        ]

    assert _experience(accessor) == 2


def test_review_of_target_itself_counts_by_default(accessor, github, records):
    _setup(github, records, ["x.ts"], ["nothing.ts"])
    github.reviews[(OWNER, REPO, 1)] = [records.review(10, "alice", records.now)]

    assert _experience(accessor) == 1


def test_exclude_target_skips_target_review(accessor, github, records):
    _setup(github, records, ["x.ts"], ["nothing.ts"])
    github.reviews[(OWNER, REPO, 1)] = [records.review(10, "alice", records.now)]

    assert _experience(accessor, exclude_target=True) == 0


def test_old_pull_requests_are_not_window_filtered(accessor, github, records):
    github.pulls[(OWNER, REPO)] = [records.pr(1), records.pr(2, created_days_ago=400)]
    github.files[(OWNER, REPO, 1)] = records.files("x.ts")
    github.files[(OWNER, REPO, 2)] = records.files("x.ts")
    github.reviews[(OWNER, REPO, 2)] = [records.review(20, "alice", records.now)]

    assert _experience(accessor) == 1


def test_target_without_files_scores_zero(accessor, github, records):
    _setup(github, records, [], ["x.ts"])
    assert _experience(accessor) == 0


def test_shared_cache_avoids_refetching_across_reviewers(accessor, github, records):
    _setup(github, records, ["x.ts"], ["x.ts"])

    _experience(accessor, reviewer="alice")
    _experience(accessor, reviewer="bob")

    assert github.calls["list_pull_requests"] == 1
    assert github.calls["list_pull_request_reviews"] == 2  # one per PR, shared by both reviewers
