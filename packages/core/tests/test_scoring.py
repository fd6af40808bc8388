"""Tests for reviewer scoring, candidate selection and ranking."""

import pytest

from pullbuddy_core.models import ReviewerCandidate, ReviewStats
from pullbuddy_core.scoring import rank_candidates, score_reviewer, select_candidates


def _candidate(login, score):
    return ReviewerCandidate(login=login, name=None, pending_reviews=0, stats=ReviewStats(), score=score)


class TestScoreReviewer:
    def test_idle_newcomer_gets_only_availability(self):
        assert score_reviewer(0, 0, 0) == pytest.approx(0.3)

    def test_formula(self):
        # 0.3 * 1/3 + 0.4 * 5/10 + 0.3 * 25/50
        assert score_reviewer(2, 5, 25) == pytest.approx(0.1 + 0.2 + 0.15)

    @pytest.mark.parametrize("pending", [0, 1, 2, 5, 20])
    def test_more_pending_reviews_strictly_lowers_score(self, pending):
        assert score_reviewer(pending + 1, 3, 10) < score_reviewer(pending, 3, 10)

    @pytest.mark.parametrize("related", [0, 1, 9, 10, 30])
    def test_more_related_changes_strictly_raises_score(self, related):
        assert score_reviewer(1, related + 1, 10) > score_reviewer(1, related, 10)

    def test_linear_terms_are_not_capped(self):
        assert score_reviewer(0, 20, 100) == pytest.approx(0.3 + 0.8 + 0.6)


class TestSelectCandidates:
    def test_author_excluded(self):
        members = [{"login": "author"}, {"login": "alice"}]
        assert select_candidates(members, "author", []) == [{"login": "alice"}]

    def test_requested_reviewers_excluded(self):
        members = [{"login": "alice"}, {"login": "bob"}, {"login": "carol"}]
        assert [m["login"] for m in select_candidates(members, "author", ["bob"])] == ["alice", "carol"]

    def test_order_preserved(self):
        members = [{"login": n} for n in ("zed", "amy", "kim")]
        assert [m["login"] for m in select_candidates(members, None, [])] == ["zed", "amy", "kim"]


class TestRankCandidates:
    def test_descending_by_score(self):
        ranked = rank_candidates([_candidate("a", 0.1), _candidate("b", 0.9), _candidate("c", 0.5)])
        assert [c.login for c in ranked] == ["b", "c", "a"]

    def test_ties_keep_input_order_and_truncate(self):
        ranked = rank_candidates([_candidate("A", 0.5), _candidate("B", 0.5), _candidate("C", 0.3)], count=2)
        assert [c.login for c in ranked] == ["A", "B"]

    def test_default_count_is_ten(self):
        ranked = rank_candidates([_candidate(str(i), i / 100) for i in range(15)])
        assert len(ranked) == 10

    def test_count_larger_than_pool(self):
        assert len(rank_candidates([_candidate("a", 0.1)], count=5)) == 1

    def test_zero_count_returns_empty(self):
        assert rank_candidates([_candidate("a", 0.1)], count=0) == []


def test_candidate_to_dict_rounds_score_for_presentation():
    candidate = ReviewerCandidate(
        login="alice",
        name="Alice",
        pending_reviews=1,
        stats=ReviewStats(total_reviews=4, related_file_changes=2),
        recent_comments=["nit"],
        score=0.456789,
    )

    data = candidate.to_dict()

    assert data["score"] == "0.46"
    assert candidate.score == 0.456789
    assert data["stats"] == {
        "pending_reviews": 1,
        "related_file_changes": 2,
        "total_reviews": 4,
        "recent_comments": ["nit"],
    }
