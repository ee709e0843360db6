import pytest

from dreview.core.reviews import Candidate, DesignReview, EvaluationScore
from dreview.core.scores import (
    export_reviews,
    normalize_score,
    review_score_out_of_five,
    score_band,
    score_rating,
    summarize_reviews,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(8, 4.0), (5, 5), (5.1, 2.55), (0, 0), (10, 5), (12, 5), (3.5, 3.5)],
)
def test_normalize_score_examples(raw, expected):
    assert normalize_score(raw) == pytest.approx(expected)


def test_normalize_score_none_is_zero():
    result = normalize_score(None)

    assert result == 0.0
    assert isinstance(result, float)


@pytest.mark.parametrize("raw", [0, 0.5, 2, 4.99, 5, 5.0001, 7, 9.5, 10, 42])
def test_normalize_score_is_idempotent_and_bounded(raw):
    once = normalize_score(raw)

    assert normalize_score(once) == once
    assert 0 <= once <= 5


def test_normalize_score_threshold_is_strict():
    assert normalize_score(5) == 5
    assert normalize_score(5.0001) == pytest.approx(2.50005)


def test_review_score_prefers_latest_evaluation():
    review = DesignReview(
        id=1,
        candidate_id=1,
        overall_score=3,
        scores=(EvaluationScore(overall_score=9), EvaluationScore(overall_score=2)),
    )

    assert review_score_out_of_five(review) == pytest.approx(4.5)


def test_review_score_falls_back_to_review_score_and_none():
    assert review_score_out_of_five(DesignReview(id=1, candidate_id=1, overall_score=4)) == 4
    assert review_score_out_of_five(DesignReview(id=2, candidate_id=1)) is None


def test_review_score_keeps_true_zero():
    review = DesignReview(id=1, candidate_id=1, overall_score=0)

    assert review_score_out_of_five(review) == 0


def test_summarize_reviews_counts_and_average():
    reviews = [
        DesignReview(id=1, candidate_id=1, status="Completed", overall_score=8),
        DesignReview(id=2, candidate_id=1, status="Finalized", overall_score=3),
        DesignReview(id=3, candidate_id=2, status="Pending"),
        DesignReview(id=4, candidate_id=2, status="In Progress"),
        DesignReview(id=5, candidate_id=2, status="Questions Generated"),
    ]

    summary = summarize_reviews(reviews)

    assert summary.total == 5
    assert summary.completed == 2
    assert summary.pending == 2
    assert summary.average_score == pytest.approx(3.5)


def test_summarize_reviews_without_scores():
    assert summarize_reviews([]).average_score == 0.0


@pytest.mark.parametrize(
    ("score", "rating", "band"),
    [
        (4.5, "Excellent", "high"),
        (4, "Excellent", "high"),
        (3.2, "Good", "mid"),
        (2, "Average", "low"),
        (1.9, "Needs Improvement", "low"),
    ],
)
def test_score_rating_and_band(score, rating, band):
    assert score_rating(score) == rating
    assert score_band(score) == band


def test_export_reviews_resolves_candidates():
    reviews = [
        DesignReview(
            id=7,
            candidate_id=3,
            problem_description="URL shortener",
            proposed_architecture="API gateway in front of a KV store",
            design_tradeoffs="Consistency over latency",
            scalability="Shard by hash prefix",
            security_measures="Rate limiting",
            maintainability="One service per bounded context",
            overall_score=9,
        ),
        DesignReview(id=8, candidate_id=99, status="Pending"),
    ]
    candidates = {3: Candidate(id=3, name="Ada", designation="Staff Engineer")}

    rows = export_reviews(reviews, candidates)

    assert rows[0]["candidateName"] == "Ada"
    assert rows[0]["candidateDesignation"] == "Staff Engineer"
    assert rows[0]["scoreOutOfFive"] == pytest.approx(4.5)
    assert rows[0]["proposedArchitecture"] == "API gateway in front of a KV store"
    assert rows[0]["designTradeoffs"] == "Consistency over latency"
    assert rows[0]["scalibilty"] == "Shard by hash prefix"
    assert rows[0]["securityMeasures"] == "Rate limiting"
    assert rows[0]["maintainability"] == "One service per bounded context"
    assert rows[1]["candidateName"] is None
    assert rows[1]["scoreOutOfFive"] is None
    assert rows[1]["scalibilty"] == ""
