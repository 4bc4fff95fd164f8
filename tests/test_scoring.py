# tests/test_scoring.py

"""
Score aggregator tests - Simple Additive Weighting over raw criterion scores
"""

import pytest

from app.services.scoring import WeightedScore, aggregate_scores


def _rows(*pairs):
    return [
        WeightedScore(criterion_id=i + 1, evaluator_id=1, score=score, weight=weight)
        for i, (score, weight) in enumerate(pairs)
    ]


class TestAggregateScores:
    """Tests for aggregate_scores."""

    def test_weighted_mean(self):
        """Weights 40/30/30 with scores 5/3/4 give (200+90+120)/100."""
        result = aggregate_scores(_rows((5, 40), (3, 30), (4, 30)))
        assert result.weighted_score == pytest.approx(4.10)
        assert result.total_score == 12

    def test_partial_criteria_use_present_weights_only(self):
        """Two of three criteria scored: divide by 70, not 100."""
        result = aggregate_scores(_rows((5, 40), (3, 30)))
        assert result.weighted_score == pytest.approx(round((5 * 40 + 3 * 30) / 70, 4))

    def test_result_stays_on_score_scale(self):
        result = aggregate_scores(_rows((5, 40), (5, 30), (5, 30)))
        assert result.weighted_score == pytest.approx(5.0)

    def test_weights_not_summing_to_100(self):
        result = aggregate_scores(_rows((4, 10), (2, 10)))
        assert result.weighted_score == pytest.approx(3.0)

    def test_no_rows_means_no_data(self):
        assert aggregate_scores([]) is None

    def test_zero_total_weight_scores_zero(self):
        """Rows exist but carry no weight: a real zero, not an absence."""
        result = aggregate_scores(_rows((4, 0), (5, 0)))
        assert result is not None
        assert result.weighted_score == 0.0
        assert result.total_score == 9

    def test_multiple_evaluators_on_same_criterion_all_count(self):
        rows = [
            WeightedScore(criterion_id=1, evaluator_id=1, score=5, weight=40),
            WeightedScore(criterion_id=1, evaluator_id=2, score=3, weight=40),
        ]
        result = aggregate_scores(rows)
        assert result.weighted_score == pytest.approx(4.0)
        assert result.total_score == 8

    def test_rounding_precision(self):
        result = aggregate_scores(_rows((5, 1), (4, 1), (4, 1)), precision=2)
        assert result.weighted_score == 4.33
