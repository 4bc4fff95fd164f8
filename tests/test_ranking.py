# tests/test_ranking.py

"""
Ranking resolver tests - competition ranking with score ties
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from app.services.ranking import RankingEntry, competition_ranks, resolve_rankings


def _entries(*triples):
    return [RankingEntry(employee_id=e, department_id=d, weighted_score=s) for e, d, s in triples]


class TestCompetitionRanks:

    def test_tie_then_skip(self):
        """4.5, 4.5, 4.0 rank 1, 1, 3."""
        ranks = competition_ranks(_entries((1, 1, 4.5), (2, 1, 4.5), (3, 1, 4.0)))
        assert ranks == {1: 1, 2: 1, 3: 3}

    def test_distinct_scores(self):
        ranks = competition_ranks(_entries((1, 1, 3.0), (2, 1, 4.0), (3, 1, 5.0)))
        assert ranks == {3: 1, 2: 2, 1: 3}

    def test_tie_in_the_middle(self):
        ranks = competition_ranks(_entries((1, 1, 5.0), (2, 1, 4.0), (3, 1, 4.0), (4, 1, 2.0)))
        assert ranks == {1: 1, 2: 2, 3: 2, 4: 4}

    def test_empty(self):
        assert competition_ranks([]) == {}

    @settings(max_examples=200)
    @given(st.lists(st.sampled_from([1.0, 2.5, 3.0, 3.3333, 4.1, 4.5, 5.0]), max_size=30))
    def test_rank_is_one_plus_strictly_greater(self, scores):
        entries = [RankingEntry(employee_id=i, department_id=None, weighted_score=s) for i, s in enumerate(scores)]
        ranks = competition_ranks(entries)
        for entry in entries:
            greater = sum(1 for other in entries if other.weighted_score > entry.weighted_score)
            assert ranks[entry.employee_id] == 1 + greater


class TestResolveRankings:

    def test_department_ranks_are_independent(self):
        results = resolve_rankings(_entries(
            (1, 1, 4.5), (2, 1, 3.0),
            (3, 2, 4.0), (4, 2, 3.5),
        ))
        assert results[1].rank_overall == 1
        assert results[3].rank_overall == 2
        assert results[4].rank_overall == 3
        assert results[2].rank_overall == 4

        assert results[1].rank_in_department == 1
        assert results[2].rank_in_department == 2
        assert results[3].rank_in_department == 1
        assert results[4].rank_in_department == 2

    def test_best_flags(self):
        results = resolve_rankings(_entries((1, 1, 4.5), (2, 1, 3.0), (3, 2, 4.0)))
        assert results[1].is_best_overall is True
        assert results[1].is_best_in_department is True
        assert results[2].is_best_overall is False
        assert results[2].is_best_in_department is False
        assert results[3].is_best_overall is False
        assert results[3].is_best_in_department is True

    def test_multiple_best_on_tie(self):
        results = resolve_rankings(_entries((1, 1, 4.5), (2, 2, 4.5), (3, 1, 4.0)))
        assert results[1].is_best_overall and results[2].is_best_overall
        assert results[3].rank_overall == 3
        assert not results[3].is_best_overall

    def test_single_employee_is_best_everywhere(self):
        results = resolve_rankings(_entries((7, 3, 1.0)))
        assert results[7].rank_overall == 1
        assert results[7].rank_in_department == 1
        assert results[7].is_best_overall and results[7].is_best_in_department
