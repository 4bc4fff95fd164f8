"""
Ranking resolver.

Ranks follow "1 + number of strictly greater scores": equal scores share a
rank and the next distinct score skips past the tie group (4.5, 4.5, 4.0 rank
1, 1, 3). Department ranks apply the same rule within each department.
"""
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Optional


@dataclass(frozen=True)
class RankingEntry:
    employee_id: int
    department_id: Optional[int]
    weighted_score: float


@dataclass(frozen=True)
class RankingResult:
    employee_id: int
    rank_overall: int
    rank_in_department: int
    is_best_overall: bool
    is_best_in_department: bool


def competition_ranks(entries: Iterable[RankingEntry]) -> Dict[int, int]:
    ordered = sorted(entries, key=lambda e: e.weighted_score, reverse=True)
    ranks: Dict[int, int] = {}
    previous_score = None
    rank = 0
    for position, entry in enumerate(ordered):
        # everything before `position` is >= this score; only a drop starts a new rank
        if previous_score is None or entry.weighted_score < previous_score:
            rank = position + 1
            previous_score = entry.weighted_score
        ranks[entry.employee_id] = rank
    return ranks


def resolve_rankings(entries: Iterable[RankingEntry]) -> Dict[int, RankingResult]:
    entries = list(entries)
    overall = competition_ranks(entries)

    by_department: Dict[Hashable, List[RankingEntry]] = defaultdict(list)
    for entry in entries:
        by_department[entry.department_id].append(entry)

    in_department: Dict[int, int] = {}
    for members in by_department.values():
        in_department.update(competition_ranks(members))

    return {
        entry.employee_id: RankingResult(
            employee_id=entry.employee_id,
            rank_overall=overall[entry.employee_id],
            rank_in_department=in_department[entry.employee_id],
            is_best_overall=overall[entry.employee_id] == 1,
            is_best_in_department=in_department[entry.employee_id] == 1,
        )
        for entry in entries
    }
