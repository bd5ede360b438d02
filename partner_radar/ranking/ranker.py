"""
Match ranking for study-partner discovery.

Scores every candidate in the pool against the requester, orders them by
total score and keeps the top ``limit``.

Key Design Decisions:
- The requester's own identifier is always excluded, even if the pool
  builder already filtered it
- Sorting is stable: equal totals keep the order they arrived in, so the
  output is only as deterministic as the pool ordering
- ``limit`` is a parameter (the radar shows 6, the summary list 4)
"""

import logging
from dataclasses import dataclass
from typing import Dict, Any, Iterable, List, Optional

from ..profiles.schema import Profile
from ..scoring.compatibility import CompatibilityScorer, ScoreBreakdown

logger = logging.getLogger(__name__)

RADAR_LIMIT = 6
SUMMARY_LIMIT = 4


@dataclass(frozen=True)
class RankedMatch:
    """
    A candidate paired with its compatibility breakdown.

    Attributes:
        profile: Candidate profile
        breakdown: ScoreBreakdown against the requester
    """
    profile: Profile
    breakdown: ScoreBreakdown

    @property
    def candidate_id(self) -> str:
        return self.profile.id

    @property
    def total(self) -> int:
        return self.breakdown.total

    def to_dict(self) -> Dict[str, Any]:
        """Flat record for presentation: profile fields plus scores."""
        scores = self.breakdown.to_dict()
        return {
            **self.profile.to_dict(),
            "compatibility": scores["total"],
            "subject_match": scores["subject"],
            "institution_match": scores["institution"],
            "location_match": scores["location"],
            "year_bonus": scores["year_bonus"],
        }


class MatchRanker:
    """
    Ranks a candidate pool by compatibility with a requester.

    Attributes:
        scorer: CompatibilityScorer used for every candidate
    """

    def __init__(self, scorer: Optional[CompatibilityScorer] = None):
        self.scorer = scorer or CompatibilityScorer()

    def rank(
        self,
        requester: Optional[Profile],
        candidate_pool: Optional[Iterable[Profile]],
        limit: Optional[int] = RADAR_LIMIT
    ) -> List[RankedMatch]:
        """
        Score, order and truncate a candidate pool.

        Args:
            requester: Requester profile (None scores every candidate as zero)
            candidate_pool: Candidate profiles in a caller-defined order
            limit: Maximum number of matches to return; None for no limit,
                negative values are treated as zero

        Returns:
            List of RankedMatch ordered by total descending, ties in pool order
        """
        if candidate_pool is None:
            return []

        requester_id = requester.id if requester is not None else None
        matches = []
        skipped_self = 0
        for candidate in candidate_pool:
            if candidate is None:
                continue
            if requester_id is not None and candidate.id == requester_id:
                skipped_self += 1
                continue
            matches.append(RankedMatch(candidate, self.scorer.score(requester, candidate)))

        if skipped_self:
            logger.debug(f"Excluded requester {requester_id} from its own candidate pool")

        # sorted() is stable, so equal totals keep pool order
        ranked = sorted(matches, key=lambda m: m.total, reverse=True)

        if limit is not None:
            if limit < 0:
                logger.warning(f"Negative match limit {limit}; returning no matches")
                limit = 0
            ranked = ranked[:limit]

        logger.debug(f"Ranked {len(matches)} candidates, kept {len(ranked)}")
        return ranked


def rank(
    requester: Optional[Profile],
    candidate_pool: Optional[Iterable[Profile]],
    limit: Optional[int] = RADAR_LIMIT,
    scorer: Optional[CompatibilityScorer] = None
) -> List[RankedMatch]:
    """
    Rank a candidate pool against a requester.

    Convenience wrapper around MatchRanker.

    Args:
        requester: Requester profile
        candidate_pool: Candidate profiles
        limit: Maximum number of matches to return
        scorer: Optional CompatibilityScorer (standard weights when omitted)

    Returns:
        Ordered list of RankedMatch, length <= limit
    """
    return MatchRanker(scorer).rank(requester, candidate_pool, limit)
