"""
Partner matching for one requester.

This module provides the request flow behind the radar screen:
1. Fetch the requester's profile from the repository
2. Fetch the candidate pool (same study field, requester excluded)
3. Score and rank the pool, keeping the top radar matches
4. Lay the radar matches out on the canvas

Fetching is the only I/O step; scoring, ranking and layout run
synchronously on the fetched snapshot. Repository errors propagate to the
caller - nothing here retries.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional, Tuple

from ..configs.loader import get_config_value
from ..data_loading.repository import ProfileRepository
from ..layout.radial import RadialLayoutEngine, LayoutResult, LayoutConfig
from ..profiles.schema import FilterCriteria
from ..ranking.ranker import MatchRanker, RankedMatch, RADAR_LIMIT, SUMMARY_LIMIT
from ..scoring.compatibility import CompatibilityScorer, ScoringConfig

logger = logging.getLogger(__name__)

DEFAULT_CANVAS_WIDTH = 600.0
DEFAULT_CANVAS_HEIGHT = 500.0


@dataclass(frozen=True)
class MatchingResult:
    """
    Result of one matching request.

    Attributes:
        requester_id: Identifier the request was made for
        matches: Ranked radar matches (at most radar_limit)
        summary: Leading matches for the summary list (at most summary_limit)
        layout: Radar layout of ``matches``
        pool_size: Number of candidates considered
    """
    requester_id: str
    matches: Tuple[RankedMatch, ...]
    summary: Tuple[RankedMatch, ...]
    layout: LayoutResult
    pool_size: int = 0

    @property
    def found(self) -> bool:
        return bool(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "requester_id": self.requester_id,
            "pool_size": self.pool_size,
            "matches": [m.to_dict() for m in self.matches],
            "summary_ids": [m.candidate_id for m in self.summary],
            "layout": self.layout.to_dict(),
        }


class PartnerMatcher:
    """
    Study-partner matcher over a profile repository.

    Attributes:
        repository: ProfileRepository supplying requester and candidates
        ranker: MatchRanker used to score and order the pool
        layout_engine: RadialLayoutEngine for the radar display
        radar_limit: Number of matches shown on the radar
        summary_limit: Number of matches shown in the summary list
    """

    def __init__(
        self,
        repository: ProfileRepository,
        scorer: Optional[CompatibilityScorer] = None,
        layout_engine: Optional[RadialLayoutEngine] = None,
        radar_limit: int = RADAR_LIMIT,
        summary_limit: int = SUMMARY_LIMIT
    ):
        """
        Initialize the matcher.

        Args:
            repository: ProfileRepository implementation
            scorer: CompatibilityScorer (standard weights when omitted)
            layout_engine: RadialLayoutEngine (standard layout when omitted)
            radar_limit: Number of matches shown on the radar
            summary_limit: Number of matches shown in the summary list
        """
        if radar_limit < 0 or summary_limit < 0:
            raise ValueError(
                f"Limits must be non-negative, got radar={radar_limit}, summary={summary_limit}"
            )
        self.repository = repository
        self.ranker = MatchRanker(scorer)
        self.layout_engine = layout_engine or RadialLayoutEngine()
        self.radar_limit = radar_limit
        self.summary_limit = summary_limit
        logger.info(
            f"Initialized PartnerMatcher (radar_limit={radar_limit}, summary_limit={summary_limit})"
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any], repository: ProfileRepository) -> "PartnerMatcher":
        """
        Create a matcher from the main config dictionary.

        Args:
            config: Main configuration dictionary
            repository: ProfileRepository implementation

        Returns:
            Configured PartnerMatcher
        """
        return cls(
            repository,
            scorer=CompatibilityScorer(ScoringConfig.from_config(config)),
            layout_engine=RadialLayoutEngine(LayoutConfig.from_config(config)),
            radar_limit=get_config_value(config, "ranking.radar_limit", RADAR_LIMIT),
            summary_limit=get_config_value(config, "ranking.summary_limit", SUMMARY_LIMIT),
        )

    def match(
        self,
        requester_id: str,
        canvas_width: float = DEFAULT_CANVAS_WIDTH,
        canvas_height: float = DEFAULT_CANVAS_HEIGHT,
        criteria: Optional[FilterCriteria] = None
    ) -> MatchingResult:
        """
        Find and lay out study partners for a requester.

        Args:
            requester_id: Requester's profile identifier
            canvas_width: Radar canvas width
            canvas_height: Radar canvas height
            criteria: Pool filter; defaults to the requester's study field
                with the requester excluded

        Returns:
            MatchingResult; empty when the requester profile is absent
        """
        requester = self.repository.get_requester_profile(requester_id)
        if requester is None:
            logger.warning(f"No profile for requester {requester_id}; returning no matches")
            return MatchingResult(
                requester_id=requester_id,
                matches=(),
                summary=(),
                layout=self.layout_engine.arrange([], canvas_width, canvas_height),
            )

        if criteria is None:
            criteria = FilterCriteria.for_requester(requester)
        elif requester.id not in criteria.exclude_ids:
            criteria = FilterCriteria(
                study_field=criteria.study_field,
                exclude_ids=criteria.exclude_ids + (requester.id,),
            )

        pool = self.repository.get_candidate_pool(criteria)
        matches = self.ranker.rank(requester, pool, self.radar_limit)
        layout_result = self.layout_engine.arrange(matches, canvas_width, canvas_height)

        logger.info(
            f"Matched requester {requester_id}: {len(matches)} of {len(pool)} candidates, "
            f"layout in {layout_result.iterations} passes"
        )
        return MatchingResult(
            requester_id=requester_id,
            matches=tuple(matches),
            summary=tuple(matches[:self.summary_limit]),
            layout=layout_result,
            pool_size=len(pool),
        )
