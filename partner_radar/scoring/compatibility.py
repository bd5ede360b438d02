"""
Compatibility scoring between a requester and a candidate partner.

The score is a weighted composite of three similarity dimensions plus a
flat year-of-study bonus:

    total = subject * 0.4 + institution * 0.3 + location * 0.2 + year_bonus

Dimension scores:
- Subject overlap: fuzzy, case-insensitive substring matching in either
  direction ("Calculus II" overlaps "Calculus")
      subject = 100 * |overlapping candidate subjects|
                    / max(|candidate subjects|, |requester subjects|, 1)
- Institution: same university -> 100, otherwise 60 (the pool is already
  restricted to the requester's field of study)
- Location: same city -> 100, same country -> 70, otherwise 30
- Year bonus: +10 when the years of study differ by at most one

The total is rounded half-up and NOT clamped. The default weights top out
at 100; heavier configured weights can push it up to 110.
Faculty equality earns nothing beyond the institution score.
"""

import logging
import math
from dataclasses import dataclass, asdict, field
from typing import Dict, Any, Optional, Sequence
import json

from ..profiles.schema import Profile, normalize_key

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (display rounding)."""
    return int(math.floor(value + 0.5))


@dataclass
class ScoringConfig:
    """
    Configuration for compatibility scoring.

    Attributes:
        weight_subject: Weight of the subject overlap score
        weight_institution: Weight of the institution score
        weight_location: Weight of the location score
        institution_same: Score for the same university
        institution_different: Score for a different university
        location_same_city: Score for the same city
        location_same_country: Score for the same country, different city
        location_other: Score otherwise
        year_bonus: Flat bonus for close years of study
        max_year_gap: Largest year difference that still earns the bonus
    """
    weight_subject: float = 0.4
    weight_institution: float = 0.3
    weight_location: float = 0.2
    institution_same: float = 100.0
    institution_different: float = 60.0
    location_same_city: float = 100.0
    location_same_country: float = 70.0
    location_other: float = 30.0
    year_bonus: int = 10
    max_year_gap: int = 1

    def validate(self) -> None:
        """Validate configuration values."""
        for name in ("weight_subject", "weight_institution", "weight_location"):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        for name in ("institution_same", "institution_different", "location_same_city",
                     "location_same_country", "location_other"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be in [0, 100], got {value}")
        if self.year_bonus < 0:
            raise ValueError(f"year_bonus must be non-negative, got {self.year_bonus}")
        if self.max_year_gap < 0:
            raise ValueError(f"max_year_gap must be non-negative, got {self.max_year_gap}")

    @property
    def max_total(self) -> int:
        """Highest total this configuration can produce."""
        weights = self.weight_subject + self.weight_institution + self.weight_location
        return round_half_up(100 * weights + self.year_bonus)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ScoringConfig":
        """Create from dictionary."""
        return cls(**d)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ScoringConfig":
        """Create from main config dictionary."""
        scoring = config.get("scoring", {})
        weights = scoring.get("weights", {})
        institution = scoring.get("institution", {})
        location = scoring.get("location", {})
        year = scoring.get("year", {})

        return cls(
            weight_subject=weights.get("subject", 0.4),
            weight_institution=weights.get("institution", 0.3),
            weight_location=weights.get("location", 0.2),
            institution_same=institution.get("same", 100.0),
            institution_different=institution.get("different", 60.0),
            location_same_city=location.get("same_city", 100.0),
            location_same_country=location.get("same_country", 70.0),
            location_other=location.get("other", 30.0),
            year_bonus=year.get("bonus", 10),
            max_year_gap=year.get("max_gap", 1),
        )

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved scoring config to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "ScoringConfig":
        """Load from JSON file."""
        with open(filepath, "r") as f:
            d = json.load(f)
        return cls.from_dict(d)


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Per-factor compatibility score for one (requester, candidate) pair.

    Attributes:
        subject_score: Subject overlap score [0, 100]
        institution_score: Institution match score [0, 100]
        location_score: Location match score [0, 100]
        year_bonus: Flat year-of-study bonus (0 or the configured bonus)
        total: Rounded weighted total, unclamped (at most 110)
        overlapping_subjects: Candidate subjects that matched the requester
    """
    subject_score: float
    institution_score: float
    location_score: float
    year_bonus: int
    total: int
    overlapping_subjects: tuple = field(default_factory=tuple)

    @classmethod
    def zero(cls) -> "ScoreBreakdown":
        """Neutral breakdown used when there is nothing to compare against."""
        return cls(
            subject_score=0.0,
            institution_score=0.0,
            location_score=0.0,
            year_bonus=0,
            total=0,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with display-rounded sub-scores."""
        return {
            "subject": round_half_up(self.subject_score),
            "institution": round_half_up(self.institution_score),
            "location": round_half_up(self.location_score),
            "year_bonus": self.year_bonus,
            "total": self.total,
            "overlapping_subjects": list(self.overlapping_subjects),
        }


def subjects_overlap(a: str, b: str) -> bool:
    """Whether either case-folded subject contains the other."""
    return a in b or b in a


def compute_subject_score(requester: Profile, candidate: Profile) -> tuple:
    """
    Compute the fuzzy subject overlap score.

    Args:
        requester: Requester profile
        candidate: Candidate profile

    Returns:
        Tuple of (score in [0, 100], overlapping candidate subjects)
    """
    requester_keys = requester.subject_keys
    overlapping = tuple(
        subject
        for subject, key in zip(candidate.subjects, candidate.subject_keys)
        if any(subjects_overlap(key, other) for other in requester_keys)
    )
    denominator = max(len(candidate.subjects), len(requester.subjects), 1)
    return 100.0 * len(overlapping) / denominator, overlapping


def _same(a: str, b: str) -> bool:
    # Blank values never match each other
    key_a = normalize_key(a)
    return bool(key_a) and key_a == normalize_key(b)


class CompatibilityScorer:
    """
    Rule-based compatibility scorer.

    Pure and total: scoring never raises for absent profile fields, which
    degrade to zero or neutral contributions instead.

    Attributes:
        config: ScoringConfig with weights and tier scores
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        """
        Initialize the scorer.

        Args:
            config: ScoringConfig instance (defaults to the standard weights)
        """
        self.config = config or ScoringConfig()
        self.config.validate()

    def score(self, requester: Optional[Profile], candidate: Optional[Profile]) -> ScoreBreakdown:
        """
        Score a candidate against the requester.

        Args:
            requester: Requester profile; None yields a zero breakdown
            candidate: Candidate profile; None yields a zero breakdown

        Returns:
            ScoreBreakdown with per-factor scores and the rounded total
        """
        if requester is None or candidate is None:
            return ScoreBreakdown.zero()

        cfg = self.config
        subject_score, overlapping = compute_subject_score(requester, candidate)
        institution_score = self._institution_score(requester, candidate)
        location_score = self._location_score(requester, candidate)
        year_bonus = self._year_bonus(requester, candidate)

        weighted = (
            subject_score * cfg.weight_subject
            + institution_score * cfg.weight_institution
            + location_score * cfg.weight_location
            + year_bonus
        )

        return ScoreBreakdown(
            subject_score=subject_score,
            institution_score=institution_score,
            location_score=location_score,
            year_bonus=year_bonus,
            total=round_half_up(weighted),
            overlapping_subjects=overlapping,
        )

    def score_many(self, requester: Optional[Profile], candidates: Sequence[Profile]) -> list:
        """Score each candidate in order."""
        return [self.score(requester, candidate) for candidate in candidates]

    def _institution_score(self, requester: Profile, candidate: Profile) -> float:
        # Faculty is not compared
        if _same(requester.university, candidate.university):
            return float(self.config.institution_same)
        return float(self.config.institution_different)

    def _location_score(self, requester: Profile, candidate: Profile) -> float:
        if _same(requester.city, candidate.city):
            return float(self.config.location_same_city)
        if _same(requester.country, candidate.country):
            return float(self.config.location_same_country)
        return float(self.config.location_other)

    def _year_bonus(self, requester: Profile, candidate: Profile) -> int:
        if requester.year_of_study is None or candidate.year_of_study is None:
            return 0
        gap = abs(requester.year_of_study - candidate.year_of_study)
        return self.config.year_bonus if gap <= self.config.max_year_gap else 0


def score(
    requester: Optional[Profile],
    candidate: Optional[Profile],
    config: Optional[ScoringConfig] = None
) -> ScoreBreakdown:
    """
    Score a candidate against a requester.

    Convenience wrapper around CompatibilityScorer.

    Args:
        requester: Requester profile
        candidate: Candidate profile
        config: Optional ScoringConfig (standard weights when omitted)

    Returns:
        ScoreBreakdown
    """
    return CompatibilityScorer(config).score(requester, candidate)


def create_scorer_from_config(config: Dict[str, Any]) -> CompatibilityScorer:
    """
    Factory function to create a CompatibilityScorer from config.

    Args:
        config: Main configuration dictionary

    Returns:
        Configured CompatibilityScorer instance
    """
    scoring_config = ScoringConfig.from_config(config)
    return CompatibilityScorer(scoring_config)
