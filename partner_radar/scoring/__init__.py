"""Compatibility scoring module."""

from .compatibility import (
    CompatibilityScorer,
    ScoreBreakdown,
    ScoringConfig,
    score,
    create_scorer_from_config,
)

__all__ = [
    "CompatibilityScorer",
    "ScoreBreakdown",
    "ScoringConfig",
    "score",
    "create_scorer_from_config",
]
