"""Evaluation module for matching diagnostics."""

from .metrics import (
    compute_score_distribution_stats,
    check_layout,
    MatchReport,
    create_match_report
)

__all__ = [
    "compute_score_distribution_stats",
    "check_layout",
    "MatchReport",
    "create_match_report"
]
