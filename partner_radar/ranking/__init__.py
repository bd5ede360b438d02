"""Match ranking module."""

from .ranker import MatchRanker, RankedMatch, rank, RADAR_LIMIT, SUMMARY_LIMIT

__all__ = ["MatchRanker", "RankedMatch", "rank", "RADAR_LIMIT", "SUMMARY_LIMIT"]
