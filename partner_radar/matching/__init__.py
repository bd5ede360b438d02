"""
Matching module.

This module provides the request flow that fetches a candidate pool,
ranks it and lays the best matches out on the radar.
"""

from .matcher import PartnerMatcher, MatchingResult

__all__ = ["PartnerMatcher", "MatchingResult"]
