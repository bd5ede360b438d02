"""
Partner Radar - Study Partner Compatibility & Layout Engine

This package implements the matching core of a study-partner platform:
scoring candidate partners against a requester's profile, ranking them,
and placing the selected candidates on a radial "radar" display without
visual overlap.

Key Design Decisions:
- Scoring is a pure function of (requester, candidate); no ambient user state
- Ranking is a stable sort, so ties keep the candidate pool order
- Layout is deterministic for a fixed input order and canvas size
- Persistence, transport and rendering are external collaborators
"""

__version__ = "1.0.0"
