"""
Profile repository interface and an in-memory implementation.

The matching engine never reads profiles from ambient session state; it is
handed them by a repository collaborator. In production that collaborator
wraps the hosted realtime store. The in-memory implementation here backs
the CLI runner, the smoke script and the tests.
"""

import logging
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from ..profiles.schema import Profile, FilterCriteria
from .loaders import load_profiles

logger = logging.getLogger(__name__)


@runtime_checkable
class ProfileRepository(Protocol):
    """Read-only access to profiles, as consumed by the matching engine."""

    def get_requester_profile(self, profile_id: str) -> Optional[Profile]:
        """Return the profile for ``profile_id``, or None when absent."""
        ...

    def get_candidate_pool(self, criteria: FilterCriteria) -> List[Profile]:
        """Return the pre-filtered candidate pool in a stable order."""
        ...


class InMemoryProfileRepository:
    """
    Profile repository over an in-memory list.

    Pool order is insertion order, so ranking ties resolve the same way on
    every call.

    Attributes:
        profiles: Profiles keyed by id, in insertion order
    """

    def __init__(self, profiles: Iterable[Profile]):
        self.profiles: Dict[str, Profile] = {}
        for profile in profiles:
            if profile.id in self.profiles:
                raise ValueError(f"Duplicate profile id: {profile.id}")
            self.profiles[profile.id] = profile
        logger.info(f"Initialized in-memory repository with {len(self.profiles)} profiles")

    @classmethod
    def from_file(cls, filepath: str, delimiter: str = ",") -> "InMemoryProfileRepository":
        """Build a repository from a CSV or JSON profiles file."""
        return cls(load_profiles(filepath, delimiter=delimiter))

    def __len__(self) -> int:
        return len(self.profiles)

    def get_requester_profile(self, profile_id: str) -> Optional[Profile]:
        profile = self.profiles.get(profile_id)
        if profile is None:
            logger.warning(f"Profile not found: {profile_id}")
        return profile

    def get_candidate_pool(self, criteria: Optional[FilterCriteria] = None) -> List[Profile]:
        criteria = criteria or FilterCriteria()
        pool = [p for p in self.profiles.values() if criteria.accepts(p)]
        logger.info(
            f"Candidate pool: {len(pool)} of {len(self.profiles)} profiles "
            f"(study_field={criteria.study_field!r})"
        )
        return pool
