"""Profile records and candidate pool filters."""

from .schema import Profile, FilterCriteria, normalize_subjects

__all__ = ["Profile", "FilterCriteria", "normalize_subjects"]
