"""Data loading module for profile files and repositories."""

from .loaders import load_profiles, load_profiles_frame, validate_profile_columns
from .repository import ProfileRepository, InMemoryProfileRepository

__all__ = [
    "load_profiles",
    "load_profiles_frame",
    "validate_profile_columns",
    "ProfileRepository",
    "InMemoryProfileRepository",
]
