"""
Profile schema for study-partner matching.

Defines the requester/candidate profile record and the filter criteria
used to build a candidate pool. Records arrive from the external
realtime store in camelCase (``studyField``, ``yearOfStudy``) or from
flat files in snake_case; both shapes are accepted.

Absent or malformed optional fields never raise: text fields become
empty strings, subjects become an empty tuple and the year becomes None.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Iterable, Tuple

logger = logging.getLogger(__name__)

SUBJECT_SEPARATOR = ";"

# snake_case attribute -> accepted record keys, in lookup order
FIELD_ALIASES = {
    "id": ("id", "uid", "user_id"),
    "name": ("name", "full_name", "fullName"),
    "study_field": ("study_field", "studyField"),
    "subjects": ("subjects",),
    "university": ("university", "institution"),
    "faculty": ("faculty",),
    "city": ("city",),
    "country": ("country",),
    "location": ("location",),
    "year_of_study": ("year_of_study", "yearOfStudy"),
    "avatar": ("avatar", "avatar_url"),
}


def _is_missing(value: Any) -> bool:
    """True for None and float NaN (pandas' marker for empty cells)."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def _clean_text(value: Any) -> str:
    if _is_missing(value):
        return ""
    return str(value).strip()


def normalize_key(value: Optional[str]) -> str:
    """Comparison key for free-text fields: trimmed and case-folded."""
    if _is_missing(value):
        return ""
    return str(value).strip().casefold()


def normalize_subjects(subjects: Any) -> Tuple[str, ...]:
    """
    Normalize a subject collection.

    Accepts a list/tuple or a ``;``-separated string. Blank entries are
    dropped and case-insensitive duplicates collapse to the first spelling.

    Args:
        subjects: Raw subjects value from a record

    Returns:
        Tuple of unique, trimmed subject strings in input order
    """
    if _is_missing(subjects):
        return ()
    if isinstance(subjects, str):
        subjects = subjects.split(SUBJECT_SEPARATOR)
    elif not isinstance(subjects, Iterable):
        return ()

    seen = set()
    result = []
    for subject in subjects:
        text = _clean_text(subject)
        key = text.casefold()
        if not text or key in seen:
            continue
        seen.add(key)
        result.append(text)
    return tuple(result)


def _parse_year(value: Any) -> Optional[int]:
    if _is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unparseable year of study: {value!r}")
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return int(number)


@dataclass(frozen=True)
class Profile:
    """
    A requester or candidate profile.

    Attributes:
        id: Unique, stable identifier
        name: Display name
        study_field: Primary field of study (single category)
        subjects: Subjects studied, compared case-insensitively
        university: Institution name
        faculty: Sub-unit within the institution
        city: City
        country: Country
        location: Free-text location shown to users
        year_of_study: Numeric year of study, None when unknown
        avatar: Optional display image reference
    """
    id: str
    name: str = ""
    study_field: str = ""
    subjects: Tuple[str, ...] = field(default_factory=tuple)
    university: str = ""
    faculty: str = ""
    city: str = ""
    country: str = ""
    location: str = ""
    year_of_study: Optional[int] = None
    avatar: Optional[str] = None

    def __post_init__(self):
        """Normalize text fields, subjects and year."""
        object.__setattr__(self, "id", _clean_text(self.id))
        for attr in ("name", "study_field", "university", "faculty",
                     "city", "country", "location"):
            object.__setattr__(self, attr, _clean_text(getattr(self, attr)))
        object.__setattr__(self, "subjects", normalize_subjects(self.subjects))
        object.__setattr__(self, "year_of_study", _parse_year(self.year_of_study))
        avatar = None if _is_missing(self.avatar) else (_clean_text(self.avatar) or None)
        object.__setattr__(self, "avatar", avatar)

    @property
    def subject_keys(self) -> Tuple[str, ...]:
        """Case-folded subjects for comparison."""
        return tuple(s.casefold() for s in self.subjects)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "study_field": self.study_field,
            "subjects": list(self.subjects),
            "university": self.university,
            "faculty": self.faculty,
            "city": self.city,
            "country": self.country,
            "location": self.location,
            "year_of_study": self.year_of_study,
            "avatar": self.avatar,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], profile_id: Optional[str] = None) -> "Profile":
        """
        Create from a record dictionary.

        Args:
            data: Record with camelCase or snake_case keys
            profile_id: Identifier to use when the record is keyed externally
                (realtime-store snapshots key records by id)

        Returns:
            Profile instance
        """
        values = {}
        for attr, aliases in FIELD_ALIASES.items():
            for alias in aliases:
                if alias in data and not _is_missing(data[alias]):
                    values[attr] = data[alias]
                    break
        if profile_id is not None:
            values["id"] = profile_id
        values.setdefault("id", "")
        return cls(**values)


@dataclass(frozen=True)
class FilterCriteria:
    """
    Candidate pool filter applied by the profile repository.

    Attributes:
        study_field: Keep only profiles in this field (case-insensitive);
            None keeps every field
        exclude_ids: Identifiers to leave out (normally the requester)
    """
    study_field: Optional[str] = None
    exclude_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        exclude_ids = self.exclude_ids
        if isinstance(exclude_ids, str):
            exclude_ids = (exclude_ids,)
        object.__setattr__(self, "exclude_ids", tuple(exclude_ids))

    def accepts(self, profile: Profile) -> bool:
        """Whether a profile belongs in the candidate pool."""
        if profile.id in self.exclude_ids:
            return False
        if self.study_field is not None:
            return normalize_key(profile.study_field) == normalize_key(self.study_field)
        return True

    @classmethod
    def for_requester(cls, requester: Profile) -> "FilterCriteria":
        """Same study field as the requester, requester excluded."""
        return cls(study_field=requester.study_field or None, exclude_ids=(requester.id,))
