"""Tests for profile records and pool filters."""
import math

import pytest

from partner_radar.profiles import FilterCriteria, Profile, normalize_subjects


class TestNormalizeSubjects:
    """Tests for subject normalization."""

    @pytest.mark.parametrize("raw,expected", [
        (None, ()),
        (math.nan, ()),
        ("", ()),
        ("Calculus;Physics", ("Calculus", "Physics")),
        (" Calculus ; ;Physics ", ("Calculus", "Physics")),
        (["Physics", "physics", "PHYSICS"], ("Physics",)),
        (("Calculus", "", None), ("Calculus",)),
        (42, ()),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_subjects(raw) == expected


class TestProfile:
    """Tests for Profile normalization and conversion."""

    def test_text_fields_trimmed(self):
        profile = Profile(id=" a ", name="  Noa ", university=None, city=math.nan)
        assert profile.id == "a"
        assert profile.name == "Noa"
        assert profile.university == ""
        assert profile.city == ""

    @pytest.mark.parametrize("raw,expected", [
        (2, 2),
        ("3", 3),
        ("2.0", 2),
        (4.0, 4),
        ("", None),
        ("second", None),
        (None, None),
        (math.nan, None),
        (True, None),
    ])
    def test_year_parsing(self, raw, expected):
        assert Profile(id="a", year_of_study=raw).year_of_study == expected

    def test_blank_avatar_is_none(self):
        assert Profile(id="a", avatar="  ").avatar is None
        assert Profile(id="a", avatar="img/a.png").avatar == "img/a.png"

    def test_from_dict_accepts_camel_case(self):
        profile = Profile.from_dict({
            "uid": "x", "fullName": "X Y", "studyField": "Science",
            "subjects": ["Calculus"], "institution": "TAU", "yearOfStudy": "2",
        })
        assert profile.id == "x"
        assert profile.name == "X Y"
        assert profile.study_field == "Science"
        assert profile.university == "TAU"
        assert profile.year_of_study == 2

    def test_from_dict_prefers_snake_case(self):
        profile = Profile.from_dict({"id": "x", "study_field": "Arts", "studyField": "Science"})
        assert profile.study_field == "Arts"

    def test_from_dict_external_id(self):
        profile = Profile.from_dict({"id": "ignored", "name": "X"}, profile_id="key-1")
        assert profile.id == "key-1"

    def test_from_dict_ignores_unknown_keys(self):
        profile = Profile.from_dict({"id": "x", "favouriteColour": "blue"})
        assert profile == Profile(id="x")

    def test_to_dict_round_trip(self):
        profile = Profile(id="x", name="X", subjects=["A", "B"], year_of_study=3)
        assert Profile.from_dict(profile.to_dict()) == profile

    def test_profiles_are_immutable(self):
        profile = Profile(id="x")
        with pytest.raises(AttributeError):
            profile.name = "changed"


class TestFilterCriteria:
    """Tests for candidate pool filters."""

    def test_for_requester(self):
        requester = Profile(id="r", study_field="Science")
        criteria = FilterCriteria.for_requester(requester)

        assert criteria.study_field == "Science"
        assert criteria.exclude_ids == ("r",)
        assert not criteria.accepts(requester)
        assert criteria.accepts(Profile(id="c", study_field="science"))
        assert not criteria.accepts(Profile(id="c", study_field="Arts"))

    def test_requester_without_field_accepts_every_field(self):
        criteria = FilterCriteria.for_requester(Profile(id="r"))
        assert criteria.study_field is None
        assert criteria.accepts(Profile(id="c", study_field="Arts"))

    def test_single_string_exclude_id(self):
        criteria = FilterCriteria(exclude_ids="u001")
        assert criteria.exclude_ids == ("u001",)
        assert not criteria.accepts(Profile(id="u001"))
        assert criteria.accepts(Profile(id="u"))

    def test_exclude_ids_list_becomes_tuple(self):
        criteria = FilterCriteria(exclude_ids=["a", "b"])
        assert criteria.exclude_ids == ("a", "b")
        assert not criteria.accepts(Profile(id="b"))
