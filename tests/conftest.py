"""Pytest fixtures for Partner Radar tests."""
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from partner_radar.profiles import Profile
from partner_radar.ranking import RankedMatch
from partner_radar.scoring import ScoreBreakdown


SAMPLE_PROFILES = project_root / "data" / "sample_profiles.csv"
CONFIG_PATH = project_root / "configs" / "config.yaml"


def make_match(candidate_id: str, total: int) -> RankedMatch:
    """RankedMatch with only a total, for layout tests."""
    return RankedMatch(
        profile=Profile(id=candidate_id, name=candidate_id),
        breakdown=ScoreBreakdown(
            subject_score=0.0,
            institution_score=0.0,
            location_score=0.0,
            year_bonus=0,
            total=total,
        ),
    )


# =============================================================================
# PROFILE FIXTURES
# =============================================================================


@pytest.fixture
def requester():
    """Requester from the reference scenario."""
    return Profile(
        id="req",
        name="Requester",
        study_field="Science",
        subjects=["Calculus", "Physics"],
        university="A",
        faculty="Exact Sciences",
        city="X",
        country="C1",
        year_of_study=2,
    )


@pytest.fixture
def close_candidate():
    """Same university, city and year; one fuzzy subject overlap."""
    return Profile(
        id="close",
        name="Close Candidate",
        study_field="Science",
        subjects=["Calculus II"],
        university="A",
        faculty="Exact Sciences",
        city="X",
        country="C1",
        year_of_study=2,
    )


@pytest.fixture
def distant_candidate():
    """No subject overlap, different university and country."""
    return Profile(
        id="distant",
        name="Distant Candidate",
        study_field="Science",
        subjects=["Organic Chemistry"],
        university="B",
        faculty="Chemistry",
        city="Y",
        country="C2",
        year_of_study=4,
    )


@pytest.fixture
def candidate_pool(requester):
    """Pool with a spread of totals, including the requester itself."""
    return [
        Profile(id="p1", subjects=["Calculus", "Physics"], university="A",
                city="X", country="C1", year_of_study=2),
        Profile(id="p2", subjects=["History"], university="B",
                city="Z", country="C3", year_of_study=5),
        requester,
        Profile(id="p3", subjects=["Physics"], university="A",
                city="W", country="C1", year_of_study=3),
        Profile(id="p4", subjects=["Calculus"], university="B",
                city="X", country="C1", year_of_study=1),
        Profile(id="p5", subjects=["Calculus", "Physics"], university="A",
                city="X", country="C1", year_of_study=2),
    ]


@pytest.fixture
def sample_profiles_path():
    return str(SAMPLE_PROFILES)


@pytest.fixture
def config_path():
    return str(CONFIG_PATH)
