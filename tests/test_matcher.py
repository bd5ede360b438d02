"""Tests for the end-to-end matching flow."""
import pytest

from partner_radar.configs import load_config
from partner_radar.data_loading import InMemoryProfileRepository
from partner_radar.layout import LayoutConfig, RadialLayoutEngine
from partner_radar.matching import PartnerMatcher, MatchingResult
from partner_radar.profiles import FilterCriteria, Profile


@pytest.fixture
def repository(sample_profiles_path):
    return InMemoryProfileRepository.from_file(sample_profiles_path)


class TestPartnerMatcher:
    """Tests for PartnerMatcher on the sample profiles."""

    def test_sample_requester(self, repository):
        result = PartnerMatcher(repository).match("u001")

        assert isinstance(result, MatchingResult)
        assert result.found
        assert result.pool_size == 8
        assert [m.candidate_id for m in result.matches] == [
            "u010", "u003", "u004", "u002", "u006", "u008"
        ]
        assert [m.total for m in result.matches] == [100, 87, 82, 80, 80, 62]
        assert [m.candidate_id for m in result.summary] == ["u010", "u003", "u004", "u002"]

    def test_layout_matches_ranking(self, repository):
        result = PartnerMatcher(repository).match("u001")
        positions = result.layout.positions

        assert [p.candidate_id for p in positions] == [m.candidate_id for m in result.matches]
        assert [p.ring for p in positions] == [0, 1, 1, 1, 1, 2]
        assert result.layout.converged

    def test_absent_requester(self, repository):
        result = PartnerMatcher(repository).match("nobody")

        assert not result.found
        assert result.matches == ()
        assert result.summary == ()
        assert result.layout.positions == ()
        assert result.pool_size == 0

    def test_custom_criteria_still_excludes_requester(self, repository):
        result = PartnerMatcher(repository).match("u001", criteria=FilterCriteria())
        ids = [m.candidate_id for m in result.matches]

        assert result.pool_size == 9
        assert "u001" not in ids
        # u007 and u010 both score 100; u007 comes first in the pool
        assert ids[:2] == ["u007", "u010"]

    def test_limits(self, repository):
        matcher = PartnerMatcher(repository, radar_limit=3, summary_limit=2)
        result = matcher.match("u001")
        assert len(result.matches) == 3
        assert len(result.summary) == 2

    def test_summary_limit_above_radar_limit(self, repository):
        result = PartnerMatcher(repository, radar_limit=2, summary_limit=4).match("u001")
        assert len(result.summary) == 2

    def test_negative_limits_rejected(self, repository):
        with pytest.raises(ValueError):
            PartnerMatcher(repository, radar_limit=-1)

    def test_requester_without_candidates(self):
        repository = InMemoryProfileRepository([Profile(id="solo", study_field="Music")])
        result = PartnerMatcher(repository).match("solo")
        assert not result.found
        assert result.layout.converged

    def test_degenerate_canvas(self, repository):
        result = PartnerMatcher(repository).match("u001", canvas_width=0, canvas_height=0)
        assert result.layout.degenerate
        assert len(result.matches) == 6

    def test_custom_layout_engine(self, repository):
        engine = RadialLayoutEngine(LayoutConfig(margin=400, max_iterations=1))
        result = PartnerMatcher(repository, layout_engine=engine).match("u001")
        assert result.layout.iterations == 1
        assert not result.layout.converged

    def test_from_config(self, repository, config_path):
        config = load_config(config_path)
        config["ranking"]["radar_limit"] = 5
        matcher = PartnerMatcher.from_config(config, repository)

        assert matcher.radar_limit == 5
        assert matcher.summary_limit == 4
        assert matcher.layout_engine.config.max_iterations == 50
        assert len(matcher.match("u001").matches) == 5

    def test_to_dict(self, repository):
        d = PartnerMatcher(repository).match("u001").to_dict()
        assert d["requester_id"] == "u001"
        assert d["summary_ids"] == ["u010", "u003", "u004", "u002"]
        assert d["matches"][0]["compatibility"] == 100
        assert len(d["layout"]["positions"]) == 6
