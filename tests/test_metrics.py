"""Tests for matching diagnostics."""
import json
import math

import numpy as np
import pytest

from partner_radar.evaluation import (
    compute_score_distribution_stats,
    check_layout,
    create_match_report,
    MatchReport,
)
from partner_radar.evaluation.metrics import pairwise_distances
from partner_radar.layout import LayoutResult, RadarPosition


def _layout(*points, iterations=1, converged=True):
    positions = tuple(
        RadarPosition(candidate_id=f"c{i}", x=x, y=y, ring=0, radius=0.25)
        for i, (x, y) in enumerate(points)
    )
    return LayoutResult(positions=positions, iterations=iterations, converged=converged)


class TestScoreDistribution:

    def test_stats(self):
        stats = compute_score_distribution_stats([80, 90, 100])
        assert stats.count == 3
        assert stats.mean == pytest.approx(90.0)
        assert stats.min == 80.0
        assert stats.max == 100.0
        assert stats.quantiles["p50"] == pytest.approx(90.0)

    def test_empty(self):
        stats = compute_score_distribution_stats([])
        assert stats.count == 0
        assert stats.mean == 0.0
        assert set(stats.quantiles) == {"p10", "p25", "p50", "p75", "p90"}


class TestLayoutCheck:

    def test_pairwise_distances(self):
        distances = pairwise_distances(np.array([[0.0, 0.0], [3.0, 4.0], [0.0, 8.0]]))
        assert sorted(distances) == pytest.approx([5.0, 5.0, 8.0])

    def test_overlap_counted(self):
        check = check_layout(_layout((0, 0), (5, 0), (50, 50), iterations=50, converged=False), margin=10)
        assert check.n_overlapping_pairs == 1
        assert check.min_distance == pytest.approx(5.0)
        assert check.iterations == 50
        assert not check.converged

    def test_bounds(self):
        inside = _layout((10, 10), (90, 40))
        outside = _layout((10, 10), (105, 40))
        assert check_layout(inside, 10, canvas_width=100, canvas_height=50).within_bounds
        assert not check_layout(outside, 10, canvas_width=100, canvas_height=50).within_bounds

    def test_single_point(self):
        check = check_layout(_layout((1, 1)), margin=10)
        assert math.isinf(check.min_distance)
        assert check.n_overlapping_pairs == 0


class TestMatchReport:

    def test_create_and_save(self, tmp_path):
        report = create_match_report("u001", [100, 87, 82], layout_result=_layout((0, 0), (50, 0)))
        assert isinstance(report, MatchReport)
        assert report.layout_check.n_overlapping_pairs == 0

        path = tmp_path / "report.json"
        report.save(str(path))
        with open(path) as f:
            saved = json.load(f)
        assert saved["requester_id"] == "u001"
        assert saved["distribution_stats"]["count"] == 3
        assert saved["layout_check"]["converged"] is True

    def test_summary_without_layout(self):
        report = create_match_report("u001", [70])
        assert report.layout_check is None
        text = report.summary()
        assert "Match Report: u001" in text
        assert "Layout Check" not in text
