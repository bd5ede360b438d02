"""Tests for the matching runner."""
import json

import pandas as pd

from partner_radar.run import run_matching, _create_synthetic_profiles


def test_run_on_sample_profiles(config_path, sample_profiles_path, tmp_path):
    result = run_matching(
        config_path,
        requester_id="u001",
        profiles_path=sample_profiles_path,
        output_dir=str(tmp_path),
    )

    assert result["success"]
    assert result["requester_id"] == "u001"

    matches = pd.read_csv(result["artifacts"]["ranked_matches"])
    assert list(matches["id"]) == ["u010", "u003", "u004", "u002", "u006", "u008"]
    assert matches.loc[0, "subjects"] == "Calculus;Physics"

    with open(result["artifacts"]["radar_positions"]) as f:
        positions = json.load(f)
    assert len(positions["positions"]) == 6

    with open(result["artifacts"]["match_report"]) as f:
        report = json.load(f)
    assert report["additional_metrics"]["pool_size"] == 8
    assert report["additional_metrics"]["summary_ids"] == ["u010", "u003", "u004", "u002"]


def test_run_defaults_to_first_profile(config_path, sample_profiles_path, tmp_path):
    result = run_matching(config_path, profiles_path=sample_profiles_path, output_dir=str(tmp_path))
    assert result["requester_id"] == "u001"


def test_run_falls_back_to_synthetic_profiles(config_path, tmp_path):
    result = run_matching(
        config_path,
        profiles_path=str(tmp_path / "missing.csv"),
        output_dir=str(tmp_path / "out"),
        canvas_width=300,
        canvas_height=300,
    )

    assert result["success"]
    assert result["requester_id"] == "u001"
    assert (tmp_path / "out" / "synthetic_profiles.csv").exists()
    assert len(result["result"].matches) <= 6


def test_synthetic_profiles_are_reproducible():
    first = _create_synthetic_profiles(n_profiles=10, random_seed=7)
    second = _create_synthetic_profiles(n_profiles=10, random_seed=7)
    assert first == second
    assert len({p.id for p in first}) == 10


def test_zero_canvas_reaches_degenerate_layout(config_path, sample_profiles_path, tmp_path):
    result = run_matching(
        config_path,
        requester_id="u001",
        profiles_path=sample_profiles_path,
        output_dir=str(tmp_path),
        canvas_width=0,
        canvas_height=0,
    )

    layout = result["result"].layout
    assert layout.degenerate
    assert all((p.x, p.y) == (0.0, 0.0) for p in layout.positions)

    with open(result["artifacts"]["radar_positions"]) as f:
        assert json.load(f)["degenerate"] is True
