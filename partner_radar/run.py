"""
Main runner for the partner matching engine.

This is the single entrypoint for matching one requester against a
profiles file and writing the results for a presentation layer.

Usage:
    python -m partner_radar.run --config configs/config.yaml --requester u001

The runner performs the following steps:
1. Load and validate configuration
2. Load profiles (synthetic profiles if the data file is missing)
3. Rank the requester's candidate pool
4. Lay the top matches out on the radar canvas
5. Save ranked matches, radar positions and a match report
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Any, List, Optional
import json

import numpy as np
import pandas as pd

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def run_matching(
    config_path: str,
    requester_id: Optional[str] = None,
    profiles_path: Optional[str] = None,
    output_dir: Optional[str] = None,
    canvas_width: Optional[float] = None,
    canvas_height: Optional[float] = None
) -> Dict[str, Any]:
    """
    Run matching for one requester and save the artifacts.

    Args:
        config_path: Path to the configuration YAML file
        requester_id: Requester profile id (first profile if omitted)
        profiles_path: Profiles file (overrides config)
        output_dir: Output directory for artifacts (overrides config)
        canvas_width: Radar canvas width (overrides config)
        canvas_height: Radar canvas height (overrides config)

    Returns:
        Dictionary with run results and paths to artifacts
    """
    from .configs import load_config, validate_config, get_config_value
    from .data_loading import load_profiles, InMemoryProfileRepository
    from .data_loading.loaders import profiles_to_frame
    from .evaluation import create_match_report
    from .matching import PartnerMatcher

    # =========================================================================
    # 1. Load and validate configuration
    # =========================================================================
    logger.info("=" * 60)
    logger.info("PARTNER RADAR MATCHING")
    logger.info("=" * 60)

    config = load_config(config_path)
    issues = validate_config(config)
    if issues:
        for issue in issues:
            logger.warning(f"Config issue: {issue}")

    setup_logging(get_config_value(config, "global.log_level", "INFO"))

    width = canvas_width if canvas_width is not None else get_config_value(
        config, "layout.canvas_width", 600
    )
    height = canvas_height if canvas_height is not None else get_config_value(
        config, "layout.canvas_height", 500
    )
    margin = get_config_value(config, "layout.margin", 10.0)

    # =========================================================================
    # 2. Load profiles
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 1: Loading Profiles")
    logger.info("=" * 60)

    effective_profiles_path = profiles_path or get_config_value(
        config, "data.profiles.path", "data/sample_profiles.csv"
    )
    synthetic = False
    try:
        profiles = load_profiles(effective_profiles_path)
    except FileNotFoundError as e:
        logger.error(f"Profiles not found: {e}")
        logger.info("Creating synthetic profiles for demonstration...")
        profiles = _create_synthetic_profiles()
        synthetic = True

    repository = InMemoryProfileRepository(profiles)
    if requester_id is None:
        requester_id = profiles[0].id
        logger.info(f"No requester given; using first profile {requester_id}")

    # =========================================================================
    # 3. Rank and lay out
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 2: Ranking and Layout")
    logger.info("=" * 60)

    matcher = PartnerMatcher.from_config(config, repository)
    result = matcher.match(requester_id, width, height)

    for position, match in enumerate(result.matches, start=1):
        scores = match.breakdown.to_dict()
        logger.info(
            f"  {position}. {match.profile.name or match.candidate_id}: {scores['total']}% "
            f"(subject {scores['subject']}, institution {scores['institution']}, "
            f"location {scores['location']}, year +{scores['year_bonus']})"
        )

    report = create_match_report(
        requester_id,
        [m.total for m in result.matches],
        layout_result=result.layout,
        margin=margin,
        canvas_width=width,
        canvas_height=height,
    )
    report.additional_metrics["pool_size"] = result.pool_size
    report.additional_metrics["summary_ids"] = [m.candidate_id for m in result.summary]
    logger.info("\n" + report.summary())

    # =========================================================================
    # 4. Save artifacts
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 3: Saving Artifacts")
    logger.info("=" * 60)

    out_dir = Path(output_dir or get_config_value(config, "global.output_dir", "artifacts"))
    out_dir.mkdir(parents=True, exist_ok=True)

    matches_path = out_dir / "ranked_matches.csv"
    matches_df = pd.DataFrame([m.to_dict() for m in result.matches])
    if not matches_df.empty:
        matches_df["subjects"] = matches_df["subjects"].apply(";".join)
    matches_df.to_csv(matches_path, index=False)
    logger.info(f"Saved {len(matches_df)} ranked matches to {matches_path}")

    positions_path = out_dir / "radar_positions.json"
    with open(positions_path, "w") as f:
        json.dump(result.layout.to_dict(), f, indent=2)
    logger.info(f"Saved radar positions to {positions_path}")

    report_path = out_dir / "match_report.json"
    report.save(str(report_path))

    if synthetic:
        pool_path = out_dir / "synthetic_profiles.csv"
        profiles_to_frame(profiles).to_csv(pool_path, index=False)
        logger.info(f"Saved synthetic profiles to {pool_path}")

    return {
        "success": True,
        "requester_id": requester_id,
        "output_dir": str(out_dir),
        "artifacts": {
            "ranked_matches": str(matches_path),
            "radar_positions": str(positions_path),
            "match_report": str(report_path),
        },
        "result": result,
    }


def _create_synthetic_profiles(n_profiles: int = 40, random_seed: int = 42) -> List["Profile"]:
    """Create synthetic study profiles for demonstration when real data is unavailable."""
    from .profiles import Profile

    rng = np.random.RandomState(random_seed)

    subjects = ["Calculus", "Calculus II", "Linear Algebra", "Physics", "Statistics",
                "Organic Chemistry", "Data Structures", "Algorithms", "Microeconomics",
                "Thermodynamics"]
    universities = [("Tel Aviv University", "Tel Aviv", "Israel"),
                    ("Technion", "Haifa", "Israel"),
                    ("ETH Zurich", "Zurich", "Switzerland"),
                    ("University of Toronto", "Toronto", "Canada")]
    faculties = ["Exact Sciences", "Engineering", "Natural Sciences"]
    fields = ["Science", "Engineering"]

    profiles = []
    for i in range(n_profiles):
        university, city, country = universities[rng.randint(len(universities))]
        chosen = rng.choice(subjects, size=rng.randint(1, 5), replace=False)
        profiles.append(Profile(
            id=f"u{i + 1:03d}",
            name=f"Student {i + 1}",
            study_field=fields[rng.randint(len(fields))],
            subjects=tuple(str(s) for s in chosen),
            university=university,
            faculty=faculties[rng.randint(len(faculties))],
            city=city,
            country=country,
            location=f"{city}, {country}",
            year_of_study=int(rng.randint(1, 5)),
        ))

    logger.info(f"Created synthetic profiles: {n_profiles} samples")
    return profiles


def main():
    """Main entry point for the matching runner."""
    parser = argparse.ArgumentParser(
        description="Rank study partners for a requester and lay them out on the radar"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--requester",
        type=str,
        default=None,
        help="Requester profile id (defaults to the first profile)"
    )
    parser.add_argument(
        "--profiles",
        type=str,
        default=None,
        help="Profiles CSV/JSON file (overrides config)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory for artifacts (overrides config)"
    )
    parser.add_argument("--width", type=float, default=None, help="Radar canvas width")
    parser.add_argument("--height", type=float, default=None, help="Radar canvas height")

    args = parser.parse_args()

    try:
        result = run_matching(
            args.config,
            requester_id=args.requester,
            profiles_path=args.profiles,
            output_dir=args.output_dir,
            canvas_width=args.width,
            canvas_height=args.height,
        )
        if result["success"]:
            logger.info("\nMatching completed successfully!")
            return 0
        else:
            logger.error("\nMatching failed!")
            return 1
    except Exception as e:
        logger.exception(f"Matching failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
