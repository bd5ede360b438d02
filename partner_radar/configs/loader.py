"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that the matching engine's sections are consistent.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is empty
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    required_sections = ["global", "scoring", "ranking", "layout"]
    for section in required_sections:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    # Weighted components must stay within [0, 1]; the year bonus is flat
    if "scoring" in config:
        weights = config["scoring"].get("weights", {})
        for name, value in weights.items():
            if not 0 <= value <= 1:
                issues.append(f"Scoring weight '{name}' must be in [0, 1], got {value}")
        total = sum(weights.values())
        if weights and total > 1.0 + 1e-9:
            issues.append(f"Scoring weights sum to more than 1: {total}")

    if "ranking" in config:
        ranking = config["ranking"]
        for key in ("radar_limit", "summary_limit"):
            value = ranking.get(key)
            if value is not None and (not isinstance(value, int) or value < 0):
                issues.append(f"ranking.{key} must be a non-negative integer, got {value}")
        radar = ranking.get("radar_limit")
        summary = ranking.get("summary_limit")
        if isinstance(radar, int) and isinstance(summary, int) and summary > radar:
            issues.append(
                f"ranking.summary_limit ({summary}) exceeds ranking.radar_limit ({radar})"
            )

    if "layout" in config:
        layout = config["layout"]
        margin = layout.get("margin", 10.0)
        if not isinstance(margin, (int, float)) or margin <= 0:
            issues.append(f"layout.margin must be positive, got {margin}")
        max_iterations = layout.get("max_iterations", 50)
        if not isinstance(max_iterations, int) or max_iterations < 1:
            issues.append(f"layout.max_iterations must be at least 1, got {max_iterations}")
        rings = layout.get("rings", [])
        thresholds = [ring.get("min_score", 0) for ring in rings]
        if thresholds != sorted(thresholds, reverse=True):
            issues.append("layout.rings must be ordered by descending min_score")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "layout.max_iterations")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
