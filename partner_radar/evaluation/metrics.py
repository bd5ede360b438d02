"""
Evaluation metrics for matching runs.

Summarizes what a matching request produced:
1. Score distribution of the ranked totals
2. Layout quality (remaining overlaps, pass count, canvas bounds)

These are diagnostics for tuning weights and layout parameters; they do
not claim anything about real-world partner quality.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Sequence
import json

import numpy as np
from scipy.spatial.distance import pdist

from ..layout.radial import LayoutResult

logger = logging.getLogger(__name__)


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    count: int
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 52.0, "p50": 71.0, "p90": 93.0}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": int(self.count),
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class LayoutQualityCheck:
    """Results of the layout overlap check."""
    min_distance: float
    n_overlapping_pairs: int
    iterations: int
    converged: bool
    within_bounds: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_distance": float(self.min_distance),
            "n_overlapping_pairs": int(self.n_overlapping_pairs),
            "iterations": int(self.iterations),
            "converged": bool(self.converged),
            "within_bounds": bool(self.within_bounds)
        }


@dataclass
class MatchReport:
    """
    Report for one matching request.

    Contains distribution statistics and the layout check.
    """
    requester_id: str
    distribution_stats: ScoreDistributionStats
    layout_check: Optional[LayoutQualityCheck] = None
    additional_metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "requester_id": self.requester_id,
            "distribution_stats": self.distribution_stats.to_dict(),
            "additional_metrics": self.additional_metrics
        }
        if self.layout_check:
            result["layout_check"] = self.layout_check.to_dict()
        return result

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved match report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        stats = self.distribution_stats
        lines = [
            f"Match Report: {self.requester_id}",
            "=" * 50,
            "",
            f"Score Distribution ({stats.count} matches):",
            f"  Mean: {stats.mean:.2f}",
            f"  Std:  {stats.std:.2f}",
            f"  Min:  {stats.min:.2f}",
            f"  Max:  {stats.max:.2f}",
        ]

        for q_name, q_value in stats.quantiles.items():
            lines.append(f"  {q_name}: {q_value:.2f}")

        if self.layout_check:
            check = self.layout_check
            lines.extend([
                "",
                "Layout Check:",
                f"  Passes: {check.iterations}",
                f"  Converged: {check.converged}",
                f"  Min distance: {check.min_distance:.2f}",
                f"  Overlapping pairs: {check.n_overlapping_pairs}",
                f"  Within bounds: {check.within_bounds}",
            ])

        return "\n".join(lines)


def compute_score_distribution_stats(
    scores: Sequence[float],
    quantiles: List[float] = [0.1, 0.25, 0.5, 0.75, 0.9]
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for scores.

    Args:
        scores: Compatibility totals
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance (all zeros for no scores)
    """
    values = np.asarray(scores, dtype=float)
    if values.size == 0:
        return ScoreDistributionStats(
            count=0, mean=0.0, std=0.0, min=0.0, max=0.0,
            quantiles={f"p{int(q * 100)}": 0.0 for q in quantiles}
        )

    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(values, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        count=int(values.size),
        mean=float(np.mean(values)),
        std=float(np.std(values)),
        min=float(np.min(values)),
        max=float(np.max(values)),
        quantiles=quantile_dict
    )


def pairwise_distances(points: np.ndarray) -> np.ndarray:
    """
    Euclidean distances between all pairs of points.

    Args:
        points: Array of (x, y) coordinates (N x 2)

    Returns:
        Array of distances for pairs j < k (N * (N - 1) / 2,)
    """
    if len(points) < 2:
        return np.empty(0)
    return pdist(points, metric="euclidean")


def check_layout(
    layout_result: LayoutResult,
    margin: float,
    canvas_width: Optional[float] = None,
    canvas_height: Optional[float] = None
) -> LayoutQualityCheck:
    """
    Check a layout for remaining overlaps and out-of-canvas markers.

    Args:
        layout_result: Layout to check
        margin: Minimum allowed center-to-center distance
        canvas_width: Canvas width for the bounds check (skipped if None)
        canvas_height: Canvas height for the bounds check (skipped if None)

    Returns:
        LayoutQualityCheck instance
    """
    points = np.array([[p.x, p.y] for p in layout_result.positions], dtype=float).reshape(-1, 2)
    distances = pairwise_distances(points)

    min_distance = float(distances.min()) if distances.size else float("inf")
    n_overlapping = int(np.sum(distances < margin))

    within_bounds = True
    if canvas_width is not None and canvas_height is not None and len(points):
        within_bounds = bool(
            np.all(points[:, 0] >= 0) and np.all(points[:, 0] <= canvas_width)
            and np.all(points[:, 1] >= 0) and np.all(points[:, 1] <= canvas_height)
        )

    if n_overlapping:
        logger.warning(
            f"Layout has {n_overlapping} overlapping pairs after {layout_result.iterations} passes"
        )

    return LayoutQualityCheck(
        min_distance=min_distance,
        n_overlapping_pairs=n_overlapping,
        iterations=layout_result.iterations,
        converged=layout_result.converged,
        within_bounds=within_bounds
    )


def create_match_report(
    requester_id: str,
    totals: Sequence[float],
    layout_result: Optional[LayoutResult] = None,
    margin: float = 10.0,
    canvas_width: Optional[float] = None,
    canvas_height: Optional[float] = None,
    quantiles: List[float] = [0.1, 0.25, 0.5, 0.75, 0.9]
) -> MatchReport:
    """
    Create a complete match report.

    Args:
        requester_id: Requester the matches were computed for
        totals: Compatibility totals of the ranked matches
        layout_result: Layout to check (skipped if None)
        margin: Layout margin used for the overlap check
        canvas_width: Canvas width for the bounds check
        canvas_height: Canvas height for the bounds check
        quantiles: Quantiles to compute

    Returns:
        MatchReport instance
    """
    dist_stats = compute_score_distribution_stats(totals, quantiles)

    layout_check = None
    if layout_result is not None:
        layout_check = check_layout(layout_result, margin, canvas_width, canvas_height)

    return MatchReport(
        requester_id=requester_id,
        distribution_stats=dist_stats,
        layout_check=layout_check
    )
