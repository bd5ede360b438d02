"""
Radial ("radar") layout for ranked matches.

Places each ranked candidate on a two-dimensional radar display:

1. Ring assignment by total score (independent of rank position):
       total >= 90 -> ring 0, radius 0.25 (innermost, best)
       total >= 80 -> ring 1, radius 0.40
       otherwise   -> ring 2, radius 0.60
2. Initial placement at equal angular increments around a full circle,
       angle = index * 360 / count   (degrees)
       x = cx + radius * cx * cos(angle)
       y = cy + radius * cy * sin(angle)
   where (cx, cy) is the canvas center. Angle comes from list order and
   radius from the ring, so two candidates in different rings may share
   an angle.
3. Collision resolution by iterative pairwise repulsion: every pair closer
   than the margin M is pushed apart symmetrically along the line joining
   them by (M - distance) / 2, for at most ``max_iterations`` passes,
   stopping after the first pass with no collisions.

Known limitations:
- Points are not clamped to the canvas after repulsion; dense layouts may
  push markers past the edge.
- The layout is not ordering-invariant: reordering the input changes the
  initial angles and therefore the final positions.
- A non-positive or non-finite canvas collapses every marker onto the
  canvas origin.
"""

import logging
import math
from dataclasses import dataclass, asdict, field
from typing import Dict, Any, List, Optional, Sequence, Tuple
import json

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RingTier:
    """
    One concentric score tier of the radar.

    Attributes:
        min_score: Lowest total that lands in this ring
        radius: Normalized radius (fraction of the half-canvas)
        label: Legend label for presentation
    """
    min_score: float
    radius: float
    label: str = ""


DEFAULT_RINGS = (
    RingTier(min_score=90, radius=0.25, label="90%+ Match"),
    RingTier(min_score=80, radius=0.40, label="80-89% Match"),
    RingTier(min_score=0, radius=0.60, label="70-79% Match"),
)


@dataclass
class LayoutConfig:
    """
    Configuration for the radial layout.

    Attributes:
        margin: Minimum center-to-center distance between markers
        max_iterations: Maximum number of repulsion passes
        rings: Ring tiers ordered by descending min_score
    """
    margin: float = 10.0
    max_iterations: int = 50
    rings: Tuple[RingTier, ...] = field(default_factory=lambda: DEFAULT_RINGS)

    def validate(self) -> None:
        """Validate configuration values."""
        if not self.margin > 0:
            raise ValueError(f"margin must be positive, got {self.margin}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
        if not self.rings:
            raise ValueError("At least one ring tier is required")
        thresholds = [ring.min_score for ring in self.rings]
        if thresholds != sorted(thresholds, reverse=True):
            raise ValueError(f"Ring tiers must be ordered by descending min_score: {thresholds}")
        for ring in self.rings:
            if ring.radius < 0:
                raise ValueError(f"Ring radius must be non-negative, got {ring.radius}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "margin": self.margin,
            "max_iterations": self.max_iterations,
            "rings": [asdict(ring) for ring in self.rings],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LayoutConfig":
        """Create from dictionary."""
        rings = d.get("rings")
        return cls(
            margin=d.get("margin", 10.0),
            max_iterations=d.get("max_iterations", 50),
            rings=tuple(RingTier(**ring) for ring in rings) if rings else DEFAULT_RINGS,
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "LayoutConfig":
        """Create from main config dictionary."""
        return cls.from_dict(config.get("layout", {}))

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved layout config to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "LayoutConfig":
        """Load from JSON file."""
        with open(filepath, "r") as f:
            d = json.load(f)
        return cls.from_dict(d)


@dataclass(frozen=True)
class RadarPosition:
    """
    Display position of one candidate.

    Attributes:
        candidate_id: Candidate profile identifier
        x: Horizontal canvas coordinate
        y: Vertical canvas coordinate
        ring: Ring index (0 is innermost)
        radius: Normalized radius of the ring
    """
    candidate_id: str
    x: float
    y: float
    ring: int
    radius: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LayoutResult:
    """
    Outcome of one layout pass.

    Attributes:
        positions: Positions in input order
        iterations: Repulsion passes run
        converged: Whether a pass finished without collisions
        degenerate: Whether the canvas was unusable and markers collapsed
    """
    positions: Tuple[RadarPosition, ...]
    iterations: int
    converged: bool
    degenerate: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "positions": [p.to_dict() for p in self.positions],
            "iterations": self.iterations,
            "converged": self.converged,
            "degenerate": self.degenerate,
        }


def assign_ring(total: float, rings: Sequence[RingTier] = DEFAULT_RINGS) -> int:
    """
    Ring index for a total score.

    Args:
        total: Compatibility total
        rings: Tiers ordered by descending min_score

    Returns:
        Index of the first tier whose min_score the total reaches; the
        outermost tier when none does
    """
    for index, ring in enumerate(rings):
        if total >= ring.min_score:
            return index
    return len(rings) - 1


def initial_positions(
    radii: np.ndarray,
    canvas_width: float,
    canvas_height: float
) -> np.ndarray:
    """
    Equal angular spacing around the canvas center.

    Args:
        radii: Normalized radius per marker (N,)
        canvas_width: Canvas width
        canvas_height: Canvas height

    Returns:
        Array of (x, y) coordinates (N x 2)
    """
    count = len(radii)
    center_x = canvas_width / 2
    center_y = canvas_height / 2
    angles = (np.arange(count) * 360.0 / count) * np.pi / 180.0

    positions = np.empty((count, 2), dtype=float)
    positions[:, 0] = center_x + (radii * center_x) * np.cos(angles)
    positions[:, 1] = center_y + (radii * center_y) * np.sin(angles)
    return positions


def resolve_collisions(
    positions: np.ndarray,
    margin: float,
    max_iterations: int
) -> Tuple[int, bool]:
    """
    Push overlapping markers apart in place.

    Pairs (j, k) with j < k are visited in a fixed order, each seeing the
    adjustments already made earlier in the same pass.

    Args:
        positions: Array of (x, y) coordinates (N x 2), modified in place
        margin: Minimum allowed center-to-center distance
        max_iterations: Maximum number of passes

    Returns:
        Tuple of (passes run, whether the last pass had no collisions)
    """
    count = len(positions)
    for iteration in range(1, max_iterations + 1):
        has_collision = False

        for j in range(count):
            for k in range(j + 1, count):
                dx = positions[j, 0] - positions[k, 0]
                dy = positions[j, 1] - positions[k, 1]
                distance = math.sqrt(dx * dx + dy * dy)

                if distance < margin:
                    has_collision = True
                    angle = math.atan2(dy, dx)
                    force = (margin - distance) / 2
                    push_x = math.cos(angle) * force
                    push_y = math.sin(angle) * force

                    positions[j, 0] += push_x
                    positions[j, 1] += push_y
                    positions[k, 0] -= push_x
                    positions[k, 1] -= push_y

        if not has_collision:
            return iteration, True

    logger.debug(f"Layout still has collisions after {max_iterations} passes")
    return max_iterations, False


def _is_degenerate(canvas_width: float, canvas_height: float) -> bool:
    for dim in (canvas_width, canvas_height):
        if dim is None or not math.isfinite(dim) or dim <= 0:
            return True
    return False


class RadialLayoutEngine:
    """
    Places ranked matches on the radar without overlap.

    Attributes:
        config: LayoutConfig with margin, pass budget and ring tiers
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        """
        Initialize the layout engine.

        Args:
            config: LayoutConfig instance (defaults: margin 10, 50 passes)
        """
        self.config = config or LayoutConfig()
        self.config.validate()

    def ring_for(self, total: float) -> int:
        """Ring index for a total score."""
        return assign_ring(total, self.config.rings)

    def arrange(
        self,
        ranked_matches: Sequence[Any],
        canvas_width: float,
        canvas_height: float
    ) -> LayoutResult:
        """
        Compute radar positions with iteration details.

        Args:
            ranked_matches: Items exposing ``candidate_id`` and ``total``
                (RankedMatch), in display order
            canvas_width: Canvas width
            canvas_height: Canvas height

        Returns:
            LayoutResult with positions in input order
        """
        if not ranked_matches:
            return LayoutResult(positions=(), iterations=0, converged=True)

        rings = [self.ring_for(match.total) for match in ranked_matches]
        radii = np.array([self.config.rings[ring].radius for ring in rings], dtype=float)

        if _is_degenerate(canvas_width, canvas_height):
            logger.warning(
                f"Degenerate canvas {canvas_width}x{canvas_height}; "
                f"collapsing {len(ranked_matches)} markers to the origin"
            )
            positions = np.zeros((len(ranked_matches), 2), dtype=float)
            iterations, converged, degenerate = 0, False, True
        else:
            positions = initial_positions(radii, canvas_width, canvas_height)
            iterations, converged = resolve_collisions(
                positions, self.config.margin, self.config.max_iterations
            )
            degenerate = False

        result = tuple(
            RadarPosition(
                candidate_id=match.candidate_id,
                x=float(positions[i, 0]),
                y=float(positions[i, 1]),
                ring=rings[i],
                radius=float(radii[i]),
            )
            for i, match in enumerate(ranked_matches)
        )

        logger.debug(
            f"Laid out {len(result)} markers in {iterations} passes (converged={converged})"
        )
        return LayoutResult(
            positions=result,
            iterations=iterations,
            converged=converged,
            degenerate=degenerate,
        )

    def layout(
        self,
        ranked_matches: Sequence[Any],
        canvas_width: float,
        canvas_height: float
    ) -> List[RadarPosition]:
        """
        Compute radar positions.

        Args:
            ranked_matches: Ranked matches in display order
            canvas_width: Canvas width
            canvas_height: Canvas height

        Returns:
            List of RadarPosition in input order
        """
        return list(self.arrange(ranked_matches, canvas_width, canvas_height).positions)


def layout(
    ranked_matches: Sequence[Any],
    canvas_width: float,
    canvas_height: float,
    config: Optional[LayoutConfig] = None
) -> List[RadarPosition]:
    """
    Place ranked matches on the radar.

    Convenience wrapper around RadialLayoutEngine.

    Args:
        ranked_matches: Ranked matches in display order
        canvas_width: Canvas width
        canvas_height: Canvas height
        config: Optional LayoutConfig

    Returns:
        List of RadarPosition
    """
    return RadialLayoutEngine(config).layout(ranked_matches, canvas_width, canvas_height)


def create_layout_engine_from_config(config: Dict[str, Any]) -> RadialLayoutEngine:
    """
    Factory function to create a RadialLayoutEngine from config.

    Args:
        config: Main configuration dictionary

    Returns:
        Configured RadialLayoutEngine instance
    """
    return RadialLayoutEngine(LayoutConfig.from_config(config))
