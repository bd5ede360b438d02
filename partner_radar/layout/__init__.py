"""Radial layout module."""

from .radial import (
    RadialLayoutEngine,
    LayoutConfig,
    LayoutResult,
    RadarPosition,
    RingTier,
    assign_ring,
    layout,
    create_layout_engine_from_config,
)

__all__ = [
    "RadialLayoutEngine",
    "LayoutConfig",
    "LayoutResult",
    "RadarPosition",
    "RingTier",
    "assign_ring",
    "layout",
    "create_layout_engine_from_config",
]
