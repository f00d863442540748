"""Coordinate conversion, outline tracing and mask helpers."""

from .polar_pixel import (
    EPSILON,
    RADIUS_OFFSET,
    InvalidInputError,
    PolarPixel,
    circular_mean,
    combine,
    convert,
)
from .outline import (
    DEFAULT_MAX_DEPTH,
    is_four_connected,
    outline_coordinates,
    sweep_angles,
    trace_outline,
)
from .mask import equivalent_radius_px, mask_area, outline_to_mask

__all__ = [
    "EPSILON",
    "RADIUS_OFFSET",
    "InvalidInputError",
    "PolarPixel",
    "circular_mean",
    "combine",
    "convert",
    "DEFAULT_MAX_DEPTH",
    "is_four_connected",
    "outline_coordinates",
    "sweep_angles",
    "trace_outline",
    "equivalent_radius_px",
    "mask_area",
    "outline_to_mask",
]
