"""
Polar-to-pixel conversion for boundary tracing.

A sample is a (radius, angle) pair measured from a fixed center. This module
turns samples into integer pixel coordinates clamped to the image, and builds
"midpoint" samples between two converted samples so that an angular sweep can
be subdivided until neighbouring outline pixels touch.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple


logger = logging.getLogger(__name__)

RADIUS_OFFSET = 1.5
EPSILON = 1e-9
TWO_PI = 2.0 * math.pi
HALF_PI = 0.5 * math.pi


class InvalidInputError(ValueError):
    """Raised when a sample or image bound cannot be converted."""


@dataclass(frozen=True)
class PolarPixel:
    """A polar sample together with the pixel it maps to."""

    r: float
    theta: float
    x: int
    y: int

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)


def _check_sample(r: float, theta: float) -> None:
    if not math.isfinite(r):
        raise InvalidInputError(f"Radius must be finite, got {r!r}")
    if not math.isfinite(theta):
        raise InvalidInputError(f"Angle must be finite, got {theta!r}")


def _check_bounds(max_x: int, max_y: int) -> None:
    if max_x < 0 or max_y < 0:
        raise InvalidInputError(
            f"Image bounds must be non-negative, got max_x={max_x}, max_y={max_y}"
        )


def _clamp(value: int, upper: int) -> int:
    if value < 0:
        return 0
    if value > upper:
        return upper
    return value


def _polar_to_cartesian(r: float, theta: float, center_x: int, center_y: int) -> Tuple[int, int]:
    # Ceiling on both axes regardless of the sign of cos/sin.
    adjusted = r - RADIUS_OFFSET
    x = math.ceil(adjusted * math.cos(theta)) + center_x
    y = math.ceil(adjusted * math.sin(theta)) + center_y
    return int(x), int(y)


def circular_mean(theta_a: float, theta_b: float) -> float:
    """
    Average two angles (radians) with wraparound.

    Adding the angles and halving fails near the 0/2π seam: the mean of 10°
    and 350° must be 0°, not 180°. When the angles are more than π apart the
    larger one is moved back by a full turn before averaging.

    Returns
    -------
    float
        The mean angle reduced into ``[0, 2π)``.
    """
    bigger, smaller = (theta_a, theta_b) if theta_a > theta_b else (theta_b, theta_a)
    if bigger - smaller > math.pi:
        bigger -= TWO_PI
    mean = ((bigger + smaller) / 2.0) % TWO_PI
    # A tiny negative mean reduces to exactly 2π in floating point.
    if mean >= TWO_PI:
        return 0.0
    return mean


def convert(
    r: float,
    theta: float,
    center_x: int,
    center_y: int,
    max_x: int,
    max_y: int,
) -> PolarPixel:
    """
    Convert a polar sample to a pixel clamped to ``[0, max_x] x [0, max_y]``.

    Parameters
    ----------
    r:
        Radius in pixels from the center. The stored value is the raw radius;
        the calibration offset is only applied when locating the pixel.
    theta:
        Angle in radians from the positive x-axis.
    center_x, center_y:
        Center of the sweep in pixel coordinates.
    max_x, max_y:
        Inclusive maximum pixel index on each axis.

    Raises
    ------
    InvalidInputError
        If ``r`` or ``theta`` is not finite, or a bound is negative.
    """
    _check_sample(r, theta)
    _check_bounds(max_x, max_y)
    x, y = _polar_to_cartesian(r, theta, center_x, center_y)
    return PolarPixel(r=r, theta=theta, x=_clamp(x, max_x), y=_clamp(y, max_y))


def _is_diagonal_pair(a: PolarPixel, c: PolarPixel, epsilon: float) -> bool:
    return (
        abs(a.x - c.x) == 1
        and abs(a.y - c.y) == 1
        and abs(a.theta - c.theta) < epsilon
        and abs(a.r - c.r) < epsilon
    )


def _orthogonal_step(anchor: PolarPixel, theta: float) -> Tuple[int, int]:
    if theta < HALF_PI:
        return anchor.x - 1, anchor.y
    if theta < math.pi:
        return anchor.x, anchor.y - 1
    if theta < 3.0 * HALF_PI:
        return anchor.x + 1, anchor.y
    return anchor.x, anchor.y + 1


def combine(
    a: PolarPixel,
    c: PolarPixel,
    center_x: int,
    center_y: int,
    max_x: int,
    max_y: int,
    epsilon: float = EPSILON,
) -> PolarPixel:
    """
    Build the sample halfway between ``a`` and ``c``.

    The radius is the arithmetic mean and the angle the circular mean of the
    two stored polar values. When ``a`` and ``c`` sit on diagonal neighbours
    with (almost) identical radius and angle, plain rounding would keep the
    outline diagonal, so the result is forced onto an orthogonal neighbour of
    ``a`` picked by the quadrant of the averaged angle. That step anchors on
    ``a``: walk the boundary with the lower-angle sample first.
    """
    _check_bounds(max_x, max_y)
    r = (a.r + c.r) / 2.0
    theta = circular_mean(a.theta, c.theta)
    x, y = _polar_to_cartesian(r, theta, center_x, center_y)

    if _is_diagonal_pair(a, c, epsilon):
        x, y = _orthogonal_step(a, theta)
        logger.debug(
            "Diagonal step between %s and %s replaced by (%d, %d)", a.position, c.position, x, y
        )

    return PolarPixel(r=r, theta=theta, x=_clamp(x, max_x), y=_clamp(y, max_y))
