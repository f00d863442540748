"""
Outline tracing from an angular sweep.

An external wand supplies one radius per angle around a center. Converting
those samples gives pixels that are usually several pixels apart; this module
closes each gap by bisecting the angular interval with
:func:`~cell_wand.core.polar_pixel.combine` until consecutive pixels touch,
producing a 4-connected outline. A single diagonal step is closed with the
corner pixel both ends share.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple, Union

import numpy as np

from .polar_pixel import EPSILON, TWO_PI, InvalidInputError, PolarPixel, combine, convert


logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


def sweep_angles(count: int, start: float = 0.0) -> np.ndarray:
    """Return ``count`` evenly spaced angles covering one full turn from ``start``."""
    if count < 1:
        raise InvalidInputError(f"A sweep needs at least one angle, got {count}")
    angles = start + np.arange(count, dtype=np.float64) * (TWO_PI / count)
    return np.mod(angles, TWO_PI)


def _touching(a: PolarPixel, c: PolarPixel) -> bool:
    return abs(a.x - c.x) + abs(a.y - c.y) <= 1


def _is_diagonal_step(a: PolarPixel, c: PolarPixel) -> bool:
    return abs(a.x - c.x) == 1 and abs(a.y - c.y) == 1


def _corner_between(a: PolarPixel, c: PolarPixel, mid: PolarPixel) -> PolarPixel:
    """Orthogonal neighbour shared by diagonal pixels ``a`` and ``c``."""
    if _touching(a, mid) and _touching(mid, c):
        return mid
    candidates = ((c.x, a.y), (a.x, c.y))
    x, y = min(candidates, key=lambda p: (p[0] - mid.x) ** 2 + (p[1] - mid.y) ** 2)
    return PolarPixel(r=mid.r, theta=mid.theta, x=x, y=y)


def _bridge(
    a: PolarPixel,
    c: PolarPixel,
    center: Tuple[int, int],
    bounds: Tuple[int, int],
    epsilon: float,
    max_depth: int,
) -> List[PolarPixel]:
    """Pixels strictly between ``a`` and ``c``, in sweep order."""
    bridged: List[PolarPixel] = []
    # Entries are either a gap (start, end, depth) or a pixel to emit.
    pending: List[Union[PolarPixel, Tuple[PolarPixel, PolarPixel, int]]] = [(a, c, 0)]
    while pending:
        item = pending.pop()
        if isinstance(item, PolarPixel):
            bridged.append(item)
            continue

        start, end, depth = item
        if _touching(start, end):
            continue
        mid = combine(start, end, center[0], center[1], bounds[0], bounds[1], epsilon=epsilon)
        if _is_diagonal_step(start, end):
            bridged.append(_corner_between(start, end, mid))
            continue
        if depth >= max_depth:
            logger.warning(
                "Gap between %s and %s left open after %d subdivisions",
                start.position,
                end.position,
                depth,
            )
            continue

        pending.append((mid, end, depth + 1))
        pending.append(mid)
        pending.append((start, mid, depth + 1))
    return bridged


def _drop_repeats(pixels: Sequence[PolarPixel], closed: bool) -> List[PolarPixel]:
    result: List[PolarPixel] = []
    for pixel in pixels:
        if result and result[-1].position == pixel.position:
            continue
        result.append(pixel)
    if closed:
        while len(result) > 1 and result[-1].position == result[0].position:
            result.pop()
    return result


def trace_outline(
    radii: Sequence[float],
    angles: Sequence[float],
    center_x: int,
    center_y: int,
    max_x: int,
    max_y: int,
    epsilon: float = EPSILON,
    max_depth: int = DEFAULT_MAX_DEPTH,
    closed: bool = True,
) -> Tuple[PolarPixel, ...]:
    """
    Stitch a sweep of polar samples into a pixel outline.

    Parameters
    ----------
    radii, angles:
        Matching sequences of radius (pixels) and angle (radians). Samples
        are visited in the given order, which should be increasing angle.
    center_x, center_y:
        Sweep center in pixel coordinates.
    max_x, max_y:
        Inclusive image bounds.
    epsilon:
        Tolerance for the diagonal-step rule in :func:`combine`.
    max_depth:
        Maximum number of bisections used to close a single gap.
    closed:
        Also bridge the last sample back to the first.

    Returns
    -------
    tuple of PolarPixel
        Outline pixels with consecutive duplicates removed.

    Raises
    ------
    InvalidInputError
        If the sequences are empty or of different length, or a sample is
        not finite.
    """
    radii_arr = np.asarray(radii, dtype=np.float64).ravel()
    angles_arr = np.asarray(angles, dtype=np.float64).ravel()
    if radii_arr.size == 0:
        raise InvalidInputError("At least one sample is required to trace an outline")
    if radii_arr.shape != angles_arr.shape:
        raise InvalidInputError(
            f"Radii and angles must have the same length ({radii_arr.size} vs {angles_arr.size})"
        )

    center = (center_x, center_y)
    bounds = (max_x, max_y)
    samples = [
        convert(float(r), float(theta), center_x, center_y, max_x, max_y)
        for r, theta in zip(radii_arr, angles_arr)
    ]

    pairs = list(zip(samples[:-1], samples[1:]))
    if closed and len(samples) > 1:
        pairs.append((samples[-1], samples[0]))

    pixels: List[PolarPixel] = [samples[0]]
    for a, c in pairs:
        pixels.extend(_bridge(a, c, center, bounds, epsilon, max_depth))
        pixels.append(c)

    outline = _drop_repeats(pixels, closed)
    logger.debug("Traced %d samples into %d outline pixels", len(samples), len(outline))
    return tuple(outline)


def outline_coordinates(outline: Sequence[PolarPixel]) -> np.ndarray:
    """Return the outline as an ``(N, 2)`` integer array of ``(x, y)`` rows."""
    if not outline:
        return np.zeros((0, 2), dtype=np.int32)
    return np.asarray([pixel.position for pixel in outline], dtype=np.int32)


def is_four_connected(outline: Sequence[PolarPixel], closed: bool = True) -> bool:
    """Check that every consecutive pair differs by one unit on exactly one axis."""
    coords = outline_coordinates(outline)
    if coords.shape[0] < 2:
        return True
    if closed:
        coords = np.vstack([coords, coords[:1]])
    steps = np.abs(np.diff(coords, axis=0)).sum(axis=1)
    return bool(np.all(steps == 1))
