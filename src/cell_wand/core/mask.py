"""Region masks built from traced outlines."""

from __future__ import annotations

import math
from typing import Sequence

import cv2
import numpy as np

from .outline import outline_coordinates
from .polar_pixel import InvalidInputError, PolarPixel


def outline_to_mask(outline: Sequence[PolarPixel], max_x: int, max_y: int) -> np.ndarray:
    """
    Fill the polygon described by ``outline`` into a boolean mask.

    The mask has shape ``(max_y + 1, max_x + 1)`` so that every clamped
    outline pixel is addressable. Outline pixels are always foreground.
    """
    if max_x < 0 or max_y < 0:
        raise InvalidInputError(
            f"Image bounds must be non-negative, got max_x={max_x}, max_y={max_y}"
        )

    canvas = np.zeros((max_y + 1, max_x + 1), dtype=np.uint8)
    coords = outline_coordinates(outline)
    if coords.shape[0] == 0:
        return canvas.astype(bool)

    if coords.shape[0] >= 3:
        cv2.fillPoly(canvas, [coords.reshape(-1, 1, 2)], 255)
    canvas[coords[:, 1], coords[:, 0]] = 255
    return canvas > 0


def mask_area(mask: np.ndarray) -> int:
    return int(np.count_nonzero(mask))


def equivalent_radius_px(mask: np.ndarray) -> float:
    """
    Radius of the circle with the same area as the mask foreground.

    Raises
    ------
    ValueError
        If the mask has no foreground pixels.
    """
    area = mask_area(mask)
    if area == 0:
        raise ValueError("Mask is empty (no foreground pixels)")
    return math.sqrt(area / math.pi)
