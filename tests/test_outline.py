import math

import numpy as np
import pytest

from cell_wand.core.outline import (
    _bridge,
    is_four_connected,
    outline_coordinates,
    sweep_angles,
    trace_outline,
)
from cell_wand.core.polar_pixel import TWO_PI, InvalidInputError, PolarPixel, convert


def test_sweep_angles_evenly_spaced():
    angles = sweep_angles(4)
    np.testing.assert_allclose(angles, [0.0, math.pi / 2, math.pi, 3 * math.pi / 2])


def test_sweep_angles_wraps_start():
    angles = sweep_angles(4, start=3 * math.pi / 2)
    assert np.all(angles >= 0.0)
    assert np.all(angles < TWO_PI)


def test_sweep_angles_rejects_empty():
    with pytest.raises(InvalidInputError):
        sweep_angles(0)


def test_trace_circle_is_closed_and_four_connected():
    angles = sweep_angles(16)
    radii = np.full(16, 20.0)
    outline = trace_outline(radii, angles, 50, 50, 99, 99)

    assert len(outline) > 16
    assert is_four_connected(outline, closed=True)
    coords = outline_coordinates(outline)
    distances = np.hypot(coords[:, 0] - 50, coords[:, 1] - 50)
    assert distances.min() >= 16.0
    assert distances.max() <= 21.0


def test_trace_has_no_repeated_neighbours():
    outline = trace_outline(np.full(8, 12.0), sweep_angles(8), 30, 30, 59, 59)
    positions = [pixel.position for pixel in outline]
    assert all(a != b for a, b in zip(positions, positions[1:]))
    assert positions[0] != positions[-1]


def test_trace_irregular_radii_is_four_connected():
    angles = sweep_angles(24)
    radii = 18.0 + 4.0 * np.sin(3 * angles)
    outline = trace_outline(radii, angles, 40, 40, 79, 79)
    assert is_four_connected(outline)


def test_trace_clamped_outline_stays_in_bounds():
    angles = sweep_angles(12)
    outline = trace_outline(np.full(12, 30.0), angles, 5, 5, 19, 19)
    coords = outline_coordinates(outline)
    assert coords[:, 0].min() >= 0 and coords[:, 0].max() <= 19
    assert coords[:, 1].min() >= 0 and coords[:, 1].max() <= 19


def test_trace_starts_with_first_sample():
    angles = sweep_angles(8)
    outline = trace_outline(np.full(8, 15.0), angles, 50, 50, 99, 99)
    assert outline[0] == convert(15.0, 0.0, 50, 50, 99, 99)


def test_trace_open_outline_does_not_wrap():
    angles = [0.0, math.pi / 2]
    outline = trace_outline([15.0, 15.0], angles, 50, 50, 99, 99, closed=False)
    assert outline[0].position == convert(15.0, 0.0, 50, 50, 99, 99).position
    assert outline[-1].position == convert(15.0, math.pi / 2, 50, 50, 99, 99).position
    assert is_four_connected(outline, closed=False)


def test_trace_single_sample():
    outline = trace_outline([10.0], [0.0], 50, 50, 99, 99)
    assert len(outline) == 1


def test_trace_zero_depth_skips_bridging():
    angles = sweep_angles(4)
    outline = trace_outline(np.full(4, 20.0), angles, 50, 50, 99, 99, max_depth=0)
    assert len(outline) == 4


@pytest.mark.parametrize("radii, angles", [([], []), ([1.0, 2.0], [0.0])])
def test_trace_rejects_bad_samples(radii, angles):
    with pytest.raises(InvalidInputError):
        trace_outline(radii, angles, 50, 50, 99, 99)


def test_trace_rejects_non_finite_radius():
    with pytest.raises(InvalidInputError):
        trace_outline([10.0, float("nan")], [0.0, 1.0], 50, 50, 99, 99)


def test_outline_coordinates_shape():
    outline = (PolarPixel(1.0, 0.0, 3, 4), PolarPixel(1.0, 0.1, 4, 4))
    coords = outline_coordinates(outline)
    assert coords.shape == (2, 2)
    assert coords.tolist() == [[3, 4], [4, 4]]
    assert outline_coordinates(()).shape == (0, 2)


def test_is_four_connected_detects_diagonal_step():
    outline = (
        PolarPixel(1.0, 0.0, 0, 0),
        PolarPixel(1.0, 0.1, 1, 0),
        PolarPixel(1.0, 0.2, 2, 1),
    )
    assert not is_four_connected(outline, closed=False)


def test_is_four_connected_checks_closing_step():
    square = (
        PolarPixel(1.0, 0.0, 0, 0),
        PolarPixel(1.0, 0.1, 1, 0),
        PolarPixel(1.0, 0.2, 1, 1),
        PolarPixel(1.0, 0.3, 0, 1),
    )
    assert is_four_connected(square, closed=True)
    assert not is_four_connected(square[:3], closed=True)
    assert is_four_connected(square[:3], closed=False)


def test_trace_through_radius_offset_is_four_connected():
    # Radii below the 1.5 px offset land on the opposite side of the center.
    outline = trace_outline([0.5, 3.0], [0.2, 2.0], 20, 20, 39, 39)
    assert is_four_connected(outline)


@pytest.mark.parametrize("seed", range(10))
def test_trace_small_random_radii_is_four_connected(seed):
    rng = np.random.default_rng(seed)
    angles = np.sort(rng.uniform(0.0, TWO_PI, size=9))
    radii = rng.uniform(0.0, 4.0, size=9)
    outline = trace_outline(radii, angles, 20, 20, 39, 39)
    assert is_four_connected(outline)


@pytest.mark.parametrize("seed", range(5))
def test_trace_mixed_random_radii_is_four_connected(seed):
    rng = np.random.default_rng(100 + seed)
    angles = sweep_angles(12)
    radii = rng.uniform(0.0, 40.0, size=12)
    outline = trace_outline(radii, angles, 50, 50, 99, 99)
    assert is_four_connected(outline)


def test_trace_deep_max_depth_does_not_exhaust_stack():
    outline = trace_outline([0.5, 3.0, 25.0], [0.2, 2.0, 4.0], 30, 30, 59, 59, max_depth=5000)
    assert is_four_connected(outline)


def test_trace_shallow_depth_leaves_gaps_open():
    outline = trace_outline(np.full(4, 20.0), sweep_angles(4), 50, 50, 99, 99, max_depth=1)
    assert not is_four_connected(outline)


def test_bridge_closes_diagonal_step_with_shared_corner():
    a = PolarPixel(r=10.0, theta=0.3, x=5, y=5)
    c = PolarPixel(r=10.0, theta=0.3, x=6, y=6)
    # combine() answers (4, 5) here, which does not touch c.
    bridged = _bridge(a, c, (50, 50), (99, 99), 1e-5, 10)
    assert [p.position for p in bridged] == [(5, 6)]
