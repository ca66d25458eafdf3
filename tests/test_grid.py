"""Tests for sdfd grid utilities."""

import numpy as np
import numpy.testing as npt
import pytest

from sdfd import (
    Circle,
    Object,
    Primitive,
    Scene,
    coverage,
    evaluate,
    plane_from_point_and_normal,
    sample_levelset_2d,
    sample_subpixel_2d,
)


def _circle_object(center=(32, 32), radius=12) -> Object:
    obj = Object()
    obj.add_primitive(Circle(center, radius))
    return obj


class TestSampleLevelset2D:
    def test_output_shape(self):
        phi = sample_levelset_2d(Scene(), _circle_object(), ((0, 64), (0, 64)), (32, 32))
        assert phi.shape == (32, 32)

    def test_non_square(self):
        phi = sample_levelset_2d(Scene(), _circle_object(), ((0, 64), (0, 64)), (16, 32))
        assert phi.shape == (32, 16)

    def test_cell_centred(self):
        # 64 cells over [0, 64]: cell (y=32, x=32) is centred on (32.5, 32.5).
        phi = sample_levelset_2d(Scene(), _circle_object(), ((0, 64), (0, 64)), (64, 64))
        npt.assert_allclose(phi[32, 32], np.hypot(0.5, 0.5) - 12, atol=1e-5)

    def test_offset_bounds_cell_centres(self):
        # Four cells over x in [-2, 2] and two over y in [10, 14].
        phi = sample_levelset_2d(Scene(), Primitive.scalar(0.0), ((-2, 2), (10, 14)), (4, 2))
        assert phi.shape == (2, 4)
        plane = plane_from_point_and_normal((0, 0), (1, 0))
        xs = sample_levelset_2d(Scene(), plane, ((-2, 2), (10, 14)), (4, 2))
        npt.assert_array_equal(xs[0], [-1.5, -0.5, 0.5, 1.5])
        npt.assert_array_equal(xs[1], xs[0])

    def test_inside_negative_outside_positive(self):
        phi = sample_levelset_2d(Scene(), _circle_object(), ((0, 64), (0, 64)), (64, 64))
        assert (phi < 0).any()
        assert (phi > 0).any()

    def test_accepts_primitive(self):
        phi = sample_levelset_2d(Scene(), Circle((0, 0), 0.3), ((-1, 1), (-1, 1)), (16, 16))
        assert phi.dtype == np.float32


class TestSampleSubpixel2D:
    def test_output_shape(self):
        scene = Scene(scale=(3, 1))
        phi = sample_subpixel_2d(scene, _circle_object(), (8, 4))
        assert phi.shape == (4, 8, 3)

    def test_channel_sample_positions(self):
        scene = Scene(scale=(3, 1))
        obj = _circle_object()
        phi = sample_subpixel_2d(scene, obj, (64, 64))
        for ch in range(3):
            expected = evaluate(scene, obj, (32 * 3 + ch + 0.5, 5 + 0.5))
            npt.assert_allclose(phi[5, 32, ch], expected, rtol=1e-6, atol=1e-6)

    def test_scaled_circle_extent_in_pixels(self):
        scene = Scene(scale=(3, 1))
        alpha = coverage(sample_subpixel_2d(scene, _circle_object(), (64, 64)))
        # Pixels 20..43 are inside along both axes through the centre.
        row = alpha[32].min(axis=-1)
        col = alpha[:, 32].min(axis=-1)
        assert (row[21:43] == 1.0).all()
        assert (col[21:43] == 1.0).all()
        assert (alpha[32, :19] == 0.0).all()
        assert (alpha[32, 45:] == 0.0).all()


class TestCoverage:
    def test_ramp(self):
        npt.assert_allclose(coverage(np.array([-2.0, -0.5, 0.0, 0.25, 0.5, 3.0])),
                            [1.0, 1.0, 0.5, 0.25, 0.0, 0.0])

