"""Tests for vector and quaternion helpers."""

import math
import numpy as np

from boids.vecmath import (
    clamp_components, normalize, quat_from_axis_angle, quat_identity,
    quat_multiply, quat_normalize, quat_rotate, quat_to_matrix,
)


class TestNormalize:

    def test_unit_length(self):
        assert np.allclose(normalize(np.array([3.0, 0.0, 4.0])), [0.6, 0.0, 0.8])

    def test_zero_vector_stays_zero(self):
        assert not normalize(np.zeros(3)).any()


class TestClamp:

    def test_clamps_in_place(self):
        v = np.array([0.2, -0.2, 0.05])
        result = clamp_components(v, -0.1, 0.1)
        assert result is v
        assert np.allclose(v, [0.1, -0.1, 0.05])


class TestQuaternions:

    def test_identity_leaves_vector(self):
        v = np.array([1.0, 2.0, 3.0])
        assert np.allclose(quat_rotate(quat_identity(), v), v)

    def test_axis_angle_rotation(self):
        q = quat_from_axis_angle(np.array([0.0, 0.0, 1.0]), math.pi / 2)
        assert np.allclose(quat_rotate(q, np.array([1.0, 0.0, 0.0])), [0.0, 1.0, 0.0])

    def test_product_applies_right_operand_first(self):
        about_z = quat_from_axis_angle(np.array([0.0, 0.0, 1.0]), math.pi / 2)
        about_x = quat_from_axis_angle(np.array([1.0, 0.0, 0.0]), math.pi / 2)
        combined = quat_multiply(about_x, about_z)
        # x -> y under z, then y -> z under x
        assert np.allclose(quat_rotate(combined, np.array([1.0, 0.0, 0.0])), [0.0, 0.0, 1.0])

    def test_normalize_zero_gives_identity(self):
        assert np.array_equal(quat_normalize(np.zeros(4)), quat_identity())

    def test_identity_matrix(self):
        expected = [1.0, 0, 0, 0, 0, 1.0, 0, 0, 0, 0, 1.0, 0, 0, 0, 0, 1.0]
        assert np.allclose(quat_to_matrix(quat_identity()), expected)

    def test_matrix_matches_rotation(self):
        q = quat_from_axis_angle(normalize(np.array([1.0, 1.0, 0.0])), 0.7)
        m = np.array(quat_to_matrix(q)).reshape(4, 4).T  # column-major -> row-major
        v = np.array([0.3, -0.2, 0.9])
        assert np.allclose(m[:3, :3] @ v, quat_rotate(q, v))
