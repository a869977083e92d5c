import math
import unittest

import numpy as np
from common.math import (
    angle_between,
    cos_between,
    projection,
    rejection,
    scalar_projection,
    vec3,
    wrap_degrees,
)
from common.types import OrientationFrame
from scipy.spatial.transform import Rotation as SciRot


class TestVectorMath(unittest.TestCase):
    def test_angle_between_self_and_opposite(self):
        for v in [vec3(1, 0, 0), vec3(0.3, -2.0, 5.5), vec3(-1e-3, 4e3, 7)]:
            with self.subTest(v=v.tolist()):
                self.assertAlmostEqual(angle_between(v, v), 0.0, places=6)
                self.assertAlmostEqual(angle_between(v, -v), math.pi, places=6)

    def test_angle_between_zero_vector_is_zero(self):
        zero = vec3(0, 0, 0)
        self.assertEqual(angle_between(zero, vec3(1, 2, 3)), 0.0)
        self.assertEqual(angle_between(vec3(1, 2, 3), zero), 0.0)
        self.assertEqual(cos_between(zero, zero), 0.0)

    def test_angle_between_matches_scipy_rotation(self):
        axis = np.array([0.0, 0.0, 1.0])
        v = vec3(1, 0, 0)
        for angle in [0.1, 1.0, 2.5, math.pi / 2]:
            with self.subTest(angle=angle):
                rotated = SciRot.from_rotvec(axis * angle).apply(v)
                self.assertAlmostEqual(angle_between(v, rotated), angle, places=6)

    def test_cos_between_is_clamped(self):
        v = vec3(1e-8, 1e8, 3.0)
        self.assertLessEqual(cos_between(v, v * 3.0), 1.0)
        self.assertGreaterEqual(cos_between(v, -v), -1.0)

    def test_projection_and_rejection_split_vector(self):
        a = vec3(3, 4, 5)
        for b in [vec3(0, 2, 0), vec3(0, 1, 0), vec3(1, 1, 1)]:
            with self.subTest(b=b.tolist()):
                proj = projection(a, b)
                rej = rejection(a, b)
                np.testing.assert_allclose(proj + rej, a, atol=1e-12)
                self.assertAlmostEqual(float(np.dot(rej, b)), 0.0, places=9)
        np.testing.assert_allclose(projection(a, vec3(0, 2, 0)), [0, 4, 0])

    def test_zero_vectors_short_circuit(self):
        zero = vec3(0, 0, 0)
        a = vec3(1, 2, 3)
        np.testing.assert_array_equal(projection(a, zero), zero)
        np.testing.assert_array_equal(rejection(zero, a), zero)
        self.assertEqual(scalar_projection(a, zero), 0.0)

    def test_scalar_projection_is_signed(self):
        a = vec3(3, -4, 0)
        self.assertAlmostEqual(scalar_projection(a, vec3(0, 1, 0)), -4.0)
        self.assertAlmostEqual(scalar_projection(a, vec3(0, 10, 0)), -4.0)
        self.assertAlmostEqual(scalar_projection(a, vec3(2, 0, 0)), 3.0)

    def test_vec3_rejects_non_finite(self):
        with self.assertRaises(ValueError):
            vec3(float("nan"), 0, 0)
        with self.assertRaises(ValueError):
            vec3([0, float("inf"), 0])
        with self.assertRaises(ValueError):
            vec3(1, 2)

    def test_wrap_degrees(self):
        self.assertEqual(wrap_degrees(200.0), -160.0)
        self.assertEqual(wrap_degrees(-200.0), 160.0)
        self.assertEqual(wrap_degrees(0.0), 0.0)
        self.assertEqual(wrap_degrees(180.0), -180.0)
        self.assertEqual(wrap_degrees(540.0), -180.0)
        self.assertEqual(wrap_degrees(-350.0), 10.0)


class TestOrientationFrame(unittest.TestCase):
    def test_from_forward_up_is_orthonormal(self):
        frame = OrientationFrame.from_forward_up((0.2, 0.1, -1.0), (0.0, 1.0, 0.3))
        np.testing.assert_allclose(frame.matrix @ frame.matrix.T, np.eye(3), atol=1e-12)
        np.testing.assert_allclose(np.cross(frame.right, frame.up), frame.backward, atol=1e-12)

    def test_from_rotation_matches_scipy_axes(self):
        rot = SciRot.from_euler("xyz", (0.1, 0.2, 0.3))
        frame = OrientationFrame.from_rotation(rot.as_matrix())
        np.testing.assert_allclose(frame.right, rot.apply([1, 0, 0]), atol=1e-12)
        np.testing.assert_allclose(frame.up, rot.apply([0, 1, 0]), atol=1e-12)
        np.testing.assert_allclose(frame.forward, rot.apply([0, 0, -1]), atol=1e-12)

    def test_to_local_inverts_rotation(self):
        rot = SciRot.from_euler("zyx", (0.7, -0.4, 1.2))
        frame = OrientationFrame.from_rotation(rot.as_matrix())
        world = np.array([0.5, -2.0, 1.0])
        np.testing.assert_allclose(frame.to_local(world), rot.inv().apply(world), atol=1e-12)

    def test_parallel_forward_up_rejected(self):
        with self.assertRaises(ValueError):
            OrientationFrame.from_forward_up((0, 1, 0), (0, 2, 0))

    def test_from_rotation_rejects_non_finite(self):
        m = np.eye(3)
        m[1, 2] = np.nan
        with self.assertRaises(ValueError):
            OrientationFrame.from_rotation(m)


if __name__ == '__main__':
    unittest.main()
