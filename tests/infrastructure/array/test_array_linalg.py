import unittest

import numpy as np

from keygrad import Array, ShapeError
from keygrad import linalg


def _rand(shape, seed=0, dtype=np.float64):
    rng = np.random.default_rng(seed)
    return Array.from_numpy(rng.standard_normal(size=shape).astype(dtype))


class TestMatmul(unittest.TestCase):
    CASES = [
        ((3, 4), (4, 5)),
        ((2, 3, 2), (2, 2, 4)),
        ((3, 2), (5, 2, 4)),
        ((1, 3, 2), (4, 2, 6)),
        ((2, 1, 3, 2), (3, 2, 2)),
        ((1, 1), (1, 1)),
    ]

    def test_matches_numpy(self):
        for i, (s1, s2) in enumerate(self.CASES):
            a, b = _rand(s1, seed=i), _rand(s2, seed=50 + i)
            out = a.matmul(b)
            ref = np.matmul(a.to_numpy(), b.to_numpy())
            with self.subTest(shapes=(s1, s2)):
                self.assertEqual(out.shape, ref.shape)
                np.testing.assert_allclose(out.to_numpy(), ref, rtol=1e-10)

    def test_ones_scenario(self):
        out = Array.ones((2, 3, 2)).matmul(Array.new(2.0, (2, 2, 4)))
        self.assertEqual(out, Array.new(4.0, (2, 3, 4)))

    def test_operator_and_free_function(self):
        a, b = _rand((2, 3)), _rand((3, 2), seed=1)
        self.assertEqual(a @ b, a.matmul(b))
        self.assertEqual(linalg.matmul(a, b), a.matmul(b))

    def test_inner_dimension_mismatch(self):
        with self.assertRaises(ShapeError):
            Array.ones((2, 3)).matmul(Array.ones((2, 3)))

    def test_rank_below_two(self):
        with self.assertRaises(ShapeError):
            Array.ones((3,)).matmul(Array.ones((3, 1)))

    def test_batch_mismatch(self):
        with self.assertRaises(ShapeError):
            Array.ones((2, 3, 2)).matmul(Array.ones((3, 2, 4)))


class TestTranspose(unittest.TestCase):
    def test_batched_transpose_matches_numpy(self):
        a = _rand((4, 2, 3))
        out = a.transpose()
        self.assertEqual(out.shape, (4, 3, 2))
        np.testing.assert_array_equal(
            out.to_numpy(), np.swapaxes(a.to_numpy(), -1, -2)
        )

    def test_transpose_of_product(self):
        a, b = _rand((3, 4)), _rand((4, 5), seed=3)
        lhs = a.matmul(b).transpose()
        rhs = b.transpose().matmul(a.transpose())
        self.assertTrue(lhs.allclose(rhs))

    def test_transpose_assign_updates_shape(self):
        a = Array.from_numpy(np.arange(6.0).reshape(2, 3))
        a.transpose_assign()
        self.assertEqual(a.shape, (3, 2))
        np.testing.assert_array_equal(a.to_numpy(), np.arange(6.0).reshape(2, 3).T)

    def test_T_property_and_free_function(self):
        a = _rand((2, 5))
        self.assertEqual(a.T, a.transpose())
        self.assertEqual(linalg.transpose(a), a.transpose())

    def test_rank_one_rejected(self):
        with self.assertRaises(ShapeError):
            Array.ones((3,)).transpose()


if __name__ == "__main__":
    unittest.main()
