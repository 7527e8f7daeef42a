import unittest

import numpy as np

from keygrad import Array, ShapeError
from keygrad import linalg


class TestReduce(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(7)
        self.x = rng.uniform(0.5, 2.0, size=(2, 3, 4))
        self.a = Array.from_numpy(self.x)

    def test_named_reductions_match_numpy_per_axis(self):
        pairs = [
            ("reduce_sum", np.sum),
            ("reduce_mean", np.mean),
            ("reduce_min", np.min),
            ("reduce_max", np.max),
            ("reduce_prod", np.prod),
        ]
        for name, ref_fn in pairs:
            for axis in range(3):
                with self.subTest(op=name, axis=axis):
                    out = getattr(self.a, name)(axis)
                    ref = ref_fn(self.x, axis=axis)
                    self.assertEqual(out.shape, ref.shape)
                    np.testing.assert_allclose(out.to_numpy(), ref, rtol=1e-10)

    def test_axis_none_reduces_everything(self):
        for name, ref_fn in [
            ("reduce_sum", np.sum),
            ("reduce_mean", np.mean),
            ("reduce_min", np.min),
            ("reduce_max", np.max),
            ("reduce_prod", np.prod),
        ]:
            with self.subTest(op=name):
                out = getattr(self.a, name)()
                self.assertEqual(out.shape, (1,))
                np.testing.assert_allclose(out.data[0], ref_fn(self.x), rtol=1e-10)

    def test_keep_dims(self):
        out = self.a.reduce_sum(1, keep_dims=True)
        self.assertEqual(out.shape, (2, 1, 4))
        np.testing.assert_allclose(
            out.to_numpy(), self.x.sum(axis=1, keepdims=True), rtol=1e-10
        )
        self.assertEqual(self.a.reduce_max(None, keep_dims=True).shape, (1, 1, 1))

    def test_mean_is_sum_over_axis_length(self):
        for axis in (None, 0, 1, 2):
            count = self.x.size if axis is None else self.x.shape[axis]
            mean = self.a.reduce_mean(axis)
            total = self.a.reduce_sum(axis)
            self.assertTrue(mean.allclose(total.div_scalar(count)))

    def test_min_max_of_negative_values(self):
        a = Array.from_list([-3.0, -1.0, -2.0])
        self.assertEqual(a.reduce_max().data[0], -1.0)
        self.assertEqual(a.reduce_min().data[0], -3.0)

    def test_rank_one_axis_reduction(self):
        out = Array.from_list([1.0, 2.0, 3.0]).reduce_sum(0)
        self.assertEqual(out.shape, (1,))
        self.assertEqual(out.data[0], 6.0)

    def test_generic_reducer_callable(self):
        out = linalg.reduce(self.a, lambda acc, v: acc + 2 * v, axis=2)
        ref = self.x[..., 0] + 2 * self.x[..., 1:].sum(axis=2)
        np.testing.assert_allclose(out.to_numpy(), ref, rtol=1e-10)

    def test_generic_reducer_ufunc(self):
        out = linalg.reduce(self.a, np.maximum, axis=0, keep_dims=True)
        np.testing.assert_allclose(
            out.to_numpy(), self.x.max(axis=0, keepdims=True)
        )

    def test_axis_out_of_range(self):
        with self.assertRaises(ShapeError):
            self.a.reduce_sum(3)
        with self.assertRaises(ShapeError):
            self.a.reduce_sum(-1)

    def test_free_functions(self):
        self.assertEqual(linalg.reduce_sum(self.a, 0), self.a.reduce_sum(0))
        self.assertEqual(linalg.reduce_mean(self.a, 1), self.a.reduce_mean(1))
        self.assertEqual(linalg.reduce_min(self.a), self.a.reduce_min())
        self.assertEqual(linalg.reduce_max(self.a), self.a.reduce_max())
        self.assertEqual(linalg.reduce_prod(self.a, 2), self.a.reduce_prod(2))


if __name__ == "__main__":
    unittest.main()
