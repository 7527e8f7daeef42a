import unittest
import warnings
from unittest import mock

import numpy as np

from keygrad import Array, ShapeError
from keygrad.infrastructure.array import _config
from keygrad.infrastructure.ops import matmul_cpu
from keygrad.infrastructure.ops.matmul_cpu import (
    general_matmul_2d_matrix_slices,
    matmul_2d_matrix_slices,
)
from keygrad.infrastructure.ops.transpose_cpu import transpose_2d_matrix_slices


class TestMatmulKernels(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(11)
        self.a = rng.standard_normal((5, 7))
        self.b = rng.standard_normal((7, 4))

    def test_blas_kernel(self):
        out = np.empty(20)
        matmul_2d_matrix_slices(self.a.reshape(-1), 5, 7, self.b.reshape(-1), 7, 4, out)
        np.testing.assert_allclose(out.reshape(5, 4), self.a @ self.b, rtol=1e-12)

    def test_reference_kernel_matches_blas(self):
        out = np.empty(20)
        general_matmul_2d_matrix_slices(
            self.a.reshape(-1), 5, 7, self.b.reshape(-1), 4, out
        )
        np.testing.assert_allclose(out.reshape(5, 4), self.a @ self.b, rtol=1e-10)

    def test_disabled_blas_uses_reference_path(self):
        a = Array.from_numpy(self.a)
        b = Array.from_numpy(self.b)
        with mock.patch.object(_config, "BLAS_ENABLED", False):
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                out = a.matmul(b)
        np.testing.assert_allclose(out.to_numpy(), self.a @ self.b, rtol=1e-10)

    def test_non_blas_dtype_warns_once(self):
        a = Array.from_numpy(self.a.astype(np.float16))
        b = Array.from_numpy(self.b.astype(np.float16))
        with mock.patch.object(matmul_cpu, "_warned_dtypes", set()), mock.patch.object(
            _config, "BLAS_ENABLED", True
        ):
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                out = a.matmul(b)
                a.matmul(b)
        runtime = [w for w in caught if issubclass(w.category, RuntimeWarning)]
        self.assertEqual(len(runtime), 1)
        self.assertIn("float16", str(runtime[0].message))
        self.assertEqual(out.dtype, np.float16)
        np.testing.assert_allclose(
            out.to_numpy().astype(np.float64),
            self.a.astype(np.float16).astype(np.float64)
            @ self.b.astype(np.float16).astype(np.float64),
            rtol=5e-2,
            atol=5e-2,
        )

    def test_buffer_length_checks(self):
        with self.assertRaises(ShapeError):
            matmul_2d_matrix_slices(
                self.a.reshape(-1), 5, 7, self.b.reshape(-1), 7, 4, np.empty(19)
            )
        with self.assertRaises(ShapeError):
            matmul_2d_matrix_slices(
                self.a.reshape(-1)[:-1], 5, 7, self.b.reshape(-1), 7, 4, np.empty(20)
            )

    def test_inner_dimension_check(self):
        with self.assertRaises(ShapeError):
            matmul_2d_matrix_slices(
                self.a.reshape(-1), 5, 7, self.b.reshape(-1), 4, 7, np.empty(35)
            )


class TestTransposeKernel(unittest.TestCase):
    def test_transpose_slice(self):
        src = np.arange(6.0)
        out = np.empty(6)
        transpose_2d_matrix_slices(src, 2, 3, out)
        np.testing.assert_array_equal(out, np.arange(6.0).reshape(2, 3).T.reshape(-1))

    def test_length_check(self):
        with self.assertRaises(ShapeError):
            transpose_2d_matrix_slices(np.arange(6.0), 2, 3, np.empty(5))


if __name__ == "__main__":
    unittest.main()
