import unittest

from keygrad import ShapeError
from keygrad.infrastructure.array._shape import (
    are_broadcastable,
    broadcast_shape,
    check_reduce_axis,
    check_shape_positive,
    matching_trailing_dims,
    matmul_shape,
    pad_shapes,
    reduce_shape,
    reduced_count,
    shape_product,
    transpose_shape,
)


class TestShapeValidation(unittest.TestCase):
    def test_shape_product(self):
        self.assertEqual(shape_product((2, 3, 4)), 24)
        self.assertEqual(shape_product(()), 1)

    def test_positive_shape_normalized_to_tuple(self):
        self.assertEqual(check_shape_positive([2, 3]), (2, 3))

    def test_zero_dimension_rejected(self):
        with self.assertRaises(ShapeError):
            check_shape_positive((2, 0, 3))

    def test_negative_dimension_rejected(self):
        with self.assertRaises(ShapeError):
            check_shape_positive((2, -1))

    def test_empty_shape_rejected(self):
        with self.assertRaises(ShapeError):
            check_shape_positive(())

    def test_non_integer_dimension_rejected(self):
        with self.assertRaises(TypeError):
            check_shape_positive((2, 1.5))
        with self.assertRaises(TypeError):
            check_shape_positive((True, 2))


class TestBroadcastShapes(unittest.TestCase):
    def test_pad_shapes(self):
        self.assertEqual(pad_shapes((3,), (2, 4, 3)), ((1, 1, 3), (2, 4, 3)))
        self.assertEqual(pad_shapes((2, 3), (3,)), ((2, 3), (1, 3)))

    def test_broadcast_shape_takes_max(self):
        self.assertEqual(broadcast_shape((3, 1, 2), (3, 5, 1)), (3, 5, 2))
        self.assertEqual(broadcast_shape((4,), (2, 3, 4)), (2, 3, 4))
        self.assertEqual(broadcast_shape((1,), (1,)), (1,))

    def test_incompatible_shapes(self):
        self.assertFalse(are_broadcastable((2, 3), (4,)))
        with self.assertRaises(ShapeError) as cm:
            broadcast_shape((2, 3), (4,), op="add")
        self.assertEqual(cm.exception.op, "add")

    def test_matching_trailing_dims(self):
        self.assertEqual(matching_trailing_dims((2, 3, 4), (5, 3, 4)), 2)
        self.assertEqual(matching_trailing_dims((2, 3, 1), (3, 4)), 0)
        self.assertEqual(matching_trailing_dims((2, 3), (2, 3)), 2)
        self.assertEqual(matching_trailing_dims((4,), (2, 3, 4)), 1)


class TestMatmulAndTransposeShapes(unittest.TestCase):
    def test_matmul_shape_batched(self):
        self.assertEqual(matmul_shape((2, 3, 2), (2, 2, 4)), (2, 3, 4))
        self.assertEqual(matmul_shape((3, 2), (5, 2, 4)), (5, 3, 4))
        self.assertEqual(matmul_shape((7, 1, 3, 2), (4, 2, 4)), (7, 4, 3, 4))

    def test_matmul_requires_rank_two(self):
        with self.assertRaises(ShapeError):
            matmul_shape((3,), (3, 2))

    def test_matmul_inner_mismatch(self):
        with self.assertRaises(ShapeError):
            matmul_shape((2, 3), (2, 3))

    def test_matmul_batch_mismatch(self):
        with self.assertRaises(ShapeError):
            matmul_shape((2, 3, 2), (3, 2, 4))

    def test_transpose_shape(self):
        self.assertEqual(transpose_shape((5, 2, 3)), (5, 3, 2))
        with self.assertRaises(ShapeError):
            transpose_shape((4,))


class TestReduceShapes(unittest.TestCase):
    def test_axis_none(self):
        self.assertEqual(reduce_shape((2, 3), None, False), (1,))
        self.assertEqual(reduce_shape((2, 3), None, True), (1, 1))

    def test_axis_removed_or_kept(self):
        self.assertEqual(reduce_shape((2, 3, 4), 1, False), (2, 4))
        self.assertEqual(reduce_shape((2, 3, 4), 1, True), (2, 1, 4))

    def test_rank_one_reduces_to_one_element(self):
        self.assertEqual(reduce_shape((5,), 0, False), (1,))

    def test_axis_out_of_range(self):
        with self.assertRaises(ShapeError):
            reduce_shape((2, 3), 2, False)

    def test_negative_axis_rejected(self):
        with self.assertRaises(ShapeError):
            check_reduce_axis((2, 3), -1)

    def test_non_int_axis_rejected(self):
        with self.assertRaises(TypeError):
            check_reduce_axis((2, 3), 1.0)

    def test_reduced_count(self):
        self.assertEqual(reduced_count((2, 3, 4), None), 24)
        self.assertEqual(reduced_count((2, 3, 4), 2), 4)


if __name__ == "__main__":
    unittest.main()
