import unittest

import numpy as np

from keygrad import Array, MissingPlaceholderError
from keygrad.infrastructure.graph import (
    AddOp,
    AddScalarOp,
    DivOp,
    DivScalarOp,
    MatMulOp,
    MulOp,
    MulScalarOp,
    Placeholder,
    ReduceMeanOp,
    ReduceSumOp,
    SubOp,
    SubScalarOp,
    Variable,
    WrapperOp,
    gradient,
)


def _var(values):
    return Variable(Array.from_numpy(np.asarray(values, dtype=np.float64)))


class TestGradientLaws(unittest.TestCase):
    def test_self_gradient_is_ones(self):
        a = Variable(Array.new(3.0, (2, 3)))
        self.assertEqual(a.grad(a), Array.ones((2, 3)))
        e = MulScalarOp(a, 2.0)
        self.assertEqual(e.grad(e), Array.ones((2, 3)))

    def test_unreachable_target_is_none(self):
        a = Variable(Array.ones((2, 2, 3)))
        b = Variable(Array.new(2.0, (2, 2, 3)))
        c = Variable(Array.ones((2, 2, 3)))
        self.assertIsNone(AddOp(a, b).grad(c))

    def test_target_above_root_is_none(self):
        a = Variable(Array.ones((2,)))
        e = AddScalarOp(a, 1.0)
        self.assertIsNone(a.grad(e))

    def test_add_scenario(self):
        a = Variable(Array.ones((2, 2, 3)))
        b = Variable(Array.new(2.0, (2, 2, 3)))
        self.assertEqual(AddOp(a, b).grad(a), Array.ones((2, 2, 3)))

    def test_matmul_scenario(self):
        a = Variable(Array.ones((2, 3, 2)))
        b = Variable(Array.new(2.0, (2, 2, 4)))
        c = MatMulOp(a, b)
        self.assertEqual(c.grad(a), Array.new(8.0, (2, 3, 2)))
        self.assertEqual(c.grad(b), Array.new(3.0, (2, 2, 4)))

    def test_gradient_function_matches_method(self):
        a = _var([1.0, 2.0])
        e = MulOp(a, a)
        self.assertEqual(gradient(e, a), e.grad(a))

    def test_placeholder_must_be_fed_for_gradient(self):
        p = Placeholder("x", (2,))
        w = _var([1.0, 2.0])
        e = MulOp(p, w)
        with self.assertRaises(MissingPlaceholderError):
            e.grad(w)
        g = e.grad(w, {"x": Array.from_list([3.0, 4.0])})
        self.assertEqual(g, Array.from_list([3.0, 4.0]))


class TestAccumulation(unittest.TestCase):
    def test_fan_out_sums_every_path(self):
        # e = (a + a) * a = 2a^2, de/da = 4a
        a = Variable(Array.ones((1,)))
        e = MulOp(AddOp(a, a), a)
        self.assertEqual(e.eval(), Array.new(2.0, (1,)))
        self.assertEqual(e.grad(a), Array.new(4.0, (1,)))
        a.assign(Array.new(3.0, (1,)))
        self.assertEqual(e.grad(a), Array.new(12.0, (1,)))

    def test_shared_intermediate_counted_once(self):
        # r = y + y with y = 2x, dr/dx = 4
        x = Variable(Array.ones((2,)))
        y = MulScalarOp(x, 2.0)
        r = AddOp(y, y)
        self.assertEqual(r.grad(x), Array.new(4.0, (2,)))

    def test_repeated_doubling(self):
        x = Variable(Array.ones((1,)))
        node = x
        for _ in range(12):
            node = AddOp(node, node)
        self.assertEqual(node.grad(x), Array.new(2.0 ** 12, (1,)))

    def test_gradient_to_intermediate_node(self):
        x = _var([1.0, 2.0])
        y = MulScalarOp(x, 3.0)
        r = MulOp(y, y)
        np.testing.assert_allclose(r.grad(y).to_numpy(), [6.0, 12.0])

    def test_deep_chain(self):
        x = Variable(Array.ones((1,)))
        node = x
        for _ in range(3000):
            node = AddScalarOp(node, 1.0)
        self.assertEqual(node.grad(x), Array.ones((1,)))

    def test_same_input_twice_in_one_node(self):
        a = _var([[1.0, 2.0], [3.0, 4.0]])
        self.assertEqual(SubOp(a, a).grad(a), Array.zeros((2, 2)))
        np.testing.assert_allclose(MulOp(a, a).grad(a).to_numpy(), [[2, 4], [6, 8]])
        A = a.eval().to_numpy()
        ones = np.ones((2, 2))
        np.testing.assert_allclose(
            MatMulOp(a, a).grad(a).to_numpy(), ones @ A.T + A.T @ ones
        )


class TestLocalRules(unittest.TestCase):
    def setUp(self):
        self.xv = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        self.yv = np.array([[0.5, 1.5, 2.0], [2.5, 1.0, 4.0]])
        self.x = Variable(Array.from_numpy(self.xv))
        self.y = Variable(Array.from_numpy(self.yv))

    def test_sub(self):
        e = SubOp(self.x, self.y)
        self.assertEqual(e.grad(self.x), Array.ones((2, 3)))
        self.assertEqual(e.grad(self.y), Array.new(-1.0, (2, 3)))

    def test_mul(self):
        e = MulOp(self.x, self.y)
        np.testing.assert_allclose(e.grad(self.x).to_numpy(), self.yv)
        np.testing.assert_allclose(e.grad(self.y).to_numpy(), self.xv)

    def test_div(self):
        e = DivOp(self.x, self.y)
        np.testing.assert_allclose(e.grad(self.x).to_numpy(), 1.0 / self.yv)
        np.testing.assert_allclose(
            e.grad(self.y).to_numpy(), -self.xv / self.yv ** 2
        )

    def test_scalar_ops(self):
        self.assertEqual(AddScalarOp(self.x, 3).grad(self.x), Array.ones((2, 3)))
        self.assertEqual(SubScalarOp(self.x, 3).grad(self.x), Array.ones((2, 3)))
        self.assertEqual(MulScalarOp(self.x, 3).grad(self.x), Array.new(3.0, (2, 3)))
        self.assertEqual(DivScalarOp(self.x, 4).grad(self.x), Array.new(0.25, (2, 3)))

    def test_matmul_general(self):
        rng = np.random.default_rng(3)
        av, bv = rng.standard_normal((3, 4)), rng.standard_normal((4, 2))
        a, b = Variable(Array.from_numpy(av)), Variable(Array.from_numpy(bv))
        e = MatMulOp(a, b)
        g = np.ones((3, 2))
        np.testing.assert_allclose(e.grad(a).to_numpy(), g @ bv.T)
        np.testing.assert_allclose(e.grad(b).to_numpy(), av.T @ g)

    def test_compute_accum_grad_for_non_input_is_none(self):
        e = AddOp(self.x, self.x)
        other = Variable(Array.ones((2, 3)))
        self.assertIsNone(e.compute_accum_grad({}, {}, other, Array.ones((2, 3))))

    def test_wrapper_routes_seed_to_root(self):
        e = AddOp(self.x, self.y)
        w = WrapperOp(e)
        seed = Array.ones((2, 3))
        self.assertIs(w.compute_accum_grad({}, {}, e, seed), seed)
        self.assertIsNone(w.compute_accum_grad({}, {}, self.x, seed))
        self.assertEqual(w.shape, e.shape)


class TestBroadcastGradients(unittest.TestCase):
    def test_broadcast_add_sums_back(self):
        a = Variable(Array.ones((2, 3)))
        b = Variable(Array.ones((3,)))
        e = AddOp(a, b)
        self.assertEqual(e.grad(b), Array.new(2.0, (3,)))
        self.assertEqual(e.grad(a), Array.ones((2, 3)))

    def test_broadcast_mul_sums_back(self):
        av = np.arange(6.0).reshape(2, 3)
        a = Variable(Array.from_numpy(av))
        b = _var([1.0, 2.0, 3.0])
        e = MulOp(a, b)
        np.testing.assert_allclose(e.grad(b).to_numpy(), av.sum(axis=0))
        np.testing.assert_allclose(e.grad(a).to_numpy(), np.tile([1.0, 2.0, 3.0], (2, 1)))

    def test_size_one_axes(self):
        a = Variable(Array.ones((3, 1, 2)))
        b = Variable(Array.ones((3, 5, 1)))
        e = MulOp(a, b)
        self.assertEqual(e.grad(a), Array.new(5.0, (3, 1, 2)))
        self.assertEqual(e.grad(b), Array.new(2.0, (3, 5, 1)))

    def test_matmul_broadcast_batch(self):
        a = Variable(Array.ones((3, 2)))
        b = Variable(Array.ones((5, 2, 4)))
        e = MatMulOp(a, b)
        self.assertEqual(e.grad(a), Array.new(20.0, (3, 2)))
        self.assertEqual(e.grad(b), Array.new(3.0, (5, 2, 4)))


class TestReduceGradients(unittest.TestCase):
    def setUp(self):
        self.x = Variable(Array.from_numpy(np.arange(24.0).reshape(2, 3, 4)))

    def test_sum_axis(self):
        for keep in (False, True):
            e = ReduceSumOp(self.x, axis=1, keep_dims=keep)
            self.assertEqual(e.grad(self.x), Array.ones((2, 3, 4)))

    def test_sum_all(self):
        self.assertEqual(ReduceSumOp(self.x).grad(self.x), Array.ones((2, 3, 4)))

    def test_mean_axis_divides_by_axis_length(self):
        for keep in (False, True):
            e = ReduceMeanOp(self.x, axis=1, keep_dims=keep)
            self.assertTrue(e.grad(self.x).allclose(Array.new(1.0 / 3, (2, 3, 4))))

    def test_mean_all_divides_by_count(self):
        e = ReduceMeanOp(self.x, keep_dims=True)
        self.assertTrue(e.grad(self.x).allclose(Array.new(1.0 / 24, (2, 3, 4))))

    def test_reduce_then_weight(self):
        # d/dx sum_j(w_j * sum_i x_ij) = w_j broadcast over i
        w = _var([1.0, 2.0, 3.0, 4.0])
        s = ReduceSumOp(self.x, axis=1)
        e = MulOp(s, w)
        ref = np.broadcast_to(np.array([1.0, 2.0, 3.0, 4.0]), (2, 3, 4))
        np.testing.assert_allclose(e.grad(self.x).to_numpy(), ref)


if __name__ == "__main__":
    unittest.main()
