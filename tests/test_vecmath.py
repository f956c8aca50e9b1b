import unittest
import warnings

import numpy as np

from neural_layer.exceptions import DimensionMismatchError, PreconditionError
from neural_layer.vecmath import (
    as_vector,
    hadamard,
    mat_diff,
    mat_vec,
    mse,
    outer,
    scale,
    sigmoid,
    sigmoid_derivative,
    vec_diff,
)


class TestMatVec(unittest.TestCase):
    """Test suite for the matrix-vector product."""

    def test_rows_are_dot_products(self):
        M = np.array([[1.0, 2.0, 3.0],
                      [0.0, -1.0, 0.5]])
        v = np.array([1.0, 1.0, 2.0])
        np.testing.assert_array_almost_equal(mat_vec(M, v), [9.0, 0.0])

    def test_writes_into_out(self):
        M = np.eye(2)
        out = np.zeros(2)
        result = mat_vec(M, [3.0, 4.0], out=out)
        self.assertIs(result, out)
        np.testing.assert_array_equal(out, [3.0, 4.0])

    def test_column_mismatch_raises(self):
        with self.assertRaises(DimensionMismatchError) as context:
            mat_vec(np.ones((2, 3)), np.ones(2))
        self.assertIn("3 columns", str(context.exception))

    def test_out_shape_mismatch_raises(self):
        with self.assertRaises(DimensionMismatchError):
            mat_vec(np.ones((2, 3)), np.ones(3), out=np.zeros(3))

    def test_non_matrix_raises(self):
        with self.assertRaises(DimensionMismatchError):
            mat_vec(np.ones(3), np.ones(3))


class TestSigmoid(unittest.TestCase):
    """Test suite for the sigmoid and its derivative."""

    def test_zero_is_half(self):
        self.assertEqual(sigmoid([0.0])[0], 0.5)

    def test_matches_logistic_formula(self):
        x = np.linspace(-8.0, 8.0, 33)
        np.testing.assert_allclose(sigmoid(x), 1.0 / (1.0 + np.exp(-x)), rtol=1e-12)

    def test_extreme_inputs_do_not_overflow(self):
        x = np.array([-1000.0, -50.0, 50.0, 1000.0])
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            y = sigmoid(x)
        self.assertTrue(np.all(np.isfinite(y)))
        self.assertEqual(y[0], 0.0)
        self.assertEqual(y[-1], 1.0)

    def test_in_place(self):
        x = np.array([-1.0, 0.0, 2.0])
        expected = 1.0 / (1.0 + np.exp(-x))
        result = sigmoid(x, out=x)
        self.assertIs(result, x)
        np.testing.assert_allclose(x, expected, rtol=1e-12)

    def test_nan_passes_through(self):
        y = sigmoid([np.nan, 0.0])
        self.assertTrue(np.isnan(y[0]))
        self.assertEqual(y[1], 0.5)

    def test_derivative_at_activation(self):
        np.testing.assert_array_almost_equal(
            sigmoid_derivative([0.5, 0.0, 1.0, 0.2]), [0.25, 0.0, 0.0, 0.16])

    def test_derivative_matches_finite_difference(self):
        z = np.array([-2.0, -0.3, 0.0, 1.7])
        h = 1e-6
        numeric = (sigmoid(z + h) - sigmoid(z - h)) / (2 * h)
        np.testing.assert_allclose(sigmoid_derivative(sigmoid(z)), numeric, rtol=1e-6)


class TestElementwise(unittest.TestCase):
    """Test suite for diff, hadamard, scale and outer."""

    def test_vec_diff(self):
        np.testing.assert_array_equal(vec_diff([3.0, 1.0], [1.0, 1.5]), [2.0, -0.5])

    def test_vec_diff_in_place(self):
        a = np.array([3.0, 1.0])
        vec_diff(a, [1.0, 1.0], out=a)
        np.testing.assert_array_equal(a, [2.0, 0.0])

    def test_hadamard(self):
        np.testing.assert_array_equal(hadamard([1.0, 2.0, 3.0], [2.0, 0.5, -1.0]), [2.0, 1.0, -3.0])

    def test_scale(self):
        np.testing.assert_array_equal(scale([1.0, -2.0], 0.5), [0.5, -1.0])

    def test_outer(self):
        G = outer([1.0, 2.0], [3.0, 0.0, -1.0])
        np.testing.assert_array_equal(G, [[3.0, 0.0, -1.0],
                                          [6.0, 0.0, -2.0]])

    def test_outer_out_shape_mismatch_raises(self):
        with self.assertRaises(DimensionMismatchError):
            outer([1.0, 2.0], [3.0], out=np.zeros((1, 2)))

    def test_out_buffer_type_checked(self):
        with self.assertRaises(PreconditionError):
            vec_diff([1.0], [2.0], out=[0.0])
        with self.assertRaises(PreconditionError):
            outer([1.0], [2.0], out=np.zeros((1, 1), dtype=np.int64))
        with self.assertRaises(PreconditionError):
            mat_vec(np.eye(2), [1.0, 1.0], out=(0.0, 0.0))

    def test_mat_diff(self):
        a = np.ones((2, 2))
        mat_diff(a, np.eye(2), out=a)
        np.testing.assert_array_equal(a, [[0.0, 1.0], [1.0, 0.0]])

    def test_length_mismatch_raises(self):
        for op in (vec_diff, hadamard):
            with self.assertRaises(DimensionMismatchError):
                op([1.0, 2.0], [1.0, 2.0, 3.0])
        with self.assertRaises(DimensionMismatchError):
            mat_diff(np.ones((2, 2)), np.ones((2, 3)))

    def test_integer_input_is_promoted(self):
        self.assertTrue(np.issubdtype(as_vector([1, 2]).dtype, np.floating))


class TestMSE(unittest.TestCase):
    """Test suite for the mean squared error reduction."""

    def test_known_value(self):
        self.assertAlmostEqual(mse([1.0, 2.0, 3.0], [1.0, 1.0, 1.0]), 5.0 / 3.0)

    def test_identical_vectors(self):
        v = np.random.default_rng(0).standard_normal(10)
        self.assertEqual(mse(v, v), 0.0)

    def test_symmetric(self):
        rng = np.random.default_rng(1)
        a, b = rng.standard_normal(7), rng.standard_normal(7)
        self.assertEqual(mse(a, b), mse(b, a))

    def test_returns_float(self):
        self.assertIsInstance(mse([1.0], [0.0]), float)

    def test_empty_raises(self):
        with self.assertRaises(DimensionMismatchError):
            mse([], [])

    def test_length_mismatch_raises(self):
        with self.assertRaises(DimensionMismatchError):
            mse([1.0, 2.0], [1.0])


if __name__ == "__main__":
    unittest.main()
