"""
Vector and matrix primitives used by the layer passes.

Every primitive validates operand lengths and accepts an optional ``out``
buffer. When ``out`` is given the result is written into it and ``out`` is
returned; otherwise a new array is allocated. ``out`` may alias an input.
"""

import numpy as np

from .exceptions import DimensionMismatchError, PreconditionError


def as_vector(v, name: str = "vector") -> np.ndarray:
    """Return `v` as a 1-D floating array, raising if it is not 1-D."""
    arr = np.asarray(v)
    if arr.ndim != 1:
        raise DimensionMismatchError(f"{name} must be 1-D, got shape {arr.shape}")
    if not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(float)
    return arr


def as_matrix(m, name: str = "matrix") -> np.ndarray:
    """Return `m` as a 2-D floating array, raising if it is not 2-D."""
    arr = np.asarray(m)
    if arr.ndim != 2:
        raise DimensionMismatchError(f"{name} must be 2-D, got shape {arr.shape}")
    if not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(float)
    return arr


def _check_same_length(a: np.ndarray, b: np.ndarray, a_name: str, b_name: str):
    if a.shape != b.shape:
        raise DimensionMismatchError(
            f"{a_name} has length {a.shape[0]} but {b_name} has length {b.shape[0]}"
        )


def check_buffer(out, name: str = "out") -> np.ndarray:
    """Raise unless `out` is a floating numpy array results can be written into."""
    if not isinstance(out, np.ndarray):
        raise PreconditionError(f"{name} must be a numpy array, got {type(out).__name__}")
    if not np.issubdtype(out.dtype, np.floating):
        raise PreconditionError(f"{name} must have a floating dtype, got {out.dtype}")
    if not out.flags.writeable:
        raise PreconditionError(f"{name} must be writeable")
    return out


def _output(out, shape, dtype) -> np.ndarray:
    if out is None:
        return np.empty(shape, dtype=dtype)
    check_buffer(out)
    if out.shape != shape:
        raise DimensionMismatchError(f"out has shape {out.shape}, expected {shape}")
    return out


def mat_vec(matrix, vec, out=None) -> np.ndarray:
    """
    Matrix-vector product.

    Parameters
    ----------
    matrix : np.ndarray
        Shape (r, c).
    vec : np.ndarray
        Shape (c,).
    out : np.ndarray, optional
        Shape (r,).

    Returns
    -------
    out : np.ndarray
        ``out[i] = dot(matrix[i], vec)``.
    """
    matrix = as_matrix(matrix, "matrix")
    vec = as_vector(vec, "vec")
    rows, cols = matrix.shape
    if vec.shape[0] != cols:
        raise DimensionMismatchError(
            f"matrix has {cols} columns but vec has length {vec.shape[0]}"
        )
    out = _output(out, (rows,), np.result_type(matrix, vec))
    return np.matmul(matrix, vec, out=out)


def sigmoid(x, out=None) -> np.ndarray:
    """Element-wise logistic sigmoid, branching on sign so exp never overflows."""
    x = as_vector(x, "x")
    out = _output(out, x.shape, x.dtype)

    e = np.exp(-np.abs(x))
    positive = x >= 0
    np.divide(1.0, 1.0 + e, out=out, where=positive)
    np.divide(e, 1.0 + e, out=out, where=~positive)
    return out


def sigmoid_derivative(y, out=None) -> np.ndarray:
    """
    Sigmoid derivative evaluated at an already-activated output.

    For ``y = sigmoid(z)``, ``d sigmoid / dz = y * (1 - y)``. The argument is
    the activation `y`, not the pre-activation `z`.
    """
    y = as_vector(y, "y")
    out = _output(out, y.shape, y.dtype)
    return np.multiply(y, 1.0 - y, out=out)


def vec_diff(a, b, out=None) -> np.ndarray:
    """Element-wise ``a - b``."""
    a = as_vector(a, "a")
    b = as_vector(b, "b")
    _check_same_length(a, b, "a", "b")
    out = _output(out, a.shape, np.result_type(a, b))
    return np.subtract(a, b, out=out)


def mat_diff(a, b, out=None) -> np.ndarray:
    """Element-wise ``a - b`` over two matrices of identical shape."""
    a = as_matrix(a, "a")
    b = as_matrix(b, "b")
    if a.shape != b.shape:
        raise DimensionMismatchError(f"a has shape {a.shape} but b has shape {b.shape}")
    out = _output(out, a.shape, np.result_type(a, b))
    return np.subtract(a, b, out=out)


def hadamard(a, b, out=None) -> np.ndarray:
    """Element-wise product of two equal-length vectors."""
    a = as_vector(a, "a")
    b = as_vector(b, "b")
    _check_same_length(a, b, "a", "b")
    out = _output(out, a.shape, np.result_type(a, b))
    return np.multiply(a, b, out=out)


def scale(vec, scalar: float, out=None) -> np.ndarray:
    """Multiply every element of `vec` by `scalar`."""
    vec = as_vector(vec, "vec")
    out = _output(out, vec.shape, vec.dtype)
    return np.multiply(vec, scalar, out=out)


def outer(u, v, out=None) -> np.ndarray:
    """
    Outer product.

    Returns
    -------
    out : np.ndarray
        Shape (len(u), len(v)) with ``out[i, j] = u[i] * v[j]``.
    """
    u = as_vector(u, "u")
    v = as_vector(v, "v")
    out = _output(out, (u.shape[0], v.shape[0]), np.result_type(u, v))
    return np.outer(u, v, out=out)


def mse(a, b) -> float:
    """Mean squared error ``(1/n) * sum((a - b)**2)``."""
    a = as_vector(a, "a")
    b = as_vector(b, "b")
    _check_same_length(a, b, "a", "b")
    n = a.shape[0]
    if n == 0:
        raise DimensionMismatchError("mse is undefined for empty vectors")
    diff = a - b
    return float(np.dot(diff, diff) / n)
