"""
Forward pass, loss and backward pass of a single sigmoid layer.

    output = sigmoid(W @ input)
    loss   = mean((output - expected)**2)
    W     -= eta * outer((output - expected) * output * (1 - output), input)

The weight matrix W has shape (rows, cols) and is owned by the caller.
`backward` updates it in place.
"""

import logging
from typing import Dict, Optional

import numpy as np

from .config import resolve_config
from .exceptions import DimensionMismatchError, PreconditionError
from .scratch import ScratchBuffers, default_scratch
from .vecmath import (
    as_matrix,
    as_vector,
    check_buffer,
    hadamard,
    mat_diff,
    mat_vec,
    outer,
    scale,
    sigmoid,
    sigmoid_derivative,
    vec_diff,
)
from . import vecmath

logger = logging.getLogger(__name__)


def _check_length(vec: np.ndarray, expected: int, name: str, what: str):
    if vec.shape[0] != expected:
        raise DimensionMismatchError(
            f"{name} has length {vec.shape[0]} but weights have {expected} {what}"
        )


def forward(x, weights, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Forward pass: ``out = sigmoid(weights @ x)``.

    Parameters
    ----------
    x : np.ndarray
        Input, shape (cols,).
    weights : np.ndarray
        Weight matrix, shape (rows, cols).
    out : np.ndarray, optional
        Output buffer, shape (rows,). Holds the pre-activation and is then
        overwritten in place by the activation.

    Returns
    -------
    out : np.ndarray
        Activations, shape (rows,), each in (0, 1).
    """
    weights = as_matrix(weights, "weights")
    x = as_vector(x, "input")
    rows, cols = weights.shape
    _check_length(x, cols, "input", "columns")
    if out is not None:
        check_buffer(out, "out")
        _check_length(out, rows, "out", "rows")

    out = mat_vec(weights, x, out=out)
    return sigmoid(out, out=out)


def mse(actual, expected) -> float:
    """Mean squared error between a layer output and its target."""
    actual = as_vector(actual, "actual")
    expected = as_vector(expected, "expected")
    if actual.shape != expected.shape:
        raise DimensionMismatchError(
            f"actual has length {actual.shape[0]} but expected has length {expected.shape[0]}"
        )
    return vecmath.mse(actual, expected)


def backward(
    actual,
    expected,
    x,
    eta: float,
    weights: np.ndarray,
    scratch: Optional[ScratchBuffers] = None,
):
    """
    Backward pass: one gradient descent step on `weights`, in place.

    Parameters
    ----------
    actual : np.ndarray
        Output of `forward` for `x`, shape (rows,). Not modified.
    expected : np.ndarray
        Target output, shape (rows,).
    x : np.ndarray
        The input given to `forward`, shape (cols,).
    eta : float
        Learning rate.
    weights : np.ndarray
        Weight matrix, shape (rows, cols). Updated in place.
    scratch : ScratchBuffers, optional
        Temporaries for this training context. Defaults to the calling
        thread's context.

    Notes
    -----
    The derivative is taken from `actual` before the error term is formed:

    1. derivative = actual * (1 - actual)
    2. delta = actual - expected
    3. delta = delta * derivative
    4. delta = eta * delta
    5. gradient = outer(delta, x)
    6. weights -= gradient

    All shape and capacity checks run before anything is written.
    """
    if not isinstance(weights, np.ndarray):
        raise PreconditionError(f"weights must be a numpy array updated in place, got {type(weights).__name__}")
    if weights.ndim != 2:
        raise DimensionMismatchError(f"weights must be 2-D, got shape {weights.shape}")
    if not np.issubdtype(weights.dtype, np.floating):
        raise PreconditionError(f"weights must have a floating dtype, got {weights.dtype}")
    if not weights.flags.writeable:
        raise PreconditionError("weights must be writeable")
    if np.ndim(eta) != 0:
        raise PreconditionError(f"eta must be a scalar, got shape {np.shape(eta)}")

    actual = as_vector(actual, "actual")
    expected = as_vector(expected, "expected")
    x = as_vector(x, "input")
    rows, cols = weights.shape
    _check_length(actual, rows, "actual", "rows")
    _check_length(expected, rows, "expected", "rows")
    _check_length(x, cols, "input", "columns")

    if scratch is None:
        scratch = default_scratch()
    derivative, delta, gradient = scratch.acquire(rows, cols, weights.dtype)

    sigmoid_derivative(actual, out=derivative)
    vec_diff(actual, expected, out=delta)
    hadamard(delta, derivative, out=delta)
    scale(delta, eta, out=delta)
    outer(delta, x, out=gradient)
    mat_diff(weights, gradient, out=weights)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("backward %dx%d eta=%g max|grad|=%.4g", rows, cols, eta,
                     float(np.max(np.abs(gradient))) if gradient.size else 0.0)


class SigmoidLayer:
    """
    Single sigmoid layer that owns its weights and scratch space.

    Parameters
    ----------
    n_in : int
        Input dimension (weight columns).
    n_out : int
        Output dimension (weight rows).
    seed : int
        Random seed for the weight initialization.
    cfg : dict, optional
        See `neural_layer.config.DEFAULT_CONFIG`.
    """

    def __init__(self, n_in: int, n_out: int, seed: int = 0, cfg: Optional[Dict] = None):
        cfg = resolve_config(cfg)
        self.n_in = n_in
        self.n_out = n_out

        self.scratch = ScratchBuffers.from_config(cfg)
        self.scratch.check_capacity(n_out, n_in)

        rng = np.random.default_rng(seed)
        self.W = (0.1 * rng.standard_normal((n_out, n_in))).astype(cfg['dtype'])

    def __repr__(self):
        return "<SigmoidLayer n_in=%d, n_out=%d>" % (self.n_in, self.n_out)

    def forward(self, x, out: Optional[np.ndarray] = None) -> np.ndarray:
        return forward(x, self.W, out=out)

    def loss(self, x, expected) -> float:
        return mse(self.forward(x), expected)

    def backward(self, actual, expected, x, eta: float):
        backward(actual, expected, x, eta, self.W, scratch=self.scratch)

    def train_step(self, x, expected, eta: float) -> float:
        """Forward, score and update on one sample. Returns the loss before the update."""
        actual = self.forward(x)
        loss = mse(actual, expected)
        self.backward(actual, expected, x, eta)
        return loss
