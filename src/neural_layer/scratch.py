"""
Scratch space for the backward pass.

A ScratchBuffers object holds the three temporaries of one training context:

- derivative : sigmoid derivative of the forward output, shape (rows,)
- delta      : scaled error term, shape (rows,)
- gradient   : outer product delta x input, shape (rows, cols)

Buffers are sized from the operands at call time and reused while the shape
and dtype stay the same. Contents are write-before-read on every call. An
optional ceiling turns oversize operands into CapacityExceededError.

Each thread gets its own default context through `default_scratch`, so two
threads never share temporaries. Sharing one ScratchBuffers object between
threads requires external locking.
"""

import logging
import threading
from typing import Dict, Optional, Tuple

import numpy as np

from .config import resolve_config
from .exceptions import CapacityExceededError

logger = logging.getLogger(__name__)


class ScratchBuffers:
    """
    Temporaries for one training context.

    Parameters
    ----------
    max_vector_len : int, optional
        Largest vector length accepted (applies to both rows and cols).
        None means unbounded.
    max_matrix_size : int, optional
        Largest ``rows * cols`` accepted. None means unbounded.
    debug_k : int
        Default number of derivative entries shown by `debug_derivative`.
    debug_rows, debug_cols : int
        Default gradient block shown by `debug_gradient`.
    """

    def __init__(
        self,
        max_vector_len: Optional[int] = None,
        max_matrix_size: Optional[int] = None,
        debug_k: int = 2,
        debug_rows: int = 3,
        debug_cols: int = 2,
    ):
        self.max_vector_len = max_vector_len
        self.max_matrix_size = max_matrix_size
        self.debug_k = debug_k
        self.debug_rows = debug_rows
        self.debug_cols = debug_cols

        self.derivative = np.empty(0)
        self.delta = np.empty(0)
        self.gradient = np.empty((0, 0))

    @classmethod
    def from_config(cls, cfg: Optional[Dict] = None) -> "ScratchBuffers":
        cfg = resolve_config(cfg)
        return cls(
            max_vector_len=cfg['max_vector_len'],
            max_matrix_size=cfg['max_matrix_size'],
            debug_k=cfg['debug_k'],
            debug_rows=cfg['debug_rows'],
            debug_cols=cfg['debug_cols'],
        )

    def __repr__(self):
        return "<ScratchBuffers shape=%s max_vector_len=%s max_matrix_size=%s>" % (
            self.gradient.shape, self.max_vector_len, self.max_matrix_size)

    def check_capacity(self, rows: int, cols: int):
        """Raise CapacityExceededError if a rows x cols layer does not fit."""
        if self.max_vector_len is not None:
            longest = max(rows, cols)
            if longest > self.max_vector_len:
                raise CapacityExceededError(
                    f"vector length {longest} exceeds scratch capacity {self.max_vector_len}"
                )
        if self.max_matrix_size is not None and rows * cols > self.max_matrix_size:
            raise CapacityExceededError(
                f"matrix size {rows}x{cols}={rows * cols} exceeds scratch capacity "
                f"{self.max_matrix_size}"
            )

    def acquire(self, rows: int, cols: int, dtype=np.float64) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Return (derivative, delta, gradient) buffers for a rows x cols layer.

        Capacity is checked first, so nothing is reallocated on failure.
        """
        self.check_capacity(rows, cols)
        dtype = np.dtype(dtype)

        if self.gradient.shape != (rows, cols) or self.gradient.dtype != dtype:
            logger.debug("Allocating scratch for a %dx%d layer (%s)", rows, cols, dtype)
            self.derivative = np.empty(rows, dtype=dtype)
            self.delta = np.empty(rows, dtype=dtype)
            self.gradient = np.empty((rows, cols), dtype=dtype)

        return self.derivative, self.delta, self.gradient

    def debug_derivative(self, k: Optional[int] = None) -> np.ndarray:
        """Copy of the first `k` entries of the last derivative vector."""
        k = self.debug_k if k is None else k
        values = self.derivative[:k].copy()
        logger.debug("derivative[:%d] = %s", values.shape[0], np.array2string(values, precision=4))
        return values

    def debug_gradient(self, rows: Optional[int] = None, cols: Optional[int] = None) -> np.ndarray:
        """Copy of the leading rows x cols block of the last gradient matrix."""
        rows = self.debug_rows if rows is None else rows
        cols = self.debug_cols if cols is None else cols
        block = self.gradient[:rows, :cols].copy()
        logger.debug("gradient[:%d, :%d] =\n%s", block.shape[0], block.shape[1],
                     np.array2string(block, precision=4))
        return block


_local = threading.local()


def default_scratch() -> ScratchBuffers:
    """The calling thread's default scratch context, created on first use."""
    scratch = getattr(_local, 'scratch', None)
    if scratch is None:
        scratch = ScratchBuffers()
        _local.scratch = scratch
    return scratch
