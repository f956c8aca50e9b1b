import logging
from typing import Dict, Optional, Tuple

import numpy as np

from .layer import SigmoidLayer, forward

logger = logging.getLogger(__name__)


def make_synthetic(n_in: int, n_out: int, n_samples: int = 64, seed: int = 0):
    """
    Inputs and targets produced by a planted sigmoid layer.

    Returns
    -------
    X : np.ndarray
        Inputs, shape (n_samples, n_in).
    Y : np.ndarray
        Targets ``sigmoid(W_true @ x)``, shape (n_samples, n_out).
    W_true : np.ndarray
        Planted weights, shape (n_out, n_in).
    """
    rng = np.random.default_rng(seed)
    X = rng.standard_normal((n_samples, n_in))
    W_true = rng.standard_normal((n_out, n_in))
    Y = np.array([forward(x, W_true) for x in X])
    return X, Y, W_true


def train_layer(
    X: np.ndarray,
    Y: np.ndarray,
    epochs: int = 100,
    eta: float = 0.5,
    seed: int = 0,
    cfg: Optional[Dict] = None,
) -> Tuple[Dict, SigmoidLayer]:
    """
    Train a SigmoidLayer with one update per sample.

    Parameters
    ----------
    X : np.ndarray
        Inputs, shape (n_samples, n_in). A 1-D array is one feature per sample.
    Y : np.ndarray
        Targets, shape (n_samples, n_out). A 1-D array is one target per sample.
    epochs : int
        Passes over the samples.
    eta : float
        Learning rate.
    seed : int
        Seed for the weight initialization.
    cfg : dict, optional
        Layer configuration.

    Returns
    -------
    history : dict
        'loss': mean per-sample MSE of each epoch (before each update),
        shape (epochs,).
    layer : SigmoidLayer
        The trained layer.
    """
    X = np.asarray(X)
    Y = np.asarray(Y)
    # 1-D arrays hold one feature (or one target) per sample.
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if Y.ndim == 1:
        Y = Y.reshape(-1, 1)
    if X.ndim != 2 or Y.ndim != 2:
        raise ValueError(f"X and Y must be 1-D or 2-D, got shapes {X.shape} and {Y.shape}")
    if X.shape[0] != Y.shape[0]:
        raise ValueError(f"X has {X.shape[0]} samples but Y has {Y.shape[0]}")

    layer = SigmoidLayer(n_in=X.shape[1], n_out=Y.shape[1], seed=seed, cfg=cfg)
    history = {'loss': []}

    for epoch in range(epochs):
        epoch_loss = 0.0
        for x, y in zip(X, Y):
            epoch_loss += layer.train_step(x, y, eta)
        epoch_loss /= X.shape[0]
        history['loss'].append(epoch_loss)
        logger.debug("epoch %d/%d loss=%.6f", epoch + 1, epochs, epoch_loss)

    history['loss'] = np.array(history['loss'])
    if epochs > 0:
        logger.info("Trained %r for %d epochs, final loss %.6f", layer, epochs, history['loss'][-1])
    return history, layer
