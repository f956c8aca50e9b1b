"""
Defaults for the layer core.

Configuration is a plain dict. Missing keys fall back to DEFAULT_CONFIG.
"""

from typing import Dict, Optional

import numpy as np


DEFAULT_CONFIG = {
    # Scratch ceilings; None sizes scratch from the operands at call time.
    'max_vector_len': None,
    'max_matrix_size': None,
    'dtype': 'float64',
    # Extents shown by the debug introspection helpers.
    'debug_k': 2,
    'debug_rows': 3,
    'debug_cols': 2,
}

# Ceilings of the original fixed-size scratch buffers (100 elements each).
LEGACY_CAPACITY = {
    'max_vector_len': 100,
    'max_matrix_size': 100,
}


def resolve_config(cfg: Optional[Dict] = None) -> Dict:
    """
    Merge `cfg` over DEFAULT_CONFIG.

    Parameters
    ----------
    cfg : dict, optional
        Partial configuration.

    Returns
    -------
    resolved : dict
        A new dict holding every key of DEFAULT_CONFIG.

    Raises
    ------
    KeyError
        If `cfg` contains a key that is not recognised.
    ValueError
        If a ceiling is not a positive integer or dtype is not a floating type.
    """
    resolved = dict(DEFAULT_CONFIG)
    if cfg is None:
        return resolved

    unknown = sorted(set(cfg) - set(DEFAULT_CONFIG))
    if unknown:
        raise KeyError(f"Unknown config keys: {unknown}. Expected a subset of {sorted(DEFAULT_CONFIG)}.")

    resolved.update(cfg)

    for key in ('max_vector_len', 'max_matrix_size'):
        value = resolved[key]
        if value is not None and (isinstance(value, bool) or int(value) != value or value <= 0):
            raise ValueError(f"{key} must be a positive integer or None, got {value!r}")

    try:
        dtype = np.dtype(resolved['dtype'])
    except TypeError as exc:
        raise ValueError(f"dtype {resolved['dtype']!r} is not a numpy dtype") from exc
    if not np.issubdtype(dtype, np.floating):
        raise ValueError(f"dtype must be a floating type, got {dtype}")

    return resolved
