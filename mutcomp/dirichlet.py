"""Gamma and Dirichlet sampling with explicit random generators"""

import numpy as np

from mutcomp.errors import InvalidParameterError


def sample_gamma(shape, count, rng):
    """
    Draw `count` independent Gamma(shape, scale=1) variates.

    A scalar shape gives an array of length `count`; a vector of shapes gives
    a (count, len(shape)) array with column i drawn from Gamma(shape[i], 1).
    """
    if count < 0:
        raise InvalidParameterError(f"number of gamma draws must be >= 0, got {count}")

    shape_arr = np.asarray(shape, dtype=float)
    if not np.all(np.isfinite(shape_arr)) or np.any(shape_arr <= 0):
        raise InvalidParameterError(f"gamma shape must be finite and > 0, got {shape}")

    if shape_arr.ndim == 0:
        return rng.gamma(shape_arr, 1.0, size=count)
    return rng.gamma(shape_arr, 1.0, size=(count, shape_arr.shape[0]))


def sample_dirichlet(concentration, n, rng):
    """
    Draw `n` samples from Dirichlet(concentration).

    Each row is built from independent Gamma(concentration[i], 1) draws
    divided by their sum, so rows are probability vectors over sites.
    """
    alpha = np.asarray(concentration, dtype=float)
    if alpha.ndim != 1 or alpha.shape[0] == 0:
        raise InvalidParameterError(
            f"concentration must be a non-empty vector, got shape {alpha.shape}"
        )
    if n <= 0:
        raise InvalidParameterError(f"number of Dirichlet samples must be > 0, got {n}")

    bad = np.flatnonzero(~np.isfinite(alpha) | (alpha <= 0))
    if len(bad) > 0:
        raise InvalidParameterError(
            f"Dirichlet concentration must be > 0, got {alpha[bad[0]]} at index {bad[0]}"
        )

    draws = sample_gamma(alpha, n, rng)
    draws /= draws.sum(axis=1, keepdims=True)

    return draws
