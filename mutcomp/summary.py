"""Reducing posterior samples to per-site means and credible intervals"""

import numpy as np
import pandas as pd
from scipy import stats

from mutcomp.errors import InvalidParameterError, ShapeMismatchError

# Central 95% credible interval
QUANTILES = (0.025, 0.975)
SUMMARY_COLS = ["site", "mean", "q025", "q975"]


def _site_index(sites, n_sites):
    if sites is None:
        return np.arange(1, n_sites + 1)

    sites = np.asarray(sites)
    if sites.shape != (n_sites,):
        raise ShapeMismatchError(
            f"{len(sites)} site identifiers given for {n_sites} sites"
        )
    return sites


def summarize(matrix, sites=None):
    """
    Per-site mean and 2.5/97.5 percentiles of an (N, L) sample matrix.

    Percentiles interpolate linearly between order statistics at rank
    (N - 1) * p. The matrix is not modified.
    """
    matrix = np.asarray(matrix)
    if matrix.ndim != 2:
        raise ShapeMismatchError(f"expected an (N, L) sample matrix, got shape {matrix.shape}")
    if matrix.shape[0] == 0:
        raise InvalidParameterError("cannot summarize a sample matrix without draws")

    q025, q975 = np.quantile(matrix, QUANTILES, axis=0, method="linear")
    # Keep q025 <= mean <= q975 under summation rounding
    mean = np.clip(matrix.mean(axis=0), q025, q975)

    return pd.DataFrame(
        {
            "site": _site_index(sites, matrix.shape[1]),
            "mean": mean,
            "q025": q025,
            "q975": q975,
        },
        columns=SUMMARY_COLS,
    )


def sample_difference(a, b):
    """Draw-by-draw difference a[k, i] - b[k, i] of two sample matrices."""
    a = np.asarray(a)
    b = np.asarray(b)

    if a.shape != b.shape:
        raise ShapeMismatchError(
            f"cannot pair sample matrices of shapes {a.shape} and {b.shape}"
        )

    return a - b


def count_significant(summary):
    """Number of sites whose credible interval lies entirely above or below 0."""
    return int(excludes_zero(summary).sum())


def excludes_zero(summary):
    q025 = np.asarray(summary["q025"])
    q975 = np.asarray(summary["q975"])
    return (q025 > 0) | (q975 < 0)


def summarize_difference(a, b, sites=None):
    diff = sample_difference(a, b)
    summary = summarize(diff, sites=sites)
    summary["excludes_zero"] = excludes_zero(summary)

    return summary


def beta_marginals(concentration, sites=None):
    """
    Exact marginal summaries of Dirichlet(concentration).

    Site i is Beta(a_i, a_0 - a_i) distributed, with a_0 the total
    concentration. Same columns as `summarize`.
    """
    alpha = np.asarray(concentration, dtype=float)
    if alpha.ndim != 1 or np.any(alpha <= 0):
        raise InvalidParameterError("concentration must be a vector of positive entries")

    rest = alpha.sum() - alpha
    # A single site carries all the mass
    if np.any(rest <= 0):
        return pd.DataFrame(
            {
                "site": _site_index(sites, len(alpha)),
                "mean": np.ones_like(alpha),
                "q025": np.ones_like(alpha),
                "q975": np.ones_like(alpha),
            },
            columns=SUMMARY_COLS,
        )

    marginal = stats.beta(alpha, rest)
    return pd.DataFrame(
        {
            "site": _site_index(sites, len(alpha)),
            "mean": marginal.mean(),
            "q025": marginal.ppf(QUANTILES[0]),
            "q975": marginal.ppf(QUANTILES[1]),
        },
        columns=SUMMARY_COLS,
    )
