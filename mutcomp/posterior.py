"""Conjugate Dirichlet posteriors for per-site mutation proportions"""

import numpy as np

from mutcomp import dirichlet
from mutcomp.errors import InvalidParameterError, ShapeMismatchError


def _label(group):
    return f" for group '{group}'" if group is not None else ""


def posterior_concentration(prior, counts, group=None):
    """Posterior Dirichlet parameters: prior[i] + counts[i] at every site."""
    prior = np.asarray(prior, dtype=float)
    counts = np.asarray(counts, dtype=float)

    if prior.shape != counts.shape or prior.ndim != 1:
        raise ShapeMismatchError(
            f"prior of shape {prior.shape} and counts of shape {counts.shape} differ{_label(group)}"
        )

    bad = np.flatnonzero(~np.isfinite(prior) | (prior < 0))
    if len(bad) > 0:
        raise InvalidParameterError(
            f"prior concentration {prior[bad[0]]} at site index {bad[0]}{_label(group)} is not >= 0"
        )

    bad = np.flatnonzero(~np.isfinite(counts) | (counts < 0))
    if len(bad) > 0:
        raise InvalidParameterError(
            f"count {counts[bad[0]]} at site index {bad[0]}{_label(group)} is not >= 0"
        )

    alpha = prior + counts

    # Sites with zero prior weight and no observation have no posterior
    bad = np.flatnonzero(alpha <= 0)
    if len(bad) > 0:
        raise InvalidParameterError(
            f"posterior concentration is 0 at site index {bad[0]}{_label(group)}; "
            "drop sites without counts or use a strictly positive prior"
        )

    return alpha


def build_posterior(prior, counts, n, rng, group=None):
    """N samples from the posterior of one group's site proportions."""
    if n <= 0:
        raise InvalidParameterError(f"simulation size must be > 0, got {n}")

    alpha = posterior_concentration(prior, counts, group=group)

    return dirichlet.sample_dirichlet(alpha, n, rng)
