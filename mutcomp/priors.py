"""Prior concentration policies for the per-group Dirichlet posteriors"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from mutcomp.errors import InvalidParameterError


def pooled_prior(counts: pd.DataFrame, groups: Optional[List[str]] = None) -> np.ndarray:
    """Sum of observed counts at each site over the contributing groups."""
    groups = list(counts.columns) if groups is None else list(groups)
    if len(groups) == 0:
        raise InvalidParameterError("pooled prior needs at least one contributing group")

    missing = [g for g in groups if g not in counts.columns]
    if missing:
        raise InvalidParameterError(f"prior groups not in count table: {missing}")

    return counts[groups].to_numpy(dtype=float).sum(axis=1)


def reference_weighted_prior(reference_counts, total_weight: float) -> np.ndarray:
    """Reference proportions scaled to a total prior weight."""
    if not total_weight > 0:
        raise InvalidParameterError(f"total prior weight must be > 0, got {total_weight}")

    ref = np.asarray(reference_counts, dtype=float)
    total = ref.sum()
    if not total > 0:
        raise InvalidParameterError("reference counts sum to zero, cannot build weighted prior")

    return ref / total * total_weight


def flat_prior(n_sites: int, concentration: float) -> np.ndarray:
    if not concentration > 0:
        raise InvalidParameterError(f"flat prior concentration must be > 0, got {concentration}")

    return np.full(n_sites, float(concentration))


@dataclass
class PooledEmpiricalPrior:
    """
    Same prior for every group: counts pooled over `groups` (all groups of
    the comparison when None).
    """
    groups: Optional[List[str]] = None

    name = "pooled-empirical"

    def priors(self, counts: pd.DataFrame, groups: Optional[List[str]] = None) -> Dict[str, np.ndarray]:
        """
        Prior of each sampled group in `groups` (all columns when None).

        Contributing groups are looked up in the full table, so they need not
        be sampled themselves.
        """
        groups = list(counts.columns) if groups is None else list(groups)
        prior = pooled_prior(counts, groups if self.groups is None else self.groups)
        return {group: prior for group in groups}


@dataclass
class ExternalReferencePrior:
    """
    Groups compared against an external reference dataset.

    Every non-reference group gets the reference proportions scaled to
    `total_weight`; the reference group gets a flat prior of
    `flat_concentration` at every site.
    """
    reference_group: str
    total_weight: float
    flat_concentration: float

    name = "external-reference-weighted"

    def priors(self, counts: pd.DataFrame, groups: Optional[List[str]] = None) -> Dict[str, np.ndarray]:
        groups = list(counts.columns) if groups is None else list(groups)
        if self.reference_group not in counts.columns:
            raise InvalidParameterError(
                f"reference group '{self.reference_group}' not in count table"
            )

        weighted = reference_weighted_prior(
            counts[self.reference_group].to_numpy(), self.total_weight
        )
        flat = flat_prior(counts.shape[0], self.flat_concentration)

        return {
            group: flat if group == self.reference_group else weighted
            for group in groups
        }


PRIOR_POLICIES = {
    PooledEmpiricalPrior.name: PooledEmpiricalPrior,
    ExternalReferencePrior.name: ExternalReferencePrior,
}
