"""Posterior comparison of per-site mutation proportions across groups"""

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np
import pandas as pd

from mutcomp import posterior
from mutcomp import summary
from mutcomp.errors import InvalidParameterError


@dataclass
class ComparisonResult:
    group_summaries: pd.DataFrame
    pair_summaries: pd.DataFrame
    significant: Dict[Tuple[str, str], int]
    priors: pd.DataFrame
    posterior_concentrations: pd.DataFrame

    def significance_table(self):
        return pd.DataFrame(
            [(a, b, n) for (a, b), n in self.significant.items()],
            columns=["group_a", "group_b", "n_significant"],
        )


def group_rng(seed, group):
    """Random generator of one group, derived from the master seed and its name."""
    # One spawn key word per byte of the name, so distinct names never share a stream
    key = tuple(str(group).encode("utf-8"))
    return np.random.default_rng(np.random.SeedSequence(seed, spawn_key=key))


def _prepare_counts(counts):
    if counts.shape[1] == 0:
        raise InvalidParameterError("no groups to compare")
    if counts.shape[0] == 0:
        raise InvalidParameterError("count table has no sites")

    counts = counts.sort_index()

    for group in counts.columns:
        values = pd.to_numeric(counts[group], errors="coerce").to_numpy(dtype=float)
        bad = np.flatnonzero(~np.isfinite(values) | (values < 0))
        if len(bad) > 0:
            raise InvalidParameterError(
                f"count {values[bad[0]]} at site {counts.index[bad[0]]} in group '{group}' is not >= 0"
            )

    return counts


def _select_groups(counts, groups=None):
    if groups is None:
        return list(counts.columns)

    missing = [g for g in groups if g not in counts.columns]
    if missing:
        raise InvalidParameterError(f"groups not in count table: {missing}")
    if len(groups) == 0:
        raise InvalidParameterError("no groups to compare")

    return list(groups)


def _check_pairs(pairs, groups):
    checked = []
    for pair in pairs:
        if len(pair) != 2:
            raise InvalidParameterError(f"group pair must name two groups, got {pair}")
        a, b = pair
        for g in (a, b):
            if g not in groups:
                raise InvalidParameterError(f"group '{g}' of pair ({a}, {b}) not among the compared groups")
        checked.append((a, b))

    return checked


def _stack(tables, keys, names):
    stacked = pd.concat(tables, keys=keys, names=names)
    return stacked.reset_index(level=names).reset_index(drop=True)


def compare_groups(counts: pd.DataFrame, config) -> ComparisonResult:
    """
    Sample every group's posterior and every requested pairwise difference.

    `counts` is indexed by site with one count column per group. Posterior
    matrices are summarized and dropped one at a time; a pair's matrices are
    regenerated from the group generators, so they are the same draws that
    produced the group summaries.
    """
    n = config.simulation_size
    if n <= 0:
        raise InvalidParameterError(f"simulation size must be > 0, got {n}")

    table = _prepare_counts(counts)
    groups = _select_groups(table, config.groups)
    pairs = _check_pairs(config.group_pairs, groups)
    sites = table.index.to_numpy()

    # Prior groups may lie outside the sampled set
    priors = config.prior.priors(table, groups)
    table = table[groups]
    # Validate every posterior before drawing anything
    alphas = {
        g: posterior.posterior_concentration(priors[g], table[g].to_numpy(), group=g)
        for g in groups
    }

    def draw(group):
        return posterior.build_posterior(
            priors[group], table[group].to_numpy(), n,
            group_rng(config.random_seed, group), group=group,
        )

    group_tables = []
    for g in groups:
        samples = draw(g)
        group_tables.append(summary.summarize(samples, sites=sites))
        del samples

    pair_tables = []
    significant = {}
    for a, b in pairs:
        samples_a = draw(a)
        samples_b = draw(b)
        diff = summary.summarize_difference(samples_a, samples_b, sites=sites)
        del samples_a, samples_b
        pair_tables.append(diff)
        significant[(a, b)] = summary.count_significant(diff)

    if pairs:
        pair_summaries = _stack(pair_tables, pairs, ["group_a", "group_b"])
    else:
        pair_summaries = pd.DataFrame(
            columns=["group_a", "group_b", *summary.SUMMARY_COLS, "excludes_zero"]
        )

    return ComparisonResult(
        group_summaries=_stack(group_tables, groups, ["group"]),
        pair_summaries=pair_summaries,
        significant=significant,
        priors=pd.DataFrame(priors, index=table.index),
        posterior_concentrations=pd.DataFrame(alphas, index=table.index),
    )
