"""Loading count tables and reference variants, and writing summaries"""

import os

import numpy as np
import pandas as pd

from mutcomp.errors import InputDataError


def _read_csv(path):
    if not os.path.isfile(path):
        raise InputDataError(f"Input table not found: {path}")
    return pd.read_csv(path)


def load_count_table(df_path, site_col="site", groups=None):
    """
    Read a table with one row per site and one count column per group.

    Returns a dataframe indexed by site (ascending) holding integer counts.
    """
    # Read in count table
    df = _read_csv(df_path)

    if site_col not in df.columns:
        raise InputDataError(f"Site column '{site_col}' missing from {df_path}")

    groups = [c for c in df.columns if c != site_col] if groups is None else list(groups)
    missing = [g for g in groups if g not in df.columns]
    if missing:
        raise InputDataError(f"Group columns {missing} missing from {df_path}")
    if len(groups) == 0:
        raise InputDataError(f"No group count columns in {df_path}")

    if df[site_col].duplicated().any():
        dup = df.loc[df[site_col].duplicated(), site_col].iloc[0]
        raise InputDataError(f"Site {dup} appears more than once in {df_path}")

    counts = df.set_index(site_col)[groups].copy()

    for group in groups:
        values = pd.to_numeric(counts[group], errors="coerce")
        if values.isna().any() or (values < 0).any() or (values != np.round(values)).any():
            raise InputDataError(
                f"Counts of group '{group}' in {df_path} must be non-negative integers"
            )
        counts[group] = values.astype(int)

    return counts.sort_index()


def drop_zero_sites(counts):
    """Remove sites without a single count in any group."""
    mask_observed = (counts != 0).any(axis=1).values

    return counts[mask_observed]


def pool_groups(counts, name, groups=None):
    """Add a column with counts summed over `groups` (all columns when None)."""
    groups = list(counts.columns) if groups is None else list(groups)
    missing = [g for g in groups if g not in counts.columns]
    if missing:
        raise InputDataError(f"Cannot pool groups {missing} missing from count table")
    if name in counts.columns:
        raise InputDataError(f"Column '{name}' already in count table")

    return counts.assign(**{name: counts[groups].sum(axis=1)})


def aggregate_reference(variants, sites, site_col="site"):
    """
    Per-site number of reference variant records, aligned to `sites`.

    Records with site 0 do not map to a site and are ignored; sites
    without records get a count of 0.
    """
    if site_col not in variants.columns:
        raise InputDataError(f"Site column '{site_col}' missing from reference table")

    site_ids = pd.to_numeric(variants[site_col], errors="coerce")
    if site_ids.isna().any():
        raise InputDataError("Reference table holds non-numeric site identifiers")

    site_ids = site_ids[site_ids != 0].astype(int)

    return (
        site_ids.value_counts()
        .reindex(pd.Index(sites, name=site_col), fill_value=0)
        .astype(int)
    )


def load_reference_counts(df_path, sites, site_col="site"):
    # Read in reference variants
    variants = _read_csv(df_path)

    return aggregate_reference(variants, sites, site_col=site_col)


def write_summaries(result, output_dir, prefix):
    """Write group, pair and significance tables of one comparison to CSV."""
    os.makedirs(output_dir, exist_ok=True)

    paths = {
        "groups": os.path.join(output_dir, f"{prefix}_group_summaries.csv"),
        "pairs": os.path.join(output_dir, f"{prefix}_pair_summaries.csv"),
        "significance": os.path.join(output_dir, f"{prefix}_significance.csv"),
    }
    result.group_summaries.to_csv(paths["groups"], index=False)
    result.pair_summaries.to_csv(paths["pairs"], index=False)
    result.significance_table().to_csv(paths["significance"], index=False)

    return paths
