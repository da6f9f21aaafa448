#!/usr/bin/env python3
"""
Curate per-site mutation count table.

This script drops sites without any observed mutation in the selected groups
and optionally adds a column with per-site counts of an external reference
variant table, so that the table can be used for posterior comparisons.
"""

import argparse
import os
import sys

# Add module folder to system paths
module_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if module_path not in sys.path:
    sys.path.append(module_path)

from mutcomp import load


def main():
    parser = argparse.ArgumentParser(
        description="Curate per-site mutation counts for posterior comparisons"
    )
    parser.add_argument(
        "--counts",
        required=True,
        help="Input CSV file with one row per site and one count column per group"
    )
    parser.add_argument(
        "--output",
        required=True,
        help="Output CSV file for curated counts"
    )
    parser.add_argument(
        "--site-col",
        default="site",
        help="Name of the site identifier column (default: site)"
    )
    parser.add_argument(
        "--groups",
        nargs='+',
        default=None,
        help="Group columns to keep (default: all)"
    )
    parser.add_argument(
        "--pool",
        default=None,
        help="Name of an added column pooling the counts of all selected groups"
    )
    parser.add_argument(
        "--reference",
        default=None,
        help="Optional CSV file with one row per reference variant"
    )
    parser.add_argument(
        "--reference-site-col",
        default="site",
        help="Site column of the reference table; 0 marks variants without site (default: site)"
    )
    parser.add_argument(
        "--reference-name",
        default="reference",
        help="Name of the added reference count column (default: reference)"
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite output file if it exists"
    )

    args = parser.parse_args()

    # Read in data
    print(f"Reading mutation counts from {args.counts}")
    counts_df = load.load_count_table(args.counts, site_col=args.site_col, groups=args.groups)

    # Retain only sites with at least one mutation in any group
    curated = load.drop_zero_sites(counts_df)

    # Summary statistics
    print('Number of sites:')
    print('In the full dataset:', counts_df.shape[0])
    print('In the curated dataset:', curated.shape[0])
    print('\nNumber of mutations per group:')
    print(curated.sum())

    # Pool cohorts into a single group
    if args.pool:
        curated = load.pool_groups(curated, args.pool)
        print(f"\nAdded pooled group '{args.pool}' with {curated[args.pool].sum()} mutations")

    # Add reference counts aligned to the curated sites
    if args.reference:
        print(f"\nReading reference variants from {args.reference}")
        if args.reference_name in curated.columns:
            parser.error(f"column '{args.reference_name}' already in {args.counts}")
        ref_counts = load.load_reference_counts(
            args.reference, curated.index, site_col=args.reference_site_col
        )
        curated = curated.assign(**{args.reference_name: ref_counts.to_numpy()})
        print(f"Reference variants at curated sites: {ref_counts.sum()}")
        print(f"Curated sites without reference variants: {(ref_counts == 0).sum()}")

    # Write curated dataframe to file
    if args.overwrite or not os.path.isfile(args.output):
        os.makedirs(os.path.dirname(args.output) if os.path.dirname(args.output) else '.', exist_ok=True)
        curated.reset_index().to_csv(args.output, index=False)
        print(f"\nSaved curated counts to {args.output}")
    else:
        print(f"\nOutput file {args.output} already exists. Use --overwrite to overwrite.")


if __name__ == "__main__":
    main()
