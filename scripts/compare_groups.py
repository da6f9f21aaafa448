#!/usr/bin/env python3
"""
Compare per-site mutation proportions across groups.

This script samples the Dirichlet posterior of each group's per-site mutation
proportions, summarizes every posterior marginal and every requested pairwise
difference, and writes the summary tables for each configured analysis.
"""

import argparse
import os
import sys

# Add module folder to system paths
module_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if module_path not in sys.path:
    sys.path.append(module_path)

from mutcomp import compare
from mutcomp import config as mc_config
from mutcomp import load


def main():
    parser = argparse.ArgumentParser(
        description="Bayesian comparison of per-site mutation proportions across groups"
    )
    parser.add_argument(
        "--counts",
        required=True,
        help="Input CSV file with one row per site and one count column per group"
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to config.yaml file (default: config.yaml)"
    )
    parser.add_argument(
        "--output-dir",
        required=True,
        help="Output directory for summary tables"
    )
    parser.add_argument(
        "--site-col",
        default="site",
        help="Name of the site identifier column (default: site)"
    )
    parser.add_argument(
        "--analysis",
        nargs='+',
        default=None,
        help="Names of the analyses to run (default: all analyses in the config)"
    )
    parser.add_argument(
        "--simulation-size",
        type=int,
        default=None,
        help="Override the number of posterior draws per group"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the random seed"
    )

    args = parser.parse_args()

    # Load config
    settings = mc_config.load_config(args.config)
    if args.simulation_size is not None:
        settings['simulation_size'] = args.simulation_size
    if args.seed is not None:
        settings['random_seed'] = args.seed
    analyses = mc_config.analyses_from_config(settings)

    if args.analysis:
        unknown = [a for a in args.analysis if a not in analyses]
        if unknown:
            parser.error(f"analyses {unknown} not in {args.config}")
        analyses = {name: analyses[name] for name in args.analysis}

    # Read in count table
    print(f"Reading mutation counts from {args.counts}")
    counts = load.load_count_table(args.counts, site_col=args.site_col)
    print(f"{counts.shape[0]} sites, groups: {list(counts.columns)}")

    # Run all analyses before writing anything
    results = {}
    for name, analysis in analyses.items():
        print(
            f"Analysis '{name}': prior {analysis.prior.name}, "
            f"N={analysis.simulation_size}, seed={analysis.random_seed}"
        )
        results[name] = compare.compare_groups(counts, analysis)

        for (a, b), n_sig in results[name].significant.items():
            print(f"  {a} - {b}: {n_sig} sites with 95% interval excluding 0")

    for name, result in results.items():
        paths = load.write_summaries(result, args.output_dir, name)
        for path in paths.values():
            print(f"Saved {path}")


if __name__ == "__main__":
    main()
