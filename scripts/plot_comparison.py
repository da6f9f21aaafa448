#!/usr/bin/env python3
"""
Plot posterior site proportions and pairwise differences.

This script reads the summary tables written by compare_groups.py and draws
the per-group proportions and the per-pair differences.
"""

import argparse
import os
import sys
import pandas as pd
import matplotlib.pyplot as plt

# Add module folder to system paths
module_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if module_path not in sys.path:
    sys.path.append(module_path)

from mutcomp import plotting


def parse_args():
    parser = argparse.ArgumentParser(description="Plot posterior comparison summaries")
    parser.add_argument('--summary-dir', required=True, help='Directory with summary CSV files')
    parser.add_argument('--analysis', required=True, help='Analysis name (file prefix)')
    parser.add_argument('--output-dir', required=True, help='Output directory for figures')
    parser.add_argument('--format', default='pdf', help='Figure file format (default: pdf)')
    return parser.parse_args()


def main():
    args = parse_args()
    os.makedirs(args.output_dir, exist_ok=True)

    groups_path = os.path.join(args.summary_dir, f"{args.analysis}_group_summaries.csv")
    pairs_path = os.path.join(args.summary_dir, f"{args.analysis}_pair_summaries.csv")

    print(f"Loading group summaries from {groups_path}...")
    group_summaries = pd.read_csv(groups_path)
    fig = plotting.plot_group_proportions(
        group_summaries,
        savepath=os.path.join(args.output_dir, f"{args.analysis}_proportions.{args.format}"),
    )
    plt.close(fig)

    print(f"Loading pair summaries from {pairs_path}...")
    pair_summaries = pd.read_csv(pairs_path)
    if pair_summaries.empty:
        print("No group pairs to plot.")
    else:
        fig = plotting.plot_pair_differences(
            pair_summaries,
            savepath=os.path.join(args.output_dir, f"{args.analysis}_differences.{args.format}"),
        )
        plt.close(fig)

    print("Done!")


if __name__ == '__main__':
    main()
