"""Figures of posterior site proportions and pairwise differences"""

import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns

sns.set_theme(font_scale=1.0, style='ticks', palette='colorblind')


def _error_bars(summary):
    lower = (summary['mean'] - summary['q025']).clip(lower=0)
    upper = (summary['q975'] - summary['mean']).clip(lower=0)
    return np.vstack([lower.to_numpy(), upper.to_numpy()])


def plot_group_proportions(group_summaries, savepath=None):
    """Posterior mean proportion per site with 95% credible intervals, one colour per group."""
    groups = list(group_summaries['group'].unique())
    sites = np.sort(group_summaries['site'].unique())
    site_pos = {s: i for i, s in enumerate(sites)}

    fig, ax = plt.subplots(figsize=(max(6, 0.35 * len(sites) * len(groups)), 4), dpi=150)
    palette = sns.color_palette('colorblind', len(groups))

    # Dodge groups around each site position
    width = 0.8 / len(groups)
    for j, group in enumerate(groups):
        data = group_summaries[group_summaries['group'] == group]
        x = data['site'].map(site_pos).to_numpy() + (j - len(groups) / 2 + 0.5) * width
        ax.errorbar(
            x, data['mean'],
            yerr=_error_bars(data),
            fmt='o', ms=4, capsize=2, color=palette[j], label=group,
        )

    ax.set_xticks(np.arange(len(sites)))
    ax.set_xticklabels(sites, rotation=90)
    ax.set(xlabel='site', ylabel='mutation proportion')
    ax.grid(True, axis='y')
    ax.legend(ncol=len(groups), loc='upper right', frameon=False)
    sns.despine()
    plt.tight_layout()

    if savepath:
        plt.savefig(savepath, bbox_inches='tight')

    return fig


def plot_pair_differences(pair_summaries, savepath=None):
    """One panel per group pair; intervals excluding 0 are highlighted."""
    pairs = list(pair_summaries[['group_a', 'group_b']].drop_duplicates().itertuples(index=False, name=None))

    fig, axes = plt.subplots(
        nrows=len(pairs), sharex=True, squeeze=False,
        figsize=(max(6, 0.25 * pair_summaries['site'].nunique()), 2.5 * len(pairs)), dpi=150,
    )
    axes = axes.flatten()
    colors = sns.color_palette('colorblind')

    for ax, (a, b) in zip(axes, pairs):
        data = pair_summaries[(pair_summaries['group_a'] == a) & (pair_summaries['group_b'] == b)]
        data = data.sort_values('site')
        x = np.arange(len(data))
        significant = data['excludes_zero'].astype(bool).to_numpy()

        for mask, color in [(~significant, colors[7]), (significant, colors[3])]:
            sub = data[mask]
            ax.errorbar(
                x[mask], sub['mean'],
                yerr=_error_bars(sub),
                fmt='o', ms=4, capsize=2, color=color,
            )

        ax.axhline(0, color='black', lw=0.8)
        ax.set_ylabel(f'{a} $-$ {b}')
        ax.set_title(f'{int(significant.sum())} sites with interval excluding 0', fontsize=9, loc='right')
        ax.grid(True, axis='y')
        ax.set_xticks(x)
        ax.set_xticklabels(data['site'], rotation=90)

    axes[-1].set_xlabel('site')
    sns.despine()
    plt.tight_layout()

    if savepath:
        plt.savefig(savepath, bbox_inches='tight')

    return fig
