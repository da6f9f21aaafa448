"""
Pytest configuration and fixtures for the posterior comparison tests.
"""

import tempfile
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest


# ============================================================================
# Path Fixtures
# ============================================================================

@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# Random Generator Fixtures
# ============================================================================

@pytest.fixture
def rng():
    """Seeded generator for sampling tests."""
    return np.random.default_rng(12345)


# ============================================================================
# Count Table Fixtures
# ============================================================================

@pytest.fixture
def three_group_counts():
    """Groups A, B, C over two sites: A favours site 1, B site 2, C neither."""
    return pd.DataFrame(
        {"A": [10, 0], "B": [0, 10], "C": [5, 5]},
        index=pd.Index([1, 2], name="site"),
    )


@pytest.fixture
def cohort_reference_counts():
    """Pooled cohort and external reference counts over three sites."""
    return pd.DataFrame(
        {"cohort": [10, 5, 3], "reference": [2, 2, 0]},
        index=pd.Index([101, 102, 103], name="site"),
    )


@pytest.fixture
def count_table_csv(temp_dir):
    """Count table on disk, including a site without any mutation."""
    path = temp_dir / "counts.csv"
    path.write_text(
        "site,disease_a,disease_b\n"
        "3,4,0\n"
        "1,2,1\n"
        "2,0,0\n"
        "5,0,7\n"
    )
    return path


@pytest.fixture
def reference_variants():
    """Per-variant reference records; site 0 marks variants without a site."""
    return pd.DataFrame(
        {
            "variant": ["v1", "v2", "v3", "v4", "v5", "v6"],
            "site": [1, 1, 3, 0, 9, 3],
        }
    )


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config():
    """Configuration with one pooled and one external-reference analysis."""
    return {
        "simulation_size": 2000,
        "random_seed": 7,
        "analyses": {
            "cohorts": {
                "prior_policy": "pooled-empirical",
                "group_pairs": [["A", "B"], ["A", "C"]],
            },
            "cohort_vs_reference": {
                "prior_policy": "external-reference-weighted",
                "external_prior_reference_group": "reference",
                "external_prior_total_weight": 35,
                "external_prior_flat_concentration": 0.1,
                "group_pairs": [["cohort", "reference"]],
                "simulation_size": 500,
            },
        },
    }
