"""
Tests for prior policies and posterior building.
"""

import numpy as np
import pandas as pd
import pytest

from mutcomp.errors import InvalidParameterError, ShapeMismatchError
from mutcomp.posterior import build_posterior, posterior_concentration
from mutcomp.priors import (
    ExternalReferencePrior,
    PooledEmpiricalPrior,
    flat_prior,
    pooled_prior,
    reference_weighted_prior,
)


# ============================================================================
# Tests: Prior Vectors
# ============================================================================


class TestPriorVectors:
    """Tests for the prior building helpers."""

    def test_pooled_prior_all_groups(self, three_group_counts):
        """Pooled prior sums every group's counts."""
        np.testing.assert_array_equal(pooled_prior(three_group_counts), [15.0, 15.0])

    def test_pooled_prior_subset(self, three_group_counts):
        """Only the contributing groups enter the pooled prior."""
        np.testing.assert_array_equal(pooled_prior(three_group_counts, ["A", "C"]), [15.0, 5.0])

    def test_pooled_prior_unknown_group(self, three_group_counts):
        """Contributing groups must be in the table."""
        with pytest.raises(InvalidParameterError, match="D"):
            pooled_prior(three_group_counts, ["A", "D"])

    def test_reference_weighted_prior(self):
        """Reference proportions are scaled to the total weight."""
        prior = reference_weighted_prior([1, 3, 0], 35)
        np.testing.assert_allclose(prior, [8.75, 26.25, 0.0])
        assert prior.sum() == pytest.approx(35)

    def test_reference_weighted_prior_empty_reference(self):
        """A reference without counts cannot define proportions."""
        with pytest.raises(InvalidParameterError):
            reference_weighted_prior([0, 0], 35)

    @pytest.mark.parametrize("weight", [0, -3])
    def test_reference_weighted_prior_bad_weight(self, weight):
        """Total weight must be positive."""
        with pytest.raises(InvalidParameterError):
            reference_weighted_prior([1, 2], weight)

    def test_flat_prior(self):
        """Flat prior repeats the concentration at every site."""
        np.testing.assert_array_equal(flat_prior(3, 0.1), [0.1, 0.1, 0.1])

    def test_flat_prior_bad_concentration(self):
        """Flat concentration must be positive."""
        with pytest.raises(InvalidParameterError):
            flat_prior(3, 0.0)


# ============================================================================
# Tests: Prior Policies
# ============================================================================


class TestPriorPolicies:
    """Tests for per-group priors of each policy."""

    def test_pooled_policy_same_prior_for_all(self, three_group_counts):
        """Every group gets the pooled prior."""
        priors = PooledEmpiricalPrior().priors(three_group_counts)
        assert set(priors) == {"A", "B", "C"}
        for prior in priors.values():
            np.testing.assert_array_equal(prior, [15.0, 15.0])

    def test_external_policy(self, cohort_reference_counts):
        """Cohort gets the weighted reference prior, reference the flat prior."""
        policy = ExternalReferencePrior("reference", total_weight=35, flat_concentration=0.1)
        priors = policy.priors(cohort_reference_counts)
        np.testing.assert_allclose(priors["cohort"], [17.5, 17.5, 0.0])
        np.testing.assert_allclose(priors["reference"], [0.1, 0.1, 0.1])

    def test_pooled_policy_sampled_subset(self, three_group_counts):
        """Only sampled groups get a prior; contributing groups come from the full table."""
        priors = PooledEmpiricalPrior(groups=["B", "C"]).priors(three_group_counts, ["A"])
        assert list(priors) == ["A"]
        np.testing.assert_array_equal(priors["A"], [5.0, 15.0])

    def test_pooled_policy_defaults_to_sampled_groups(self, three_group_counts):
        """Without explicit contributors the sampled groups are pooled."""
        priors = PooledEmpiricalPrior().priors(three_group_counts, ["A", "B"])
        np.testing.assert_array_equal(priors["B"], [10.0, 10.0])

    def test_external_policy_unsampled_reference(self, cohort_reference_counts):
        """The reference informs the prior even when it is not sampled."""
        policy = ExternalReferencePrior("reference", total_weight=35, flat_concentration=0.1)
        priors = policy.priors(cohort_reference_counts, ["cohort"])
        assert list(priors) == ["cohort"]
        np.testing.assert_allclose(priors["cohort"], [17.5, 17.5, 0.0])

    def test_external_policy_missing_reference(self, three_group_counts):
        """The reference group must be a column of the table."""
        policy = ExternalReferencePrior("reference", total_weight=35, flat_concentration=0.1)
        with pytest.raises(InvalidParameterError, match="reference"):
            policy.priors(three_group_counts)

    def test_policy_names(self):
        """Policies carry their configuration tag."""
        assert PooledEmpiricalPrior.name == "pooled-empirical"
        assert ExternalReferencePrior.name == "external-reference-weighted"


# ============================================================================
# Tests: Posterior
# ============================================================================


class TestPosterior:
    """Tests for posterior concentration and sampling."""

    def test_posterior_concentration(self):
        """Posterior adds counts to the prior."""
        np.testing.assert_array_equal(
            posterior_concentration([15.0, 15.0], [10, 0]), [25.0, 15.0]
        )

    def test_zero_counts_give_prior(self):
        """A group without mutations has the prior as posterior."""
        prior = np.array([0.5, 2.0, 7.0])
        np.testing.assert_array_equal(posterior_concentration(prior, [0, 0, 0]), prior)

    def test_zero_prior_with_counts(self):
        """Zero prior entries are fine where the group has counts."""
        np.testing.assert_array_equal(posterior_concentration([0.0, 3.0], [2, 0]), [2.0, 3.0])

    def test_length_mismatch(self):
        """Prior and counts must cover the same sites."""
        with pytest.raises(ShapeMismatchError, match="group 'A'"):
            posterior_concentration([1.0, 1.0], [1, 2, 3], group="A")

    def test_zero_posterior_rejected(self):
        """A site with no prior weight and no counts has no posterior."""
        with pytest.raises(InvalidParameterError, match="site index 1 for group 'B'"):
            posterior_concentration([1.0, 0.0], [0, 0], group="B")

    def test_negative_counts_rejected(self):
        """Counts must be non-negative."""
        with pytest.raises(InvalidParameterError):
            posterior_concentration([1.0, 1.0], [-1, 3])

    def test_negative_prior_rejected(self):
        """Prior entries must be non-negative."""
        with pytest.raises(InvalidParameterError):
            posterior_concentration([-0.5, 1.0], [3, 3])

    def test_build_posterior_shape(self, rng):
        """One row per draw, one column per site."""
        samples = build_posterior([15.0, 15.0], [10, 0], 1000, rng)
        assert samples.shape == (1000, 2)
        np.testing.assert_allclose(samples.sum(axis=1), 1.0, atol=1e-9)

    def test_build_posterior_bad_size(self, rng):
        """Simulation size must be positive."""
        with pytest.raises(InvalidParameterError):
            build_posterior([1.0, 1.0], [1, 1], 0, rng)

    def test_build_posterior_from_series(self, rng, three_group_counts):
        """Count columns of a table can be passed directly."""
        samples = build_posterior(pooled_prior(three_group_counts), three_group_counts["A"], 10, rng)
        assert samples.shape == (10, 2)
