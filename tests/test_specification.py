"""
Unit tests for PriorSpec and ModelSpecification.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose, assert_array_equal

from bayesreg.data import Dataset, load_challenger
from bayesreg.distributions import Gamma
from bayesreg.errors import DimensionMismatchError, InvalidParameterError
from bayesreg.model import ModelSpecification, PriorSpec


class TestPriorSpec:
    """Tests for prior overrides."""

    def test_defaults(self) -> None:
        """Test default priors: N(0, I) weights, Gamma(1, 2) precision."""
        spec = PriorSpec()
        prior = spec.weight_prior(3)
        assert_array_equal(prior.mean, np.zeros(3))
        assert_array_equal(prior.covariance, np.eye(3))
        assert spec.noise_prior() == Gamma(1.0, 2.0)

    def test_overrides(self) -> None:
        spec = PriorSpec(
            weight_mean=np.array([1.0, 2.0]),
            weight_covariance=4.0 * np.eye(2),
            noise_shape=3.0,
            noise_rate=0.5,
        )
        prior = spec.weight_prior(2)
        assert_array_equal(prior.mean, [1.0, 2.0])
        assert_allclose(prior.precision, 0.25 * np.eye(2))
        assert spec.noise_prior() == Gamma(3.0, 0.5)

    def test_invalid_noise_prior(self) -> None:
        with pytest.raises(InvalidParameterError):
            PriorSpec(noise_shape=0.0).noise_prior()
        with pytest.raises(InvalidParameterError):
            PriorSpec(noise_rate=-1.0).noise_prior()

    def test_non_positive_definite_covariance(self) -> None:
        spec = PriorSpec(weight_covariance=np.array([[1.0, 3.0], [3.0, 1.0]]))
        with pytest.raises(InvalidParameterError):
            spec.weight_prior(2)

    def test_repr(self) -> None:
        assert "noise_rate=2.0" in repr(PriorSpec())


class TestModelSpecification:
    """Tests for model specification."""

    def test_challenger_sufficient_statistics(self) -> None:
        """Test XᵀX, Xᵀy and yᵀy on the O-ring data."""
        spec = ModelSpecification(load_challenger())
        assert_allclose(spec.gram, [[112400.0, 1600.0], [1600.0, 23.0]])
        assert_allclose(spec.moment, [424.0, 7.0])
        assert spec.target_energy == 9.0
        assert spec.n_obs == 23
        assert spec.dimension == 2

    def test_prior_dimension_mismatch(self) -> None:
        """Test that a 3-D prior on 2-D features is rejected."""
        prior = PriorSpec(weight_mean=np.zeros(3), weight_covariance=np.eye(3))
        with pytest.raises(DimensionMismatchError):
            ModelSpecification(load_challenger(), prior)

    def test_prior_mean_only_mismatch(self) -> None:
        with pytest.raises(DimensionMismatchError):
            ModelSpecification(load_challenger(), PriorSpec(weight_mean=np.zeros(3)))

    def test_default_priors(self) -> None:
        ds = Dataset(np.ones((4, 3)), np.zeros(4))
        spec = ModelSpecification(ds)
        assert spec.weight_prior.dimension == 3
        assert spec.noise_prior.mean == 0.5
