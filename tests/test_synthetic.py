"""
Tests for the synthetic regression data generator.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose, assert_array_equal

from bayesreg.errors import InvalidParameterError
from bayesreg.simulation import SyntheticRegressionGenerator


class TestSyntheticRegressionGenerator:
    """Tests for dataset generation from known parameters."""

    def test_init(self) -> None:
        gen = SyntheticRegressionGenerator([1.0, -1.0, 0.5], noise_precision_true=4.0)
        assert gen.dimension == 3
        assert gen.noise_std == 0.5

    @pytest.mark.parametrize("kwargs", [
        {"weights_true": [1.0], "noise_precision_true": 0.0},
        {"weights_true": [1.0], "noise_precision_true": 1.0, "feature_scale": -1.0},
        {"weights_true": [], "noise_precision_true": 1.0},
        {"weights_true": [1.0], "noise_precision_true": float("inf")},
    ])
    def test_invalid_arguments(self, kwargs) -> None:
        with pytest.raises(InvalidParameterError):
            SyntheticRegressionGenerator(**kwargs)

    def test_shape_and_bias(self) -> None:
        gen = SyntheticRegressionGenerator([1.0, -1.0, 0.5], noise_precision_true=4.0)
        ds = gen.generate(n_obs=50, random_seed=0)
        assert ds.features.shape == (50, 3)
        assert ds.targets.shape == (50,)
        assert_array_equal(ds.features[:, -1], np.ones(50))

    def test_bias_only_model(self) -> None:
        gen = SyntheticRegressionGenerator([2.0], noise_precision_true=1.0)
        ds = gen.generate(n_obs=10, random_seed=0)
        assert ds.dimension == 1

    def test_reproducible(self) -> None:
        gen = SyntheticRegressionGenerator([1.0, 0.0], noise_precision_true=1.0)
        a = gen.generate(n_obs=20, random_seed=11)
        b = gen.generate(n_obs=20, random_seed=11)
        assert_array_equal(a.features, b.features)
        assert_array_equal(a.targets, b.targets)

    def test_noise_level(self) -> None:
        """Test that residuals around the true line have variance 1/τ."""
        w = np.array([0.3, -0.7])
        gen = SyntheticRegressionGenerator(w, noise_precision_true=2.0, feature_scale=3.0)
        ds = gen.generate(n_obs=20000, random_seed=5)
        residual = ds.targets - ds.features @ w
        assert_allclose(residual.var(), 0.5, rtol=0.05)
        assert_allclose(ds.features[:, 0].std(), 3.0, rtol=0.05)

    def test_invalid_n_obs(self) -> None:
        gen = SyntheticRegressionGenerator([1.0], noise_precision_true=1.0)
        with pytest.raises(InvalidParameterError):
            gen.generate(n_obs=0)
