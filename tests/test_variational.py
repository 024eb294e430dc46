"""
Tests for the variational inference engine.

Tests cover:
- Configuration validation
- Single update steps against closed-form expressions
- Per-iteration invariants (SPD covariance, non-decreasing ELBO,
  shrinking precision updates)
- Parameter recovery on synthetic data
- Degenerate single-observation input
- Challenger O-ring scenario
- Determinism and partial convergence
"""

import logging

import pytest
import numpy as np
from numpy.testing import assert_allclose, assert_array_equal

from bayesreg.data import Dataset, load_challenger
from bayesreg.errors import InvalidParameterError, NumericalError
from bayesreg.inference import (
    ConvergenceStatus,
    InferenceConfig,
    VariationalInference,
    VariationalState,
    compute_elbo,
    infer,
    sweep,
    update_noise,
    update_weights,
)
from bayesreg.linalg import is_positive_definite
from bayesreg.model import ModelSpecification, PriorSpec
from bayesreg.prediction import PredictiveEngine
from bayesreg.simulation import SyntheticRegressionGenerator


W_TRUE = np.array([1.5, -2.0, 0.5])
TAU_TRUE = 4.0


@pytest.fixture
def synthetic_spec() -> ModelSpecification:
    gen = SyntheticRegressionGenerator(W_TRUE, TAU_TRUE)
    return ModelSpecification(gen.generate(n_obs=500, random_seed=7))


@pytest.fixture
def challenger_spec() -> ModelSpecification:
    return ModelSpecification(load_challenger())


class TestInferenceConfig:
    """Tests for engine configuration."""

    def test_defaults(self) -> None:
        config = InferenceConfig()
        assert config.max_iterations == 100
        assert config.tolerance == 1e-6

    @pytest.mark.parametrize("max_iterations", [0, -3, 2.5, float("inf"), float("nan")])
    def test_invalid_max_iterations(self, max_iterations) -> None:
        with pytest.raises(InvalidParameterError):
            InferenceConfig(max_iterations=max_iterations)

    def test_invalid_tolerance(self) -> None:
        with pytest.raises(InvalidParameterError):
            InferenceConfig(tolerance=-1e-3)
        with pytest.raises(InvalidParameterError):
            InferenceConfig(tolerance=np.nan)


class TestUpdateSteps:
    """Tests for the individual coordinate updates."""

    def test_update_weights_closed_form(self, challenger_spec) -> None:
        """Test μ_w and Σ_w against a direct solve."""
        tau = 2.5
        mean, cov = update_weights(challenger_spec, tau)

        precision = np.eye(2) + tau * challenger_spec.gram
        assert_allclose(cov, np.linalg.inv(precision), rtol=1e-8)
        assert_allclose(mean, np.linalg.solve(precision, tau * challenger_spec.moment), rtol=1e-8)

    def test_update_weights_with_prior_mean(self) -> None:
        """Test that the prior mean enters through Σ₀⁻¹μ₀."""
        ds = Dataset(np.array([[1.0, 1.0], [2.0, 1.0]]), np.array([1.0, 2.0]))
        prior = PriorSpec(weight_mean=np.array([1.0, -1.0]), weight_covariance=2.0 * np.eye(2))
        spec = ModelSpecification(ds, prior)

        mean, _ = update_weights(spec, 1.0)
        precision = 0.5 * np.eye(2) + spec.gram
        expected = np.linalg.solve(precision, 0.5 * np.array([1.0, -1.0]) + spec.moment)
        assert_allclose(mean, expected, rtol=1e-10)

    def test_update_noise(self, challenger_spec) -> None:
        """Test a = a₀ + N/2 and b = b₀ + ½ E[||y - Xw||²]."""
        mean = np.array([-0.05, 3.5])
        cov = np.diag([1e-4, 0.5])
        shape, rate = update_noise(challenger_spec, mean, cov)

        X, y = challenger_spec.features, challenger_spec.targets
        residual = y - X @ mean
        spread = sum(x @ cov @ x for x in X)
        assert shape == 1.0 + 23 / 2
        assert_allclose(rate, 2.0 + 0.5 * (residual @ residual + spread))

    def test_sweep_uses_current_precision(self, challenger_spec) -> None:
        state = VariationalState(np.zeros(2), np.eye(2), 1.0, 2.0)
        new_state = sweep(challenger_spec, state)
        mean, cov = update_weights(challenger_spec, 0.5)
        assert_array_equal(new_state.mean, mean)
        assert_array_equal(new_state.covariance, cov)


class TestIterationInvariants:
    """Tests for properties that hold at every sweep."""

    def test_covariance_spd_every_iteration(self, synthetic_spec, challenger_spec) -> None:
        """Test that Σ_w stays symmetric positive definite."""
        engine = VariationalInference()
        for spec in (synthetic_spec, challenger_spec):
            for report in engine.iterate(spec):
                cov = report.state.covariance
                assert_array_equal(cov, cov.T)
                assert is_positive_definite(cov)

    def test_elbo_non_decreasing(self, synthetic_spec, challenger_spec) -> None:
        """Test that coordinate ascent never lowers the ELBO."""
        for spec in (synthetic_spec, challenger_spec):
            result = VariationalInference().run(spec)
            elbo = np.array(result.elbo_history)
            assert np.all(np.isfinite(elbo))
            assert np.all(np.diff(elbo) >= -1e-9 * np.maximum(1.0, np.abs(elbo[1:])))

    def test_precision_updates_shrink(self, synthetic_spec) -> None:
        """Test that successive ⟨τ⟩ differences decrease toward zero."""
        result = VariationalInference().run(synthetic_spec)
        diffs = np.abs(np.diff(result.precision_history))

        assert result.converged
        assert len(diffs) >= 3
        assert diffs[-1] < diffs[0]
        assert np.all(np.diff(diffs[1:]) <= 0.0)

    def test_elbo_recorded_per_sweep(self, challenger_spec) -> None:
        result = VariationalInference().run(challenger_spec)
        assert len(result.elbo_history) == result.n_iterations
        assert len(result.precision_history) == result.n_iterations + 1

    def test_history_starts_at_prior_mean(self, challenger_spec) -> None:
        result = VariationalInference().run(challenger_spec)
        assert result.precision_history[0] == 0.5

    def test_final_elbo_matches_returned_state(self, challenger_spec) -> None:
        result = VariationalInference().run(challenger_spec)
        state = VariationalState(
            np.array(result.weights.mean),
            np.array(result.weights.covariance),
            result.noise.shape,
            result.noise.rate,
        )
        assert_allclose(compute_elbo(challenger_spec, state), result.elbo_history[-1])


class TestRecovery:
    """Tests for recovering known parameters."""

    def test_recovers_weights_and_precision(self, synthetic_spec) -> None:
        """Test posterior means within 4 posterior std of the truth (N=500)."""
        result = VariationalInference().run(synthetic_spec)

        assert result.converged
        z_weights = np.abs(result.weights.mean - W_TRUE) / result.weights.std
        assert np.all(z_weights < 4.0), z_weights

        z_tau = abs(result.noise.mean - TAU_TRUE) / result.noise.std
        assert z_tau < 4.0, z_tau

    def test_noise_shape(self, synthetic_spec) -> None:
        result = VariationalInference().run(synthetic_spec)
        assert result.noise.shape == 1.0 + 500 / 2


class TestDegenerateInput:
    """Tests for a single observation."""

    def test_single_observation_stays_near_prior(self) -> None:
        """Test N=1 converges and barely moves away from N(0, I)."""
        ds = Dataset.from_observations([((2.0, 1.0), 1.0)])
        result = VariationalInference().run(ModelSpecification(ds))

        assert result.converged
        assert np.all(np.abs(result.weights.mean) < 0.5)
        assert np.trace(result.weights.covariance) > 1.0
        assert result.noise.shape == 1.5
        assert is_positive_definite(result.weights.covariance)


class TestChallenger:
    """Tests for the O-ring scenario."""

    def test_converges_with_negative_slope(self, challenger_spec) -> None:
        """Test convergence within 100 sweeps and a negative temperature slope."""
        result = VariationalInference(InferenceConfig(max_iterations=100)).run(challenger_spec)

        assert result.status is ConvergenceStatus.CONVERGED
        assert result.n_iterations <= 100
        assert result.weights.mean[0] < 0.0

    def test_cold_launch_predicts_more_distress(self, challenger_spec) -> None:
        """Test predictive mean at 31°F exceeds that at 75°F."""
        result = VariationalInference().run(challenger_spec)
        engine = PredictiveEngine.from_result(result)

        cold = engine.predict([31.0, 1.0])
        warm = engine.predict([75.0, 1.0])
        assert cold.mean > warm.mean
        # Extrapolating far from the data widens the prediction
        assert cold.variance > warm.variance


class TestDeterminism:
    """Tests for reproducibility."""

    def test_identical_runs_bitwise_equal(self, challenger_spec) -> None:
        """Test that two runs on identical inputs give identical posteriors."""
        first = VariationalInference().run(challenger_spec)
        second = VariationalInference().run(ModelSpecification(load_challenger()))

        assert_array_equal(first.weights.mean, second.weights.mean)
        assert_array_equal(first.weights.covariance, second.weights.covariance)
        assert first.noise == second.noise
        assert first.weights == second.weights
        assert first.n_iterations == second.n_iterations

    def test_engine_reusable(self, challenger_spec, synthetic_spec) -> None:
        engine = VariationalInference()
        first = engine.run(challenger_spec)
        engine.run(synthetic_spec)
        again = engine.run(challenger_spec)
        assert first.weights == again.weights


class TestPartialConvergence:
    """Tests for the iteration cap."""

    def test_cap_reached_is_reported(self, challenger_spec) -> None:
        """Test that hitting max_iterations returns a posterior flagged as partial."""
        result = infer(challenger_spec, InferenceConfig(max_iterations=1))

        assert result.status is ConvergenceStatus.MAX_ITERATIONS_REACHED
        assert result.converged_partially
        assert not result.converged
        assert result.n_iterations == 1
        assert is_positive_definite(result.weights.covariance)

    def test_cap_logs_warning(self, challenger_spec, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="bayesreg.inference.variational"):
            infer(challenger_spec, InferenceConfig(max_iterations=2))
        assert any("max_iterations=2" in rec.getMessage() for rec in caplog.records)

    def test_terminal_states(self) -> None:
        assert ConvergenceStatus.CONVERGED.is_terminal
        assert ConvergenceStatus.MAX_ITERATIONS_REACHED.is_terminal
        assert not ConvergenceStatus.ITERATING.is_terminal
        assert not ConvergenceStatus.INITIALIZED.is_terminal


class TestNumericalFailure:
    """Tests for numerical breakdown."""

    def test_collinear_features_with_flat_prior(self) -> None:
        """Test that a numerically singular posterior precision raises NumericalError."""
        X = np.array([[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])
        ds = Dataset(X, np.array([1.0, 2.0, 3.0]))
        spec = ModelSpecification(ds, PriorSpec(weight_covariance=1e12 * np.eye(2)))

        with pytest.raises(NumericalError):
            VariationalInference().run(spec)
