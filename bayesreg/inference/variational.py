"""
Variational mean-field inference for linear regression with unknown noise.

The joint model
    y_i ~ N(wᵀx_i, 1/τ),   w ~ N(μ₀, Σ₀),   τ ~ Gamma(a₀, b₀)

has no closed-form joint posterior because w and τ are coupled. Mean-field
variational Bayes approximates p(w, τ | y) ≈ q(w) q(τ) and alternates the two
optimal factor updates (coordinate ascent):

    Update weights, given ⟨τ⟩:
        Λ_w = Σ₀⁻¹ + ⟨τ⟩ XᵀX
        μ_w = Λ_w⁻¹ (Σ₀⁻¹ μ₀ + ⟨τ⟩ Xᵀy)

    Update noise, given μ_w and Σ_w = Λ_w⁻¹:
        a   = a₀ + N/2
        b   = b₀ + ½ [ Σ_i (y_i - x_iᵀμ_w)² + Σ_i x_iᵀ Σ_w x_i ]
        ⟨τ⟩ = a / b

⟨τ⟩ starts at the prior mean a₀/b₀. Sweeps repeat until the relative change
in ⟨τ⟩ and the relative L2 change in μ_w both fall below the tolerance, or
until the iteration cap. Hitting the cap is not an error: the last posterior
is returned with status MAX_ITERATIONS_REACHED.

States: INITIALIZED → ITERATING → {CONVERGED, MAX_ITERATIONS_REACHED}.

The loop is a pure function of its inputs; there is no random
initialisation, so repeated runs are bit-for-bit identical.
"""

import logging
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional
import numpy as np
from numpy.typing import NDArray

from bayesreg.distributions import Gamma, VectorGaussian
from bayesreg.errors import InvalidParameterError
from bayesreg.inference.elbo import compute_elbo, expected_squared_residuals
from bayesreg.linalg import inv_spd
from bayesreg.model import ModelSpecification

logger = logging.getLogger(__name__)


class ConvergenceStatus(Enum):
    """State of a coordinate-ascent run."""

    INITIALIZED = "initialized"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"

    @property
    def is_terminal(self) -> bool:
        return self in (ConvergenceStatus.CONVERGED, ConvergenceStatus.MAX_ITERATIONS_REACHED)


class InferenceConfig:
    """Engine configuration."""

    def __init__(
        self,
        max_iterations: int = 100,
        tolerance: float = 1e-6,
    ) -> None:
        """
        Initialize engine configuration.

        Parameters
        ----------
        max_iterations : int
            Maximum number of coordinate-ascent sweeps (>= 1). Default 100.
        tolerance : float
            Relative-change convergence threshold (>= 0). Default 1e-6.

        Raises
        ------
        InvalidParameterError
            If either value is out of range.
        """
        if (
            not np.isfinite(max_iterations)
            or int(max_iterations) != max_iterations
            or max_iterations < 1
        ):
            raise InvalidParameterError(
                f"max_iterations must be a positive integer. Got {max_iterations}"
            )
        if not (tolerance >= 0 and np.isfinite(tolerance)):
            raise InvalidParameterError(
                f"tolerance must be a non-negative number. Got {tolerance}"
            )

        self.max_iterations = int(max_iterations)
        self.tolerance = float(tolerance)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"InferenceConfig(max_iterations={self.max_iterations}, "
            f"tolerance={self.tolerance:g})"
        )


class VariationalState(NamedTuple):
    """Parameters of q(w) = N(mean, covariance) and q(τ) = Gamma(shape, rate)."""

    mean: NDArray[np.float64]
    covariance: NDArray[np.float64]
    shape: float
    rate: float

    @property
    def expected_precision(self) -> float:
        """⟨τ⟩ = shape / rate."""
        return self.shape / self.rate


class SweepReport(NamedTuple):
    """Outcome of one coordinate-ascent sweep."""

    iteration: int
    state: VariationalState
    precision_change: float
    mean_change: float
    elbo: float
    converged: bool


def initial_state(spec: ModelSpecification) -> VariationalState:
    """
    Starting point: q(w) and q(τ) equal to their priors, so ⟨τ⟩ = a₀/b₀.
    """
    return VariationalState(
        mean=np.array(spec.weight_prior.mean),
        covariance=np.array(spec.weight_prior.covariance),
        shape=spec.noise_prior.shape,
        rate=spec.noise_prior.rate,
    )


def update_weights(spec: ModelSpecification, expected_precision: float):
    """
    Optimal q(w) given ⟨τ⟩.

    Parameters
    ----------
    spec : ModelSpecification
        Priors and data
    expected_precision : float
        Current ⟨τ⟩

    Returns
    -------
    mean : NDArray[np.float64]
        μ_w, shape (D,)
    covariance : NDArray[np.float64]
        Σ_w = Λ_w⁻¹, shape (D, D)

    Raises
    ------
    NumericalError
        If Λ_w is singular or not positive definite beyond tolerance.
    """
    prior = spec.weight_prior
    posterior_precision = prior.precision + expected_precision * spec.gram
    covariance = inv_spd(posterior_precision)
    mean = covariance @ (prior.precision @ prior.mean + expected_precision * spec.moment)
    return mean, covariance


def update_noise(spec: ModelSpecification, mean, covariance):
    """
    Optimal q(τ) given q(w).

    Returns
    -------
    shape : float
        a = a₀ + N/2
    rate : float
        b = b₀ + ½ E_q(w)[||y - Xw||²]
    """
    prior = spec.noise_prior
    shape = prior.shape + 0.5 * spec.n_obs
    rate = prior.rate + 0.5 * expected_squared_residuals(spec, mean, covariance)
    return shape, rate


def sweep(spec: ModelSpecification, state: VariationalState) -> VariationalState:
    """One coordinate-ascent sweep: weights first, then noise."""
    mean, covariance = update_weights(spec, state.expected_precision)
    shape, rate = update_noise(spec, mean, covariance)
    return VariationalState(mean, covariance, shape, rate)


def _relative_change(new, old) -> float:
    new = np.asarray(new, dtype=np.float64)
    old = np.asarray(old, dtype=np.float64)
    scale = max(float(np.linalg.norm(old)), np.finfo(np.float64).tiny)
    return float(np.linalg.norm(new - old)) / scale


class InferenceResult:
    """
    Posteriors and convergence information from a variational run.

    Attributes
    ----------
    weights : VectorGaussian
        Posterior q(w) = N(μ_w, Σ_w)
    noise : Gamma
        Posterior q(τ) = Gamma(a, b) over the noise precision
    status : ConvergenceStatus
        CONVERGED or MAX_ITERATIONS_REACHED
    n_iterations : int
        Number of sweeps performed
    precision_history : List[float]
        ⟨τ⟩ before the first sweep (prior mean) and after every sweep
    elbo_history : List[float]
        ELBO after every sweep
    """

    def __init__(
        self,
        weights: VectorGaussian,
        noise: Gamma,
        status: ConvergenceStatus,
        n_iterations: int,
        precision_history: List[float],
        elbo_history: List[float],
    ) -> None:
        self.weights = weights
        self.noise = noise
        self.status = status
        self.n_iterations = n_iterations
        self.precision_history = tuple(precision_history)
        self.elbo_history = tuple(elbo_history)

    @property
    def converged(self) -> bool:
        return self.status is ConvergenceStatus.CONVERGED

    @property
    def converged_partially(self) -> bool:
        """True when the iteration cap was hit before convergence."""
        return self.status is ConvergenceStatus.MAX_ITERATIONS_REACHED

    @property
    def expected_precision(self) -> float:
        return self.noise.mean

    @property
    def noise_variance_estimate(self) -> float:
        """Plug-in noise variance b / a."""
        return self.noise.rate / self.noise.shape

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"InferenceResult(status={self.status.value}, "
            f"iterations={self.n_iterations}, weights={self.weights}, "
            f"noise={self.noise})"
        )


class VariationalInference:
    """
    Coordinate-ascent variational inference engine.

    Holds only configuration; every call to ``run`` or ``iterate`` owns its
    own state, so one engine can serve independent runs.
    """

    def __init__(self, config: Optional[InferenceConfig] = None) -> None:
        """
        Initialize engine.

        Parameters
        ----------
        config : InferenceConfig, optional
            Iteration cap and tolerance. If None, use defaults.
        """
        self.config = config or InferenceConfig()

    def iterate(self, spec: ModelSpecification) -> Iterator[SweepReport]:
        """
        Run sweeps lazily, yielding a report after each one.

        Stops after the first converged sweep or after
        ``config.max_iterations`` sweeps, whichever comes first.

        Raises
        ------
        NumericalError
            If a posterior precision matrix cannot be inverted.
        """
        tol = self.config.tolerance
        state = initial_state(spec)

        for iteration in range(1, self.config.max_iterations + 1):
            new_state = sweep(spec, state)

            precision_change = _relative_change(
                new_state.expected_precision, state.expected_precision
            )
            mean_change = _relative_change(new_state.mean, state.mean)
            # No previous μ_w exists before the first sweep
            converged = (
                iteration > 1
                and precision_change <= tol
                and mean_change <= tol
            )
            elbo = compute_elbo(spec, new_state)

            logger.debug(
                "sweep %d: <tau>=%.6g d_tau=%.3g d_mean=%.3g elbo=%.6g",
                iteration, new_state.expected_precision,
                precision_change, mean_change, elbo,
            )

            yield SweepReport(iteration, new_state, precision_change, mean_change, elbo, converged)

            state = new_state
            if converged:
                return

    def run(self, spec: ModelSpecification) -> InferenceResult:
        """
        Run coordinate ascent to convergence or the iteration cap.

        Parameters
        ----------
        spec : ModelSpecification
            Priors and data

        Returns
        -------
        InferenceResult
            Posterior over weights and noise precision plus status.
        """
        status = ConvergenceStatus.INITIALIZED
        precision_history = [spec.noise_prior.mean]
        elbo_history = []
        last: Optional[SweepReport] = None

        for report in self.iterate(spec):
            status = ConvergenceStatus.ITERATING
            precision_history.append(report.state.expected_precision)
            elbo_history.append(report.elbo)
            last = report

        if last.converged:
            status = ConvergenceStatus.CONVERGED
            logger.info(
                "Variational inference converged after %d iterations (<tau>=%.6g)",
                last.iteration, last.state.expected_precision,
            )
        else:
            status = ConvergenceStatus.MAX_ITERATIONS_REACHED
            logger.warning(
                "Variational inference stopped at max_iterations=%d without converging "
                "(d_tau=%.3g, d_mean=%.3g); returning last posterior",
                last.iteration, last.precision_change, last.mean_change,
            )

        state = last.state
        return InferenceResult(
            weights=VectorGaussian(state.mean, covariance=state.covariance, validate=False),
            noise=Gamma(state.shape, state.rate),
            status=status,
            n_iterations=last.iteration,
            precision_history=precision_history,
            elbo_history=elbo_history,
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"VariationalInference(config={self.config})"


def infer(
    spec: ModelSpecification,
    config: Optional[InferenceConfig] = None,
) -> InferenceResult:
    """Convenience wrapper: ``VariationalInference(config).run(spec)``."""
    return VariationalInference(config).run(spec)
