"""
Model specification: priors plus observed data.

Mathematical model:
    w ~ N(μ₀, Σ₀)                      # Weight prior
    τ ~ Gamma(a₀, b₀)                  # Noise precision prior (shape, rate)
    y_i | w, τ ~ N(wᵀx_i, 1/τ)         # Likelihood, i = 1..N

Defaults: μ₀ = 0, Σ₀ = I_D, a₀ = 1, b₀ = 2 (weakly informative, prior mean
precision 0.5).
"""

from typing import Optional
import numpy as np
from numpy.typing import NDArray

from bayesreg.data import Dataset
from bayesreg.distributions import Gamma, VectorGaussian
from bayesreg.errors import DimensionMismatchError


class PriorSpec:
    """Specification of priors for the weights and the noise precision."""

    def __init__(
        self,
        # Weight prior
        weight_mean: Optional[NDArray[np.float64]] = None,
        weight_covariance: Optional[NDArray[np.float64]] = None,
        # Noise precision prior
        noise_shape: float = 1.0,
        noise_rate: float = 2.0,
    ) -> None:
        """
        Initialize prior specification.

        Parameters
        ----------
        weight_mean : NDArray[np.float64], optional
            Prior mean μ₀, shape (D,). Default zeros.
        weight_covariance : NDArray[np.float64], optional
            Prior covariance Σ₀, shape (D, D). Default identity.
        noise_shape : float
            Gamma shape a₀ for the noise precision. Default 1.0.
        noise_rate : float
            Gamma rate b₀ for the noise precision. Default 2.0.
        """
        self.weight_mean = weight_mean
        self.weight_covariance = weight_covariance
        self.noise_shape = noise_shape
        self.noise_rate = noise_rate

    def weight_prior(self, dimension: int) -> VectorGaussian:
        """
        Build the weight prior for a D-dimensional model.

        Raises
        ------
        DimensionMismatchError
            If an override does not have dimension D.
        InvalidParameterError
            If the covariance override is not symmetric positive definite.
        """
        mean = np.zeros(dimension) if self.weight_mean is None else self.weight_mean
        cov = np.eye(dimension) if self.weight_covariance is None else self.weight_covariance

        prior = VectorGaussian(mean, covariance=cov)
        if prior.dimension != dimension:
            raise DimensionMismatchError(
                f"Weight prior has dimension {prior.dimension}, features have {dimension}"
            )
        return prior

    def noise_prior(self) -> Gamma:
        """Gamma(a₀, b₀) prior over the noise precision."""
        return Gamma(self.noise_shape, self.noise_rate)

    def __repr__(self) -> str:
        """String representation."""
        mean = "zeros" if self.weight_mean is None else "custom"
        cov = "identity" if self.weight_covariance is None else "custom"
        return (
            f"PriorSpec(weight_mean={mean}, weight_covariance={cov}, "
            f"noise_shape={self.noise_shape}, noise_rate={self.noise_rate})"
        )


class ModelSpecification:
    """
    Priors and data for one regression problem.

    Attributes
    ----------
    dataset : Dataset
        Observed data
    weight_prior : VectorGaussian
        Prior over weights, dimension D
    noise_prior : Gamma
        Prior over noise precision
    """

    def __init__(
        self,
        dataset: Dataset,
        prior_spec: Optional[PriorSpec] = None,
    ) -> None:
        """
        Initialize model specification.

        Parameters
        ----------
        dataset : Dataset
            Observed (features, targets); features include the bias column.
        prior_spec : PriorSpec, optional
            Prior overrides. If None, use defaults.

        Raises
        ------
        DimensionMismatchError
            If the weight prior dimension differs from the feature dimension.
        InvalidParameterError
            If a prior parameter is invalid.
        """
        self.dataset = dataset
        self.prior_spec = prior_spec or PriorSpec()
        self.weight_prior = self.prior_spec.weight_prior(dataset.dimension)
        self.noise_prior = self.prior_spec.noise_prior()

        self._gram: Optional[NDArray[np.float64]] = None
        self._moment: Optional[NDArray[np.float64]] = None

    @property
    def features(self) -> NDArray[np.float64]:
        return self.dataset.features

    @property
    def targets(self) -> NDArray[np.float64]:
        return self.dataset.targets

    @property
    def n_obs(self) -> int:
        return self.dataset.n_obs

    @property
    def dimension(self) -> int:
        return self.dataset.dimension

    @property
    def gram(self) -> NDArray[np.float64]:
        """XᵀX, shape (D, D)."""
        if self._gram is None:
            self._gram = self.features.T @ self.features
        return self._gram

    @property
    def moment(self) -> NDArray[np.float64]:
        """Xᵀy, shape (D,)."""
        if self._moment is None:
            self._moment = self.features.T @ self.targets
        return self._moment

    @property
    def target_energy(self) -> float:
        """yᵀy."""
        return float(self.targets @ self.targets)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"ModelSpecification(n_obs={self.n_obs}, dimension={self.dimension}, "
            f"prior_spec={self.prior_spec})"
        )
