"""
Gamma distribution over a non-negative precision.

Parameterised by shape a > 0 and rate b > 0:

    p(τ) = bᵃ / Γ(a) · τ^(a-1) · exp(-b τ)

    E[τ]      = a / b
    Var[τ]    = a / b²
    E[log τ]  = ψ(a) - log b        (ψ = digamma)

scipy.stats.gamma uses a scale parameterisation, scale = 1 / rate.
"""

import math
from typing import Optional
import numpy as np
from numpy.typing import NDArray
from scipy import stats
from scipy.special import digamma

from bayesreg.errors import InvalidParameterError


class Gamma:
    """
    Gamma distribution with shape/rate parameters.

    Attributes
    ----------
    shape : float
        Shape a > 0
    rate : float
        Rate b > 0
    """

    def __init__(self, shape: float, rate: float) -> None:
        """
        Initialize Gamma distribution.

        Raises
        ------
        InvalidParameterError
            If shape or rate is non-positive or not finite.
        """
        shape = float(shape)
        rate = float(rate)
        if not (math.isfinite(shape) and shape > 0):
            raise InvalidParameterError(f"Gamma shape must be positive. Got {shape}")
        if not (math.isfinite(rate) and rate > 0):
            raise InvalidParameterError(f"Gamma rate must be positive. Got {rate}")

        self._shape = shape
        self._rate = rate

    @property
    def shape(self) -> float:
        return self._shape

    @property
    def rate(self) -> float:
        return self._rate

    @classmethod
    def from_mean_and_variance(cls, mean: float, variance: float) -> "Gamma":
        """
        Moment-matched Gamma: a = m² / v, b = m / v.

        Raises
        ------
        InvalidParameterError
            If mean or variance is non-positive.
        """
        if mean <= 0 or variance <= 0:
            raise InvalidParameterError(
                f"Mean and variance must be positive. Got mean={mean}, variance={variance}"
            )
        return cls(mean * mean / variance, mean / variance)

    @property
    def mean(self) -> float:
        return self.shape / self.rate

    @property
    def variance(self) -> float:
        return self.shape / (self.rate * self.rate)

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    @property
    def mode(self) -> float:
        """Mode (a - 1) / b, or 0 when a < 1."""
        return max(0.0, (self.shape - 1.0) / self.rate)

    def expected_log(self) -> float:
        """E[log τ] = ψ(a) - log b."""
        return float(digamma(self.shape) - math.log(self.rate))

    def entropy(self) -> float:
        """Differential entropy."""
        return float(self._frozen().entropy())

    def logpdf(self, x) -> NDArray[np.float64]:
        """Log density at x."""
        return self._frozen().logpdf(x)

    def pdf(self, x) -> NDArray[np.float64]:
        """Density at x."""
        return self._frozen().pdf(x)

    def sample(
        self,
        n_samples: int,
        random_seed: Optional[int] = None
    ) -> NDArray[np.float64]:
        """
        Draw samples.

        Parameters
        ----------
        n_samples : int
            Number of samples
        random_seed : int, optional
            Seed for reproducibility

        Returns
        -------
        NDArray[np.float64]
            Samples, shape (n_samples,)
        """
        rng = np.random.default_rng(random_seed)
        return rng.gamma(self.shape, 1.0 / self.rate, size=n_samples)

    def _frozen(self):
        return stats.gamma(a=self.shape, scale=1.0 / self.rate)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Gamma):
            return NotImplemented
        return self.shape == other.shape and self.rate == other.rate

    def __hash__(self) -> int:
        return hash(("Gamma", self.shape, self.rate))

    def __repr__(self) -> str:
        """String representation."""
        return f"Gamma(shape={self.shape!r}, rate={self.rate!r})[mean={self.mean:.4g}]"
