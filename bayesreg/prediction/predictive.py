"""
Predictive distribution for a new input.

Given q(w) = N(μ_w, Σ_w), q(τ) = Gamma(a, b) and a new feature vector x*:

    mean     = x*ᵀ μ_w
    variance = x*ᵀ Σ_w x* + b / a

The first variance term is parameter uncertainty; the second plugs in b/a as
the noise variance. This is a Gaussian approximation: integrating τ out
exactly would give a Student-t, which is not attempted here.
"""

from typing import List
import numpy as np

from bayesreg.distributions import Gamma, Gaussian, VectorGaussian
from bayesreg.linalg import as_vector, quad_form


def predict(weights: VectorGaussian, noise: Gamma, x) -> Gaussian:
    """
    Predictive Gaussian for one feature vector.

    Parameters
    ----------
    weights : VectorGaussian
        Posterior over weights
    noise : Gamma
        Posterior over noise precision
    x : array_like
        Feature vector including bias, shape (D,)

    Returns
    -------
    Gaussian

    Raises
    ------
    DimensionMismatchError
        If x does not have length D.
    """
    x = as_vector(x, weights.dimension)
    mean = float(x @ weights.mean)
    variance = quad_form(x, weights.covariance) + noise.rate / noise.shape
    return Gaussian(mean, variance)


class PredictiveEngine:
    """
    Posterior predictive for a fitted regression.

    Attributes
    ----------
    weights : VectorGaussian
        Posterior over weights
    noise : Gamma
        Posterior over noise precision
    """

    def __init__(self, weights: VectorGaussian, noise: Gamma) -> None:
        self.weights = weights
        self.noise = noise

    @classmethod
    def from_result(cls, result) -> "PredictiveEngine":
        """Build from an InferenceResult."""
        return cls(result.weights, result.noise)

    @property
    def noise_variance(self) -> float:
        """Plug-in noise variance b / a."""
        return self.noise.rate / self.noise.shape

    def predict(self, x) -> Gaussian:
        return predict(self.weights, self.noise, x)

    def predict_many(self, features) -> List[Gaussian]:
        """
        Predictive Gaussians for each row of a design matrix.

        Parameters
        ----------
        features : array_like
            Test inputs, shape (M, D)
        """
        X = np.atleast_2d(np.asarray(features, dtype=np.float64))
        return [self.predict(row) for row in X]

    def __repr__(self) -> str:
        """String representation."""
        return f"PredictiveEngine(weights={self.weights}, noise={self.noise})"
