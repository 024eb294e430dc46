"""
Distribution value objects.

- Gaussian: univariate, used for predictive distributions
- VectorGaussian: multivariate, posterior over regression weights
- Gamma: shape/rate, posterior over noise precision
"""

from bayesreg.distributions.gaussian import Gaussian
from bayesreg.distributions.gamma import Gamma
from bayesreg.distributions.vector_gaussian import VectorGaussian

__all__ = [
    "Gaussian",
    "Gamma",
    "VectorGaussian",
]
