"""
Exception taxonomy for Bayesian linear regression.

- InvalidParameterError: malformed prior or configuration (non-positive
  Gamma shape/rate, non positive-definite covariance, non-finite data)
- DimensionMismatchError: feature dimensionality inconsistent with the prior
  or across observations
- NumericalError: a matrix that must be positive definite is singular or
  indefinite beyond tolerance

Partial convergence is not an error; it is reported through
``ConvergenceStatus.MAX_ITERATIONS_REACHED`` on the inference result.
"""


class BayesRegError(Exception):
    """Base class for all errors raised by bayesreg."""


class InvalidParameterError(BayesRegError, ValueError):
    """A distribution, prior or engine parameter is out of its valid range."""


class DimensionMismatchError(BayesRegError, ValueError):
    """Array dimensions do not agree."""


class NumericalError(BayesRegError, ArithmeticError):
    """Positive-definite matrix operation failed."""
