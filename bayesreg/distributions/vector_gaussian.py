"""
Multivariate Gaussian over the weight vector.

A VectorGaussian can be specified in moment form (mean μ, covariance Σ) or in
natural form (mean μ, precision Λ = Σ⁻¹). Posterior updates in linear-Gaussian
models come out naturally in precision form:

    Λ_post = Λ_prior + τ XᵀX

while prediction needs the covariance. Whichever form was not supplied is
computed on first access with a Cholesky-based SPD inverse and memoized on
the instance.

Parameters are stored as read-only copies, so a VectorGaussian is a value
object: equality and hashing are defined over (mean, covariance).
"""

from typing import Optional
import numpy as np
from numpy.typing import NDArray
from scipy.stats import multivariate_normal

from bayesreg.errors import DimensionMismatchError, InvalidParameterError
from bayesreg.distributions.gaussian import Gaussian
from bayesreg.linalg import as_matrix, as_vector, inv_spd, is_positive_definite, log_det_spd


def _frozen_copy(arr: NDArray[np.float64]) -> NDArray[np.float64]:
    out = np.array(arr, dtype=np.float64, copy=True)
    out.flags.writeable = False
    return out


class VectorGaussian:
    """
    Multivariate Gaussian N(μ, Σ).

    Attributes
    ----------
    dimension : int
        Dimensionality D
    mean : NDArray[np.float64]
        Mean vector μ, shape (D,)
    """

    def __init__(
        self,
        mean: NDArray[np.float64],
        covariance: Optional[NDArray[np.float64]] = None,
        precision: Optional[NDArray[np.float64]] = None,
        validate: bool = True
    ) -> None:
        """
        Initialize multivariate Gaussian.

        Parameters
        ----------
        mean : NDArray[np.float64]
            Mean vector μ, shape (D,)
        covariance : NDArray[np.float64], optional
            Covariance Σ, shape (D, D). Exactly one of covariance/precision.
        precision : NDArray[np.float64], optional
            Precision Λ = Σ⁻¹, shape (D, D).
        validate : bool, optional
            If True, check that the supplied matrix is symmetric positive
            definite.

        Raises
        ------
        InvalidParameterError
            If both or neither matrix form is given, or the matrix is not
            symmetric positive definite.
        DimensionMismatchError
            If the matrix shape does not match the mean.
        """
        if (covariance is None) == (precision is None):
            raise InvalidParameterError(
                "Specify exactly one of covariance or precision"
            )

        self.mean = _frozen_copy(as_vector(mean))
        self.dimension: int = self.mean.shape[0]
        if self.dimension == 0:
            raise DimensionMismatchError("VectorGaussian needs at least one dimension")

        self._covariance: Optional[NDArray[np.float64]] = None
        self._precision: Optional[NDArray[np.float64]] = None

        if covariance is not None:
            self._covariance = _frozen_copy(as_matrix(covariance, self.dimension))
            supplied, name = self._covariance, "covariance"
        else:
            self._precision = _frozen_copy(as_matrix(precision, self.dimension))
            supplied, name = self._precision, "precision"

        if validate:
            if not np.all(np.isfinite(self.mean)):
                raise InvalidParameterError("Mean must be finite")
            if not is_positive_definite(supplied):
                raise InvalidParameterError(
                    f"{name.capitalize()} matrix must be symmetric positive definite"
                )

    @classmethod
    def standard(cls, dimension: int) -> "VectorGaussian":
        """Zero-mean, identity-covariance Gaussian of the given dimension."""
        if dimension <= 0:
            raise DimensionMismatchError(f"dimension must be positive. Got {dimension}")
        return cls(np.zeros(dimension), covariance=np.eye(dimension), validate=False)

    @property
    def covariance(self) -> NDArray[np.float64]:
        """
        Covariance matrix Σ (computed lazily from the precision).

        Returns
        -------
        NDArray[np.float64]
            Read-only covariance, shape (D, D)
        """
        if self._covariance is None:
            self._covariance = _frozen_copy(inv_spd(self._precision))
        return self._covariance

    @property
    def precision(self) -> NDArray[np.float64]:
        """
        Precision matrix Λ = Σ⁻¹ (computed lazily from the covariance).

        Returns
        -------
        NDArray[np.float64]
            Read-only precision, shape (D, D)
        """
        if self._precision is None:
            self._precision = _frozen_copy(inv_spd(self._covariance))
        return self._precision

    @property
    def variances(self) -> NDArray[np.float64]:
        """Marginal variances diag(Σ)."""
        return np.diag(self.covariance).copy()

    @property
    def std(self) -> NDArray[np.float64]:
        """Marginal standard deviations."""
        return np.sqrt(self.variances)

    def marginal(self, index: int) -> Gaussian:
        """Univariate marginal of component ``index``."""
        if not (-self.dimension <= index < self.dimension):
            raise IndexError(
                f"index must be in [0, {self.dimension - 1}]. Got {index}"
            )
        return Gaussian(self.mean[index], self.covariance[index, index])

    def logpdf(self, x) -> NDArray[np.float64]:
        """
        Log density.

        Parameters
        ----------
        x : array_like
            Point(s), shape (D,) or (n, D)
        """
        x = np.asarray(x, dtype=np.float64)
        if x.shape[-1] != self.dimension:
            raise DimensionMismatchError(
                f"Expected points of dimension {self.dimension}. Got shape {x.shape}"
            )
        return multivariate_normal(mean=self.mean, cov=self.covariance).logpdf(x)

    def pdf(self, x) -> NDArray[np.float64]:
        return np.exp(self.logpdf(x))

    def entropy(self) -> float:
        """
        Differential entropy.

        H = D/2 (1 + log 2π) + ½ log det(Σ)
        """
        return float(
            0.5 * self.dimension * (1.0 + np.log(2.0 * np.pi))
            + 0.5 * log_det_spd(self.covariance)
        )

    def sample(
        self,
        n_samples: int,
        random_seed: Optional[int] = None
    ) -> NDArray[np.float64]:
        """
        Sample from N(μ, Σ).

        Returns
        -------
        NDArray[np.float64]
            Samples, shape (n_samples, D)
        """
        rng = np.random.default_rng(random_seed)
        return rng.multivariate_normal(self.mean, self.covariance, size=n_samples)

    def __eq__(self, other) -> bool:
        if not isinstance(other, VectorGaussian):
            return NotImplemented
        return (
            np.array_equal(self.mean, other.mean)
            and np.array_equal(self.covariance, other.covariance)
        )

    def __hash__(self) -> int:
        return hash(("VectorGaussian", self.mean.tobytes(), self.covariance.tobytes()))

    def __repr__(self) -> str:
        """String representation."""
        mean = np.array2string(self.mean, precision=6, separator=", ")
        cov = np.array2string(self.covariance, precision=6, separator=", ")
        return f"VectorGaussian(mean={mean}, covariance={cov})"
