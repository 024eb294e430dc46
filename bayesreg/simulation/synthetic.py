"""
Synthetic regression data from known parameters.

Generates datasets from the model the engine assumes:

    x_i = (z_i, 1),  z_i ~ N(0, s² I_K)
    y_i = w_trueᵀ x_i + ε_i,  ε_i ~ N(0, 1/τ_true)

so that inference can be checked for recovery of (w_true, τ_true).
"""

from typing import Optional
import numpy as np
from numpy.typing import NDArray

from bayesreg.data import Dataset, with_bias
from bayesreg.errors import InvalidParameterError
from bayesreg.linalg import as_vector


class SyntheticRegressionGenerator:
    """
    Generator of regression datasets with known ground truth.

    Attributes
    ----------
    weights_true : NDArray[np.float64]
        True weights, shape (D,); the last entry is the bias weight
    noise_precision_true : float
        True noise precision τ
    feature_scale : float
        Standard deviation of the non-bias features
    """

    def __init__(
        self,
        weights_true: NDArray[np.float64],
        noise_precision_true: float,
        feature_scale: float = 1.0,
    ) -> None:
        """
        Initialize generator.

        Parameters
        ----------
        weights_true : NDArray[np.float64]
            True weights including the bias weight last, length D >= 1
        noise_precision_true : float
            True noise precision (> 0)
        feature_scale : float
            Standard deviation of each non-bias feature (> 0). Default 1.0.

        Raises
        ------
        InvalidParameterError
            If weights_true is empty or a scale parameter is not positive.
        """
        self.weights_true = as_vector(weights_true)
        if self.weights_true.shape[0] < 1:
            raise InvalidParameterError("weights_true must have at least one entry")
        if not (np.isfinite(noise_precision_true) and noise_precision_true > 0):
            raise InvalidParameterError(
                f"noise_precision_true must be positive. Got {noise_precision_true}"
            )
        if not (np.isfinite(feature_scale) and feature_scale > 0):
            raise InvalidParameterError(f"feature_scale must be positive. Got {feature_scale}")

        self.noise_precision_true = float(noise_precision_true)
        self.feature_scale = float(feature_scale)

    @property
    def dimension(self) -> int:
        return self.weights_true.shape[0]

    @property
    def noise_std(self) -> float:
        return 1.0 / np.sqrt(self.noise_precision_true)

    def generate(
        self,
        n_obs: int,
        random_seed: Optional[int] = None,
    ) -> Dataset:
        """
        Draw a dataset.

        Parameters
        ----------
        n_obs : int
            Number of observations (>= 1)
        random_seed : int, optional
            Seed for reproducibility

        Returns
        -------
        Dataset
            Features (z, 1) of dimension D and noisy targets
        """
        if n_obs < 1:
            raise InvalidParameterError(f"n_obs must be positive. Got {n_obs}")

        rng = np.random.default_rng(random_seed)

        raw = rng.normal(0.0, self.feature_scale, size=(n_obs, self.dimension - 1))
        X = with_bias(raw)
        noise = rng.normal(0.0, self.noise_std, size=n_obs)
        y = X @ self.weights_true + noise

        return Dataset(X, y)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"SyntheticRegressionGenerator(dimension={self.dimension}, "
            f"noise_precision_true={self.noise_precision_true}, "
            f"feature_scale={self.feature_scale})"
        )
