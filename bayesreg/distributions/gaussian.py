"""
Univariate Gaussian, used as the predictive distribution over a response.
"""

import math
from typing import Optional, Tuple
import numpy as np
from numpy.typing import NDArray
from scipy import stats

from bayesreg.errors import InvalidParameterError


class Gaussian:
    """
    Gaussian N(mean, variance).

    Attributes
    ----------
    mean : float
        Mean
    variance : float
        Variance > 0
    """

    def __init__(self, mean: float, variance: float) -> None:
        """
        Initialize Gaussian.

        Raises
        ------
        InvalidParameterError
            If mean is not finite or variance is not a positive finite number.
        """
        mean = float(mean)
        variance = float(variance)
        if not math.isfinite(mean):
            raise InvalidParameterError(f"Gaussian mean must be finite. Got {mean}")
        if not (math.isfinite(variance) and variance > 0):
            raise InvalidParameterError(
                f"Gaussian variance must be positive. Got {variance}"
            )

        self._mean = mean
        self._variance = variance

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def variance(self) -> float:
        return self._variance

    @classmethod
    def from_mean_and_precision(cls, mean: float, precision: float) -> "Gaussian":
        if not precision > 0:
            raise InvalidParameterError(
                f"Gaussian precision must be positive. Got {precision}"
            )
        return cls(mean, 1.0 / precision)

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    @property
    def precision(self) -> float:
        return 1.0 / self.variance

    def logpdf(self, x) -> NDArray[np.float64]:
        return self._frozen().logpdf(x)

    def pdf(self, x) -> NDArray[np.float64]:
        return self._frozen().pdf(x)

    def cdf(self, x) -> NDArray[np.float64]:
        return self._frozen().cdf(x)

    def interval(self, level: float = 0.95) -> Tuple[float, float]:
        """
        Central credible interval.

        Parameters
        ----------
        level : float
            Probability mass inside the interval, in (0, 1).

        Returns
        -------
        lower, upper : float
        """
        if not (0 < level < 1):
            raise InvalidParameterError(f"level must be in (0, 1). Got {level}")
        lower, upper = self._frozen().interval(level)
        return float(lower), float(upper)

    def sample(
        self,
        n_samples: int,
        random_seed: Optional[int] = None
    ) -> NDArray[np.float64]:
        rng = np.random.default_rng(random_seed)
        return rng.normal(self.mean, self.std, size=n_samples)

    def _frozen(self):
        return stats.norm(loc=self.mean, scale=self.std)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Gaussian):
            return NotImplemented
        return self.mean == other.mean and self.variance == other.variance

    def __hash__(self) -> int:
        return hash(("Gaussian", self.mean, self.variance))

    def __repr__(self) -> str:
        """String representation."""
        return f"Gaussian(mean={self.mean!r}, variance={self.variance!r})"
