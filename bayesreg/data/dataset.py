"""
Observations and datasets for linear regression.

A Dataset is an ordered, read-only collection of (feature vector, target)
pairs, stored as a design matrix X (rows = feature vectors) and a target
vector y. Feature vectors are expected to carry the bias term as their last
component; ``with_bias`` appends it to raw features.
"""

from typing import Iterable, Iterator, NamedTuple, Sequence, Tuple
import numpy as np
from numpy.typing import NDArray

from bayesreg.errors import DimensionMismatchError, InvalidParameterError


class Observation(NamedTuple):
    """One (feature vector, scalar target) pair."""

    features: NDArray[np.float64]
    target: float


def with_bias(raw_features) -> NDArray[np.float64]:
    """
    Append a constant bias column of ones.

    Parameters
    ----------
    raw_features : array_like
        Raw features, shape (N,) for a single covariate or (N, K)

    Returns
    -------
    NDArray[np.float64]
        Design matrix, shape (N, K + 1), last column all ones
    """
    X = np.asarray(raw_features, dtype=np.float64)
    if X.ndim == 1:
        X = X[:, None]
    if X.ndim != 2:
        raise DimensionMismatchError(
            f"raw_features must be 1-D or 2-D. Got shape {X.shape}"
        )
    return np.hstack([X, np.ones((X.shape[0], 1))])


class Dataset:
    """
    Read-only regression dataset.

    Attributes
    ----------
    features : NDArray[np.float64]
        Design matrix X, shape (N, D)
    targets : NDArray[np.float64]
        Targets y, shape (N,)
    n_obs : int
        Number of observations N (>= 1)
    dimension : int
        Feature dimensionality D
    """

    def __init__(self, features, targets) -> None:
        """
        Initialize dataset.

        Parameters
        ----------
        features : array_like
            Design matrix, shape (N, D)
        targets : array_like
            Targets, shape (N,)

        Raises
        ------
        DimensionMismatchError
            If features is ragged or not 2-D, or the number of rows differs
            from the number of targets.
        InvalidParameterError
            If the dataset is empty or contains non-finite values.
        """
        try:
            X = np.array(features, dtype=np.float64, copy=True)
        except ValueError as exc:
            raise DimensionMismatchError(
                "feature vectors must all have the same length"
            ) from exc
        y = np.array(targets, dtype=np.float64, copy=True).reshape(-1)

        if X.ndim != 2:
            raise DimensionMismatchError(
                f"features must be a 2-D design matrix. Got shape {X.shape}"
            )
        if X.shape[0] != y.shape[0]:
            raise DimensionMismatchError(
                f"features has {X.shape[0]} rows but targets has {y.shape[0]} entries"
            )
        if X.shape[0] < 1 or X.shape[1] < 1:
            raise InvalidParameterError(
                f"Dataset needs at least one observation and one feature. Got shape {X.shape}"
            )
        if not (np.all(np.isfinite(X)) and np.all(np.isfinite(y))):
            raise InvalidParameterError("Dataset contains non-finite values")

        X.flags.writeable = False
        y.flags.writeable = False
        self.features = X
        self.targets = y
        self.n_obs, self.dimension = X.shape

    @classmethod
    def from_observations(
        cls,
        observations: Iterable[Tuple[Sequence[float], float]]
    ) -> "Dataset":
        """
        Build a dataset from (feature vector, target) pairs.

        Raises
        ------
        DimensionMismatchError
            If feature vectors do not all share the same length.
        """
        rows = []
        targets = []
        for features, target in observations:
            row = np.asarray(features, dtype=np.float64)
            if row.ndim != 1:
                raise DimensionMismatchError(
                    f"Feature vectors must be 1-D. Got shape {row.shape}"
                )
            if rows and row.shape[0] != rows[0].shape[0]:
                raise DimensionMismatchError(
                    f"Observation {len(rows)} has dimension {row.shape[0]}, "
                    f"expected {rows[0].shape[0]}"
                )
            rows.append(row)
            targets.append(float(target))

        if not rows:
            raise InvalidParameterError("Dataset needs at least one observation")

        return cls(np.vstack(rows), np.asarray(targets))

    def __len__(self) -> int:
        return self.n_obs

    def __getitem__(self, index: int) -> Observation:
        return Observation(self.features[index], float(self.targets[index]))

    def __iter__(self) -> Iterator[Observation]:
        for i in range(self.n_obs):
            yield self[i]

    def __repr__(self) -> str:
        """String representation."""
        return f"Dataset(n_obs={self.n_obs}, dimension={self.dimension})"
