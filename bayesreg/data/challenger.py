"""
Challenger O-ring erosion data.

23 pre-Challenger shuttle flights: launch temperature (°F) and the number of
O-rings showing thermal distress. Source: UCI Machine Learning Repository,
space-shuttle/o-ring-erosion-only.data.
"""

import numpy as np

from bayesreg.data.dataset import Dataset, with_bias

TEMPERATURE = np.array([
    66, 70, 69, 68, 67, 72, 73, 70, 57, 63, 70, 78,
    67, 53, 67, 75, 70, 81, 76, 79, 75, 76, 58,
], dtype=np.float64)

DISTRESS = np.array([
    0, 1, 0, 0, 0, 0, 0, 0, 1, 1, 1, 0,
    0, 2, 0, 0, 0, 0, 0, 0, 0, 0, 1,
], dtype=np.float64)


def load_challenger() -> Dataset:
    """
    Load the O-ring dataset with features (temperature, 1).

    Returns
    -------
    Dataset
        23 observations, dimension 2
    """
    return Dataset(with_bias(TEMPERATURE), DISTRESS)
