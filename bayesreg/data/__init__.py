"""
Regression data containers and the bundled Challenger O-ring dataset.
"""

from bayesreg.data.dataset import Dataset, Observation, with_bias
from bayesreg.data.challenger import load_challenger

__all__ = [
    "Dataset",
    "Observation",
    "with_bias",
    "load_challenger",
]
