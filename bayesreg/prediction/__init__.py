"""
Posterior predictive distributions over the response.
"""

from bayesreg.prediction.predictive import PredictiveEngine, predict

__all__ = [
    "PredictiveEngine",
    "predict",
]
