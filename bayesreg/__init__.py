"""
Bayesian linear regression with unknown observation noise.

Posterior over weights and noise precision by mean-field variational
coordinate ascent, and Gaussian predictive distributions for new inputs.

**Usage:**
```python
from bayesreg import BayesianLinearRegression
from bayesreg.data import load_challenger

reg = BayesianLinearRegression()
result = reg.fit(load_challenger())
print(result.weights, result.noise, result.status)
print(reg.predict([31.0, 1.0]))
```
"""

from bayesreg.errors import (
    BayesRegError,
    DimensionMismatchError,
    InvalidParameterError,
    NumericalError,
)
from bayesreg.data import Dataset, Observation, load_challenger, with_bias
from bayesreg.distributions import Gamma, Gaussian, VectorGaussian
from bayesreg.model import ModelSpecification, PriorSpec
from bayesreg.inference import (
    ConvergenceStatus,
    InferenceConfig,
    InferenceResult,
    VariationalInference,
)
from bayesreg.prediction import PredictiveEngine, predict
from bayesreg.regression import BayesianLinearRegression

__version__ = "0.1.0"

__all__ = [
    "BayesRegError",
    "DimensionMismatchError",
    "InvalidParameterError",
    "NumericalError",
    "Dataset",
    "Observation",
    "load_challenger",
    "with_bias",
    "Gamma",
    "Gaussian",
    "VectorGaussian",
    "ModelSpecification",
    "PriorSpec",
    "ConvergenceStatus",
    "InferenceConfig",
    "InferenceResult",
    "VariationalInference",
    "PredictiveEngine",
    "predict",
    "BayesianLinearRegression",
]
