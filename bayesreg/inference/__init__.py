"""
Posterior inference for Bayesian linear regression.

Two paths:
1. VariationalInference: closed-form mean-field coordinate ascent (the
   engine used for fitting and prediction)
2. ReferenceModelBuilder + NUTSSampler: the same model declared in PyMC and
   sampled with NUTS, for checking the variational approximation

**Usage:**
```python
from bayesreg.data import load_challenger
from bayesreg.model import ModelSpecification
from bayesreg.inference import VariationalInference, InferenceConfig

spec = ModelSpecification(load_challenger())
result = VariationalInference(InferenceConfig(max_iterations=100)).run(spec)
print(result.weights, result.noise, result.status)
```

Only the model_builder and sampler modules import PyMC, so the variational
engine stays light-weight:
```python
from bayesreg.inference.model_builder import ReferenceModelBuilder
from bayesreg.inference.sampler import NUTSSampler, reference_posterior

model = ReferenceModelBuilder(spec).build()
summary = NUTSSampler().sample(model, draws=1000, tune=1000)
weights, noise = reference_posterior(summary)
```
"""

from bayesreg.inference.elbo import compute_elbo
from bayesreg.inference.variational import (
    ConvergenceStatus,
    InferenceConfig,
    InferenceResult,
    SweepReport,
    VariationalInference,
    VariationalState,
    infer,
    sweep,
    update_noise,
    update_weights,
)

__all__ = [
    "ConvergenceStatus",
    "InferenceConfig",
    "InferenceResult",
    "SweepReport",
    "VariationalInference",
    "VariationalState",
    "compute_elbo",
    "infer",
    "sweep",
    "update_noise",
    "update_weights",
]
