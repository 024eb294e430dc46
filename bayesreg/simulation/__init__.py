"""
Synthetic data generation for recovery and convergence experiments.

**Usage:**
```python
from bayesreg.simulation import SyntheticRegressionGenerator

gen = SyntheticRegressionGenerator(weights_true=[1.5, -2.0, 0.5], noise_precision_true=4.0)
dataset = gen.generate(n_obs=500, random_seed=0)
```
"""

from bayesreg.simulation.synthetic import SyntheticRegressionGenerator

__all__ = [
    "SyntheticRegressionGenerator",
]
