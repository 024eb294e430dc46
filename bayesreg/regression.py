"""
Fit-and-predict facade over the model specification, inference and
predictive components.
"""

from typing import List, Optional

from bayesreg.data import Dataset
from bayesreg.distributions import Gaussian
from bayesreg.inference import ConvergenceStatus, InferenceConfig, InferenceResult, VariationalInference
from bayesreg.model import ModelSpecification, PriorSpec
from bayesreg.prediction import PredictiveEngine


class BayesianLinearRegression:
    """
    Bayesian linear regression with unknown noise precision.

    Attributes
    ----------
    prior_spec : PriorSpec
        Prior overrides
    config : InferenceConfig
        Iteration cap and tolerance
    result : InferenceResult or None
        Posterior from the last ``fit`` (None before fitting)
    """

    def __init__(
        self,
        prior_spec: Optional[PriorSpec] = None,
        config: Optional[InferenceConfig] = None,
    ) -> None:
        self.prior_spec = prior_spec or PriorSpec()
        self.config = config or InferenceConfig()
        self.result: Optional[InferenceResult] = None
        self._predictive: Optional[PredictiveEngine] = None

    def fit(self, dataset: Dataset) -> InferenceResult:
        """
        Infer the posterior over weights and noise precision.

        Raises
        ------
        DimensionMismatchError, InvalidParameterError, NumericalError
            Propagated from specification and inference.
        """
        spec = ModelSpecification(dataset, self.prior_spec)
        self.result = VariationalInference(self.config).run(spec)
        self._predictive = PredictiveEngine.from_result(self.result)
        return self.result

    @property
    def status(self) -> ConvergenceStatus:
        if self.result is None:
            return ConvergenceStatus.INITIALIZED
        return self.result.status

    def _engine(self) -> PredictiveEngine:
        if self._predictive is None:
            raise RuntimeError("Model has not been fitted. Call .fit() first.")
        return self._predictive

    def predict(self, x) -> Gaussian:
        """Predictive Gaussian for one feature vector (bias last)."""
        return self._engine().predict(x)

    def predict_many(self, features) -> List[Gaussian]:
        """Predictive Gaussians for each row of ``features``."""
        return self._engine().predict_many(features)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"BayesianLinearRegression(prior_spec={self.prior_spec}, "
            f"config={self.config}, status={self.status.value})"
        )
