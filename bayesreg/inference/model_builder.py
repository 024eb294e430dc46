"""
Reference model builder: the regression model declared in PyMC.

The variational engine solves the model with explicit closed-form updates.
This module declares the same model as random variables in PyMC so that it
can be sampled with NUTS and the variational posterior checked against an
asymptotically exact one.

Mathematical model:
    w ~ MvNormal(μ₀, Σ₀)                      # "weights"
    τ ~ Gamma(a₀, b₀)                         # "noise_precision"
    y_i ~ Normal(wᵀx_i, precision τ)          # "targets"
    σ² = 1/τ                                  # "noise_variance" (deterministic)
"""

from typing import Optional
import numpy as np
import pymc as pm
import pytensor.tensor as pt

from bayesreg.model import ModelSpecification


class ReferenceModelBuilder:
    """
    PyMC model builder for Bayesian linear regression.

    Attributes
    ----------
    spec : ModelSpecification
        Priors and data
    model : pm.Model or None
        PyMC model (None until built)
    """

    def __init__(self, spec: ModelSpecification) -> None:
        """
        Initialize model builder.

        Parameters
        ----------
        spec : ModelSpecification
            Priors and observed data to declare in PyMC.
        """
        self.spec = spec
        self.model: Optional[pm.Model] = None

    def _build_priors(self):
        """
        Declare the weight and noise-precision priors.

        Returns
        -------
        weights : pm.TensorVariable
            Weight vector, shape (D,)
        noise_precision : pm.TensorVariable
            Scalar noise precision
        """
        weight_prior = self.spec.weight_prior
        noise_prior = self.spec.noise_prior

        weights = pm.MvNormal(
            "weights",
            mu=np.array(weight_prior.mean),
            cov=np.array(weight_prior.covariance),
            shape=(self.spec.dimension,),
        )
        noise_precision = pm.Gamma(
            "noise_precision",
            alpha=noise_prior.shape,
            beta=noise_prior.rate,
        )
        pm.Deterministic("noise_variance", 1.0 / noise_precision)

        return weights, noise_precision

    def build(self, observed: bool = True) -> pm.Model:
        """
        Build the PyMC model.

        Parameters
        ----------
        observed : bool
            If True (default), condition on the dataset targets. If False,
            the targets are left unobserved, which gives the prior
            predictive model.

        Returns
        -------
        model : pm.Model
            PyMC model ready for sampling.
        """
        with pm.Model() as model:
            features = pm.Data("features", np.array(self.spec.features))
            weights, noise_precision = self._build_priors()

            pm.Normal(
                "targets",
                mu=pt.dot(features, weights),
                tau=noise_precision,
                observed=np.array(self.spec.targets) if observed else None,
                shape=(self.spec.n_obs,),
            )

        self.model = model
        return model

    def get_model(self) -> pm.Model:
        """
        Get the built model.

        Raises
        ------
        RuntimeError
            If model has not been built yet.
        """
        if self.model is None:
            raise RuntimeError("Model has not been built. Call .build() first.")
        return self.model

    def __repr__(self) -> str:
        """String representation."""
        return f"ReferenceModelBuilder(spec={self.spec}, built={self.model is not None})"
