"""
NUTS sampling of the reference regression model and convergence diagnostics.

Orchestrates PyMC sampling of the model built by ReferenceModelBuilder,
reports ArviZ convergence diagnostics (Rhat, ESS, divergences) per model
variable and reduces the draws to the same (VectorGaussian, Gamma) form the
variational engine returns, so both posteriors can be compared directly.

Key diagnostics:
- Rhat (rank-normalised split-Rhat): <1.01 indicates convergence
- ESS (bulk effective sample size): >400 in total recommended
- Divergences: <2% of draws acceptable; >5% is rejected outright
"""

import logging
import time
from typing import Dict, List, Optional, Tuple
import numpy as np
from numpy.typing import NDArray
import pymc as pm
import arviz as az

from bayesreg.distributions import Gamma, VectorGaussian

logger = logging.getLogger(__name__)

POSTERIOR_VARS = ["weights", "noise_precision"]
RHAT_THRESHOLD = 1.01
MAX_DIVERGENCE_RATE = 0.05


class InferenceSummary:
    """
    One NUTS run: ArviZ InferenceData plus run settings and timing.

    Attributes
    ----------
    idata : arviz.InferenceData
        Posterior draws and sampler statistics
    n_draws, n_tune, n_chains : int
        Run settings
    sampling_time : float
        Wall-clock seconds spent in ``pm.sample``
    """

    def __init__(
        self,
        idata,  # arviz.InferenceData
        n_draws: int,
        n_tune: int,
        n_chains: int,
        sampling_time: float,
    ) -> None:
        self.idata = idata
        self.n_draws = n_draws
        self.n_tune = n_tune
        self.n_chains = n_chains
        self.sampling_time = sampling_time

    @property
    def total_draws(self) -> int:
        return self.n_draws * self.n_chains

    def pooled_draws(self, var_name: str) -> NDArray[np.float64]:
        """
        Draws of one variable with chains concatenated.

        Returns
        -------
        NDArray[np.float64]
            Shape (chains * draws,) for scalars, (chains * draws, D) for
            vector variables.
        """
        values = np.asarray(self.idata.posterior[var_name].values, dtype=np.float64)
        n_pooled = values.shape[0] * values.shape[1]
        return values.reshape((n_pooled,) + values.shape[2:])

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"InferenceSummary(draws={self.n_draws}, tune={self.n_tune}, "
            f"chains={self.n_chains}, time={self.sampling_time:.1f}s)"
        )


class NUTSSampler:
    """NUTS sampler for the reference regression model."""

    def __init__(self, target_accept: float = 0.9) -> None:
        """
        Initialize sampler.

        Parameters
        ----------
        target_accept : float
            NUTS acceptance rate target, in (0.5, 0.99). Default 0.9.
        """
        if not (0.5 < target_accept < 0.99):
            raise ValueError(f"target_accept must be in (0.5, 0.99). Got {target_accept}")

        self.target_accept = target_accept

    def sample(
        self,
        model: pm.Model,
        draws: int = 1000,
        tune: int = 1000,
        chains: int = 2,
        cores: int = 1,
        random_seed: Optional[int] = None,
        progressbar: bool = False,
    ) -> InferenceSummary:
        """
        Run NUTS on a PyMC model.

        Parameters
        ----------
        model : pm.Model
            PyMC model (from ReferenceModelBuilder.build())
        draws : int
            Post-tuning samples per chain. Default 1000.
        tune : int
            Tuning steps per chain. Default 1000.
        chains : int
            Number of chains. Default 2.
        cores : int
            Number of processes. Default 1.
        random_seed : int, optional
            Random seed for reproducibility.
        progressbar : bool
            Show progress bar. Default False.

        Returns
        -------
        summary : InferenceSummary

        Raises
        ------
        RuntimeError
            If divergences exceed 5% of total samples.
        """
        start_time = time.time()

        with model:
            idata = pm.sample(
                draws=draws,
                tune=tune,
                chains=chains,
                cores=cores,
                random_seed=random_seed,
                progressbar=progressbar,
                target_accept=self.target_accept,
                return_inferencedata=True,
                discard_tuned_samples=True,
            )

        summary = InferenceSummary(
            idata=idata,
            n_draws=draws,
            n_tune=tune,
            n_chains=chains,
            sampling_time=time.time() - start_time,
        )

        div_rate = DiagnosticsComputer.divergence_rate(idata)
        if div_rate > MAX_DIVERGENCE_RATE:
            raise RuntimeError(
                f"Divergence rate too high: {div_rate:.1%} of {summary.total_draws} draws. "
                f"Consider increasing tune or target_accept."
            )

        if chains > 1:
            rhat = DiagnosticsComputer.rhat(idata)
            unmixed = sorted(name for name, value in rhat.items() if value > RHAT_THRESHOLD)
            if unmixed:
                logger.warning(
                    "Rhat above %.2f for %s; chains may not have mixed",
                    RHAT_THRESHOLD, ", ".join(unmixed),
                )

        logger.info(
            "NUTS finished: %d chains x %d draws in %.1fs (divergence rate %.2f%%)",
            chains, draws, summary.sampling_time, 100.0 * div_rate,
        )
        return summary

    def __repr__(self) -> str:
        """String representation."""
        return f"NUTSSampler(target_accept={self.target_accept})"


class DiagnosticsComputer:
    """ArviZ convergence diagnostics, reduced to one number per variable."""

    @staticmethod
    def rhat(idata, var_names: Optional[List[str]] = None) -> Dict[str, float]:
        """
        Worst (largest) split-Rhat per variable.

        Vector variables such as ``weights`` report the maximum over their
        components. Requires at least 2 chains.
        """
        var_names = var_names or POSTERIOR_VARS
        if idata.posterior.sizes["chain"] < 2:
            raise ValueError("Need at least 2 chains for Rhat")

        rhat = az.rhat(idata, var_names=var_names)
        return {name: float(rhat[name].max()) for name in var_names}

    @staticmethod
    def ess(idata, var_names: Optional[List[str]] = None) -> Dict[str, float]:
        """Smallest bulk effective sample size per variable."""
        var_names = var_names or POSTERIOR_VARS
        ess = az.ess(idata, var_names=var_names, method="bulk")
        return {name: float(ess[name].min()) for name in var_names}

    @staticmethod
    def divergence_rate(idata) -> float:
        """Fraction of draws flagged as divergent."""
        n_divergences = idata.sample_stats.diverging.sum().item()
        n_total = idata.posterior.sizes["draw"] * idata.posterior.sizes["chain"]
        return float(n_divergences / n_total)

    @staticmethod
    def summary_stats(
        idata,
        var_names: Optional[List[str]] = None,
    ) -> Dict[str, Dict[str, float]]:
        """
        Posterior summary per scalar component (``weights[0]``, ...).

        Returns
        -------
        stats : Dict
            name -> mean, std, 95% HDI bounds, Rhat, bulk ESS
        """
        summary_df = az.summary(idata, var_names=var_names or POSTERIOR_VARS, hdi_prob=0.95)

        return {
            name: {
                "mean": float(row["mean"]),
                "std": float(row["sd"]),
                "hdi_low": float(row["hdi_2.5%"]),
                "hdi_high": float(row["hdi_97.5%"]),
                "rhat": float(row["r_hat"]),
                "ess_bulk": float(row["ess_bulk"]),
            }
            for name, row in summary_df.iterrows()
        }


def reference_posterior(summary: InferenceSummary) -> Tuple[VectorGaussian, Gamma]:
    """
    Moment-match the NUTS draws to the variational posterior family.

    Parameters
    ----------
    summary : InferenceSummary
        Output of NUTSSampler.sample on a ReferenceModelBuilder model.

    Returns
    -------
    weights : VectorGaussian
        Sample mean and covariance of the weight draws
    noise : Gamma
        Gamma with the sample mean and variance of the precision draws
    """
    weight_draws = summary.pooled_draws("weights")
    precision_draws = summary.pooled_draws("noise_precision")

    covariance = np.atleast_2d(np.cov(weight_draws, rowvar=False))
    weights = VectorGaussian(weight_draws.mean(axis=0), covariance=covariance)
    noise = Gamma.from_mean_and_variance(
        float(precision_draws.mean()), float(precision_draws.var(ddof=1))
    )
    return weights, noise
