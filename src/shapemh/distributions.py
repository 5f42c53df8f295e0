"""
Gaussian densities used by proposals, priors and noise models.

- DiagonalNormal: zero-mean normal with covariance stddev^2 * I. Used as the
  perturbation kernel of the block random walks and as pose priors.
- MultivariateNormal: full-covariance normal. Used as the noise model of a
  landmark correspondence (logpdf of the residual vector).

All log-densities are returned as Python floats.
"""

import jax.numpy as jnp
import jax.scipy.stats as stats
import numpy as np

from .error_handling import ConfigurationError, validate_step_size


class DiagonalNormal:
    """Zero-mean normal N(0, stddev^2 * I) of fixed dimensionality."""

    def __init__(self, stddev: float, dim: int):
        self.stddev = validate_step_size(stddev)
        if dim < 0:
            raise ConfigurationError(f"Dimension must be >= 0, got {dim}")
        self.dim = int(dim)

    def logpdf(self, x) -> float:
        x = jnp.asarray(x, dtype=jnp.float64)
        if x.shape != (self.dim,):
            raise ConfigurationError(f"Expected vector of shape ({self.dim},), got {x.shape}")
        return float(jnp.sum(stats.norm.logpdf(x, loc=0.0, scale=self.stddev)))

    def sample(self, rng) -> np.ndarray:
        return rng.normal((self.dim,), scale=self.stddev)

    def __repr__(self):
        return f"DiagonalNormal(stddev={self.stddev}, dim={self.dim})"


class MultivariateNormal:
    """
    Normal N(mean, cov).

    As a landmark noise model the mean is usually zero and logpdf is called
    with the residual between observed and model point.
    """

    def __init__(self, mean, cov):
        mean = np.asarray(mean, dtype=np.float64)
        cov = np.asarray(cov, dtype=np.float64)
        if mean.ndim != 1 or cov.shape != (mean.shape[0], mean.shape[0]):
            raise ConfigurationError(
                f"Covariance shape {cov.shape} does not match mean shape {mean.shape}"
            )
        if not np.allclose(cov, cov.T):
            raise ConfigurationError("Covariance matrix must be symmetric")
        try:
            np.linalg.cholesky(cov)
        except np.linalg.LinAlgError:
            raise ConfigurationError("Covariance matrix must be positive definite") from None
        self.mean = jnp.asarray(mean)
        self.cov = jnp.asarray(cov)

    @classmethod
    def isotropic(cls, sigma: float, dim: int = 3) -> "MultivariateNormal":
        """Zero-mean noise with variance sigma^2 in every direction."""
        sigma = validate_step_size(sigma)
        return cls(np.zeros(dim), np.eye(dim) * sigma ** 2)

    @property
    def dim(self) -> int:
        return self.mean.shape[0]

    def logpdf(self, x) -> float:
        x = jnp.asarray(x, dtype=jnp.float64)
        return float(stats.multivariate_normal.logpdf(x, self.mean, self.cov))

    def __repr__(self):
        return f"MultivariateNormal(dim={self.dim})"
