"""
Prior evaluator.

The coefficients of a low-rank statistical shape model are standard
normal a priori, so the shape prior is the N(0, I) log-density of the
coefficient vector. Rotation and translation get optional zero-mean
DiagonalNormal priors; without them the pose is left flat.
"""

from typing import Optional

import jax.numpy as jnp
import jax.scipy.stats as stats

from ..distributions import DiagonalNormal
from ..error_handling import ConfigurationError, validate_rank, validate_sample_rank
from ..sample import Sample


class PriorEvaluator:
    """
    log p(theta) = log N(coefficients | 0, I)
                   + log p_rot(rotation) + log p_trans(translation)

    Args:
        rank: Number of shape coefficients
        rotation_prior: Optional DiagonalNormal over the 3 Euler angles
        translation_prior: Optional DiagonalNormal over the translation
    """

    def __init__(self, rank: int,
                 rotation_prior: Optional[DiagonalNormal] = None,
                 translation_prior: Optional[DiagonalNormal] = None):
        self.rank = validate_rank(rank)
        for name, prior in (('rotation_prior', rotation_prior),
                            ('translation_prior', translation_prior)):
            if prior is not None and prior.dim != 3:
                raise ConfigurationError(f"{name} must be 3-dimensional, got dim={prior.dim}")
        self.rotation_prior = rotation_prior
        self.translation_prior = translation_prior

    def log_value(self, sample: Sample) -> float:
        validate_sample_rank(sample, self.rank)
        params = sample.parameters
        coeffs = jnp.asarray(params.coefficients)
        value = float(jnp.sum(stats.norm.logpdf(coeffs)))
        if self.rotation_prior is not None:
            value += self.rotation_prior.logpdf(params.rotation)
        if self.translation_prior is not None:
            value += self.translation_prior.logpdf(params.translation)
        return value

    def __repr__(self):
        return (f"PriorEvaluator(rank={self.rank}, rotation_prior={self.rotation_prior}, "
                f"translation_prior={self.translation_prior})")
