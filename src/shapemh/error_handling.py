"""
Error Handling and Validation Utilities for the Metropolis-Hastings chain.

This module defines the exception types raised by the package and the
validators that run when samplers, proposals and runs are constructed.

Configuration problems are fatal and surface immediately as
ConfigurationError. Failures raised by collaborators while a chain is
running are wrapped in ChainEvaluationError so the caller can see which
step and which proposal triggered them.
"""

import math
from numbers import Integral
from typing import Any, Dict, Sequence

import logging
logger = logging.getLogger('shapemh')


class ConfigurationError(ValueError):
    """Invalid construction or run configuration."""


class ChainEvaluationError(RuntimeError):
    """
    A collaborator failed while the chain was computing a step.

    Attributes:
        step: 0-based index of the step that failed
        provenance: Label of the candidate being scored (or of the current
            sample when the proposal itself failed)
    """

    def __init__(self, step: int, provenance: str, message: str):
        super().__init__(f"Step {step} ({provenance}): {message}")
        self.step = step
        self.provenance = provenance


def validate_step_size(stddev) -> float:
    """
    Validates a random-walk step size.

    Args:
        stddev: Standard deviation of the perturbation

    Returns:
        stddev as a float

    Raises:
        ConfigurationError: If stddev is not finite and strictly positive
    """
    try:
        value = float(stddev)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Step size must be a number, got {stddev!r}") from None
    if not math.isfinite(value) or value <= 0.0:
        raise ConfigurationError(f"Step size must be finite and > 0, got {stddev}")
    return value


def validate_mixture_weights(weights: Sequence[float], tolerance: float = 1e-6) -> None:
    """
    Validates mixture weights: each in [0, 1] and summing to 1.

    Raises:
        ConfigurationError: Listing every problem found
    """
    errors = []

    if len(weights) == 0:
        errors.append("Mixture needs at least one component")

    for i, w in enumerate(weights):
        if not math.isfinite(w) or w < 0.0 or w > 1.0:
            errors.append(f"Weight {i} must be in [0, 1], got {w}")

    total = math.fsum(weights)
    if weights and abs(total - 1.0) > tolerance:
        errors.append(f"Weights must sum to 1, got {total}")

    if errors:
        raise ConfigurationError("Invalid mixture weights:\n  " + "\n  ".join(errors))


def validate_rank(rank) -> int:
    """Validates a shape-model rank (number of coefficients)."""
    if isinstance(rank, bool) or not isinstance(rank, Integral) or rank < 0:
        raise ConfigurationError(f"Model rank must be a non-negative integer, got {rank!r}")
    return int(rank)


def validate_sample_rank(sample, rank: int) -> None:
    """
    Checks that a sample's coefficient vector matches the model rank.

    Raises:
        ConfigurationError: On dimensionality mismatch
    """
    n = sample.parameters.rank
    if n != rank:
        raise ConfigurationError(
            f"Coefficient dimensionality mismatch: sample '{sample.provenance}' "
            f"has {n} coefficients, model rank is {rank}"
        )


def validate_chain_config(chain_config: Dict[str, Any]) -> None:
    """
    Validates that a chain run configuration is sensible.

    Args:
        chain_config: Configuration dictionary (see mcmc_utils.clean_config)

    Raises:
        ConfigurationError: If configuration is invalid
    """
    errors = []

    required_keys = ['rng_seed', 'burn_in', 'num_samples']
    for key in required_keys:
        if key not in chain_config:
            errors.append(f"Missing required config key: '{key}'")

    if 'rng_seed' in chain_config:
        seed = chain_config['rng_seed']
        if isinstance(seed, bool) or not isinstance(seed, Integral):
            errors.append(f"rng_seed must be an integer, got {seed!r}")

    if 'burn_in' in chain_config:
        if chain_config['burn_in'] < 0:
            errors.append("burn_in must be >= 0")

    if 'num_samples' in chain_config:
        if chain_config['num_samples'] < 0:
            errors.append("num_samples must be >= 0")

    if 'cache_capacity' in chain_config:
        if chain_config['cache_capacity'] < 1:
            errors.append("cache_capacity must be >= 1")

    if 'log_every' in chain_config:
        if chain_config['log_every'] < 0:
            errors.append("log_every must be >= 0")

    if errors:
        raise ConfigurationError("Invalid chain configuration:\n  " + "\n  ".join(errors))
