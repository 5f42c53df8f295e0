"""
History processing utilities for chain output.

This module provides functions for:
- Applying burn-in and taking a fixed number of samples from a lazy chain
- Stacking samples into per-block numpy arrays
- Posterior mean and covariance of the stacked parameter vectors

These are downstream reductions; they never drive the chain beyond the
samples they are asked for.
"""

from itertools import islice
from typing import Dict, Iterable, Iterator, Sequence

import numpy as np

from .sample import BLOCK_NAMES, Sample

import logging
logger = logging.getLogger('shapemh')


def burn_and_take(samples: Iterable[Sample], burn_in: int, num_samples: int) -> Iterator[Sample]:
    """
    Drop the first `burn_in` samples, then yield the next `num_samples`.

    Lazy: pulls exactly burn_in + num_samples elements once exhausted.
    """
    if burn_in < 0 or num_samples < 0:
        raise ValueError(f"burn_in and num_samples must be >= 0, got {burn_in}, {num_samples}")
    return islice(samples, burn_in, burn_in + num_samples)


def stack_history(samples: Sequence[Sample]) -> Dict[str, np.ndarray]:
    """
    Stack samples into arrays.

    Args:
        samples: Finite sequence of samples with a common rank

    Returns:
        Dict with 'translation' (n, 3), 'rotation' (n, 3),
        'coefficients' (n, rank) and 'provenance' (n,) arrays
    """
    samples = list(samples)
    if not samples:
        raise ValueError("No samples to stack")

    history = {
        name: np.stack([s.parameters.block(name) for s in samples])
        for name in BLOCK_NAMES
    }
    history['provenance'] = np.array([s.provenance for s in samples])
    return history


def posterior_summary(samples: Sequence[Sample]) -> Dict[str, object]:
    """
    Mean and covariance of the parameter vectors
    (translation | rotation | coefficients).

    Returns:
        Dict with 'mean' (d,), 'covariance' (d, d) and 'num_samples'
    """
    samples = list(samples)
    if not samples:
        raise ValueError("No samples to summarize")

    vectors = np.stack([s.parameters.as_vector() for s in samples])
    n = vectors.shape[0]
    mean = np.mean(vectors, axis=0)
    if n > 1:
        covariance = np.cov(vectors, rowvar=False, ddof=1)
    else:
        covariance = np.zeros((vectors.shape[1], vectors.shape[1]))
    covariance = np.atleast_2d(covariance)

    distinct = len({s.parameters.key() for s in samples})
    logger.info(f"Posterior summary over {n} samples ({distinct} distinct states)")
    return {'mean': mean, 'covariance': covariance, 'num_samples': n}
