"""
Explicit random source for the sampler.

Every stochastic call in the package (initial seeding, proposal
perturbations, mixture component choice, acceptance draws) takes a
RandomSource argument. The source wraps a JAX PRNG key and splits a fresh
subkey for each draw, so the same seed and the same sequence of calls
reproduce identical draws.
"""

import jax.numpy as jnp
import jax.random as random
import numpy as np


class RandomSource:
    """
    Seedable, stateful stream of JAX PRNG keys.

    Not thread-safe: a source belongs to one chain run.
    """

    def __init__(self, seed: int = 0):
        self.seed = seed
        self._key = random.PRNGKey(seed)
        self.draws = 0

    def next_key(self):
        """Advance the stream and return a fresh subkey."""
        self._key, subkey = random.split(self._key)
        self.draws += 1
        return subkey

    def normal(self, shape, scale=1.0) -> np.ndarray:
        """Draw N(0, scale^2) values of the given shape as float64 numpy array."""
        noise = random.normal(self.next_key(), shape=shape, dtype=jnp.float64)
        return np.asarray(noise, dtype=np.float64) * scale

    def uniform(self) -> float:
        """Draw one value from Uniform(0, 1)."""
        return float(random.uniform(self.next_key(), dtype=jnp.float64))

    def categorical(self, probabilities) -> int:
        """Draw an index with the given probabilities."""
        p = jnp.asarray(probabilities, dtype=jnp.float64)
        return int(random.choice(self.next_key(), p.shape[0], p=p))

    def __repr__(self):
        return f"RandomSource(seed={self.seed}, draws={self.draws})"


def as_random_source(rng) -> RandomSource:
    """Accept a RandomSource or an integer seed."""
    if isinstance(rng, RandomSource):
        return rng
    return RandomSource(int(rng))

