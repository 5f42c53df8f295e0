"""
Pytest configuration and shared fixtures for shapemh tests.
"""

import math

import numpy as np
import pytest

from shapemh import RandomSource, Sample, Parameters
from shapemh.test_models import LinearShapeModel


@pytest.fixture
def rng_seed():
    """Default RNG seed for reproducible tests."""
    return 42


@pytest.fixture
def rng(rng_seed):
    return RandomSource(rng_seed)


@pytest.fixture
def linear_model():
    """Small linear shape model: 20 points, rank 4."""
    return LinearShapeModel.random(n_points=20, rank=4, seed=3)


@pytest.fixture
def initial_sample(linear_model):
    """Seed at the mean shape, rotating around the mean-shape centroid."""
    return Sample.initial(linear_model.rank, rotation_center=linear_model.centroid())


# ============================================================================
# INSTRUMENTED COLLABORATORS
# ============================================================================

class CountingEvaluator:
    """Evaluator wrapper counting log_value calls."""

    def __init__(self, evaluator):
        self.evaluator = evaluator
        self.calls = 0

    def log_value(self, sample):
        self.calls += 1
        return self.evaluator.log_value(sample)


class CountingProposal:
    """Proposal wrapper counting propose calls; keeps the wrapped label."""

    def __init__(self, generator):
        self.generator = generator
        self.label = generator.label
        self.proposals = 0

    def propose(self, sample, rng):
        self.proposals += 1
        return self.generator.propose(sample, rng)

    def log_transition_probability(self, from_sample, to_sample):
        return self.generator.log_transition_probability(from_sample, to_sample)


class StepProposal:
    """Deterministic +step move on the first coefficient, symmetric by fiat."""

    label = 'StepProposal'

    def __init__(self, step=1.0):
        self.step = step

    def propose(self, sample, rng):
        coeffs = sample.parameters.coefficients.copy()
        coeffs[0] += self.step
        return sample.with_parameters(self.label,
                                      sample.parameters.replace_block('coefficients', coeffs))

    def log_transition_probability(self, from_sample, to_sample):
        return 0.0


class FailingEvaluator:
    """Raises RuntimeError on the n-th call (1-based), 0.0 otherwise."""

    def __init__(self, fail_on_call):
        self.fail_on_call = fail_on_call
        self.calls = 0

    def log_value(self, sample):
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise RuntimeError("point lookup failed")
        return 0.0


def make_sample(coefficients=(0.0,), rotation=(0.0, 0.0, 0.0), translation=(0.0, 0.0, 0.0),
                provenance='test', rotation_center=(0.0, 0.0, 0.0)):
    """Build a Sample from plain sequences."""
    return Sample(provenance, Parameters(translation, rotation, coefficients), rotation_center)


def random_sample(rank, seed, provenance='random', scale=1.0):
    rs = np.random.RandomState(seed)
    return make_sample(coefficients=rs.normal(0, scale, rank),
                       rotation=rs.normal(0, 0.1 * scale, 3),
                       translation=rs.normal(0, scale, 3),
                       provenance=provenance)


def sum_coefficients(sample):
    return float(np.sum(sample.parameters.coefficients))


def impossible_unless(seed_sample):
    """Log-density 0 at seed_sample's parameters, -inf everywhere else."""
    def log_value(sample):
        return 0.0 if sample.parameters == seed_sample.parameters else -math.inf
    return log_value
