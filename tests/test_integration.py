"""
Integration Tests - Complete Sampling Runs

Tests full chains against posteriors with known answers:
- standard normal coefficient posterior (mean 0, variance 1)
- landmark posterior on a linear shape model with a pose/shape mixture
- stacking and summarizing the collected history

These are slower than the unit tests.

Run with: pytest tests/test_integration.py -v
"""

import numpy as np
import pytest

from shapemh import (
    AcceptanceLogger,
    BestSampleLogger,
    CachedEvaluator,
    DiagonalNormal,
    LoggerGroup,
    MetropolisHastings,
    MixtureProposal,
    PriorEvaluator,
    RandomSource,
    RotationUpdateProposal,
    Sample,
    ShapeUpdateProposal,
    TranslationUpdateProposal,
    burn_and_take,
    posterior_summary,
    stack_history,
)
from shapemh.test_models import landmark_posterior, standard_normal_posterior

from .conftest import make_sample


# ============================================================================
# STANDARD NORMAL POSTERIOR
# ============================================================================

def standard_normal_run(seed, burn_in=2000, num_samples=5000):
    posterior = CachedEvaluator(standard_normal_posterior(rank=1))
    generator = ShapeUpdateProposal(1, 0.5)
    chain = MetropolisHastings(generator, posterior)
    start = make_sample(coefficients=[5.0], provenance='initial')
    logger = AcceptanceLogger()
    iterator = chain.iterator(start, logger, RandomSource(seed))
    values = np.array([s.parameters.coefficients[0]
                       for s in burn_and_take(iterator, burn_in, num_samples)])
    return values, logger


class TestStandardNormal:
    """Chain targets N(0, 1) on one coefficient, started far out at 5."""

    def test_moments(self):
        values, _ = standard_normal_run(seed=0)
        assert values.shape == (5000,)
        assert abs(np.mean(values)) < 0.1
        assert abs(np.var(values) - 1.0) < 0.2

    def test_moments_under_mixture(self):
        # a coefficient move out of a rotation-produced state is still symmetric
        posterior = CachedEvaluator(PriorEvaluator(1, rotation_prior=DiagonalNormal(1.0, 3)))
        generator = MixtureProposal([
            (0.5, ShapeUpdateProposal(1, 0.5)),
            (0.5, RotationUpdateProposal(2.0)),
        ])
        chain = MetropolisHastings(generator, posterior)
        iterator = chain.iterator(Sample.initial(1), None, RandomSource(0))
        values = np.array([s.parameters.coefficients[0]
                           for s in burn_and_take(iterator, 2000, 20000)])
        assert abs(np.var(values) - 1.0) < 0.2

    def test_acceptance_ratio_reasonable(self):
        _, logger = standard_normal_run(seed=0, burn_in=0, num_samples=2000)
        ratio = logger.acceptance_ratios()['ShapeUpdateProposal (0.5)']
        assert 0.6 < ratio < 0.95

    def test_reproducible(self):
        first, _ = standard_normal_run(seed=7, burn_in=100, num_samples=300)
        second, _ = standard_normal_run(seed=7, burn_in=100, num_samples=300)
        np.testing.assert_array_equal(first, second)


# ============================================================================
# LANDMARK POSTERIOR
# ============================================================================

class TestLandmarkPosterior:
    """Fit a linear shape model to landmarks with a pose/shape mixture."""

    @pytest.fixture
    def truth(self, linear_model):
        return Sample('truth',
                      make_sample(coefficients=[0.5, -0.3, 0.2, 0.1]).parameters,
                      linear_model.centroid())

    def _mixture(self, rank):
        return MixtureProposal([
            (0.5, ShapeUpdateProposal(rank, 0.1)),
            (0.25, RotationUpdateProposal(0.01)),
            (0.25, TranslationUpdateProposal(0.1)),
        ])

    def test_chain_approaches_truth(self, linear_model, truth, initial_sample):
        posterior = CachedEvaluator(landmark_posterior(linear_model, truth, range(linear_model.n_points)))
        acceptance = AcceptanceLogger()
        best = BestSampleLogger()
        chain = MetropolisHastings(self._mixture(linear_model.rank), posterior)

        iterator = chain.iterator(initial_sample, LoggerGroup(acceptance, best), RandomSource(5))
        samples = list(burn_and_take(iterator, 2000, 1000))

        assert best.best_value > posterior.log_value(initial_sample)
        assert set(acceptance.acceptance_ratios()) == set(self._mixture(linear_model.rank).labels)

        coefficients = stack_history(samples)['coefficients']
        true_coefficients = truth.parameters.coefficients
        error = np.linalg.norm(coefficients.mean(axis=0) - true_coefficients)
        assert error < np.linalg.norm(true_coefficients)

    def test_marginalized_matches_naive_along_chain(self, linear_model, truth, initial_sample):
        identifiers = [0, 3, 3, 7, 11]
        naive = landmark_posterior(linear_model, truth, identifiers)
        marginalized = landmark_posterior(linear_model, truth, identifiers, marginalized=True)
        chain = MetropolisHastings(self._mixture(linear_model.rank), CachedEvaluator(naive))

        for s in chain.iterator(initial_sample, None, RandomSource(1)).take(50):
            assert marginalized.log_value(s) == pytest.approx(naive.log_value(s), rel=1e-9)

    def test_pose_prior_bounds_pose(self, linear_model, truth, initial_sample):
        posterior = landmark_posterior(linear_model, truth, range(5), pose_prior_stddev=0.5)
        assert posterior.log_value(initial_sample) > -np.inf
        far = initial_sample.with_parameters(
            'far', initial_sample.parameters.replace_block('translation', [50.0, 0.0, 0.0]))
        assert posterior.log_value(far) < posterior.log_value(initial_sample)


# ============================================================================
# HISTORY PROCESSING
# ============================================================================

class TestHistoryProcessing:
    """Test burn-in, stacking and summaries."""

    def test_burn_and_take(self):
        assert list(burn_and_take(iter(range(10)), 3, 4)) == [3, 4, 5, 6]
        assert list(burn_and_take(iter(range(5)), 3, 4)) == [3, 4]
        with pytest.raises(ValueError):
            burn_and_take(iter(range(5)), -1, 2)

    def test_stack_history(self):
        samples = [make_sample(coefficients=[float(i), 2.0 * i], provenance=f"p{i}") for i in range(4)]
        history = stack_history(samples)
        assert history['coefficients'].shape == (4, 2)
        assert history['translation'].shape == (4, 3)
        assert history['rotation'].shape == (4, 3)
        np.testing.assert_array_equal(history['coefficients'][:, 1], [0.0, 2.0, 4.0, 6.0])
        assert list(history['provenance']) == ['p0', 'p1', 'p2', 'p3']

    def test_stack_empty(self):
        with pytest.raises(ValueError):
            stack_history([])

    def test_posterior_summary(self):
        samples = [make_sample(coefficients=[c]) for c in (1.0, 2.0, 3.0)]
        summary = posterior_summary(samples)
        assert summary['num_samples'] == 3
        assert summary['mean'].shape == (7,)
        assert summary['mean'][6] == pytest.approx(2.0)
        assert summary['covariance'].shape == (7, 7)
        assert summary['covariance'][6, 6] == pytest.approx(1.0)
        assert summary['covariance'][0, 0] == 0.0

    def test_posterior_summary_single(self):
        summary = posterior_summary([make_sample(coefficients=[1.0])])
        np.testing.assert_array_equal(summary['covariance'], np.zeros((4, 4)))
