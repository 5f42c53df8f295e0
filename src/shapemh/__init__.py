"""
shapemh - Metropolis-Hastings sampling of pose and shape posteriors

Public API:
    Chain State:
        Parameters - translation, Euler rotation and shape coefficients
        Sample - Parameters plus provenance label and rotation center
        RandomSource - explicit, seedable random stream for every draw

    Evaluators (unnormalized log-densities):
        PriorEvaluator - N(0, I) coefficient prior plus optional pose priors
        CorrespondenceEvaluator - landmark likelihood on the full model
        MarginalizedCorrespondenceEvaluator - same, on the marginal model
        ProductEvaluator - prior x likelihood (sum of log values)
        CachedEvaluator - LRU memoization around any evaluator
        evaluator_from_function - wrap fn(sample) -> float

    Proposals:
        ShapeUpdateProposal - random walk on the shape coefficients
        RotationUpdateProposal - random walk on the Euler angles
        TranslationUpdateProposal - random walk on the translation
        MixtureProposal - weighted dispatch over proposals

    Chain:
        MetropolisHastings - chain.iterator(initial, logger, rng) -> lazy samples
        AcceptanceLogger - per-proposal acceptance ratios
        BestSampleLogger - best state seen by the chain
        LoggerGroup - notify several loggers

    Runs & Summaries:
        run_chain - config-driven run with burn-in and sample count
        burn_and_take, stack_history, posterior_summary

    Errors:
        ConfigurationError, ChainEvaluationError

Example:
    from shapemh import (MetropolisHastings, MixtureProposal, ShapeUpdateProposal,
                         RotationUpdateProposal, PriorEvaluator, ProductEvaluator,
                         CachedEvaluator, AcceptanceLogger, RandomSource, Sample)

    generator = MixtureProposal([
        (0.6, ShapeUpdateProposal(rank, 0.1)),
        (0.4, RotationUpdateProposal(0.01)),
    ])
    posterior = CachedEvaluator(ProductEvaluator(PriorEvaluator(rank), likelihood))
    chain = MetropolisHastings(generator, posterior)

    logger = AcceptanceLogger()
    samples = chain.iterator(Sample.initial(rank, center), logger, RandomSource(42))
    kept = list(samples.drop(1000).take(5000))
    print(logger.acceptance_ratios())
"""
# CRITICAL: Import jax_config FIRST to set environment variables before JAX loads
from . import jax_config  # noqa: F401

from .rng import RandomSource
from .sample import Parameters, Sample
from .distributions import DiagonalNormal, MultivariateNormal
from .error_handling import ConfigurationError, ChainEvaluationError
from .evaluators import (
    Evaluator,
    PriorEvaluator,
    Correspondence,
    CorrespondenceEvaluator,
    MarginalizedCorrespondenceEvaluator,
    ProductEvaluator,
    CachedEvaluator,
    evaluator_from_function,
)
from .proposals import (
    ProposalGenerator,
    ShapeUpdateProposal,
    RotationUpdateProposal,
    TranslationUpdateProposal,
    MixtureProposal,
)
from .chain import MetropolisHastings, ChainIterator
from .chain_logger import (
    AcceptanceLogger,
    BestSampleLogger,
    LoggerGroup,
    log_acceptance_summary,
)
from .history_processing import burn_and_take, stack_history, posterior_summary

# Main entry point
from .mcmc_backend import run_chain
