"""
MCMC Backend - Main Entry Point.

run_chain() drives one Metropolis-Hastings run from a configuration dict:

    1. clean_config / validate_chain_config
    2. RandomSource from rng_seed
    3. optional CachedEvaluator around the posterior
    4. drop burn_in samples, collect num_samples samples
    5. log wall time and the acceptance summary

Callers that want the raw lazy chain use MetropolisHastings.iterator()
directly; this module only adds configuration and reporting around it.
"""

import time
from datetime import timedelta
from typing import Any, Dict, List, Tuple

from .chain import MetropolisHastings
from .chain_logger import AcceptanceLogger, LoggerGroup, log_acceptance_summary
from .error_handling import validate_chain_config
from .evaluators.cached import CachedEvaluator
from .history_processing import burn_and_take
from .mcmc_utils import clean_config
from .rng import RandomSource
from .sample import Sample

import logging
logger = logging.getLogger('shapemh')

__all__ = [
    'run_chain',
]


def run_chain(
    chain_config: Dict[str, Any],
    generator,
    evaluator,
    initial_sample: Sample,
    chain_logger=None,
) -> Tuple[List[Sample], AcceptanceLogger]:
    """
    Run a chain and collect samples after burn-in.

    Args:
        chain_config: Run configuration (see mcmc_utils.clean_config).
            Not modified; a cleaned copy is used.
        generator: Proposal generator
        evaluator: Posterior evaluator
        initial_sample: Seed state
        chain_logger: Optional extra accept/reject logger, notified next to
            the AcceptanceLogger this function creates

    Returns:
        (samples, acceptance_logger)

    Raises:
        ConfigurationError: If the configuration is invalid
        ChainEvaluationError: If a collaborator fails during the run
    """
    config = clean_config(dict(chain_config))
    validate_chain_config(config)

    rng = RandomSource(config['rng_seed'])
    if config['use_cache']:
        evaluator = CachedEvaluator(evaluator, capacity=config['cache_capacity'])

    acceptance = AcceptanceLogger()
    observer = acceptance if chain_logger is None else LoggerGroup(acceptance, chain_logger)

    chain = MetropolisHastings(generator, evaluator)
    iterator = chain.iterator(initial_sample, observer, rng)

    logger.info("\n--- MCMC RUN ---")
    logger.info(f"  Seed: {config['rng_seed']}  Burn-in: {config['burn_in']}  "
                f"Samples: {config['num_samples']}")

    start_time = time.perf_counter()
    samples = []
    log_every = config['log_every']
    for i, sample in enumerate(burn_and_take(iterator, config['burn_in'], config['num_samples'])):
        samples.append(sample)
        if log_every and (i + 1) % log_every == 0:
            logger.info(f"  Collected {i + 1}/{config['num_samples']} samples "
                        f"(step {iterator.steps})")
    wall_time = time.perf_counter() - start_time

    logger.info("\n--- MCMC Run Summary ---")
    logger.info(f"  Total Wall Time: {timedelta(seconds=int(wall_time))} ({wall_time:.2f}s)")
    logger.info(f"  Steps: {iterator.steps}")
    if isinstance(evaluator, CachedEvaluator):
        logger.info(f"  Posterior cache: {evaluator.hits} hits, {evaluator.misses} misses")
    log_acceptance_summary(acceptance)

    return samples, acceptance
