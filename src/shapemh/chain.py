"""
Metropolis-Hastings Chain.

MetropolisHastings combines a proposal generator and a posterior
evaluator. Its iterator() returns a lazy, unbounded ChainIterator: every
next() performs exactly one step and returns the chain state after it.

One step from the current state x:
    1. y = generator.propose(x, rng)
    2. delta = [log p(y) + log q(x | y)] - [log p(x) + log q(y | x)]
       with log q(to | from) = generator.log_transition_probability(from, to).
       For the reverse term x is relabelled with y's provenance, so both
       terms come from the kernel that produced y.
    3. u ~ Uniform(0, 1); accept iff log(u) < delta
    4. accepted: x := y, logger.accept(...), emit y
       rejected: logger.reject(...), emit x again

Loggers receive an evaluator that returns the values already computed for
x and y in this step. The seed is checked against every declared rank
when the iterator is created.

All density arithmetic is in log space. A posterior of -inf for the
candidate rejects it; a NaN delta (both states impossible) also rejects.
Failures raised by the generator or evaluator abort the run with a
ChainEvaluationError naming the step and provenance. There is no retry.
"""

import math
from itertools import islice
from typing import Iterator

from .chain_logger import AcceptanceLogger
from .error_handling import ChainEvaluationError, ConfigurationError, validate_sample_rank
from .evaluators.base import Evaluator
from .proposals.common import check_generator
from .rng import RandomSource, as_random_source
from .sample import Sample

import logging
_log = logging.getLogger('shapemh')


def _declared_ranks(component) -> list:
    """Ranks declared by a collaborator or by the collaborators it wraps."""
    ranks = []
    rank = getattr(component, 'rank', None)
    if isinstance(rank, int):
        ranks.append(rank)
    for name in ('generators', 'evaluators'):
        for inner in getattr(component, name, ()):
            ranks.extend(_declared_ranks(inner))
    inner = getattr(component, 'evaluator', None)
    if inner is not None:
        ranks.extend(_declared_ranks(inner))
    return ranks


class _StepScores:
    """
    Posterior values computed during one step, handed to the loggers as
    their evaluator so they never score the same sample again.
    """

    def __init__(self, evaluator, scores):
        self.evaluator = evaluator
        self._scores = scores

    def log_value(self, sample: Sample) -> float:
        try:
            return self._scores[sample.key()]
        except KeyError:
            return self.evaluator.log_value(sample)


class MetropolisHastings:
    """
    Metropolis-Hastings sampler.

    Args:
        generator: Proposal generator (see shapemh.proposals)
        evaluator: Posterior evaluator (see shapemh.evaluators), usually a
            CachedEvaluator around a ProductEvaluator
    """

    def __init__(self, generator, evaluator: Evaluator):
        check_generator(generator)
        if not hasattr(evaluator, 'log_value'):
            raise ConfigurationError(f"{evaluator!r} is not an evaluator (no log_value method)")
        self.generator = generator
        self.evaluator = evaluator

    def log_acceptance_ratio(self, current: Sample, candidate: Sample) -> float:
        """delta of the acceptance test for moving from current to candidate."""
        return self._log_ratio(self.evaluator.log_value(current),
                               self.evaluator.log_value(candidate), current, candidate)

    def _log_ratio(self, current_value: float, candidate_value: float,
                   current: Sample, candidate: Sample) -> float:
        # The reverse move carries the candidate's provenance, so a mixture
        # scores both directions with the component that proposed the candidate.
        reverse_target = current.with_parameters(candidate.provenance, current.parameters)
        forward = self.generator.log_transition_probability(current, candidate)
        backward = self.generator.log_transition_probability(candidate, reverse_target)
        return (candidate_value + backward) - (current_value + forward)

    def check_initial_sample(self, initial_sample: Sample) -> None:
        """
        Check the seed against every rank the generator and evaluator declare,
        including the components of mixtures, products and caches.

        Raises:
            ConfigurationError: On dimensionality mismatch
        """
        for rank in _declared_ranks(self.generator) + _declared_ranks(self.evaluator):
            validate_sample_rank(initial_sample, rank)

    def iterator(self, initial_sample: Sample, logger=None, rng=0) -> "ChainIterator":
        """
        Lazy chain of samples starting after `initial_sample`.

        Args:
            initial_sample: Seed state; its rotation center is kept for the
                whole run
            logger: Accept/reject logger; a fresh AcceptanceLogger when None
            rng: RandomSource (or integer seed) consumed by every step

        Returns:
            ChainIterator (unbounded; truncate with drop/take or islice)

        Raises:
            ConfigurationError: If the seed does not match a declared rank
        """
        self.check_initial_sample(initial_sample)
        if logger is None:
            logger = AcceptanceLogger()
        return ChainIterator(self, initial_sample, logger, as_random_source(rng))


class ChainIterator(Iterator[Sample]):
    """
    Pull-based cursor over the chain.

    Attributes:
        current: State after the last completed step (the seed before any)
        steps: Number of completed steps
        logger: Accept/reject logger notified on every step
        rng: RandomSource consumed by the steps
    """

    def __init__(self, chain: MetropolisHastings, initial_sample: Sample, logger, rng: RandomSource):
        self.chain = chain
        self.current = initial_sample
        self.logger = logger
        self.rng = rng
        self.steps = 0
        _log.info(f"Starting Metropolis-Hastings chain from '{initial_sample.provenance}' "
                  f"with {chain.generator.label}")

    def __iter__(self):
        return self

    def __next__(self) -> Sample:
        step = self.steps
        current = self.current
        generator = self.chain.generator
        evaluator = self.chain.evaluator

        try:
            candidate = generator.propose(current, self.rng)
        except ConfigurationError:
            raise
        except Exception as exc:
            _log.error(f"Proposal failed at step {step} from '{current.provenance}': {exc}")
            raise ChainEvaluationError(step, current.provenance, f"proposal failed: {exc}") from exc

        try:
            current_value = evaluator.log_value(current)
            if step == 0 and current_value == -math.inf:
                _log.warning("Posterior is -inf at the initial sample; every candidate "
                             "with a finite posterior will be accepted")
            candidate_value = evaluator.log_value(candidate)
            log_ratio = self.chain._log_ratio(current_value, candidate_value, current, candidate)
        except ConfigurationError:
            raise
        except Exception as exc:
            _log.error(f"Evaluation failed at step {step} for '{candidate.provenance}': {exc}")
            raise ChainEvaluationError(step, candidate.provenance, f"evaluation failed: {exc}") from exc

        u = self.rng.uniform()
        log_u = math.log(u) if u > 0.0 else -math.inf
        accepted = log_u < log_ratio

        scores = _StepScores(evaluator, {current.key(): current_value,
                                         candidate.key(): candidate_value})
        self.steps += 1
        if accepted:
            self.current = candidate
            self.logger.accept(current, candidate, generator, scores)
        else:
            self.logger.reject(current, candidate, generator, scores)

        if _log.isEnabledFor(logging.DEBUG):
            _log.debug(f"step {step}: {'accept' if accepted else 'reject'} "
                       f"{candidate.provenance} (delta={log_ratio:.4g})")
        return self.current

    def drop(self, n: int) -> "ChainIterator":
        """
        Advance by n steps now, discarding the samples (burn-in).

        Eager, unlike take(); returns this iterator so that
        drop(n).take(m) chains.
        """
        if n < 0:
            raise ValueError(f"Cannot drop a negative number of samples: {n}")
        for _ in islice(self, n):
            pass
        return self

    def take(self, n: int) -> Iterator[Sample]:
        """Lazy view over the next n samples."""
        if n < 0:
            raise ValueError(f"Cannot take a negative number of samples: {n}")
        return islice(self, n)
