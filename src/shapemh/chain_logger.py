"""
Accept/Reject Loggers.

The chain notifies a logger once per step, after the accept/reject
decision:

    logger.accept(current, proposed, generator, evaluator)
    logger.reject(current, proposed, generator, evaluator)

Loggers are observers: they must not raise and must not change the chain.
Their state is owned by the instance and lives as long as one chain run.

- AcceptanceLogger: accepted/rejected counts keyed by the candidate's
  provenance label
- BestSampleLogger: the highest-scoring state seen so far (MAP tracking)
- LoggerGroup: fan-out to several loggers
- log_acceptance_summary: report ratios through the package logger
"""

import math
from typing import Dict, Optional, Protocol, Tuple

import numpy as np

from .sample import Sample

import logging
logger = logging.getLogger('shapemh')


# Acceptance ratios below this are reported as warnings
LOW_ACCEPTANCE_RATIO = 0.10


class AcceptRejectLogger(Protocol):
    def accept(self, current: Sample, proposed: Sample, generator, evaluator) -> None: ...

    def reject(self, current: Sample, proposed: Sample, generator, evaluator) -> None: ...


class AcceptanceLogger:
    """Per-provenance accept/reject counters."""

    def __init__(self):
        self._accepted: Dict[str, int] = {}
        self._rejected: Dict[str, int] = {}

    def accept(self, current, proposed, generator, evaluator) -> None:
        label = proposed.provenance
        self._accepted[label] = self._accepted.get(label, 0) + 1
        self._rejected.setdefault(label, 0)

    def reject(self, current, proposed, generator, evaluator) -> None:
        label = proposed.provenance
        self._rejected[label] = self._rejected.get(label, 0) + 1
        self._accepted.setdefault(label, 0)

    def counts(self) -> Dict[str, Tuple[int, int]]:
        """{label: (accepted, rejected)} for every label observed."""
        return {label: (self._accepted[label], self._rejected[label]) for label in self._accepted}

    def acceptance_ratios(self) -> Dict[str, float]:
        """{label: accepted / (accepted + rejected)}; unseen labels are absent."""
        return {label: a / (a + r) for label, (a, r) in self.counts().items()}

    @property
    def total_steps(self) -> int:
        return sum(self._accepted.values()) + sum(self._rejected.values())

    def overall_acceptance_ratio(self) -> float:
        """Accepted fraction over all labels (nan before the first step)."""
        total = self.total_steps
        if total == 0:
            return math.nan
        return sum(self._accepted.values()) / total

    def __repr__(self):
        return f"AcceptanceLogger(steps={self.total_steps}, labels={len(self._accepted)})"


class BestSampleLogger:
    """
    Keeps the best state seen by the chain.

    Scores the seed (the `current` of the first notification) and every
    accepted candidate. Rejected candidates never become chain states and
    are not considered.

    By default the scores come from the evaluator passed with each
    notification; the chain passes the values it computed during the step,
    so nothing is evaluated twice and nothing new can fail. An explicit
    `evaluator` overrides this and must be a pure (ideally cached)
    posterior, since its errors propagate out of the notification.
    """

    def __init__(self, evaluator=None):
        self.evaluator = evaluator
        self.best_sample: Optional[Sample] = None
        self.best_value = -math.inf

    def _consider(self, sample: Sample, step_evaluator) -> None:
        scorer = self.evaluator if self.evaluator is not None else step_evaluator
        value = scorer.log_value(sample)
        if self.best_sample is None or value > self.best_value:
            self.best_sample = sample
            self.best_value = value

    def accept(self, current, proposed, generator, evaluator) -> None:
        if self.best_sample is None:
            self._consider(current, evaluator)
        self._consider(proposed, evaluator)

    def reject(self, current, proposed, generator, evaluator) -> None:
        if self.best_sample is None:
            self._consider(current, evaluator)


class LoggerGroup:
    """Forward every notification to each logger, in order."""

    def __init__(self, *loggers):
        self.loggers = tuple(loggers)

    def accept(self, current, proposed, generator, evaluator) -> None:
        for lg in self.loggers:
            lg.accept(current, proposed, generator, evaluator)

    def reject(self, current, proposed, generator, evaluator) -> None:
        for lg in self.loggers:
            lg.reject(current, proposed, generator, evaluator)


def log_acceptance_summary(acceptance_logger: AcceptanceLogger) -> Dict[str, float]:
    """
    Log per-label acceptance ratios and warn about low ones.

    Returns:
        The ratios that were logged
    """
    ratios = acceptance_logger.acceptance_ratios()
    if not ratios:
        logger.info("No proposals recorded")
        return ratios

    counts = acceptance_logger.counts()
    values = np.array(list(ratios.values()))
    logger.info(f"--- MH Acceptance Ratios ({len(ratios)} proposals, "
                f"{acceptance_logger.total_steps} steps) ---")
    for label, ratio in sorted(ratios.items()):
        accepted, rejected = counts[label]
        logger.info(f"  {label}: {ratio:.1%} ({accepted}/{accepted + rejected})")
    logger.info(f"  Mean: {np.mean(values):.1%}  Min: {np.min(values):.1%}  Max: {np.max(values):.1%}")

    low = [label for label, ratio in ratios.items() if ratio < LOW_ACCEPTANCE_RATIO]
    if low:
        logger.warning(f"  {len(low)} proposal(s) have acceptance ratio < "
                       f"{LOW_ACCEPTANCE_RATIO:.0%}: {', '.join(sorted(low))}")
    return ratios
