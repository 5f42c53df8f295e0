"""
Landmark correspondence likelihoods.

The shape model is an external collaborator reached through a narrow
interface:

    model.instance(sample) -> instance
        posed shape instance for the sample's parameters
    model.point(instance, identifier) -> (3,) array
        position of one model point in that instance
    model.marginal(identifiers) -> model
        the same model restricted to the given points (only needed by the
        marginalized evaluator)

A correspondence pairs a model point identifier with an observed target
position and a noise model exposing `logpdf(residual) -> float`. The
likelihood is

    sum_i noise_i.logpdf(target_i - model_point_i)

Errors raised by the model propagate unchanged; the chain reports them
with the failing step.
"""

from collections import namedtuple
from typing import Iterable, Protocol, Sequence

import numpy as np

from ..error_handling import ConfigurationError
from ..sample import Sample


Correspondence = namedtuple('Correspondence', ['identifier', 'target', 'noise'])


class ShapeModel(Protocol):
    def instance(self, sample: Sample): ...

    def point(self, instance, identifier) -> np.ndarray: ...


def _as_correspondences(correspondences: Iterable) -> Sequence[Correspondence]:
    result = []
    for c in correspondences:
        identifier, target, noise = c
        target = np.asarray(target, dtype=np.float64)
        if target.shape != (3,):
            raise ConfigurationError(
                f"Target of correspondence '{identifier}' must be a 3D point, got shape {target.shape}"
            )
        if not hasattr(noise, 'logpdf'):
            raise ConfigurationError(
                f"Noise model of correspondence '{identifier}' has no logpdf method"
            )
        result.append(Correspondence(identifier, target, noise))
    return tuple(result)


def _correspondence_log_value(model, correspondences, sample) -> float:
    instance = model.instance(sample)
    total = 0.0
    for c in correspondences:
        residual = c.target - np.asarray(model.point(instance, c.identifier), dtype=np.float64)
        total += c.noise.logpdf(residual)
    return total


class CorrespondenceEvaluator:
    """Likelihood of observed landmarks under the full model."""

    def __init__(self, model: ShapeModel, correspondences: Iterable):
        self.model = model
        self.correspondences = _as_correspondences(correspondences)

    def log_value(self, sample: Sample) -> float:
        return _correspondence_log_value(self.model, self.correspondences, sample)

    def __repr__(self):
        return f"CorrespondenceEvaluator(n={len(self.correspondences)})"


class MarginalizedCorrespondenceEvaluator:
    """
    Likelihood of observed landmarks under the model marginalized to the
    observed points.

    The marginal model only computes positions for the referenced points,
    which makes each evaluation cheaper. Values match
    CorrespondenceEvaluator within floating tolerance. Identifiers are
    remapped to their index in the marginal model.
    """

    def __init__(self, model, correspondences: Iterable):
        full = _as_correspondences(correspondences)
        identifiers = []
        for c in full:
            if c.identifier not in identifiers:
                identifiers.append(c.identifier)
        self.identifiers = tuple(identifiers)
        self.model = model.marginal(self.identifiers)
        index = {identifier: i for i, identifier in enumerate(self.identifiers)}
        self.correspondences = tuple(
            Correspondence(index[c.identifier], c.target, c.noise) for c in full
        )

    def log_value(self, sample: Sample) -> float:
        return _correspondence_log_value(self.model, self.correspondences, sample)

    def __repr__(self):
        return (f"MarginalizedCorrespondenceEvaluator(n={len(self.correspondences)}, "
                f"points={len(self.identifiers)})")
