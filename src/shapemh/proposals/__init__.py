"""
Proposal Generators for Metropolis-Hastings Sampling

A proposal generator is any object with:
    label: str
    propose(sample, rng) -> Sample
    log_transition_probability(from_sample, to_sample) -> float

propose() consumes entropy only from the RandomSource it is given and sets
the provenance of the candidate to the generator's label.
log_transition_probability() is the log density of proposing `to_sample`
from `from_sample`; the chain uses it for the Hastings correction.

Block random walks (rand_walk.py) perturb exactly one parameter block with
N(0, stddev^2 * I) noise and are symmetric. MixtureProposal (mixture.py)
dispatches to one weighted component per step.

To add a new proposal:
1. Create a new file in proposals/ implementing the three members above
2. Export it from this __init__.py
"""

from .common import ProposalGenerator
from .rand_walk import (
    BlockRandomWalk,
    ShapeUpdateProposal,
    RotationUpdateProposal,
    TranslationUpdateProposal,
)
from .mixture import MixtureProposal

__all__ = [
    'ProposalGenerator',
    'BlockRandomWalk',
    'ShapeUpdateProposal',
    'RotationUpdateProposal',
    'TranslationUpdateProposal',
    'MixtureProposal',
]
