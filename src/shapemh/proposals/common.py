"""
Common definitions for proposal generators.
"""

from typing import Protocol, runtime_checkable

from ..error_handling import ConfigurationError
from ..rng import RandomSource
from ..sample import Sample


@runtime_checkable
class ProposalGenerator(Protocol):
    label: str

    def propose(self, sample: Sample, rng: RandomSource) -> Sample:
        ...

    def log_transition_probability(self, from_sample: Sample, to_sample: Sample) -> float:
        ...


def check_generator(generator) -> None:
    """Raise ConfigurationError if `generator` lacks the proposal members."""
    missing = [name for name in ('label', 'propose', 'log_transition_probability')
               if not hasattr(generator, name)]
    if missing:
        raise ConfigurationError(f"{generator!r} is not a proposal generator (missing {missing})")
