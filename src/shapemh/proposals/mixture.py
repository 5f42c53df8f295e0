"""
Mixture Proposal for MCMC Sampling

Dispatches each step to one of several weighted sub-generators:

    With prob w_k: candidate = generator_k.propose(current)

The candidate is returned unchanged, so its provenance names the component
that produced it.

Hastings correction: the transition density is taken from the single
component whose label matches the provenance of `to_sample`, not from the
full mixture density sum_k w_k q_k(to|from). For block proposals with
disjoint supports this is the usual simplification, provided the forward
and reverse terms use the same component: the chain relabels the current
state with the candidate's provenance before asking for the reverse term.
When `to_sample` was not produced by any component (the seed of the
chain, or a sample from an outer generator), the component matching
`from_sample` is used instead.
Nested mixtures resolve a label through the inner mixture that owns it.
"""

from typing import Iterable, Sequence, Tuple

import numpy as np

from ..error_handling import ConfigurationError, validate_mixture_weights
from ..rng import RandomSource
from ..sample import Sample
from .common import check_generator


class MixtureProposal:
    """
    Weighted dispatch over sub-generators.

    Args:
        components: Sequence of (weight, generator) pairs. Weights must lie
            in [0, 1] and sum to 1; generator labels must be unique.
    """

    def __init__(self, components: Iterable[Tuple[float, object]]):
        components = [(float(w), g) for w, g in components]
        validate_mixture_weights([w for w, _ in components])
        for _, g in components:
            check_generator(g)

        labels = [g.label for _, g in components]
        duplicates = sorted({lbl for lbl in labels if labels.count(lbl) > 1})
        if duplicates:
            raise ConfigurationError(f"Mixture component labels must be unique, repeated: {duplicates}")

        self.weights = np.array([w for w, _ in components])
        self.generators = tuple(g for _, g in components)
        self._by_label = dict(zip(labels, self.generators))
        inner = ', '.join(f"{w:g}*{lbl}" for w, lbl in zip(self.weights, labels))
        self.label = f"MixtureProposal({inner})"

    @classmethod
    def from_pairs(cls, *pairs: Tuple[float, object]) -> "MixtureProposal":
        """MixtureProposal.from_pairs((0.6, a), (0.4, b))"""
        return cls(pairs)

    @property
    def labels(self) -> Sequence[str]:
        return tuple(g.label for g in self.generators)

    def propose(self, sample: Sample, rng: RandomSource) -> Sample:
        k = rng.categorical(self.weights)
        return self.generators[k].propose(sample, rng)

    def handles(self, provenance: str) -> bool:
        """True if a component (or a nested mixture) produces this label."""
        return self._component_for_label(provenance) is not None

    def _component_for_label(self, provenance: str):
        generator = self._by_label.get(provenance)
        if generator is not None:
            return generator
        for g in self.generators:
            if hasattr(g, 'handles') and g.handles(provenance):
                return g
        return None

    def component_for(self, from_sample: Sample, to_sample: Sample):
        """Component whose label matches to_sample, else from_sample."""
        for s in (to_sample, from_sample):
            generator = self._component_for_label(s.provenance)
            if generator is not None:
                return generator
        raise KeyError(
            f"No mixture component matches provenance '{to_sample.provenance}' "
            f"or '{from_sample.provenance}'. Available: {list(self._by_label)}"
        )

    def log_transition_probability(self, from_sample: Sample, to_sample: Sample) -> float:
        return self.component_for(from_sample, to_sample).log_transition_probability(
            from_sample, to_sample
        )

    def __repr__(self):
        return self.label
