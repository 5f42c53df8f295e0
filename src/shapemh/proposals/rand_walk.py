"""
Block Random Walk Proposals for MCMC Sampling

Each proposal perturbs exactly one parameter block and copies the others:

    block' = block + eps,   eps ~ N(0, stddev^2 * I)

    ShapeUpdateProposal        - shape coefficients (dimension = model rank)
    RotationUpdateProposal     - the 3 Euler angles
    TranslationUpdateProposal  - the 3D translation

The transition density is the perturbation density evaluated at the
difference of the block between the two samples. The kernel is symmetric,
q(x'|x) = q(x|x'), so forward and reverse terms cancel in the acceptance
ratio.

The provenance label of a candidate is "<ClassName> (<stddev>)", so
acceptance statistics separate kernels of the same kind with different
step sizes.
"""

from ..distributions import DiagonalNormal
from ..error_handling import validate_rank, validate_sample_rank, validate_step_size
from ..rng import RandomSource
from ..sample import Sample


class BlockRandomWalk:
    """
    Gaussian random walk on one named parameter block.

    Args:
        block: 'translation', 'rotation' or 'coefficients'
        dim: Dimensionality of the block
        stddev: Perturbation standard deviation (> 0)
    """

    def __init__(self, block: str, dim: int, stddev: float):
        self.block = block
        self.stddev = validate_step_size(stddev)
        self.kernel = DiagonalNormal(self.stddev, dim)
        self.label = f"{type(self).__name__} ({self.stddev})"

    @property
    def dim(self) -> int:
        return self.kernel.dim

    def _check(self, sample: Sample) -> None:
        pass

    def propose(self, sample: Sample, rng: RandomSource) -> Sample:
        self._check(sample)
        current = sample.parameters.block(self.block)
        perturbed = current + self.kernel.sample(rng)
        parameters = sample.parameters.replace_block(self.block, perturbed)
        return sample.with_parameters(self.label, parameters)

    def log_transition_probability(self, from_sample: Sample, to_sample: Sample) -> float:
        self._check(from_sample)
        self._check(to_sample)
        residual = (to_sample.parameters.block(self.block)
                    - from_sample.parameters.block(self.block))
        return self.kernel.logpdf(residual)

    def __repr__(self):
        return self.label


class ShapeUpdateProposal(BlockRandomWalk):
    """Random walk on the shape coefficients."""

    def __init__(self, rank: int, stddev: float):
        self.rank = validate_rank(rank)
        super().__init__('coefficients', self.rank, stddev)

    def _check(self, sample: Sample) -> None:
        validate_sample_rank(sample, self.rank)


class RotationUpdateProposal(BlockRandomWalk):
    """Random walk on the Euler angles, around the sample's rotation center."""

    def __init__(self, stddev: float):
        super().__init__('rotation', 3, stddev)


class TranslationUpdateProposal(BlockRandomWalk):
    """Random walk on the translation."""

    def __init__(self, stddev: float):
        super().__init__('translation', 3, stddev)
