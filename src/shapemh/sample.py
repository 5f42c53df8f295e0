"""
Chain State Data Structures.

This module contains the value types the sampler moves around:
- Parameters: pose (translation, Euler rotation) and shape coefficients
- Sample: Parameters plus provenance label and the fixed rotation center

Both are frozen dataclasses. Arrays are stored as read-only float64 numpy
arrays, so a transition always builds a new Sample instead of mutating
the current one.
"""

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from .error_handling import ConfigurationError, validate_rank


# Parameter blocks in vector order
BLOCK_NAMES = ('translation', 'rotation', 'coefficients')


def _key_bytes(arr: np.ndarray) -> bytes:
    # -0.0 + 0.0 == +0.0, so values equal under np.array_equal share a key
    return (arr + 0.0).tobytes()


def _frozen_array(values, name: str, length: int = None) -> np.ndarray:
    arr = np.array(values, dtype=np.float64)
    if arr.ndim != 1:
        raise ConfigurationError(f"{name} must be a 1-D vector, got shape {arr.shape}")
    if length is not None and arr.shape[0] != length:
        raise ConfigurationError(f"{name} must have {length} entries, got {arr.shape[0]}")
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class Parameters:
    """
    Pose and shape parameters of one chain state.

    Fields:
        translation: 3-vector
        rotation: 3 Euler angles (radians)
        coefficients: N shape-model coefficients (N = model rank)
    """
    translation: np.ndarray
    rotation: np.ndarray
    coefficients: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, 'translation', _frozen_array(self.translation, 'translation', 3))
        object.__setattr__(self, 'rotation', _frozen_array(self.rotation, 'rotation', 3))
        object.__setattr__(self, 'coefficients', _frozen_array(self.coefficients, 'coefficients'))

    @classmethod
    def zeros(cls, rank: int) -> "Parameters":
        """Neutral parameters: identity pose, mean shape."""
        rank = validate_rank(rank)
        return cls(np.zeros(3), np.zeros(3), np.zeros(rank))

    @property
    def rank(self) -> int:
        return self.coefficients.shape[0]

    def block(self, name: str) -> np.ndarray:
        if name not in BLOCK_NAMES:
            raise KeyError(f"Unknown parameter block '{name}'. Available: {list(BLOCK_NAMES)}")
        return getattr(self, name)

    def replace_block(self, name: str, values) -> "Parameters":
        """Copy with one block replaced; the other blocks are shared unchanged."""
        current = self.block(name)
        values = np.asarray(values, dtype=np.float64)
        if values.shape != current.shape:
            raise ConfigurationError(
                f"Block '{name}' has shape {current.shape}, got {values.shape}"
            )
        blocks = {n: getattr(self, n) for n in BLOCK_NAMES}
        blocks[name] = values
        return Parameters(**blocks)

    def as_vector(self) -> np.ndarray:
        """Concatenated (translation, rotation, coefficients)."""
        return np.concatenate([self.translation, self.rotation, self.coefficients])

    def key(self) -> Tuple[bytes, bytes, bytes]:
        """Hashable key of the exact numeric content."""
        return (_key_bytes(self.translation), _key_bytes(self.rotation), _key_bytes(self.coefficients))

    def __eq__(self, other):
        if not isinstance(other, Parameters):
            return NotImplemented
        return all(np.array_equal(getattr(self, n), getattr(other, n)) for n in BLOCK_NAMES)

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return (f"Parameters(translation={self.translation.tolist()}, "
                f"rotation={self.rotation.tolist()}, "
                f"coefficients={self.coefficients.tolist()})")


@dataclass(frozen=True, eq=False)
class Sample:
    """
    One state of the chain.

    Fields:
        provenance: Label of the proposal that produced this sample
        parameters: Parameters of the state
        rotation_center: 3D point the rotation is applied around; set when
            the chain is seeded and copied unchanged by every proposal
    """
    provenance: str
    parameters: Parameters
    rotation_center: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        if not isinstance(self.parameters, Parameters):
            raise ConfigurationError(
                f"parameters must be Parameters, got {type(self.parameters).__name__}"
            )
        object.__setattr__(
            self, 'rotation_center', _frozen_array(self.rotation_center, 'rotation_center', 3)
        )

    @classmethod
    def initial(cls, rank: int, rotation_center=(0.0, 0.0, 0.0), provenance: str = 'initial') -> "Sample":
        """Seed sample at the neutral parameters."""
        return cls(provenance, Parameters.zeros(rank), rotation_center)

    def with_parameters(self, provenance: str, parameters: Parameters) -> "Sample":
        """Successor sample; the rotation center is carried over."""
        return Sample(provenance, parameters, self.rotation_center)

    def key(self):
        """Cache key: numeric parameters and rotation center, provenance excluded."""
        return self.parameters.key() + (_key_bytes(self.rotation_center),)

    def __eq__(self, other):
        if not isinstance(other, Sample):
            return NotImplemented
        return (self.provenance == other.provenance
                and self.parameters == other.parameters
                and np.array_equal(self.rotation_center, other.rotation_center))

    def __hash__(self):
        return hash((self.provenance,) + self.key())
