"""
Evaluator capability.

Any object with a `log_value(sample) -> float` method is an evaluator;
there is no base class to inherit from.
"""

from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

from ..sample import Sample


@runtime_checkable
class Evaluator(Protocol):
    def log_value(self, sample: Sample) -> float:
        ...


@dataclass(frozen=True)
class FunctionEvaluator:
    """Adapter turning `fn(sample) -> float` into an evaluator."""
    fn: Callable[[Sample], float]
    name: str = 'function'

    def log_value(self, sample: Sample) -> float:
        return float(self.fn(sample))


def evaluator_from_function(fn: Callable[[Sample], float], name: str = None) -> FunctionEvaluator:
    return FunctionEvaluator(fn, name or getattr(fn, '__name__', 'function'))
