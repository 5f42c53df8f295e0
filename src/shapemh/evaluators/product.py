"""
Product evaluator: prior x likelihood in log space.
"""

from ..error_handling import ConfigurationError
from ..sample import Sample


class ProductEvaluator:
    """log_value(s) = sum of the sub-evaluators' log values, in order."""

    def __init__(self, *evaluators):
        if not evaluators:
            raise ConfigurationError("ProductEvaluator needs at least one evaluator")
        for e in evaluators:
            if not hasattr(e, 'log_value'):
                raise ConfigurationError(f"{e!r} is not an evaluator (no log_value method)")
        self.evaluators = tuple(evaluators)

    def log_value(self, sample: Sample) -> float:
        return sum((e.log_value(sample) for e in self.evaluators), 0.0)

    def __repr__(self):
        inner = ', '.join(repr(e) for e in self.evaluators)
        return f"ProductEvaluator({inner})"
