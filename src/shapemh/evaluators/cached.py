"""
Memoizing evaluator.

CachedEvaluator wraps any evaluator with a bounded LRU memo table. The key
is the numeric content of the sample (parameters and rotation center);
the provenance label is not part of the key, so numerically identical
samples produced by different proposals share one entry.

The chain scores the current sample again on every step, so with a cache
the posterior is computed once per distinct state.
"""

from collections import OrderedDict

from ..error_handling import ConfigurationError
from ..sample import Sample

import logging
logger = logging.getLogger('shapemh')


class CachedEvaluator:
    """
    LRU cache around `evaluator.log_value`.

    Args:
        evaluator: Wrapped evaluator (must be pure)
        capacity: Maximum number of memoized values

    Attributes:
        hits, misses: Lookup counters since construction or clear()
    """

    def __init__(self, evaluator, capacity: int = 1000):
        if not hasattr(evaluator, 'log_value'):
            raise ConfigurationError(f"{evaluator!r} is not an evaluator (no log_value method)")
        if capacity < 1:
            raise ConfigurationError(f"Cache capacity must be >= 1, got {capacity}")
        self.evaluator = evaluator
        self.capacity = int(capacity)
        self._memo = OrderedDict()
        self.hits = 0
        self.misses = 0

    def log_value(self, sample: Sample) -> float:
        key = sample.key()
        try:
            value = self._memo[key]
        except KeyError:
            pass
        else:
            self._memo.move_to_end(key)
            self.hits += 1
            return value

        self.misses += 1
        value = self.evaluator.log_value(sample)
        self._memo[key] = value
        if len(self._memo) > self.capacity:
            self._memo.popitem(last=False)
            logger.debug(f"Cache full ({self.capacity}), evicted least recently used entry")
        return value

    def clear(self) -> None:
        self._memo.clear()
        self.hits = 0
        self.misses = 0

    def __contains__(self, sample: Sample) -> bool:
        return sample.key() in self._memo

    def __len__(self):
        return len(self._memo)

    def __repr__(self):
        return (f"CachedEvaluator({self.evaluator!r}, capacity={self.capacity}, "
                f"size={len(self._memo)}, hits={self.hits}, misses={self.misses})")
