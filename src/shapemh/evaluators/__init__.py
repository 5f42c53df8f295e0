"""
Posterior Evaluators for Metropolis-Hastings Sampling

An evaluator scores a Sample with an unnormalized log-density. Evaluators
must be pure functions of the sample's numeric content; they may return
-inf for impossible states and never raise for representable inputs.

Variants:
    PriorEvaluator - shape coefficient prior plus optional pose priors
    CorrespondenceEvaluator - landmark likelihood on the full model
    MarginalizedCorrespondenceEvaluator - same likelihood on the model
        marginalized to the observed landmarks
    ProductEvaluator - sum of sub-evaluator log values (prior x likelihood)
    CachedEvaluator - LRU memoizing decorator around any evaluator

Plain functions `fn(sample) -> float` can be wrapped with
evaluator_from_function.
"""

from .base import Evaluator, FunctionEvaluator, evaluator_from_function
from .prior import PriorEvaluator
from .likelihood import (
    Correspondence,
    CorrespondenceEvaluator,
    MarginalizedCorrespondenceEvaluator,
)
from .product import ProductEvaluator
from .cached import CachedEvaluator

__all__ = [
    'Evaluator',
    'FunctionEvaluator',
    'evaluator_from_function',
    'PriorEvaluator',
    'Correspondence',
    'CorrespondenceEvaluator',
    'MarginalizedCorrespondenceEvaluator',
    'ProductEvaluator',
    'CachedEvaluator',
]
