"""
Model Module for Supervised Random Walks.

This module contains the learned state and the objectives:
- ParameterVector: shared feature weights (nonnegative, lock-guarded)
- FeatureGate: which features are held fixed during training
- Loss strategies: pairwise squared hinge and positive/negative log loss

Example:
    >>> from srw.model import ParameterVector, add_default_weights, create_loss
    >>>
    >>> params = add_default_weights(graph, ParameterVector())
    >>> loss_fn = create_loss('pairwise', margin=0.01)
"""

from .features import FeatureGate
from .parameters import ParameterVector, NegativeWeightError, add_default_weights, check_nonnegative
from .loss import LossStrategy, PairwiseSquaredLoss, PosNegLogLoss, create_loss

__all__ = [
    'FeatureGate',
    'ParameterVector',
    'NegativeWeightError',
    'add_default_weights',
    'check_nonnegative',
    'LossStrategy',
    'PairwiseSquaredLoss',
    'PosNegLogLoss',
    'create_loss',
]
