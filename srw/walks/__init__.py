"""
Random Walk Module for Supervised Random Walks.

This module implements the numeric core of the supervised random walk:

1. Feature-weighted edge weights (linear in the parameter vector)
2. Random walk with restart for a fixed number of steps
3. The analytic derivative of the walk output w.r.t. the parameters

The core idea: the walk's output distribution is a differentiable function
of the parameter vector, so the parameters can be tuned by gradient
descent toward a desired ranking of nodes.

Functions:
    edge_weight / total_edge_weight: Unnormalized edge and outflow weights
    walk_once / rwr: Forward walk
    rwr_with_derivative / deriv_rwr_by_params: Forward walk plus derivative

Example:
    >>> from srw.graph import AnnotatedGraph
    >>> from srw.walks import rwr
    >>>
    >>> graph = AnnotatedGraph.from_edge_list([('A', 'B', {'f': 1.0})])
    >>> rwr(graph, {'A': 1.0}, {'f': 1.0}, steps=1)
    {'B': 1.0}
"""

from .edge_weights import edge_weight, total_edge_weight, deriv_edge_weight_by_params
from .walker import walk_once, rwr, Distribution
from .gradient import (
    deriv_walk_prob_by_params,
    rwr_with_derivative,
    deriv_rwr_by_params,
    DerivativeTable,
)

__all__ = [
    'edge_weight',
    'total_edge_weight',
    'deriv_edge_weight_by_params',
    'walk_once',
    'rwr',
    'Distribution',
    'deriv_walk_prob_by_params',
    'rwr_with_derivative',
    'deriv_rwr_by_params',
    'DerivativeTable',
]
