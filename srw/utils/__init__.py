"""
Utilities Module.

This module provides helper functions for:
- Graph and distribution diagnostics
- Ranking evaluation of trained walks

Components:
    graph_utils: Graph statistics, dead ends, distribution mass
    metrics: ROC-AUC of positive vs negative nodes
"""

from .graph_utils import (
    total_mass,
    dead_end_nodes,
    compute_graph_statistics
)
from .metrics import (
    example_auc,
    evaluate_ranking
)

__all__ = [
    # Graph utils
    'total_mass',
    'dead_end_nodes',
    'compute_graph_statistics',
    # Metrics
    'example_auc',
    'evaluate_ranking',
]
