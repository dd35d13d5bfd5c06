"""
Evaluation Metrics Module.

This module measures how well a trained walk ranks labelled nodes:
positives should score above negatives in the RWR output.
"""

import logging
from typing import Dict, Hashable, Iterable, List, Mapping

import numpy as np
from sklearn.metrics import roc_auc_score

logger = logging.getLogger(__name__)


def example_auc(
    scores: Mapping[Hashable, float],
    pos_nodes: Iterable[Hashable],
    neg_nodes: Iterable[Hashable]
) -> float:
    """
    ROC-AUC of positive vs negative nodes under the given scores.

    Nodes missing from scores get 0. Returns NaN when either label is absent.
    """
    pos_nodes = list(pos_nodes)
    neg_nodes = list(neg_nodes)
    if not pos_nodes or not neg_nodes:
        return float('nan')

    labels = [1] * len(pos_nodes) + [0] * len(neg_nodes)
    values = [scores.get(n, 0.0) for n in pos_nodes + neg_nodes]
    return float(roc_auc_score(labels, values))


def evaluate_ranking(trainer, params: Mapping[str, float], examples: Iterable) -> Dict:
    """
    Evaluate the walk ranking on labelled examples.

    Args:
        trainer: SRWTrainer (supplies walk length)
        params: Parameter vector
        examples: Examples with graph, query, pos_nodes and neg_nodes

    Returns:
        Dictionary with mean AUC, per-example AUCs and the number evaluated
    """
    aucs: List[float] = []
    for example in examples:
        scores = trainer.rwr(example.graph, example.query, params)
        auc = example_auc(scores, example.pos_nodes, example.neg_nodes)
        if not np.isnan(auc):
            aucs.append(auc)

    if not aucs:
        logger.warning("No examples with both positive and negative nodes to evaluate")
        return {'mean_auc': float('nan'), 'aucs': [], 'num_evaluated': 0}

    return {
        'mean_auc': float(np.mean(aucs)),
        'aucs': aucs,
        'num_evaluated': len(aucs),
    }
