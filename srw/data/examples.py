"""
Training Examples Module.

An example pairs a query (start distribution) on a graph with the labels
the trained walk should respect. The loss strategies read the labels; the
trainer only needs the graph and length().
"""

from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional

import numpy as np

from ..graph import AnnotatedGraph
from ..walks import rwr


@dataclass
class RWExample:
    """
    A query over an annotated graph.

    Attributes:
        graph: Graph the walk runs on
        query: Start distribution (node -> mass)
    """
    graph: AnnotatedGraph
    query: Dict[Hashable, float]

    def length(self) -> int:
        """Size of the example; normalizes the learning rate."""
        return 1


@dataclass
class PosNegRWExample(RWExample):
    """
    A query with nodes that should rank high (pos) and low (neg).

    Attributes:
        graph: Graph the walk runs on
        query: Start distribution (node -> mass)
        pos_nodes: Nodes the walk should score highly
        neg_nodes: Nodes the walk should score low
    """
    pos_nodes: List[Hashable] = field(default_factory=list)
    neg_nodes: List[Hashable] = field(default_factory=list)

    def __post_init__(self):
        if not self.pos_nodes and not self.neg_nodes:
            raise ValueError("Example needs at least one positive or negative node")
        overlap = set(self.pos_nodes) & set(self.neg_nodes)
        if overlap:
            raise ValueError(f"Nodes labelled both positive and negative: {sorted(map(str, overlap))}")

    def length(self) -> int:
        return len(self.pos_nodes) + len(self.neg_nodes)


def create_mock_examples(
    graph: AnnotatedGraph,
    num_examples: int = 20,
    num_pos: int = 2,
    num_neg: int = 4,
    target_params: Optional[Dict[str, float]] = None,
    steps: int = 10,
    seed: Optional[int] = 42
) -> List[PosNegRWExample]:
    """
    Create labelled examples whose labels come from a hidden parameter vector.

    For each example a random query node is walked with target_params; the
    top-scoring reached nodes become positives and the lowest-scoring ones
    negatives. Training from default weights should then move the
    parameters toward target_params' ranking.

    Args:
        graph: Graph to sample queries from
        num_examples: Number of examples to create
        num_pos: Positive nodes per example
        num_neg: Negative nodes per example
        target_params: Hidden weights (default: f_i -> i + 1)
        steps: Walk length used for labelling
        seed: Random seed for reproducibility

    Returns:
        List of examples (queries reaching too few nodes are skipped)
    """
    rng = np.random.default_rng(seed)
    if target_params is None:
        target_params = {name: float(i + 1) for i, name in enumerate(sorted(graph.all_feature_names()))}

    candidates = [n for n in graph.nodes if graph.outgoing_neighbors(n)]
    examples: List[PosNegRWExample] = []
    if not candidates:
        return examples

    attempts = 0
    while len(examples) < num_examples and attempts < num_examples * 10:
        attempts += 1
        start = candidates[int(rng.integers(len(candidates)))]
        scores = rwr(graph, {start: 1.0}, target_params, steps)
        ranked = sorted(
            (node for node, score in scores.items() if node != start and score > 0),
            key=lambda node: scores[node],
            reverse=True
        )
        if len(ranked) < num_pos + num_neg:
            continue
        examples.append(PosNegRWExample(
            graph=graph,
            query={start: 1.0},
            pos_nodes=ranked[:num_pos],
            neg_nodes=ranked[-num_neg:],
        ))

    return examples
