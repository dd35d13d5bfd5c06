"""
Graph Utilities Module.

This module provides helper functions for inspecting annotated graphs and
walk distributions.
"""

from typing import Dict, Hashable, List, Mapping

import numpy as np

from ..graph import AnnotatedGraph
from ..walks import total_edge_weight


def total_mass(dist: Mapping[Hashable, float]) -> float:
    """Total mass held by a distribution (1.0 minus what dead ends absorbed)."""
    return float(sum(dist.values()))


def dead_end_nodes(graph: AnnotatedGraph, params: Mapping[str, float]) -> List[Hashable]:
    """
    Nodes whose total outgoing edge weight is zero under params.

    Args:
        graph: Annotated graph
        params: Parameter vector

    Returns:
        List of dead-end nodes
    """
    return [u for u in graph.nodes if total_edge_weight(graph, u, params) == 0]


def compute_graph_statistics(graph: AnnotatedGraph) -> Dict:
    """
    Compute graph statistics relevant to walking.

    Args:
        graph: Annotated graph

    Returns:
        Dictionary with graph statistics
    """
    num_nodes = graph.num_nodes
    out_degrees = np.array([len(graph.outgoing_neighbors(u)) for u in graph.nodes], dtype=float)
    features_per_edge = np.array(
        [len(graph.features_on(u, v)) for u in graph.nodes for v in graph.outgoing_neighbors(u)],
        dtype=float
    )

    max_edges = num_nodes * (num_nodes - 1)

    return {
        'num_nodes': num_nodes,
        'num_edges': graph.num_edges,
        'num_features': len(graph.all_feature_names()),
        'density': graph.num_edges / max_edges if max_edges > 0 else 0.0,
        'avg_out_degree': float(out_degrees.mean()) if out_degrees.size else 0.0,
        'max_out_degree': int(out_degrees.max()) if out_degrees.size else 0,
        'no_outlinks': int((out_degrees == 0).sum()),
        'avg_features_per_edge': float(features_per_edge.mean()) if features_per_edge.size else 0.0,
    }
