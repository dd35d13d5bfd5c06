"""
Edge Weight Model.

Edge weights are linear in both the edge features and the parameter
vector:

    w(u, v) = Σ_f params[f] * phi_f(u, v)

so the derivative of an edge weight with respect to params[f] is just the
value of feature f on that edge, independent of the current parameters.
"""

from typing import Dict, Hashable, Mapping

from ..graph import AnnotatedGraph


def edge_weight(
    graph: AnnotatedGraph,
    u: Hashable,
    v: Hashable,
    params: Mapping[str, float]
) -> float:
    """
    Unnormalized weight of the edge u -> v.

    A feature missing from params contributes 0.

    Args:
        graph: Annotated graph
        u: Start node
        v: End node
        params: Parameter vector (feature name -> nonnegative value)

    Returns:
        Edge weight (0.0 if there is no edge)
    """
    total = 0.0
    for feature in graph.features_on(u, v):
        total += params.get(feature.name, 0.0) * feature.weight
    return total


def total_edge_weight(
    graph: AnnotatedGraph,
    u: Hashable,
    params: Mapping[str, float]
) -> float:
    """
    Sum of the unnormalized weights of all outlinks from u.

    Zero means u is a dead end: a walk loses any mass that reaches it.
    """
    total = 0.0
    for v in graph.outgoing_neighbors(u):
        total += edge_weight(graph, u, v, params)
    return total


def deriv_edge_weight_by_params(
    graph: AnnotatedGraph,
    u: Hashable,
    v: Hashable
) -> Dict[str, float]:
    """
    Derivative of w(u, v) with respect to each feature active on the edge.

    Returns:
        Mapping feature name -> d w(u, v) / d params[feature]
    """
    result: Dict[str, float] = {}
    for feature in graph.features_on(u, v):
        result[feature.name] = result.get(feature.name, 0.0) + feature.weight
    return result
