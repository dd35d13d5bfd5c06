"""
RWR Gradient Module.

This module computes the derivative of the T-step random walk output with
respect to the parameter vector (Algorithm 1 of Backstrom & Leskovec,
"Supervised Random Walks", WSDM 2011), by co-iterating the forward walk
with a per-feature derivative table.

At each step, for every node j holding positive mass p[j] and every
outgoing neighbor u of j:

    dNext[u][f] += w(j, u) * d[j][f] + p[j] * dQ_ju/dw_f

    dQ_ju/dw_f = ( dw(j,u)/dw_f * Z_j - w(j,u) * S_ju ) / Z_j²

where w is the unnormalized edge weight, Z_j = Σ_v w(j, v), and S_ju is
the sum of the feature values on edge (j, u). dQ_ju/dw_f covers the
trainable features active on (j, u); derivatives already held at j are
carried to u for every trainable feature.

d_0 is empty since the start vector does not depend on the parameters.
Dead ends (Z_j == 0) are skipped exactly as in the forward walk, and
untrained features never enter the table.
"""

from typing import TYPE_CHECKING, Dict, Hashable, Iterable, Mapping, Optional, Set, Tuple

from ..graph import AnnotatedGraph
from .edge_weights import deriv_edge_weight_by_params, edge_weight, total_edge_weight
from .walker import Distribution, walk_once

if TYPE_CHECKING:
    from ..model.features import FeatureGate

DerivativeTable = Dict[Hashable, Dict[str, float]]


def _trainable(gate: Optional['FeatureGate'], candidates: Iterable[str]) -> Set[str]:
    if gate is None:
        return set(candidates)
    return gate.trainable_features(candidates)


def deriv_walk_prob_by_params(
    graph: AnnotatedGraph,
    j: Hashable,
    u: Hashable,
    params: Mapping[str, float],
    gate: Optional['FeatureGate'] = None
) -> Dict[str, float]:
    """
    Derivative of the transition probability Q_ju w.r.t. each trainable
    feature active on edge (j, u).

    Args:
        graph: Annotated graph
        j: Start node
        u: End node
        params: Parameter vector
        gate: Optional FeatureGate; untrained features are omitted

    Returns:
        Mapping feature -> dQ_ju/dw_f (empty if j is a dead end)
    """
    z = total_edge_weight(graph, j, params)
    if z == 0:
        return {}

    w_ju = edge_weight(graph, j, u, params)
    dw_ju = deriv_edge_weight_by_params(graph, j, u)
    edge_total = sum(dw_ju.values())

    z2 = z * z
    return {
        f: (dw_ju[f] * z - w_ju * edge_total) / z2
        for f in _trainable(gate, dw_ju)
    }


def rwr_with_derivative(
    graph: AnnotatedGraph,
    start: Mapping[Hashable, float],
    params: Mapping[str, float],
    steps: int,
    gate: Optional['FeatureGate'] = None
) -> Tuple[Mapping[Hashable, float], DerivativeTable]:
    """
    Run the walk and its derivative together for exactly `steps` steps.

    Args:
        graph: Annotated graph
        start: Query vector (node -> mass)
        params: Parameter vector
        steps: Number of walk steps
        gate: Optional FeatureGate holding the untrained features

    Returns:
        Tuple of (distribution, derivative table) where table[node][f] is
        the accumulated derivative of distribution[node] w.r.t. params[f]
    """
    if steps < 0:
        raise ValueError(f"steps must be nonnegative, got {steps}")

    p: Mapping[Hashable, float] = start
    d: DerivativeTable = {}

    for _ in range(steps):
        d_next: DerivativeTable = {}

        for j, p_j in p.items():
            if p_j <= 0:
                continue
            if total_edge_weight(graph, j, params) == 0:
                continue

            d_j = d.get(j, {})
            for u in graph.outgoing_neighbors(j):
                dq_ju = deriv_walk_prob_by_params(graph, j, u, params, gate)
                features = _trainable(gate, set(dq_ju) | set(d_j))
                if not features:
                    continue

                w_ju = edge_weight(graph, j, u, params)
                row = d_next.setdefault(u, {})
                for f in features:
                    inc = w_ju * d_j.get(f, 0.0) + p_j * dq_ju.get(f, 0.0)
                    row[f] = row.get(f, 0.0) + inc

        p = walk_once(graph, p, params)
        d = d_next

    return p, d


def deriv_rwr_by_params(
    graph: AnnotatedGraph,
    start: Mapping[Hashable, float],
    params: Mapping[str, float],
    steps: int,
    gate: Optional['FeatureGate'] = None
) -> DerivativeTable:
    """
    Derivative table of rwr(graph, start, params, steps) w.r.t. the parameters.

    Returns:
        Mapping node -> feature -> derivative
    """
    _, d = rwr_with_derivative(graph, start, params, steps, gate)
    return d


__all__ = [
    'Distribution',
    'DerivativeTable',
    'deriv_walk_prob_by_params',
    'rwr_with_derivative',
    'deriv_rwr_by_params',
]
