"""
Random Walk with Restart Module.

This module propagates probability mass over an annotated graph for a
fixed number of steps. At each step every node passes its mass to its
successors in proportion to their feature-weighted edge weights.

Key Concept:
    Restart links are expected to be represented explicitly in the graph
    (e.g. an edge from every node back to the query), so the walk itself
    is a plain power iteration with no damping term.

Dead ends (nodes whose total outgoing weight is 0) absorb mass: it is
dropped, not redistributed, and the walk carries on.
"""

import logging
from typing import Dict, Hashable, Mapping

from ..graph import AnnotatedGraph
from .edge_weights import edge_weight, total_edge_weight

logger = logging.getLogger(__name__)

Distribution = Dict[Hashable, float]


def walk_once(
    graph: AnnotatedGraph,
    dist: Mapping[Hashable, float],
    params: Mapping[str, float]
) -> Distribution:
    """
    Walk one step away from dist.

    Args:
        graph: Annotated graph
        dist: Current distribution (node -> mass); not modified
        params: Parameter vector (feature name -> nonnegative value)

    Returns:
        New distribution holding only nodes reached by some edge
    """
    next_dist: Distribution = {}

    for k, (u, mass) in enumerate(dist.items()):
        if k > 0 and k % 100 == 0:
            logger.debug("Walked from %d nodes...", k)

        z = total_edge_weight(graph, u, params)
        if z == 0:
            logger.debug("0 total edge weight at u=%r (mass %g); dropping", u, mass)
            continue

        for v in graph.outgoing_neighbors(u):
            inc = mass * edge_weight(graph, u, v, params) / z
            next_dist[v] = next_dist.get(v, 0.0) + inc

    if not next_dist:
        logger.warning("No entries in distribution after walk step")

    return next_dist


def rwr(
    graph: AnnotatedGraph,
    start: Mapping[Hashable, float],
    params: Mapping[str, float],
    steps: int
) -> Mapping[Hashable, float]:
    """
    Random walk with restart from start for exactly `steps` iterations.

    steps == 0 returns start itself. An empty distribution is walked on
    (as a no-op) for the remaining steps.

    Args:
        graph: Annotated graph
        start: Query vector (node -> mass)
        params: Parameter vector
        steps: Number of walk steps

    Returns:
        Distribution after `steps` steps
    """
    if steps < 0:
        raise ValueError(f"steps must be nonnegative, got {steps}")

    dist = start
    for _ in range(steps):
        dist = walk_once(graph, dist, params)
    return dist
