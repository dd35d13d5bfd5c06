"""
Graph Module for Supervised Random Walks.

This module provides the annotated directed graph the walks run on:
each edge carries a list of named features whose dot product with the
shared parameter vector gives the edge weight.

Classes:
    AnnotatedGraph: NetworkX-backed graph with per-edge feature lists
    Feature: A (name, weight) record attached to one edge

Example:
    >>> from srw.graph import AnnotatedGraph
    >>>
    >>> graph = AnnotatedGraph.from_edge_list([
    ...     ('a', 'b', {'f': 1.0}),
    ...     ('a', 'c', {'f': 0.5, 'g': 1.0}),
    ... ])
    >>> graph.features_on('a', 'c')
    [Feature(name='f', weight=0.5), Feature(name='g', weight=1.0)]
"""

from .annotated_graph import AnnotatedGraph, Feature

__all__ = [
    'AnnotatedGraph',
    'Feature',
]
