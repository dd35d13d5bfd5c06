"""
Data Module for Supervised Random Walks.

This module handles:
1. Training examples (a query plus positive/negative nodes)
2. Loading graphs and examples from JSON

Classes:
    RWExample: A query over an annotated graph
    PosNegRWExample: A query with positive and negative nodes

Example:
    >>> from srw.data import load_graph, load_examples
    >>>
    >>> graph = load_graph('data/graph.json')
    >>> examples = load_examples('data/examples.json', graph)
"""

from .examples import RWExample, PosNegRWExample, create_mock_examples
from .loader import load_graph, load_examples

__all__ = [
    'RWExample',
    'PosNegRWExample',
    'create_mock_examples',
    'load_graph',
    'load_examples',
]
