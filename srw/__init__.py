"""
Supervised Random Walk Training Package.

This package learns edge-feature weights for a random walk with restart on
an annotated directed graph, so that walks from a query rank labelled
nodes as desired (Backstrom & Leskovec, "Supervised Random Walks", 2011,
trained with SGD).

Submodules:
    - graph: Annotated directed graph with per-edge features
    - walks: Edge weights, forward walk, and its parameter derivative
    - model: Parameter vector, feature gate, and loss strategies
    - data: Training examples and JSON loading
    - training: SGD trainer, logging, and checkpointing
    - utils: Graph diagnostics and ranking metrics

Example:
    >>> from srw.graph import AnnotatedGraph
    >>> from srw.model import ParameterVector, create_loss
    >>> from srw.data import create_mock_examples
    >>> from srw.training import SRWTrainer
"""

__version__ = "1.0.0"

VERSION_INFO = {
    'major': 1,
    'minor': 0,
    'patch': 0,
    'release': 'stable'
}
