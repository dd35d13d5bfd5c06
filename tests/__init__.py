"""
Test Suite for Supervised Random Walk Training.

This package contains tests for all modules:
- test_graph.py: Annotated graph, examples and JSON loading
- test_walks.py: Edge weights and the forward random walk
- test_gradient.py: Derivative of the walk w.r.t. the parameters
- test_model.py: Feature gate, parameter vector and loss strategies
- test_training.py: SGD update, training loop and callbacks
- test_integration.py: End-to-end integration tests
"""
