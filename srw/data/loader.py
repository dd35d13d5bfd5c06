"""
Data Loader Module.

Loads annotated graphs and labelled examples from JSON.

Graph file:
    {"edges": [{"source": "q", "target": "d1", "features": {"title": 1.0}}, ...]}

Example file:
    [{"query": {"q": 1.0}, "pos": ["d1"], "neg": ["d2", "d3"]}, ...]
"""

import json
from pathlib import Path
from typing import List, Union

from ..graph import AnnotatedGraph
from .examples import PosNegRWExample


def load_graph(path: Union[str, Path]) -> AnnotatedGraph:
    """
    Load an annotated graph from a JSON file.

    Args:
        path: Path to graph JSON

    Returns:
        AnnotatedGraph instance
    """
    with open(path, 'r') as f:
        data = json.load(f)

    graph = AnnotatedGraph()
    for node in data.get('nodes', []):
        graph.add_node(node)

    for i, edge in enumerate(data.get('edges', [])):
        try:
            graph.add_edge(edge['source'], edge['target'], edge.get('features', {}))
        except KeyError as e:
            raise ValueError(f"Edge {i} in {path} is missing {e}") from e

    return graph


def load_examples(path: Union[str, Path], graph: AnnotatedGraph) -> List[PosNegRWExample]:
    """
    Load labelled examples over a graph from a JSON file.

    Args:
        path: Path to examples JSON
        graph: Graph the examples' queries refer to

    Returns:
        List of examples
    """
    with open(path, 'r') as f:
        records = json.load(f)

    examples = []
    for i, record in enumerate(records):
        if 'query' not in record:
            raise ValueError(f"Example {i} in {path} has no query")
        query = {node: float(mass) for node, mass in record['query'].items()}
        examples.append(PosNegRWExample(
            graph=graph,
            query=query,
            pos_nodes=list(record.get('pos', [])),
            neg_nodes=list(record.get('neg', [])),
        ))

    return examples
