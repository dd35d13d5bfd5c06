"""
Annotated Graph Module.

This module provides the directed, feature-annotated graph that supervised
random walks run on. Every edge carries a list of named, real-valued
features; the walk turns those features into an edge weight by taking
their dot product with a shared parameter vector.

Storage is a NetworkX DiGraph with the features kept as an edge attribute,
so any hashable value can be a node identifier.
"""

from dataclasses import dataclass
from typing import Hashable, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

import networkx as nx
import numpy as np
import torch


@dataclass(frozen=True)
class Feature:
    """
    A named feature on a single directed edge.

    Attributes:
        name: Feature name, shared across all edges that carry it
        weight: Value of this feature on this particular edge
    """
    name: str
    weight: float = 1.0


FeatureSpec = Union[Mapping[str, float], Iterable[Feature]]


class AnnotatedGraph:
    """
    Directed graph whose edges are annotated with named features.

    This is the only graph capability the walk and gradient code needs:
    - outgoing_neighbors(u): nodes reachable from u in one step
    - features_on(u, v): features of edge (u, v), empty if there is no edge
    - all_feature_names(): feature vocabulary over all edges

    The graph is read-only once training starts.

    Example:
        >>> from srw.graph import AnnotatedGraph
        >>>
        >>> graph = AnnotatedGraph()
        >>> graph.add_edge('query', 'doc1', {'title_match': 1.0})
        >>> graph.add_edge('query', 'doc2', {'title_match': 0.5, 'recent': 1.0})
        >>> graph.outgoing_neighbors('query')
        ['doc1', 'doc2']
        >>> sorted(graph.all_feature_names())
        ['recent', 'title_match']
    """

    FEATURES_ATTR = 'features'

    def __init__(self):
        """Initialize an empty graph."""
        self.graph = nx.DiGraph()
        self._feature_names: Set[str] = set()

    def add_node(self, node: Hashable) -> None:
        """Add a node with no edges."""
        self.graph.add_node(node)

    def add_edge(self, u: Hashable, v: Hashable, features: FeatureSpec) -> None:
        """
        Add (or replace) the edge u -> v.

        Args:
            u: Source node
            v: Target node
            features: Mapping of feature name -> weight, or Feature records
        """
        if isinstance(features, Mapping):
            records = tuple(Feature(name, float(w)) for name, w in features.items())
        else:
            records = tuple(Feature(f.name, float(f.weight)) for f in features)

        self.graph.add_edge(u, v, **{self.FEATURES_ATTR: records})
        self._feature_names.update(f.name for f in records)

    def outgoing_neighbors(self, u: Hashable) -> List[Hashable]:
        """Nodes v with an edge u -> v (empty for unknown nodes)."""
        if u not in self.graph:
            return []
        return list(self.graph.successors(u))

    def features_on(self, u: Hashable, v: Hashable) -> List[Feature]:
        """Features of edge u -> v, or an empty list if there is no such edge."""
        data = self.graph.get_edge_data(u, v)
        if data is None:
            return []
        return list(data[self.FEATURES_ATTR])

    def all_feature_names(self) -> Set[str]:
        """Every feature name that appears on some edge."""
        return set(self._feature_names)

    @property
    def nodes(self) -> List[Hashable]:
        return list(self.graph.nodes)

    @property
    def num_nodes(self) -> int:
        return self.graph.number_of_nodes()

    @property
    def num_edges(self) -> int:
        return self.graph.number_of_edges()

    def __contains__(self, node: Hashable) -> bool:
        return node in self.graph

    def __repr__(self) -> str:
        return (
            f"AnnotatedGraph(nodes={self.num_nodes}, edges={self.num_edges}, "
            f"features={len(self._feature_names)})"
        )

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_edge_list(
        cls,
        edges: Iterable[Tuple[Hashable, Hashable, FeatureSpec]]
    ) -> 'AnnotatedGraph':
        """
        Build a graph from (source, target, features) triples.

        Args:
            edges: Iterable of (u, v, features) where features is a mapping
                   name -> weight or a sequence of Feature records

        Returns:
            AnnotatedGraph instance
        """
        graph = cls()
        for u, v, features in edges:
            graph.add_edge(u, v, features)
        return graph

    @classmethod
    def from_edge_index(
        cls,
        edge_index: torch.Tensor,
        edge_attr: torch.Tensor,
        feature_names: Sequence[str],
        node_ids: Optional[Sequence[Hashable]] = None,
        drop_zero: bool = True
    ) -> 'AnnotatedGraph':
        """
        Build a graph from PyG-style tensors.

        Args:
            edge_index: Edge tensor of shape [2, num_edges]
            edge_attr: Edge feature tensor of shape [num_edges, num_features]
            feature_names: Name for each column of edge_attr
            node_ids: Optional identifiers for node indices (default: the ints)
            drop_zero: Skip features whose value on an edge is exactly 0

        Returns:
            AnnotatedGraph instance
        """
        if edge_index.dim() != 2 or edge_index.shape[0] != 2:
            raise ValueError(f"edge_index must have shape [2, E], got {tuple(edge_index.shape)}")
        if edge_attr.dim() != 2 or edge_attr.shape[0] != edge_index.shape[1]:
            raise ValueError(
                f"edge_attr must have shape [E, F] with E={edge_index.shape[1]}, "
                f"got {tuple(edge_attr.shape)}"
            )
        if edge_attr.shape[1] != len(feature_names):
            raise ValueError(
                f"Got {len(feature_names)} feature names for {edge_attr.shape[1]} columns"
            )

        graph = cls()
        if edge_index.numel() == 0:
            return graph

        src = edge_index[0].cpu().tolist()
        dst = edge_index[1].cpu().tolist()
        attrs = edge_attr.detach().cpu().tolist()

        for s, d, row in zip(src, dst, attrs):
            u = node_ids[s] if node_ids is not None else s
            v = node_ids[d] if node_ids is not None else d
            features = [
                Feature(name, float(value))
                for name, value in zip(feature_names, row)
                if not (drop_zero and value == 0)
            ]
            graph.add_edge(u, v, features)

        return graph

    @classmethod
    def create_mock(
        cls,
        num_nodes: int = 50,
        num_features: int = 4,
        out_degree: int = 3,
        dead_end_fraction: float = 0.1,
        seed: Optional[int] = 42
    ) -> 'AnnotatedGraph':
        """
        Create a synthetic annotated graph for testing and development.

        Each non-dead-end node gets up to out_degree random successors; each
        edge carries a random non-empty subset of features with weights in
        (0, 1].

        Args:
            num_nodes: Number of nodes (labelled 0..num_nodes-1)
            num_features: Size of the feature vocabulary (f0, f1, ...)
            out_degree: Outgoing edges per node
            dead_end_fraction: Fraction of nodes left without outgoing edges
            seed: Random seed for reproducibility

        Returns:
            AnnotatedGraph instance
        """
        rng = np.random.default_rng(seed)
        names = [f"f{i}" for i in range(num_features)]

        graph = cls()
        for node in range(num_nodes):
            graph.add_node(node)

        num_dead = int(round(num_nodes * dead_end_fraction))
        dead_ends = set(rng.choice(num_nodes, size=num_dead, replace=False).tolist()) if num_dead else set()

        for u in range(num_nodes):
            if u in dead_ends:
                continue
            k = min(out_degree, num_nodes - 1)
            candidates = [n for n in range(num_nodes) if n != u]
            for v in rng.choice(candidates, size=k, replace=False).tolist():
                active = rng.random(num_features) < 0.5
                if not active.any():
                    active[rng.integers(num_features)] = True
                weights = 1.0 - rng.random(num_features)
                graph.add_edge(u, v, {
                    names[i]: float(weights[i])
                    for i in range(num_features) if active[i]
                })

        return graph
