"""
Parameter Vector Module.

The parameter vector maps feature names to shared, nonnegative weights.
It is the one piece of state shared across training calls (and threads),
so it carries the lock that the trainer's update holds.
"""

import json
import random
import threading
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from ..graph import AnnotatedGraph

DEFAULT_WEIGHT = 1.0
DEFAULT_JITTER = 0.01


class NegativeWeightError(RuntimeError):
    """A parameter weight would become negative after an SGD update."""


class ParameterVector(dict):
    """
    Feature name -> nonnegative weight, plus a lock for atomic updates.

    Reads are not serialized against updates; only the trainer's
    read-clip-apply sequence takes the lock.

    Example:
        >>> params = ParameterVector({'f': 1.0})
        >>> with params.lock:
        ...     params['f'] -= 0.5
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lock = threading.Lock()

    def snapshot(self) -> Dict[str, float]:
        """Plain-dict copy taken under the lock."""
        with self.lock:
            return dict(self)

    def to_json(self, path: Union[str, Path]) -> None:
        """Save to a JSON file."""
        with open(path, 'w') as f:
            json.dump(self.snapshot(), f, indent=2, sort_keys=True)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'ParameterVector':
        """Load from a JSON file written by to_json."""
        with open(path, 'r') as f:
            data = json.load(f)

        params = cls({name: float(value) for name, value in data.items()})
        negative = [name for name, value in params.items() if value < 0]
        if negative:
            raise ValueError(f"Parameter file {path} has negative weights: {negative}")
        return params

    def __repr__(self) -> str:
        return f"ParameterVector({dict.__repr__(self)})"


def add_default_weights(
    graph: AnnotatedGraph,
    params: Dict[str, float],
    rng: Optional[random.Random] = None
) -> Dict[str, float]:
    """
    Give every graph feature missing from params a weight near 1.0.

    The weight is slightly randomized to break symmetry between features.
    Features already in params are never touched, so this is idempotent.

    Args:
        graph: Annotated graph
        params: Parameter vector, updated in place
        rng: Optional random generator (default: module-level random)

    Returns:
        The same params object
    """
    rand = rng.random if rng is not None else random.random
    for name in graph.all_feature_names():
        if name not in params:
            params.setdefault(name, DEFAULT_WEIGHT + DEFAULT_JITTER * rand())
    return params


def check_nonnegative(params: Mapping[str, float]) -> None:
    """Raise NegativeWeightError if any weight is negative."""
    for name, value in params.items():
        if value < 0:
            raise NegativeWeightError(f"Parameter weight {name} can't be negative ({value})")
