"""
Feature Gate Module.

Some features are held fixed during training (e.g. restart links whose
weight should stay at its default). The gate filters them out of both the
derivative computation and the SGD update.
"""

from typing import Iterable, Mapping, Optional, Set, Union

from ..graph import Feature


class FeatureGate:
    """
    Filter feature names against a set of untrained (frozen) features.

    Example:
        >>> gate = FeatureGate(untrained_features={'restart'})
        >>> sorted(gate.trainable_features({'restart', 'f', 'g'}))
        ['f', 'g']
    """

    def __init__(self, untrained_features: Optional[Iterable[str]] = None):
        self.untrained_features: Set[str] = set(untrained_features or ())

    def trainable_features(
        self,
        candidates: Union[Iterable[str], Mapping[str, float], Iterable[Feature]]
    ) -> Set[str]:
        """
        Names in candidates that are not untrained.

        Args:
            candidates: Feature names, a parameter vector (its keys are used),
                        or Feature records (reduced to their names)

        Returns:
            Subset of the candidate names disjoint from the untrained set
        """
        result = set()
        for item in candidates:
            name = item.name if isinstance(item, Feature) else item
            if name not in self.untrained_features:
                result.add(name)
        return result

    def freeze(self, *names: str) -> None:
        """Exclude features from training."""
        self.untrained_features.update(names)

    def unfreeze(self, *names: str) -> None:
        """Make previously frozen features trainable again."""
        self.untrained_features.difference_update(names)

    def __repr__(self) -> str:
        return f"FeatureGate(untrained_features={sorted(self.untrained_features)})"
