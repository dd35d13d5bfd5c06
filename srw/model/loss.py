"""
Ranking Loss Module.

This module implements the loss strategies a supervised random walk is
trained with. A strategy turns one labelled example into a loss value and
a gradient over the parameter vector; the trainer applies the update.

Each strategy reads the walk length, regularization strength (mu) and the
feature gate from the trainer session it is called with.

Loss Functions:
    Pairwise squared hinge (Backstrom & Leskovec):
        L = Σ_{pos, neg} max(0, p[neg] - p[pos] + margin)² + mu * ||w||²

    Positive/negative log loss:
        L = -Σ_pos log p[pos] - Σ_neg log(1 - p[neg]) + mu * ||w||²

Where p is the RWR distribution from the example's query and w ranges over
trainable features.
"""

import math
from typing import Dict, Mapping

from ..walks import rwr, rwr_with_derivative


class LossStrategy:
    """
    Base class for ranking losses over RWR scores.

    Subclasses implement gradient() and loss(). Calling them on the base
    class is an unsupported operation: the walk core has no loss of its own.
    """

    def gradient(self, session, params: Mapping[str, float], example) -> Dict[str, float]:
        """
        Gradient of the example's loss w.r.t. the parameter vector.

        The trainer subtracts rate * gradient, so this is descent on loss().
        """
        raise NotImplementedError(
            f"{type(self).__name__} does not implement gradient(); use a concrete loss strategy"
        )

    def loss(self, session, params: Mapping[str, float], example) -> float:
        """Empirical loss of the current ranking for one example."""
        raise NotImplementedError(
            f"{type(self).__name__} does not implement loss(); use a concrete loss strategy"
        )

    def regularization(self, session, params: Mapping[str, float]) -> float:
        """mu * squared L2 norm of the trainable weights."""
        weights = _snapshot(params)
        return session.mu * sum(
            weights[f] ** 2 for f in session.feature_gate.trainable_features(weights)
        )

    def regularization_gradient(self, session, params: Mapping[str, float]) -> Dict[str, float]:
        """Gradient of regularization(): 2 * mu * w_f."""
        weights = _snapshot(params)
        return {
            f: 2.0 * session.mu * weights[f]
            for f in session.feature_gate.trainable_features(weights)
        }


def _snapshot(params: Mapping[str, float]) -> Dict[str, float]:
    # other training threads may insert default weights while we iterate
    return params.snapshot() if hasattr(params, 'snapshot') else dict(params)


class PairwiseSquaredLoss(LossStrategy):
    """
    Squared hinge loss on every (positive, negative) pair.

    A pair contributes when the negative node scores above the positive
    node minus the margin.

    Example:
        >>> loss_fn = PairwiseSquaredLoss(margin=0.0)
        >>> trainer = SRWTrainer(loss_strategy=loss_fn)
        >>> trainer.train_on_example(params, example)
    """

    def __init__(self, margin: float = 0.0):
        """
        Initialize pairwise loss.

        Args:
            margin: Score gap by which positives should beat negatives
        """
        self.margin = margin

    def loss(self, session, params, example) -> float:
        p = rwr(example.graph, example.query, params, session.steps)

        total = 0.0
        for pos in example.pos_nodes:
            for neg in example.neg_nodes:
                delta = p.get(neg, 0.0) - p.get(pos, 0.0) + self.margin
                if delta > 0:
                    total += delta * delta

        return total + self.regularization(session, params)

    def gradient(self, session, params, example) -> Dict[str, float]:
        p, d = rwr_with_derivative(
            example.graph, example.query, params, session.steps, session.feature_gate
        )

        grad = self.regularization_gradient(session, params)
        for pos in example.pos_nodes:
            d_pos = d.get(pos, {})
            for neg in example.neg_nodes:
                delta = p.get(neg, 0.0) - p.get(pos, 0.0) + self.margin
                if delta <= 0:
                    continue
                d_neg = d.get(neg, {})
                for f in set(d_pos) | set(d_neg):
                    grad[f] = grad.get(f, 0.0) + 2.0 * delta * (d_neg.get(f, 0.0) - d_pos.get(f, 0.0))

        return grad


class PosNegLogLoss(LossStrategy):
    """
    Log loss treating RWR scores as probabilities of relevance.

    Scores are clipped to [epsilon, 1 - epsilon] so nodes the walk never
    reaches still have finite loss.
    """

    def __init__(self, epsilon: float = 1e-10):
        """
        Initialize log loss.

        Args:
            epsilon: Clipping bound for scores before taking logs
        """
        self.epsilon = epsilon

    def _clip(self, score: float) -> float:
        return min(max(score, self.epsilon), 1.0 - self.epsilon)

    def _in_range(self, score: float) -> bool:
        return self.epsilon < score < 1.0 - self.epsilon

    def loss(self, session, params, example) -> float:
        p = rwr(example.graph, example.query, params, session.steps)

        total = 0.0
        for pos in example.pos_nodes:
            total -= math.log(self._clip(p.get(pos, 0.0)))
        for neg in example.neg_nodes:
            total -= math.log(1.0 - self._clip(p.get(neg, 0.0)))

        return total + self.regularization(session, params)

    def gradient(self, session, params, example) -> Dict[str, float]:
        p, d = rwr_with_derivative(
            example.graph, example.query, params, session.steps, session.feature_gate
        )

        # clipped scores are flat, so they contribute no gradient
        grad = self.regularization_gradient(session, params)
        for pos in example.pos_nodes:
            score = p.get(pos, 0.0)
            if not self._in_range(score):
                continue
            for f, dp in d.get(pos, {}).items():
                grad[f] = grad.get(f, 0.0) - dp / score
        for neg in example.neg_nodes:
            score = p.get(neg, 0.0)
            if not self._in_range(score):
                continue
            for f, dp in d.get(neg, {}).items():
                grad[f] = grad.get(f, 0.0) + dp / (1.0 - score)

        return grad


def create_loss(loss_type: str = 'pairwise', **kwargs) -> LossStrategy:
    """
    Create loss strategy by name.

    Args:
        loss_type: Type of loss ('pairwise', 'posneg')
        **kwargs: Additional arguments for specific loss types
            - margin (float): For pairwise loss, default 0.0
            - epsilon (float): For posneg loss, default 1e-10

    Returns:
        Loss strategy
    """
    if loss_type == 'pairwise':
        return PairwiseSquaredLoss(margin=kwargs.get('margin', 0.0))
    elif loss_type == 'posneg':
        return PosNegLogLoss(epsilon=kwargs.get('epsilon', 1e-10))
    else:
        raise ValueError(f"Unknown loss type: {loss_type}")
