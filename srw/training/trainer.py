"""
Supervised Random Walk Trainer Module.

This module implements SGD training of the edge-feature parameter vector:
- Single-example updates with a nonnegativity-preserving learning rate
- Average loss evaluation over a collection of examples
- An epoch driver with optional thread-per-example parallelism

Design Decisions:
- The trainer instance is the session: walk length, learning rate, mu,
  epoch counter and the untrained-feature gate live on it.
- The loss is an injected strategy; without one, gradient() and
  empirical_loss() are unsupported operations.
- The parameter vector is the only shared mutable state. Only the
  read-clip-apply part of an update holds its lock; walks read it freely.
- A fixed number of epochs; there is no convergence test.
"""

import logging
import math
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence

from ..graph import AnnotatedGraph
from ..model.features import FeatureGate
from ..model.loss import LossStrategy, create_loss
from ..model.parameters import NegativeWeightError, add_default_weights, check_nonnegative
from ..walks import rwr, deriv_rwr_by_params
from .callbacks import ParameterCheckpoint, TrainingLogger

logger = logging.getLogger(__name__)

NUM_EPOCHS = 5


class SRWTrainer:
    """
    Supervised random walk with restart, trained by SGD.

    Follows Backstrom and Leskovec's 2011 WSDM paper, but uses SGD instead
    of L-BFGS and assumes all restart links are explicit in the graph.

    Example:
        >>> from srw.model import ParameterVector, PairwiseSquaredLoss
        >>> from srw.training import SRWTrainer
        >>>
        >>> trainer = SRWTrainer(loss_strategy=PairwiseSquaredLoss(), steps=10)
        >>> params = ParameterVector()
        >>> trainer.train(params, examples, num_epochs=5)
    """

    def __init__(
        self,
        loss_strategy: Optional[LossStrategy] = None,
        steps: int = 10,
        eta: float = 1.0,
        mu: float = 0.001,
        untrained_features: Optional[Iterable[str]] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize trainer.

        Args:
            loss_strategy: Loss supplying per-example gradient and loss
            steps: Walk length (number of RWR iterations)
            eta: Base learning rate
            mu: Regularization strength, consumed by the loss strategy
            untrained_features: Features excluded from training
            seed: Seed for example shuffling and default-weight jitter
        """
        if steps < 0:
            raise ValueError(f"steps must be nonnegative, got {steps}")
        if eta <= 0:
            raise ValueError(f"eta must be positive, got {eta}")

        self.loss_strategy = loss_strategy
        self.steps = steps
        self.eta = eta
        self.mu = mu
        self.epoch = 1
        self.feature_gate = FeatureGate(untrained_features)
        self.rng = random.Random(seed)

        # used when the parameter vector is a plain dict without its own lock
        self._update_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        loss_strategy: Optional[LossStrategy] = None
    ) -> 'SRWTrainer':
        """
        Build a trainer from a configuration dictionary.

        If loss_strategy is None, one is created from the 'loss' section.
        """
        walk_config = config.get('walk', {})
        train_config = config.get('training', {})

        if loss_strategy is None:
            loss_config = dict(config.get('loss', {}))
            loss_strategy = create_loss(loss_config.pop('type', 'pairwise'), **loss_config)

        return cls(
            loss_strategy=loss_strategy,
            steps=walk_config.get('steps', 10),
            eta=train_config.get('learning_rate', 1.0),
            mu=train_config.get('mu', 0.001),
            untrained_features=train_config.get('untrained_features') or (),
            seed=train_config.get('seed', 42),
        )

    @property
    def untrained_features(self):
        return self.feature_gate.untrained_features

    # ------------------------------------------------------------------
    # Walks
    # ------------------------------------------------------------------

    def rwr(
        self,
        graph: AnnotatedGraph,
        start: Mapping[Hashable, float],
        params: Mapping[str, float]
    ) -> Mapping[Hashable, float]:
        """Random walk with restart for self.steps iterations."""
        return rwr(graph, start, params, self.steps)

    def deriv_rwr_by_params(
        self,
        graph: AnnotatedGraph,
        start: Mapping[Hashable, float],
        params: Mapping[str, float]
    ):
        """Derivative table of self.rwr(...) w.r.t. the trainable parameters."""
        return deriv_rwr_by_params(graph, start, params, self.steps, self.feature_gate)

    # ------------------------------------------------------------------
    # Loss strategy
    # ------------------------------------------------------------------

    def gradient(self, params: Mapping[str, float], example) -> Dict[str, float]:
        """Gradient of the example's loss, from the loss strategy."""
        if self.loss_strategy is None:
            raise NotImplementedError(
                "SRWTrainer has no loss strategy; construct it with one to compute gradients"
            )
        return self.loss_strategy.gradient(self, params, example)

    def empirical_loss(self, params: Mapping[str, float], example) -> float:
        """Loss of the current ranking for one example, from the loss strategy."""
        if self.loss_strategy is None:
            raise NotImplementedError(
                "SRWTrainer has no loss strategy; construct it with one to compute losses"
            )
        return self.loss_strategy.loss(self, params, example)

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train_on_example(self, params: Dict[str, float], example) -> float:
        """
        Take one SGD step on params along the gradient of this example.

        Since params is restricted to nonnegative values, the rate is
        reduced until no feature with a positive gradient can be pushed
        below zero. Clipping and applying happen under the parameter lock
        so no other writer can invalidate the clip in between.

        Args:
            params: Parameter vector, updated in place
            example: Example with .graph and .length()

        Returns:
            The learning rate actually applied

        Raises:
            NegativeWeightError: If a weight would still become negative;
                params is left unchanged in that case
        """
        add_default_weights(example.graph, params, self.rng)

        grad = self.gradient(params, example)
        trainable = self.feature_gate.trainable_features(grad)
        grad = {f: g for f, g in grad.items() if f in trainable}
        logger.debug("Gradient: %s", grad)

        rate = self.eta / (self.epoch ** 2) / example.length()
        logger.debug("rate %g", rate)

        lock = getattr(params, 'lock', self._update_lock)
        with lock:
            for f, g in grad.items():
                if g > 0:
                    rate = self._clip_rate(rate, params.get(f, 0.0), g)

            updated = {f: params.get(f, 0.0) - rate * g for f, g in grad.items()}
            negative = {f: w for f, w in updated.items() if w < 0}
            if negative:
                raise NegativeWeightError(
                    f"Parameter weights can't be negative after update: {negative}"
                )
            params.update(updated)

        return rate

    @staticmethod
    def _clip_rate(rate: float, weight: float, g: float) -> float:
        """Largest rate <= the given one with weight - rate * g >= 0 in floating point."""
        rate = min(rate, weight / g)
        while rate > 0 and rate * g > weight:
            rate = math.nextafter(rate, 0.0)
        return rate

    def average_loss(self, params: Dict[str, float], examples: Iterable) -> float:
        """
        Mean over examples of loss / example.length().

        Returns NaN for an empty collection of examples.
        """
        total_loss = 0.0
        num_examples = 0
        for example in examples:
            add_default_weights(example.graph, params, self.rng)
            total_loss += self.empirical_loss(params, example) / example.length()
            num_examples += 1

        if num_examples == 0:
            logger.warning("average_loss called with no examples; returning NaN")
            return float('nan')

        return total_loss / num_examples

    def train_epoch(
        self,
        params: Dict[str, float],
        examples: Sequence,
        num_workers: int = 1,
        shuffle: bool = True
    ) -> Dict[str, float]:
        """
        Train on every example once at the current epoch's rate.

        Args:
            params: Parameter vector, updated in place
            examples: Training examples
            num_workers: Threads to run examples on (1 = sequential)
            shuffle: Whether to shuffle example order

        Returns:
            Dictionary with epoch metrics
        """
        order: List = list(examples)
        if shuffle:
            self.rng.shuffle(order)

        if num_workers > 1 and len(order) > 1:
            # new features are inserted before any worker iterates params
            for graph in {id(ex.graph): ex.graph for ex in order}.values():
                add_default_weights(graph, params, self.rng)

            workers = min(num_workers, len(order))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(self.train_on_example, params, ex) for ex in order]
                rates = [future.result() for future in futures]
        else:
            rates = [self.train_on_example(params, ex) for ex in order]

        return {
            'loss': self.average_loss(params, order),
            'mean_rate': sum(rates) / len(rates) if rates else 0.0,
            'num_examples': len(order),
        }

    def train(
        self,
        params: Dict[str, float],
        examples: Sequence,
        num_epochs: int = NUM_EPOCHS,
        num_workers: int = 1,
        training_logger: Optional[TrainingLogger] = None,
        checkpoint: Optional[ParameterCheckpoint] = None
    ) -> float:
        """
        Full training loop.

        Args:
            params: Parameter vector, updated in place
            examples: Training examples
            num_epochs: Number of epochs (always run to completion)
            num_workers: Threads per epoch
            training_logger: Optional logger for epoch metrics
            checkpoint: Optional callback that saves the parameter vector

        Returns:
            Average loss after the last epoch
        """
        check_nonnegative(params)

        final_loss = float('nan')
        for _ in range(num_epochs):
            epoch = self.epoch
            if training_logger is not None:
                training_logger.start_epoch(epoch)

            metrics = self.train_epoch(params, examples, num_workers=num_workers)
            final_loss = metrics['loss']

            if training_logger is not None:
                training_logger.end_epoch()
                training_logger.log_epoch(epoch, metrics)
            if checkpoint is not None:
                checkpoint.on_epoch_end(epoch, params, final_loss)

            self.epoch += 1

        if training_logger is not None:
            training_logger.save_final({'final_loss': final_loss, 'epochs': num_epochs})

        return final_loss


__all__ = ['SRWTrainer', 'NUM_EPOCHS']
