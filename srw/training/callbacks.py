"""
Training Callbacks Module.

This module implements callbacks for training monitoring:
- TrainingLogger: Log metrics and training progress
- ParameterCheckpoint: Save the parameter vector during training
"""

import json
import time
from pathlib import Path
from typing import Dict, List, Mapping, Optional


class TrainingLogger:
    """
    Log training metrics and progress.

    Provides:
    - Console logging
    - JSON metrics file
    - Training time tracking

    Example:
        >>> logger = TrainingLogger(log_dir='logs', log_every=1)
        >>>
        >>> for epoch in range(1, 6):
        ...     logger.start_epoch(epoch)
        ...     metrics = trainer.train_epoch(params, examples)
        ...     logger.end_epoch()
        ...     logger.log_epoch(epoch, metrics)
        >>>
        >>> logger.save_final()
    """

    def __init__(
        self,
        log_dir: str = 'logs',
        log_every: int = 1,
        verbose: bool = True
    ):
        """
        Initialize logger.

        Args:
            log_dir: Directory for log files
            log_every: Print to console every N epochs
            verbose: Whether to print to console
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_every = log_every
        self.verbose = verbose

        self.epoch_metrics: List[Dict] = []
        self.start_time = time.time()
        self.epoch_times: List[float] = []

        self.current_epoch = 0
        self.epoch_start_time = None

    def start_epoch(self, epoch: int):
        """Mark start of an epoch."""
        self.current_epoch = epoch
        self.epoch_start_time = time.time()

    def end_epoch(self):
        """Mark end of an epoch."""
        if self.epoch_start_time is not None:
            self.epoch_times.append(time.time() - self.epoch_start_time)

    def log_epoch(self, epoch: int, metrics: Mapping[str, float]):
        """
        Log metrics for an epoch.

        Args:
            epoch: Epoch number (1-based, as used for rate decay)
            metrics: Epoch metrics from SRWTrainer.train_epoch
        """
        record = {
            'epoch': epoch,
            'timestamp': time.time() - self.start_time,
            **metrics
        }
        self.epoch_metrics.append(record)

        if self.verbose and epoch % self.log_every == 0:
            self._print_epoch(epoch, metrics)

    def _print_epoch(self, epoch: int, metrics: Mapping[str, float]):
        """Print epoch summary to console."""
        parts = [f"Epoch {epoch:4d}"]

        for key, value in metrics.items():
            if isinstance(value, float):
                parts.append(f"{key}: {value:.6g}")
            else:
                parts.append(f"{key}: {value}")

        if self.epoch_times:
            parts.append(f"({self.epoch_times[-1]:.2f}s)")

        print(" | ".join(parts))

    def save_final(self, extra_info: Optional[Dict] = None):
        """
        Save final training log.

        Args:
            extra_info: Additional info to include in the summary
        """
        total_time = time.time() - self.start_time
        losses = [m['loss'] for m in self.epoch_metrics if 'loss' in m]

        summary = {
            'total_epochs': len(self.epoch_metrics),
            'total_time_seconds': total_time,
            'avg_epoch_time': sum(self.epoch_times) / len(self.epoch_times)
                             if self.epoch_times else 0,
            'final_metrics': self.epoch_metrics[-1] if self.epoch_metrics else {},
            'best_loss': min(losses) if losses else None,
        }

        if extra_info:
            summary.update(extra_info)

        with open(self.log_dir / 'epoch_metrics.json', 'w') as f:
            json.dump(self.epoch_metrics, f, indent=2)

        with open(self.log_dir / 'training_summary.json', 'w') as f:
            json.dump(summary, f, indent=2)

        if self.verbose:
            print(f"\nTraining complete in {total_time:.1f} seconds")
            print(f"Logs saved to {self.log_dir}")

    def get_metric_history(self, metric_name: str) -> List[float]:
        """Get history of a specific metric."""
        return [m[metric_name] for m in self.epoch_metrics if metric_name in m]


class ParameterCheckpoint:
    """
    Save the parameter vector during training.

    Saves whenever the average loss improves, and optionally every N epochs.

    Example:
        >>> checkpoint = ParameterCheckpoint(save_dir='checkpoints', save_every=2)
        >>> trainer.train(params, examples, checkpoint=checkpoint)
    """

    def __init__(
        self,
        save_dir: str = 'checkpoints',
        save_best: bool = True,
        save_every: Optional[int] = None,
        filename_prefix: str = 'params'
    ):
        """
        Initialize checkpoint callback.

        Args:
            save_dir: Directory to save checkpoints
            save_best: Whether to save the lowest-loss parameters
            save_every: Save every N epochs (None = only best)
            filename_prefix: Prefix for checkpoint files
        """
        self.save_dir = Path(save_dir)
        self.save_dir.mkdir(parents=True, exist_ok=True)

        self.save_best = save_best
        self.save_every = save_every
        self.filename_prefix = filename_prefix

        self.best_value = float('inf')
        self.best_epoch = 0

    @property
    def best_path(self) -> Path:
        return self.save_dir / f'{self.filename_prefix}_best.json'

    def on_epoch_end(self, epoch: int, params: Mapping[str, float], value: float) -> bool:
        """
        Called at end of each epoch.

        Args:
            epoch: Current epoch
            params: Parameter vector to save
            value: Average loss for comparison

        Returns:
            True if a checkpoint was saved
        """
        saved = False

        if value < self.best_value:
            self.best_value = value
            self.best_epoch = epoch
            if self.save_best:
                self._save(params, self.best_path, epoch, value)
                saved = True

        if self.save_every and epoch % self.save_every == 0:
            path = self.save_dir / f'{self.filename_prefix}_epoch_{epoch}.json'
            self._save(params, path, epoch, value)
            saved = True

        return saved

    def _save(self, params: Mapping[str, float], path: Path, epoch: int, value: float):
        snapshot = params.snapshot() if hasattr(params, 'snapshot') else dict(params)
        with open(path, 'w') as f:
            json.dump({
                'epoch': epoch,
                'loss': value,
                'params': snapshot,
            }, f, indent=2, sort_keys=True)

    def load_best(self) -> Dict[str, float]:
        """Load the parameters from the best checkpoint."""
        with open(self.best_path, 'r') as f:
            return json.load(f)['params']
