"""
Training Module for Supervised Random Walks.

This module implements SGD training of the edge-feature parameters:
- Nonnegativity-safe single-example updates
- Average loss evaluation
- Epoch loop with logging and checkpointing

Components:
    SRWTrainer: Trainer / session holding walk and learning-rate settings
    TrainingLogger: Logging and metrics tracking
    ParameterCheckpoint: Save the parameter vector during training

Example:
    >>> from srw.model import ParameterVector, create_loss
    >>> from srw.training import SRWTrainer
    >>>
    >>> trainer = SRWTrainer(loss_strategy=create_loss('pairwise'), steps=10)
    >>> params = ParameterVector()
    >>> trainer.train(params, examples, num_epochs=5)
"""

from .trainer import SRWTrainer, NUM_EPOCHS
from .callbacks import TrainingLogger, ParameterCheckpoint

__all__ = [
    'SRWTrainer',
    'NUM_EPOCHS',
    'TrainingLogger',
    'ParameterCheckpoint',
]
