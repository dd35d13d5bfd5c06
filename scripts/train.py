#!/usr/bin/env python3
"""
Supervised Random Walk Training Script.

This script learns edge-feature weights by SGD on labelled queries.

Usage:
    python scripts/train.py --config config/default.yaml
    python scripts/train.py --graph data/graph.json --examples data/examples.json
    python scripts/train.py --mock --epochs 10 --workers 4
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config import load_config
from srw.data import create_mock_examples, load_examples, load_graph
from srw.graph import AnnotatedGraph
from srw.model import ParameterVector, add_default_weights
from srw.training import ParameterCheckpoint, SRWTrainer, TrainingLogger
from srw.utils import compute_graph_statistics, evaluate_ranking


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Train supervised random walk parameters')

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to configuration file (default: config/default.yaml)'
    )
    parser.add_argument(
        '--graph', type=str, default=None,
        help='Graph JSON file'
    )
    parser.add_argument(
        '--examples', type=str, default=None,
        help='Examples JSON file'
    )
    parser.add_argument(
        '--mock', action='store_true',
        help='Train on a synthetic graph and examples'
    )
    parser.add_argument(
        '--epochs', type=int, default=None,
        help='Number of epochs (overrides config)'
    )
    parser.add_argument(
        '--lr', type=float, default=None,
        help='Learning rate eta (overrides config)'
    )
    parser.add_argument(
        '--steps', type=int, default=None,
        help='Walk length (overrides config)'
    )
    parser.add_argument(
        '--workers', type=int, default=None,
        help='Threads per epoch (overrides config)'
    )
    parser.add_argument(
        '--init-params', type=str, default=None,
        help='Parameter JSON to start from'
    )
    parser.add_argument(
        '--output', type=str, default='params.json',
        help='Where to write the trained parameters'
    )
    parser.add_argument(
        '--verbose', action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args()


def load_data(args, config):
    """Load graph and examples from files or generate mock data."""
    if args.mock or not (args.graph and args.examples):
        if not args.mock:
            print("No --graph/--examples given, using mock data")
        mock_config = config.get('mock', {})
        graph = AnnotatedGraph.create_mock(
            num_nodes=mock_config.get('num_nodes', 50),
            num_features=mock_config.get('num_features', 4),
            out_degree=mock_config.get('out_degree', 3),
            dead_end_fraction=mock_config.get('dead_end_fraction', 0.1),
            seed=config['training'].get('seed', 42)
        )
        examples = create_mock_examples(
            graph,
            num_examples=mock_config.get('num_examples', 20),
            steps=config['walk'].get('steps', 10),
            seed=config['training'].get('seed', 42)
        )
        return graph, examples

    print("Loading data...")
    graph = load_graph(args.graph)
    examples = load_examples(args.examples, graph)
    return graph, examples


def main():
    """Main training function."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    print("=" * 60)
    print("Supervised Random Walk Training")
    print("=" * 60)

    config = load_config(args.config)
    config.setdefault('walk', {})
    config.setdefault('training', {})

    # Override config with command line args
    if args.epochs is not None:
        config['training']['epochs'] = args.epochs
    if args.lr is not None:
        config['training']['learning_rate'] = args.lr
    if args.steps is not None:
        config['walk']['steps'] = args.steps
    if args.workers is not None:
        config['training']['num_workers'] = args.workers

    graph, examples = load_data(args, config)
    if not examples:
        print("No training examples; nothing to do")
        return 1

    stats = compute_graph_statistics(graph)
    print(f"  Nodes: {stats['num_nodes']}")
    print(f"  Edges: {stats['num_edges']}")
    print(f"  Features: {stats['num_features']}")
    print(f"  Nodes without outlinks: {stats['no_outlinks']}")
    print(f"  Examples: {len(examples)}")

    trainer = SRWTrainer.from_config(config)

    if args.init_params:
        print(f"\nStarting from parameters: {args.init_params}")
        params = ParameterVector.from_json(args.init_params)
    else:
        params = ParameterVector()
    add_default_weights(graph, params, trainer.rng)

    before = evaluate_ranking(trainer, params, examples)
    print(f"\nInitial mean AUC: {before['mean_auc']:.4f}")

    train_config = config['training']
    paths_config = config.get('paths', {})
    num_epochs = train_config.get('epochs', 5)

    training_logger = TrainingLogger(log_dir=paths_config.get('logs', 'logs'))
    checkpoint = ParameterCheckpoint(save_dir=paths_config.get('checkpoints', 'checkpoints'))

    print(f"\nStarting training for {num_epochs} epochs...")
    print("-" * 60)
    start_time = time.time()

    final_loss = trainer.train(
        params,
        examples,
        num_epochs=num_epochs,
        num_workers=train_config.get('num_workers', 1),
        training_logger=training_logger,
        checkpoint=checkpoint
    )

    print("-" * 60)
    print(f"Final average loss: {final_loss:.6g} ({time.time() - start_time:.1f}s)")

    after = evaluate_ranking(trainer, params, examples)
    print(f"Final mean AUC: {after['mean_auc']:.4f}")

    params.to_json(args.output)
    print(f"Parameters saved to: {args.output}")

    print("\nLearned weights:")
    for name, value in sorted(params.items()):
        print(f"  {name}: {value:.4f}")

    print("\n" + "=" * 60)
    print("Training complete!")
    print("=" * 60)
    return 0


if __name__ == '__main__':
    sys.exit(main())
