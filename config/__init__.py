"""
Configuration module for supervised random walk training.

This module loads the YAML configuration holding walk, training, loss and
path settings.
"""

from pathlib import Path
import yaml
from typing import Dict, Any, Optional


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, loads default.yaml

    Returns:
        Configuration dictionary
    """
    if config_path is None:
        config_path = Path(__file__).parent / "default.yaml"
    else:
        config_path = Path(config_path)

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    for section in ('walk', 'training', 'loss', 'paths'):
        if not isinstance(config.get(section, {}), dict):
            raise ValueError(f"Config section '{section}' in {config_path} must be a mapping")

    return config


def get_default_config() -> Dict[str, Any]:
    """Get default configuration dictionary."""
    return load_config()


__all__ = ['load_config', 'get_default_config']
