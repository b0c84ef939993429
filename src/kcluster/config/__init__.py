"""Configuration management with Pydantic validation."""

from __future__ import annotations

from kcluster.config.loader import ConfigLoader, default_config, load_config
from kcluster.config.models import (
    ClusteringConfig,
    Config,
    DataConfig,
    ExperimentConfig,
    LoggingConfig,
)
from kcluster.config.utils import compute_config_hash, validate_config_reproducibility

__all__ = [
    "Config",
    "ClusteringConfig",
    "DataConfig",
    "LoggingConfig",
    "ExperimentConfig",
    "ConfigLoader",
    "load_config",
    "default_config",
    "compute_config_hash",
    "validate_config_reproducibility",
]
