"""Configuration utilities including hashing and reproducibility checks."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Dict, List, Set, Tuple

import yaml
from omegaconf import DictConfig, OmegaConf


# Keys to exclude from config hash (volatile/system-specific)
VOLATILE_KEYS = {
    "experiment.config_hash",
    "logging",
    "hydra",
}


def flatten_dict(
    d: Dict[str, Any],
    parent_key: str = "",
    sep: str = ".",
) -> Dict[str, Any]:
    """Flatten nested dictionary with dot-separated keys.

    Args:
        d: Dictionary to flatten
        parent_key: Parent key prefix
        sep: Separator for nested keys

    Returns:
        Flattened dictionary
    """
    items: List[Tuple[str, Any]] = []

    for k, v in d.items():
        new_key = f"{parent_key}{sep}{k}" if parent_key else k

        if isinstance(v, dict):
            items.extend(flatten_dict(v, new_key, sep).items())
        elif isinstance(v, (list, tuple)):
            items.append((new_key, str(v)))
        else:
            items.append((new_key, v))

    return dict(items)


def compute_config_hash(
    config: Dict[str, Any] | DictConfig,
    exclude_keys: Set[str] | None = None,
    hash_length: int = 8,
) -> str:
    """Compute deterministic hash of configuration.

    Args:
        config: Configuration dictionary or DictConfig
        exclude_keys: Additional keys to exclude from hash
        hash_length: Number of hash characters to return

    Returns:
        Truncated SHA256 hash of configuration
    """
    if isinstance(config, DictConfig):
        config = OmegaConf.to_container(config, resolve=True)

    flat_config = flatten_dict(config)

    all_exclude = VOLATILE_KEYS.copy()
    if exclude_keys:
        all_exclude.update(exclude_keys)

    filtered_config = {
        k: v for k, v in flat_config.items()
        if not any(k == ex or k.startswith(ex + ".") for ex in all_exclude)
    }

    config_str = json.dumps(filtered_config, sort_keys=True, default=str)

    return hashlib.sha256(config_str.encode()).hexdigest()[:hash_length]


def validate_config_reproducibility(
    config: Dict[str, Any] | DictConfig,
) -> Tuple[bool, List[str]]:
    """Check if configuration is reproducible.

    Args:
        config: Configuration to validate

    Returns:
        Tuple of (is_reproducible, list_of_issues)
    """
    issues = []

    if isinstance(config, DictConfig):
        config = OmegaConf.to_container(config, resolve=True)

    clustering = config.get('clustering') or {}
    if clustering.get('seed') is None:
        issues.append("No random seed specified for centroid initialization")

    data = config.get('data') or {}
    path = data.get('path')
    if path and not Path(str(path)).is_absolute():
        issues.append("Relative path in data.path")

    return len(issues) == 0, issues


def save_config_with_hash(
    config: Dict[str, Any] | DictConfig,
    output_dir: str | Path,
) -> Path:
    """Save configuration with hash in filename.

    Args:
        config: Configuration to save
        output_dir: Directory to save to

    Returns:
        Path to saved configuration file
    """
    if isinstance(config, DictConfig):
        config = OmegaConf.to_container(config, resolve=True)
    config = json.loads(json.dumps(config, default=str))

    config_hash = compute_config_hash(config)
    config.setdefault('experiment', {})['config_hash'] = config_hash

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    config_file = output_dir / f"config_{config_hash}.yaml"
    with open(config_file, 'w') as f:
        yaml.safe_dump(config, f, default_flow_style=False)

    return config_file
