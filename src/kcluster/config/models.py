"""Pydantic models for configuration validation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from kcluster.clustering.functions import AGGREGATES, DISTANCES
from kcluster.clustering.interface import EmptyClusterPolicy


class ClusteringConfig(BaseModel):
    """K-Means configuration."""

    n_clusters: int = Field(3, gt=0)
    max_iter: int = Field(300, gt=0)
    seed: Optional[int] = Field(42, ge=0)
    empty_cluster_policy: EmptyClusterPolicy = EmptyClusterPolicy.RESEED
    distance: str = "euclidean"
    aggregate: str = "mean"

    @field_validator('distance')
    @classmethod
    def validate_distance(cls, v: str) -> str:
        """Ensure the distance is registered."""
        if v not in DISTANCES:
            raise ValueError(f"distance must be one of {sorted(DISTANCES)}")
        return v

    @field_validator('aggregate')
    @classmethod
    def validate_aggregate(cls, v: str) -> str:
        """Ensure the aggregate is registered."""
        if v not in AGGREGATES:
            raise ValueError(f"aggregate must be one of {sorted(AGGREGATES)}")
        return v

    @model_validator(mode='after')
    def validate_function_pair(self) -> 'ClusteringConfig':
        """Series inputs need the series distance and aggregate together."""
        if (self.distance == "series") != (self.aggregate == "series_mean"):
            raise ValueError("distance 'series' must be paired with aggregate 'series_mean'")
        return self


class DataConfig(BaseModel):
    """Input data configuration."""

    path: Optional[Path] = None
    columns: Optional[List[str]] = None
    index_col: Optional[str] = None
    as_series: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    json_format: bool = False
    file: Optional[Path] = None

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is a standard logging level name."""
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown logging level: {v}")
        return v


class ExperimentConfig(BaseModel):
    """Experiment tracking configuration."""

    name: str = "kmeans"
    config_hash: Optional[str] = None


class Config(BaseModel):
    """Main configuration."""

    clustering: ClusteringConfig = Field(default_factory=ClusteringConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    experiment: ExperimentConfig = Field(default_factory=ExperimentConfig)

    @model_validator(mode='after')
    def validate_series_input(self) -> 'Config':
        """The series distance only works on rows loaded as Series."""
        if self.clustering.distance == "series" and not self.data.as_series:
            raise ValueError("distance 'series' requires data.as_series=true")
        return self
