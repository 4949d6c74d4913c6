"""
Configuration management for skeleton cleaning.

Loads YAML configuration over dataclass defaults.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml


LENGTH_METHODS = ("chain", "linear")


@dataclass
class CleaningConfig:
    """Configuration for short edge cleaning."""
    threshold: Optional[float] = None  # required, no implicit default
    calibration: List[float] = field(default_factory=lambda: [1.0, 1.0, 1.0])
    iterative_pruning: bool = False
    use_clusters: bool = True
    length_method: str = "chain"  # "chain" or "linear"

    def validate(self):
        """Fail fast on values the cleaner cannot run with."""
        if self.threshold is None:
            raise ValueError("Cleaning threshold is required")
        if self.length_method not in LENGTH_METHODS:
            raise ValueError(f"Unknown length method: {self.length_method}")
        from skelclean.cleaning.calibration import validate_calibration
        validate_calibration(self.calibration)


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class DebugConfig:
    """Configuration for debug artifact generation."""
    enabled: bool = False


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""
    cleaning: CleaningConfig = field(default_factory=CleaningConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = PipelineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    if "cleaning" in yaml_data:
        for key, value in yaml_data["cleaning"].items():
            if hasattr(config.cleaning, key):
                setattr(config.cleaning, key, value)

    if "tracing" in yaml_data:
        for key, value in yaml_data["tracing"].items():
            if hasattr(config.tracing, key):
                setattr(config.tracing, key, value)

    if "debug" in yaml_data:
        for key, value in yaml_data["debug"].items():
            if hasattr(config.debug, key):
                setattr(config.debug, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = PipelineConfig()

    yaml_data = {
        "cleaning": {
            "threshold": config.cleaning.threshold,
            "calibration": list(config.cleaning.calibration),
            "iterative_pruning": config.cleaning.iterative_pruning,
            "use_clusters": config.cleaning.use_clusters,
            "length_method": config.cleaning.length_method,
        },
        "tracing": {
            "enabled": config.tracing.enabled,
            "level": config.tracing.level,
        },
        "debug": {
            "enabled": config.debug.enabled,
        },
    }

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
