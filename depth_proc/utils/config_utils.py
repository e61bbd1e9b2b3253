#!/usr/bin/env python3
"""Load node parameter profiles from YAML and validate them."""

import math
from pathlib import Path
from typing import Any, Dict, List, Union
import yaml
from depth_proc.core.disparity import DisparityConfig
from depth_proc.core.errors import ConfigurationError
from depth_proc.core.point_cloud import PointCloudConfig

def resolve_config_path(config_file: str, package: str = "depth_proc") -> Path:
    """Absolute paths are used as is; bare names are looked up in <share>/config."""
    path = Path(config_file)
    if path.is_absolute():
        return path
    from ament_index_python.packages import get_package_share_directory

    return Path(get_package_share_directory(package)) / "config" / config_file

def load_profile(path: Union[str, Path], section: str) -> Dict[str, Any]:
    """Return the mapping stored under ``section`` in a YAML file.

    A missing section yields an empty dict so nodes fall back to their
    parameter defaults.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")
    with open(path, "r") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    profile = cfg.get(section, {}) or {}
    if not isinstance(profile, dict):
        raise ConfigurationError(f"Section '{section}' in {path} must be a mapping")
    return profile

def validate_disparity_config(cfg: DisparityConfig) -> List[str]:
    errors = []
    if cfg.queue_size < 1:
        errors.append(f"queue_size must be at least 1, got {cfg.queue_size}")
    if cfg.min_range < 0 or math.isnan(cfg.min_range):
        errors.append(f"min_range must be non-negative, got {cfg.min_range}")
    if not cfg.max_range > cfg.min_range:
        errors.append(f"max_range must exceed min_range, got {cfg.max_range} <= {cfg.min_range}")
    if not cfg.delta_d > 0:
        errors.append(f"delta_d must be positive, got {cfg.delta_d}")
    return errors

def validate_point_cloud_config(cfg: PointCloudConfig) -> List[str]:
    errors = []
    if cfg.queue_size < 1:
        errors.append(f"queue_size must be at least 1, got {cfg.queue_size}")
    if not cfg.slop >= 0:
        errors.append(f"slop must be non-negative, got {cfg.slop}")
    if math.isnan(cfg.invalid_depth):
        errors.append("invalid_depth must be a number")
    return errors

def disparity_config_from_dict(values: Dict[str, Any]) -> DisparityConfig:
    defaults = DisparityConfig()
    try:
        cfg = DisparityConfig(
            queue_size=int(values.get("queue_size", defaults.queue_size)),
            min_range=float(values.get("min_range", defaults.min_range)),
            max_range=float(values.get("max_range", defaults.max_range)),
            delta_d=float(values.get("delta_d", defaults.delta_d)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid disparity parameter: {e}") from e
    errors = validate_disparity_config(cfg)
    if errors:
        raise ConfigurationError("; ".join(errors))
    return cfg

def point_cloud_config_from_dict(values: Dict[str, Any]) -> PointCloudConfig:
    defaults = PointCloudConfig()
    try:
        cfg = PointCloudConfig(
            queue_size=int(values.get("queue_size", defaults.queue_size)),
            slop=float(values.get("slop", defaults.slop)),
            invalid_depth=float(values.get("invalid_depth", defaults.invalid_depth)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid point cloud parameter: {e}") from e
    errors = validate_point_cloud_config(cfg)
    if errors:
        raise ConfigurationError("; ".join(errors))
    return cfg
