"""
Configuration Loading System

Loads YAML lifetime tables and converts them to the data structures used by
the conflict graph builder.

YAML format:
    cycles: 5
    lifetimes:
      a: [0, 2]
      b: [1, 3]
"""

import yaml
from typing import Dict, List, Any, Optional

from .lifetime import LifetimeTable


class ConfigurationError(Exception):
    """Raised when configuration is invalid"""
    pass


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML file"""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigurationError(f"Configuration file is empty: {config_path}")
    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate lifetime table configuration and return list of issues

    Returns:
        List of validation error messages (empty if valid)
    """
    issues = []

    if "lifetimes" not in config:
        issues.append("Missing required section: lifetimes")
    elif not isinstance(config["lifetimes"], dict) or not config["lifetimes"]:
        issues.append("'lifetimes' must be a non-empty mapping of variable -> [t_def, t_use]")
    else:
        for var_id, interval in config["lifetimes"].items():
            if not isinstance(interval, (list, tuple)) or len(interval) != 2:
                issues.append(f"Lifetime of {var_id} must be a [t_def, t_use] pair")
            elif not all(isinstance(tick, int) for tick in interval):
                issues.append(f"Lifetime of {var_id} must use integer ticks")

    cycles = config.get("cycles")
    if cycles is not None and (not isinstance(cycles, int) or cycles < 0):
        issues.append("'cycles' must be a non-negative integer")

    return issues


def create_lifetime_table_from_config(
    config: Dict[str, Any],
    horizon: Optional[int] = None
) -> LifetimeTable:
    """
    Create a validated LifetimeTable from a parsed YAML table.

    Args:
        config: Parsed YAML with 'lifetimes' and optional 'cycles'
        horizon: Overrides 'cycles' when given

    Raises:
        ConfigurationError: If the structure is malformed
        LifetimeError: If a lifetime is invalid or out of bounds
    """
    issues = validate_config(config)
    if issues:
        raise ConfigurationError("; ".join(issues))

    intervals = {var_id: tuple(interval) for var_id, interval in config["lifetimes"].items()}

    if horizon is None:
        horizon = config.get("cycles")
    if horizon is None:
        horizon = max(t_use for _, t_use in intervals.values())

    return LifetimeTable.from_mapping(horizon, intervals)


def load_lifetime_table(config_path: str, horizon: Optional[int] = None) -> LifetimeTable:
    """Load a YAML lifetime table from disk"""
    return create_lifetime_table_from_config(load_config(config_path), horizon)
