"""
CLI module for the register allocation GA.

Handles run configuration loading, validation, and dispatching.
"""

from typing import Dict, Any
from pathlib import Path
import yaml

from .genetic_algorithm import validate_ratio


class ConfigValidationError(Exception):
    """Raised when run configuration is invalid."""
    pass


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    return config


def _require_int(section: Dict[str, Any], key: str, minimum: int) -> None:
    value = section.get(key)
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        kind = "positive" if minimum > 0 else "non-negative"
        raise ConfigValidationError(f"'ga.{key}' must be a {kind} integer, got: {value}")


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    for field in ['input', 'ga', 'output']:
        if field not in config:
            raise ConfigValidationError(f"Missing required field: '{field}'")
        if not isinstance(config[field], dict):
            raise ConfigValidationError(f"'{field}' must be a dictionary")

    # Validate input section
    if 'lifetimes' not in config['input']:
        raise ConfigValidationError("Missing required field: 'input.lifetimes'")

    lifetimes_path = Path(config['input']['lifetimes'])
    if not lifetimes_path.exists():
        raise ConfigValidationError(f"Lifetime table not found: {lifetimes_path}")

    cycles = config['input'].get('cycles')
    if cycles is not None and (not isinstance(cycles, int) or cycles < 0):
        raise ConfigValidationError(f"'input.cycles' must be a non-negative integer, got: {cycles}")

    # Validate GA section
    ga_config = config['ga']
    _require_int(ga_config, 'population_size', 1)
    _require_int(ga_config, 'selection_size', 1)
    _require_int(ga_config, 'generations', 0)

    for key in ['mutation_ratio', 'cross_ratio']:
        if key not in ga_config:
            raise ConfigValidationError(f"Missing required field: 'ga.{key}'")
        try:
            validate_ratio(ga_config[key], key)
        except ValueError as e:
            raise ConfigValidationError(str(e))

    seed = ga_config.get('random_seed')
    if seed is not None and (not isinstance(seed, int) or seed < 0):
        raise ConfigValidationError(f"'ga.random_seed' must be a non-negative integer, got: {seed}")

    if 'report_every' in ga_config:
        _require_int(ga_config, 'report_every', 1)

    # Validate output section
    if 'root' not in config['output']:
        raise ConfigValidationError("Missing required field: 'output.root'")


def run_from_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration and execute the evolution run.

    This is the main entry point called by ga_cli.py.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Run summary dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
        LifetimeError: If the lifetime table is rejected
    """
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)

    print(f"Validating configuration...")
    validate_run_config(config)

    from .orchestration import run_evolution
    summary = run_evolution(config)

    print("\nRun completed successfully!")
    return summary
