"""
I/O utilities for the register allocation GA.

Handles lifetime CSV parsing, coloring and history export, and run summary
sidecar files.
"""

import csv
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml

from interference.config_loader import load_lifetime_table as load_yaml_lifetime_table
from interference.lifetime import Lifetime, LifetimeTable, VarId


def load_lifetime_csv(
    csv_path: Union[str, Path],
    horizon: Optional[int] = None
) -> LifetimeTable:
    """
    Load a lifetime CSV file into a LifetimeTable.

    CSV format:
        var,t_def,t_use
        a,0,2
        b,1,3
        ...

    Args:
        csv_path: Path to CSV file
        horizon: Last valid cycle (defaults to the largest t_use)

    Returns:
        Validated LifetimeTable

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If CSV format is invalid
        LifetimeError: If a lifetime is invalid or out of bounds
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    lifetimes = []
    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)

        if not all(col in (reader.fieldnames or []) for col in ['var', 't_def', 't_use']):
            raise ValueError(f"Invalid CSV format in {csv_path}. Expected columns: var,t_def,t_use")

        for line, row in enumerate(reader, start=2):
            try:
                t_def = int(row['t_def'])
                t_use = int(row['t_use'])
            except ValueError:
                raise ValueError(f"Invalid t_def,t_use ticks in {csv_path} line {line}")
            lifetimes.append(Lifetime(row['var'], t_def, t_use))

    if not lifetimes:
        raise ValueError(f"CSV file is empty (no lifetimes): {csv_path}")

    if horizon is None:
        horizon = max(lifetime.t_use for lifetime in lifetimes)

    return LifetimeTable(horizon, lifetimes)


def load_lifetime_table(
    path: Union[str, Path],
    horizon: Optional[int] = None
) -> LifetimeTable:
    """Load a lifetime table from CSV or YAML, chosen by file suffix"""
    path = Path(path)
    if path.suffix.lower() in ('.yaml', '.yml'):
        if not path.exists():
            raise FileNotFoundError(f"Lifetime table not found: {path}")
        return load_yaml_lifetime_table(str(path), horizon)
    return load_lifetime_csv(path, horizon)


def _check_writable(output_path: Path, overwrite: bool) -> None:
    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")
    output_path.parent.mkdir(parents=True, exist_ok=True)


def save_coloring_csv(
    coloring: Dict[VarId, int],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save a coloring as var,color,register rows sorted by color.

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)
    _check_writable(output_path, overwrite)

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['var', 'color', 'register'])
        for var_id, color in sorted(coloring.items(), key=lambda item: (item[1], str(item[0]))):
            writer.writerow([var_id, color, f"R{color}"])

    return output_path


def save_history_csv(
    history: List[Dict[str, int]],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """Save per-generation statistics (generation, best, worst, population)"""
    output_path = Path(output_path)
    _check_writable(output_path, overwrite)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=['generation', 'best_phene', 'worst_phene', 'population'])
        writer.writeheader()
        for record in history:
            writer.writerow(record)

    return output_path


def save_metadata(
    metadata: dict,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save metadata to YAML sidecar file.

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)
    _check_writable(output_path, overwrite)

    with open(output_path, 'w') as f:
        yaml.dump(metadata, f, default_flow_style=False, sort_keys=False)

    return output_path


def save_text(text: str, output_path: Union[str, Path], overwrite: bool = False) -> Path:
    output_path = Path(output_path)
    _check_writable(output_path, overwrite)
    output_path.write_text(text + "\n")
    return output_path
