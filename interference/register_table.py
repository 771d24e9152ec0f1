"""
Register Table Export

Lays a finished coloring out as registers over clock cycles, one cell per
tick, and exports the table as text or CSV.
"""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from .lifetime import LifetimeTable, VarId


@dataclass
class RegisterRow:
    """Occupancy of one register across all cycles"""
    reg_id: int
    cycle_cells: List[Optional[VarId]]

    @property
    def name(self) -> str:
        return f"R{self.reg_id}"

    def variables(self) -> List[VarId]:
        """Distinct variables held by this register, in cycle order"""
        seen = []
        for var_id in self.cycle_cells:
            if var_id is not None and var_id not in seen:
                seen.append(var_id)
        return seen

    def __str__(self) -> str:
        cells = "\t".join("-" if var_id is None else str(var_id) for var_id in self.cycle_cells)
        return f"{self.name}:\t[ {cells} ]"


def build_register_table(coloring: Dict[VarId, int], table: LifetimeTable) -> List[RegisterRow]:
    """
    Bind each color to a register and fill its cycle cells.

    Args:
        coloring: Mapping var_id -> color index
        table: Lifetime table the coloring was computed for

    Returns:
        Register rows sorted by register id

    Raises:
        KeyError: If a colored variable has no lifetime in the table
        ValueError: If two variables bound to one register are live at the same tick
    """
    binding: Dict[int, List[VarId]] = {}
    for var_id, color in coloring.items():
        binding.setdefault(color, []).append(var_id)

    rows = []
    for reg_id in sorted(binding):
        cycle_cells: List[Optional[VarId]] = [None] * table.cycles

        for var_id in binding[reg_id]:
            lifetime = table[var_id]
            for cycle in range(lifetime.t_def, lifetime.t_use + 1):
                if cycle_cells[cycle] is not None:
                    raise ValueError(
                        f"R{reg_id} holds both {cycle_cells[cycle]} and {var_id} at cycle {cycle}"
                    )
                cycle_cells[cycle] = var_id

        rows.append(RegisterRow(reg_id=reg_id, cycle_cells=cycle_cells))

    return rows


def format_register_table(rows: List[RegisterRow]) -> str:
    return "\n".join(str(row) for row in rows)


def export_register_csv(rows: List[RegisterRow], output_path: Union[str, Path]) -> Path:
    """Write one row per register with one column per cycle"""
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    cycles = len(rows[0].cycle_cells) if rows else 0

    with open(output_file, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['register'] + [f'c{cycle}' for cycle in range(cycles)])

        for row in rows:
            writer.writerow([row.name] + ['' if var_id is None else var_id for var_id in row.cycle_cells])

    return output_file
