"""
Register timeline visualization.

Plots each register as a horizontal lane with one bar per variable lifetime
held in it.
"""

from typing import List, Optional, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .lifetime import LifetimeTable
from .register_table import RegisterRow


def plot_register_timeline(
    rows: List[RegisterRow],
    table: LifetimeTable,
    ax: plt.Axes = None,
    title: Optional[str] = None
) -> plt.Axes:
    """
    Draw registers against clock cycles.

    Args:
        rows: Register rows from build_register_table
        table: Lifetime table supplying each variable's interval
        ax: Axes to draw on (a new figure is created when omitted)
        title: Optional plot title

    Returns:
        The axes drawn on
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(max(6, table.cycles * 0.6), max(2, len(rows) * 0.6)))

    cmap = plt.get_cmap('tab20')

    for lane, row in enumerate(rows):
        for idx, var_id in enumerate(row.variables()):
            lifetime = table[var_id]
            ax.broken_barh(
                [(lifetime.t_def - 0.4, len(lifetime) - 0.2)],
                (lane - 0.35, 0.7),
                facecolors=cmap((lane + idx) % 20),
                edgecolor="black",
                linewidth=1
            )
            ax.text((lifetime.t_def + lifetime.t_use) / 2, lane, str(var_id),
                    ha='center', va='center', fontsize=8)

    ax.set_yticks(range(len(rows)))
    ax.set_yticklabels([row.name for row in rows])
    ax.set_xlim(-0.5, table.horizon + 0.5)
    ax.set_ylim(-0.5, len(rows) - 0.5)
    ax.invert_yaxis()
    ax.set_xlabel("Cycle")
    ax.set_ylabel("Register")
    ax.grid(True, axis='x', color="lightgray", linewidth=0.5, alpha=0.5)
    ax.set_title(title or f"Register allocation ({len(rows)} registers)")

    return ax


def save_register_timeline(
    rows: List[RegisterRow],
    table: LifetimeTable,
    save_path: str,
    figsize: Tuple[int, int] = None
) -> str:
    """Render the timeline to a PNG file and close the figure"""
    fig, ax = plt.subplots(figsize=figsize or (max(6, table.cycles * 0.6), max(2, len(rows) * 0.6)))
    plot_register_timeline(rows, table, ax)
    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return save_path
