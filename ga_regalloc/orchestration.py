"""
Orchestration module for the register allocation GA.

Drives a complete run: load the lifetime table, build the conflict graph,
evolve the population for the configured number of generations and write
the winning allocation to disk.
"""

from typing import Any, Dict, List
from pathlib import Path
import numpy as np

from interference.conflict_graph import ConflictGraph
from interference.register_table import (
    build_register_table,
    export_register_csv,
    format_register_table,
)
from .builder import ChromosomeBuilder
from .genetic_algorithm import GeneticAlgorithm
from .io_utils import (
    load_lifetime_table,
    save_coloring_csv,
    save_history_csv,
    save_metadata,
    save_text,
)


def population_statistics(ga: GeneticAlgorithm, generation: int) -> Dict[str, int]:
    """Best/worst phene and size of the live population"""
    phenes = [chromosome.phene for chromosome in ga.population]
    return {
        'generation': generation,
        'best_phene': min(phenes) if phenes else 0,
        'worst_phene': max(phenes) if phenes else 0,
        'population': len(phenes),
    }


def evolve(
    ga: GeneticAlgorithm,
    population_size: int,
    selection_size: int,
    generations: int,
    report_every: int = 0
) -> List[Dict[str, int]]:
    """
    Seed the population and run the generation loop.

    Args:
        ga: Orchestrator to drive
        population_size: Initial population size and survivor count per generation
        selection_size: Selection pool size per generation
        generations: Number of generations to run
        report_every: Print a progress line every N generations (0 disables)

    Returns:
        Per-generation statistics, generation 0 being the seeded population
    """
    ga.gen(population_size)
    history = [population_statistics(ga, 0)]

    for generation in range(1, generations + 1):
        ga.step(selection_size, population_size)
        history.append(population_statistics(ga, generation))

        if report_every and (generation % report_every == 0 or generation == generations):
            stats = history[-1]
            print(f"  Generation {generation}/{generations}: "
                  f"best={stats['best_phene']} worst={stats['worst_phene']} "
                  f"population={stats['population']}")

    return history


def run_evolution(run_config: Dict) -> Dict[str, Any]:
    """
    Evolve a register allocation for one lifetime table.

    Args:
        run_config: Validated run configuration dict from YAML

    Algorithm:
        1. Setup RNG (use ga.random_seed or draw one)
        2. Load and bounds-check the lifetime table
        3. Build conflict graph, chromosome builder and orchestrator
        4. Run the generation loop
        5. Pick the winner and lay it out as a register table
        6. Write coloring.csv, registers.txt, registers.csv, history.csv,
           summary.yaml and optionally registers.png

    Returns:
        Summary dictionary (also written as summary.yaml)
    """
    print("=" * 70)
    print("REGISTER ALLOCATION GA")
    print("=" * 70)

    ga_config = run_config['ga']

    # Setup RNG
    seed = ga_config.get('random_seed')
    if seed is None:
        seed = int(np.random.randint(0, 2**31))
    print(f"Random seed: {seed}")
    rng = np.random.default_rng(seed)

    # Load lifetimes
    lifetimes_path = run_config['input']['lifetimes']
    print(f"Loading lifetimes from: {lifetimes_path}")
    table = load_lifetime_table(lifetimes_path, run_config['input'].get('cycles'))
    print(f"Variables: {len(table)}, cycles: {table.cycles}")

    graph = ConflictGraph.build(table)
    print(f"Conflict graph: {len(graph)} vertices, {len(graph.edges())} edges")

    # Create output directory
    output_root = Path(run_config['output']['root'])
    overwrite = run_config['output'].get('overwrite', False)

    if output_root.exists() and not overwrite:
        raise FileExistsError(
            f"Output directory already exists: {output_root}\n"
            f"Set 'output.overwrite: true' in config to overwrite"
        )

    output_root.mkdir(parents=True, exist_ok=overwrite)
    print(f"Output directory: {output_root}\n")

    ga = GeneticAlgorithm(
        graph,
        ChromosomeBuilder(graph, rng),
        tuple(ga_config['mutation_ratio']),
        tuple(ga_config['cross_ratio']),
        rng
    )

    population_size = ga_config['population_size']
    selection_size = ga_config['selection_size']
    generations = ga_config['generations']
    print(f"Population: {population_size}, selection: {selection_size}, "
          f"generations: {generations}")
    print(f"Mutation ratio: {ga.mutation_ratio[0]}/{ga.mutation_ratio[1]}, "
          f"cross ratio: {ga.cross_ratio[0]}/{ga.cross_ratio[1]}")
    print()

    history = evolve(ga, population_size, selection_size, generations,
                     ga_config.get('report_every', 10))

    winner = ga.pick_winner()
    coloring = winner.coloring
    rows = build_register_table(coloring, table)

    # Save outputs
    coloring_path = save_coloring_csv(coloring, output_root / 'coloring.csv', overwrite=overwrite)
    registers_txt = save_text(format_register_table(rows), output_root / 'registers.txt', overwrite=overwrite)
    registers_csv = export_register_csv(rows, output_root / 'registers.csv')
    history_path = save_history_csv(history, output_root / 'history.csv', overwrite=overwrite)

    plot_path = None
    if run_config['output'].get('plot', False):
        from interference.visualization import save_register_timeline
        plot_path = save_register_timeline(rows, table, str(output_root / 'registers.png'))

    summary = {
        'random_seed': seed,
        'lifetimes': str(lifetimes_path),
        'variables': len(table),
        'cycles': table.cycles,
        'edges': len(graph.edges()),
        'generations': generations,
        'initial_best_phene': history[0]['best_phene'],
        'best_phene': winner.phene,
        'gene': [str(var_id) for var_id in winner.gene],
        'coloring': {str(var_id): color for var_id, color in coloring.items()},
    }
    summary_path = save_metadata(summary, output_root / 'summary.yaml', overwrite=overwrite)

    # Print summary
    print()
    print("=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"Registers used: {winner.phene} (generation 0 best: {history[0]['best_phene']})")
    print(format_register_table(rows))
    print()
    print(f"Coloring: {coloring_path}")
    print(f"Register table: {registers_txt}, {registers_csv}")
    print(f"History: {history_path}")
    print(f"Summary: {summary_path}")
    if plot_path:
        print(f"Plot: {plot_path}")

    return summary
