"""
Tests for the generational orchestrator and the run driver.
"""

import csv
import tempfile
import unittest
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path

import numpy as np
import yaml

from ga_regalloc.builder import ChromosomeBuilder
from ga_regalloc.cli import run_from_config
from ga_regalloc.data_models import Chromosome
from ga_regalloc.genetic_algorithm import GeneticAlgorithm, gen_ratio, validate_ratio
from ga_regalloc.orchestration import evolve, run_evolution

from .fixtures import path_graph, kernel_graph, assert_proper_coloring, assert_permutation


def make_ga(graph, mutation_ratio=(1, 2), cross_ratio=(1, 1), seed=42):
    rng = np.random.default_rng(seed)
    return GeneticAlgorithm(graph, ChromosomeBuilder(graph, rng), mutation_ratio, cross_ratio, rng)


class TestRatios(unittest.TestCase):
    """Test rational probabilities."""

    def test_validate_ratio(self):
        self.assertEqual(validate_ratio([1, 2], "r"), (1, 2))
        self.assertEqual(validate_ratio((0, 1), "r"), (0, 1))

        for bad in [(1, 0), (3, 2), (-1, 2), (1,), "ab", None]:
            with self.assertRaises(ValueError):
                validate_ratio(bad, "r")

    def test_gen_ratio_extremes(self):
        rng = np.random.default_rng(0)
        self.assertTrue(all(gen_ratio(rng, (1, 1)) for _ in range(100)))
        self.assertFalse(any(gen_ratio(rng, (0, 1)) for _ in range(100)))

    def test_gen_ratio_frequency(self):
        rng = np.random.default_rng(0)
        hits = sum(gen_ratio(rng, (1, 4)) for _ in range(4000))
        self.assertAlmostEqual(hits / 4000, 0.25, delta=0.03)

    def test_orchestrator_rejects_bad_ratio(self):
        with self.assertRaises(ValueError):
            make_ga(path_graph(), mutation_ratio=(2, 1))


class TestGeneticAlgorithm(unittest.TestCase):
    """Test the generation state machine."""

    def setUp(self):
        self.graph = path_graph()
        self.ga = make_ga(self.graph)

    def test_gen(self):
        self.ga.gen(6)
        self.assertEqual(len(self.ga.population), 6)
        for chromosome in self.ga.population:
            assert_permutation(self, self.graph, chromosome.gene)

    def test_cross_without_pool_is_noop(self):
        self.ga.next_gen = [Chromosome(["A", "B", "C", "D"], self.graph)]
        self.ga.cross()
        self.assertEqual(len(self.ga.next_gen), 1)

    def test_cross_always_pairs_with_ratio_one(self):
        self.ga.gen(4)
        self.ga.select(4)
        self.assertEqual(len(self.ga.selection_pool), 4)

        self.ga.cross()

        self.assertEqual(len(self.ga.next_gen), 8)
        self.assertEqual(self.ga.selection_pool, [])

    def test_cross_never_pairs_with_ratio_zero(self):
        ga = make_ga(self.graph, cross_ratio=(0, 1))
        ga.gen(4)
        ga.select(4)
        ga.cross()

        self.assertEqual(ga.next_gen, [])
        self.assertEqual(ga.selection_pool, [])

    def test_mutate_empty_buffer_is_noop(self):
        self.ga.mutate()
        self.assertEqual(self.ga.next_gen, [])

    def test_mutate_with_ratio_one_touches_every_child(self):
        ga = make_ga(kernel_graph(), mutation_ratio=(1, 1))
        ga.gen(4)
        ga.select(4)
        ga.cross()
        for chromosome in ga.next_gen:
            chromosome.evaluate()

        ga.mutate()

        self.assertTrue(all(not chromosome.is_decoded for chromosome in ga.next_gen))

    def test_accept_and_reduce(self):
        self.ga.gen(4)
        self.ga.select(4)
        self.ga.cross()
        self.ga.accept()

        self.assertEqual(len(self.ga.population), 12)
        self.assertEqual(self.ga.next_gen, [])

        self.ga.reduce(4)
        self.assertEqual(len(self.ga.population), 4)

    def test_pick_winner(self):
        self.assertIsNone(self.ga.pick_winner())

        worst = Chromosome(["A", "B", "C", "D"], self.graph)
        best = Chromosome(["A", "C", "B", "D"], self.graph)
        self.ga.population = [worst, best]

        self.assertIs(self.ga.pick_winner(), best)

    def test_end_to_end_path_graph(self):
        self.ga.gen(4)
        initial_worst = max(c.phene for c in self.ga.population)

        self.ga.select(4)
        self.ga.cross()
        self.ga.mutate()
        self.ga.accept()
        self.ga.reduce(4)

        for chromosome in self.ga.population:
            assert_permutation(self, self.graph, chromosome.gene)
            assert_proper_coloring(self, self.graph, chromosome.coloring)

        self.assertLessEqual(self.ga.pick_winner().phene, initial_worst)

    def test_population_stays_valid_every_step(self):
        graph = kernel_graph()
        ga = make_ga(graph, mutation_ratio=(1, 3), cross_ratio=(3, 4), seed=5)
        ga.gen(10)
        best = ga.pick_winner().phene

        for _ in range(15):
            for stage in (lambda: ga.select(8), ga.cross, ga.mutate, ga.accept, lambda: ga.reduce(10)):
                stage()
                for chromosome in ga.population + ga.selection_pool + ga.next_gen:
                    assert_permutation(self, graph, chromosome.gene)
                    assert_proper_coloring(self, graph, chromosome.coloring)

            # survivors include the previous population, so the best never regresses
            self.assertLessEqual(ga.pick_winner().phene, best)
            best = ga.pick_winner().phene

    def test_same_seed_same_run(self):
        graph = kernel_graph()
        winners = []
        for _ in range(2):
            ga = make_ga(graph, seed=11)
            evolve(ga, 8, 6, 10)
            winners.append(ga.pick_winner().gene)

        self.assertEqual(winners[0], winners[1])


class TestRunEvolution(unittest.TestCase):
    """Test the complete run driver."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)

        self.lifetimes_path = self.root / "lifetimes.csv"
        with open(self.lifetimes_path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(['var', 't_def', 't_use'])
            writer.writerows([['A', 0, 2], ['B', 1, 3], ['C', 3, 5], ['D', 4, 4]])

        self.config = {
            'input': {'lifetimes': str(self.lifetimes_path), 'cycles': 5},
            'ga': {
                'population_size': 4,
                'selection_size': 4,
                'generations': 10,
                'mutation_ratio': [1, 2],
                'cross_ratio': [1, 1],
                'random_seed': 42,
            },
            'output': {'root': str(self.root / 'out')},
        }

    def tearDown(self):
        self.tmpdir.cleanup()

    def run_quietly(self, config):
        with redirect_stdout(StringIO()) as out:
            summary = run_evolution(config)
        return summary, out.getvalue()

    def test_outputs_written(self):
        summary, log = self.run_quietly(self.config)
        out = self.root / 'out'

        for name in ['coloring.csv', 'registers.txt', 'registers.csv', 'history.csv', 'summary.yaml']:
            self.assertTrue((out / name).exists(), name)
        self.assertFalse((out / 'registers.png').exists())

        self.assertLessEqual(summary['best_phene'], summary['initial_best_phene'])
        self.assertEqual(summary['random_seed'], 42)
        self.assertIn("SUMMARY", log)

        with open(out / 'summary.yaml') as f:
            self.assertEqual(yaml.safe_load(f)['best_phene'], summary['best_phene'])

        with open(out / 'history.csv', newline='') as f:
            self.assertEqual(len(list(csv.DictReader(f))), 11)

    def test_winning_coloring_is_proper(self):
        summary, _ = self.run_quietly(self.config)
        coloring = summary['coloring']

        for id_a, id_b in path_graph().edges():
            self.assertNotEqual(coloring[id_a], coloring[id_b])
        self.assertEqual(summary['best_phene'], max(coloring.values()) + 1)

    def test_existing_output_requires_overwrite(self):
        (self.root / 'out').mkdir()
        with self.assertRaises(FileExistsError):
            self.run_quietly(self.config)

        self.config['output']['overwrite'] = True
        self.run_quietly(self.config)

    def test_plot_written_when_requested(self):
        self.config['output']['plot'] = True
        self.run_quietly(self.config)
        self.assertTrue((self.root / 'out' / 'registers.png').exists())

    def test_run_from_config_file(self):
        config_path = self.root / "run.yaml"
        with open(config_path, 'w') as f:
            yaml.dump(self.config, f)

        with redirect_stdout(StringIO()) as out:
            summary = run_from_config(str(config_path))

        self.assertIn("Run completed successfully", out.getvalue())
        self.assertTrue((self.root / 'out' / 'coloring.csv').exists())
        self.assertEqual(summary['variables'], 4)

    def test_seed_drawn_when_missing(self):
        del self.config['ga']['random_seed']
        summary, log = self.run_quietly(self.config)
        self.assertIsInstance(summary['random_seed'], int)
        self.assertIn(f"Random seed: {summary['random_seed']}", log)


if __name__ == '__main__':
    unittest.main()
