"""
Tests for the genetic-algorithm population manager.

Validates configuration checks, bound invariants, elitism, reproducibility
and the end-to-end gen-algo entry point.
"""

import dataclasses
import json
import threading

import numpy as np
import pytest

from cgnbench.codecs import Codec, DynamicHuffmanCodec
from cgnbench.errors import ConfigError, DataError
from cgnbench.evaluation.benchmark_data import BenchmarkResult, ToTake
from cgnbench.evaluation.benchmark_execution_strategies import SequentialExecutionStrategy
from cgnbench.optimization.fitness import WORST_FITNESS, FitnessFunction
from cgnbench.optimization.ga_types import (
    FitnessEvaluation,
    GeneticAlgorithmConfig,
    Individual,
    ParameterVector,
)
from cgnbench.optimization.genetic_algorithm import genetic_algorithm
from cgnbench.optimization.population_manager import PopulationManager

from .conftest import MALFORMED_RECORDS, write_corpus


class CancelOnCompress(Codec):
    """Wraps a codec and sets the cancel event on its first compress call"""

    name = "dynamic-huffman"

    def __init__(self, inner, event):
        self.inner = inner
        self.event = event

    def compress(self, text):
        self.event.set()
        return self.inner.compress(text)

    def decompress(self, data):
        return self.inner.decompress(data)


class PeakFitness:
    """Cheap stand-in fitness: peaks at (height=60, dev=6), counts calls"""

    def __init__(self):
        self.calls = 0

    def __call__(self, params, cancel_event=None):
        self.calls += 1
        fitness = -((params.height - 60.0) ** 2) - (params.dev - 6.0) ** 2
        return FitnessEvaluation(fitness, BenchmarkResult(algorithm="peak"))


def make_config(**overrides):
    values = dict(
        init_population=20,
        number_of_games=ToTake.of(3),
        generations=10,
        mutation_rate=0.2,
        tournament_size=3,
        height_min=10.0,
        height_max=200.0,
        dev_min=1.0,
        dev_max=30.0,
        input_db_path="unused.pgn",
        seed=7,
    )
    values.update(overrides)
    return GeneticAlgorithmConfig(**values)


def make_manager(config=None, fitness=None, **kwargs):
    return PopulationManager(
        config or make_config(),
        fitness or PeakFitness(),
        execution_strategy=SequentialExecutionStrategy(show_progress=False),
        **kwargs,
    )


class TestConfigValidation:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"height_min": 50.0, "height_max": 10.0},
            {"dev_min": 5.0, "dev_max": 1.0},
            {"init_population": 0},
            {"tournament_size": 0},
            {"tournament_size": 21},
            {"generations": 0},
            {"mutation_rate": 1.5},
            {"mutation_rate": -0.1},
            {"height_max": float("inf")},
            {"height_min": -1e308, "height_max": 1e308},
            {"dev_min": -1e308, "dev_max": 1e308},
            {"height_min": 0.0, "height_max": 1e308, "mutation_scale": 5.0},
            {"mutation_scale": -1.0},
        ],
    )
    def test_invalid_config_rejected(self, overrides):
        with pytest.raises(ConfigError):
            make_manager(make_config(**overrides))

    def test_wide_finite_range_allowed(self):
        config = make_config(height_min=0.0, height_max=1e150, generations=2)
        outcome = make_manager(config).run()
        assert config.height_bounds.contains(outcome.best_params.height)

    def test_degenerate_bounds_allowed(self):
        config = make_config(height_min=42.0, height_max=42.0, generations=2)
        outcome = make_manager(config).run()
        assert outcome.best_params.height == 42.0

    def test_config_is_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            make_config().generations = 3


class TestGeneticOperators:
    def test_initial_population_within_bounds(self):
        manager = make_manager()
        pop = manager.initialize()

        assert len(pop) == 20
        for ind in pop:
            assert manager.cfg.height_bounds.contains(ind.params.height)
            assert manager.cfg.dev_bounds.contains(ind.params.dev)
            assert not ind.is_evaluated

    def test_crossover_stays_between_parents(self):
        manager = make_manager()
        a = ParameterVector(20.0, 2.0)
        b = ParameterVector(100.0, 20.0)
        for _ in range(50):
            child = manager.crossover(a, b)
            assert 20.0 <= child.height <= 100.0
            assert 2.0 <= child.dev <= 20.0

    def test_mutation_is_clamped_to_bounds(self):
        config = make_config(mutation_rate=1.0, mutation_scale=5.0)
        manager = make_manager(config)
        for _ in range(100):
            child = manager.mutate(ParameterVector(200.0, 1.0))
            assert config.height_bounds.contains(child.height)
            assert config.dev_bounds.contains(child.dev)

    def test_zero_mutation_rate_leaves_genes_alone(self):
        manager = make_manager(make_config(mutation_rate=0.0))
        params = ParameterVector(55.5, 7.5)
        assert manager.mutate(params) == params

    def test_select_returns_population_sized_pool(self):
        manager = make_manager()
        pop = manager.evaluate(manager.initialize())
        parents = manager.select(pop)

        assert len(parents) == len(pop)
        assert all(parent.is_evaluated for parent in parents)

    def test_full_tournament_always_picks_the_best(self):
        config = make_config(init_population=5, tournament_size=5)
        manager = make_manager(config)
        pop = manager.evaluate(manager.initialize())
        best = max(pop, key=lambda ind: ind.fitness)

        assert all(parent is best for parent in manager.select(pop))

    def test_reproduce_keeps_population_size_for_odd_pools(self):
        config = make_config(init_population=5, tournament_size=2)
        manager = make_manager(config)
        parents = manager.evaluate(manager.initialize())

        offspring = manager.reproduce(parents)
        assert len(offspring) == 5
        assert not any(child.is_evaluated for child in offspring)

    def test_evaluate_skips_cached_individuals(self):
        fitness = PeakFitness()
        manager = make_manager(fitness=fitness)
        cached = Individual(
            ParameterVector(60.0, 6.0), FitnessEvaluation(0.0, BenchmarkResult("peak"))
        )
        pop = [cached, Individual(ParameterVector(10.0, 1.0))]

        evaluated = manager.evaluate(pop)
        assert fitness.calls == 1
        assert evaluated[0].evaluation is cached.evaluation

    def test_best_index_ties_go_to_lowest_index(self):
        result = BenchmarkResult("peak")
        pop = [
            Individual(ParameterVector(1.0, 1.0), FitnessEvaluation(-1.0, result)),
            Individual(ParameterVector(2.0, 1.0), FitnessEvaluation(3.0, result)),
            Individual(ParameterVector(3.0, 1.0), FitnessEvaluation(3.0, result)),
        ]
        assert PopulationManager._best_index(pop) == 1

    def test_mean_fitness_ignores_failed_individuals(self):
        result = BenchmarkResult("peak")
        pop = [
            Individual(ParameterVector(1.0, 1.0), FitnessEvaluation(-2.0, result)),
            Individual(ParameterVector(1.0, 1.0), FitnessEvaluation(WORST_FITNESS, result)),
            Individual(ParameterVector(1.0, 1.0), FitnessEvaluation(-4.0, result)),
        ]
        assert PopulationManager._mean_fitness(pop) == pytest.approx(-3.0)


class TestRun:
    def test_runs_requested_generations(self):
        outcome = make_manager().run()

        assert len(outcome.history) == 10
        assert [s.generation for s in outcome.history] == list(range(10))
        assert not outcome.cancelled

    def test_best_never_gets_worse(self):
        outcome = make_manager().run()

        best = [summary.best_fitness for summary in outcome.history]
        assert all(later >= earlier for earlier, later in zip(best, best[1:]))
        assert outcome.best_fitness == max(best)
        assert outcome.best_fitness == outcome.history[-1].global_best_fitness

    def test_best_params_within_bounds(self):
        outcome = make_manager().run()
        assert 10.0 <= outcome.best_params.height <= 200.0
        assert 1.0 <= outcome.best_params.dev <= 30.0

    def test_search_improves_on_random_start(self):
        outcome = make_manager().run()
        assert outcome.history[-1].best_fitness >= outcome.history[0].best_fitness
        assert abs(outcome.best_params.height - 60.0) < 40.0

    def test_same_seed_same_result(self):
        first = make_manager().run()
        second = make_manager().run()

        assert first.best_params == second.best_params
        assert [s.best_fitness for s in first.history] == [
            s.best_fitness for s in second.history
        ]

    def test_explicit_rng_is_used(self):
        first = make_manager(rng=np.random.default_rng(123)).run()
        second = make_manager(rng=np.random.default_rng(123)).run()
        assert first.best_params == second.best_params

    def test_single_generation_skips_reproduction(self):
        fitness = PeakFitness()
        outcome = make_manager(make_config(generations=1), fitness).run()

        assert len(outcome.history) == 1
        assert fitness.calls == 20

    def test_elite_is_not_re_evaluated(self):
        fitness = PeakFitness()
        make_manager(make_config(generations=3), fitness).run()
        # 20 in the first generation, then 19 new offspring per generation
        assert fitness.calls == 20 + 19 + 19

    def test_cancel_between_generations(self):
        event = threading.Event()

        class CancelAfterFirstGeneration(PeakFitness):
            def __call__(self, params, cancel_event=None):
                evaluation = super().__call__(params, cancel_event)
                if self.calls == 20:
                    event.set()
                return evaluation

        outcome = make_manager(fitness=CancelAfterFirstGeneration(), cancel_event=event).run()

        assert outcome.cancelled
        assert len(outcome.history) == 1
        assert outcome.best is not None

    def test_cancel_interrupts_a_running_evaluation(self, small_sample):
        event = threading.Event()
        built = []

        def factory(height, dev):
            codec = DynamicHuffmanCodec(height, dev)
            built.append(codec)
            return CancelOnCompress(codec, event) if len(built) == 3 else codec

        config = make_config(init_population=5, tournament_size=2)
        fitness = FitnessFunction(small_sample, codec_factory=factory)
        outcome = make_manager(config, fitness, cancel_event=event).run()

        assert outcome.cancelled
        assert len(outcome.history) == 1
        assert len(built) == 5
        assert outcome.best_fitness > WORST_FITNESS
        assert outcome.best_result.records_tested == len(small_sample)
        assert not outcome.best_result.cancelled


class TestGeneticAlgorithm:
    """End-to-end runs against a real corpus"""

    def test_small_run_writes_results(self, corpus_path, corpus_dir):
        output = corpus_dir / "ga.json"
        config = make_config(
            init_population=4,
            generations=2,
            tournament_size=2,
            number_of_games=ToTake.of(2),
            input_db_path=corpus_path,
            output_path=output,
        )

        outcome = genetic_algorithm(config)

        assert len(outcome.history) == 2
        assert outcome.best_fitness > WORST_FITNESS
        payload = json.loads(output.read_text())
        assert payload["kind"] == "optimization"
        assert payload["data"]["best_params"] == outcome.best_params.to_dict()
        assert payload["data"]["config"]["number_of_games"] == "2"

    def test_invalid_config_fails_before_reading_corpus(self, corpus_dir):
        config = make_config(height_min=5.0, height_max=1.0, input_db_path=corpus_dir / "missing")
        with pytest.raises(ConfigError):
            genetic_algorithm(config)

    def test_empty_sample_raises(self, corpus_path):
        config = make_config(number_of_games=ToTake.of(0), input_db_path=corpus_path)
        with pytest.raises(DataError):
            genetic_algorithm(config)

    def test_corpus_without_games_raises(self, corpus_dir):
        path = write_corpus(corpus_dir, MALFORMED_RECORDS)
        with pytest.raises(DataError):
            genetic_algorithm(make_config(input_db_path=path))
