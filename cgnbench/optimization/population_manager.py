"""Genetic algorithm over the (height, dev) parameters of the dynamic Huffman coder.

Each generation is evaluated in full before selection starts. The best
individual of a generation is carried unchanged into the next one, so the best
fitness never decreases from one generation to the next.
"""

from __future__ import annotations

import logging
import threading
import time
from functools import partial

import numpy as np

from cgnbench.evaluation.benchmark_execution_strategies import (
    ExecutionStrategy,
    SequentialExecutionStrategy,
)
from cgnbench.optimization.fitness import WORST_FITNESS, FitnessFunction
from cgnbench.optimization.ga_types import (
    FitnessEvaluation,
    GenerationSummary,
    GeneticAlgorithmConfig,
    Individual,
    OptimizationOutcome,
    ParameterVector,
)

logger = logging.getLogger(__name__)


def _evaluate_params(
    fitness_function: FitnessFunction,
    params: ParameterVector,
    cancel_event: threading.Event | None = None,
) -> FitnessEvaluation:
    return fitness_function(params, cancel_event=cancel_event)


class PopulationManager:
    """
    Orchestrates initialize → evaluate → select → reproduce for a fixed number
    of generations and returns the best individual seen in any generation.

    All random draws come from one numpy Generator, seeded from config.seed,
    so a run with a seed is reproducible. Fitness evaluation itself is
    deterministic, which keeps runs reproducible under parallel evaluation.
    """

    def __init__(
        self,
        config: GeneticAlgorithmConfig,
        fitness_function: FitnessFunction,
        execution_strategy: ExecutionStrategy | None = None,
        rng: np.random.Generator | None = None,
        cancel_event: threading.Event | None = None,
    ):
        config.validate()
        self.cfg = config
        self.fitness_function = fitness_function
        self.execution_strategy = execution_strategy or SequentialExecutionStrategy()
        self._rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.cancel_event = cancel_event
        self._height_bounds = config.height_bounds
        self._dev_bounds = config.dev_bounds

    # ------------- Public -------------

    def run(self) -> OptimizationOutcome:
        t0 = time.perf_counter()
        pop = self.initialize()
        history: list[GenerationSummary] = []
        global_best: Individual | None = None
        cancelled = False

        for gen in range(self.cfg.generations):
            tg0 = time.perf_counter()
            pop = self.evaluate(pop, gen)

            gen_best = pop[self._best_index(pop)]
            if global_best is None or gen_best.fitness > global_best.fitness:
                global_best = gen_best

            summary = GenerationSummary(
                generation=gen,
                best_fitness=gen_best.fitness,
                mean_fitness=self._mean_fitness(pop),
                best_params=gen_best.params,
                global_best_fitness=global_best.fitness,
            )
            history.append(summary)
            logger.info(
                "Generation %d/%d: best=%.6f mean=%.6f height=%.4f dev=%.4f (%.2fs)",
                gen + 1,
                self.cfg.generations,
                summary.best_fitness,
                summary.mean_fitness,
                gen_best.params.height,
                gen_best.params.dev,
                time.perf_counter() - tg0,
            )

            if self._cancel_requested():
                logger.info("Cancelled during generation %d", gen + 1)
                cancelled = True
                break

            if gen == self.cfg.generations - 1:
                break

            parents = self.select(pop)
            offspring = self.reproduce(parents)
            # Elitism: the generation's best replaces one offspring, fitness cached
            offspring[0] = Individual(gen_best.params, gen_best.evaluation)
            pop = offspring

        logger.info("Genetic algorithm finished in %.2fs", time.perf_counter() - t0)
        return OptimizationOutcome(
            best=global_best, history=history, config=self.cfg, cancelled=cancelled
        )

    # ------------- Core steps -------------

    def initialize(self) -> list[Individual]:
        size = self.cfg.init_population
        heights = self._rng.uniform(self.cfg.height_min, self.cfg.height_max, size=size)
        devs = self._rng.uniform(self.cfg.dev_min, self.cfg.dev_max, size=size)
        return [
            Individual(
                ParameterVector(float(h), float(d)).clamped(self._height_bounds, self._dev_bounds)
            )
            for h, d in zip(heights, devs)
        ]

    def evaluate(self, pop: list[Individual], gen_idx: int = 0) -> list[Individual]:
        """Return the population with every individual evaluated.

        Individuals that already carry an evaluation (the elite) are not
        re-run. Returns only after all evaluations are available. Evaluations
        cut short by the cancel event score WORST_FITNESS.
        """
        pending = [i for i, ind in enumerate(pop) if not ind.is_evaluated]
        # An in-process run can watch the cancel event; worker processes cannot.
        if isinstance(self.execution_strategy, SequentialExecutionStrategy):
            task = partial(_evaluate_params, cancel_event=self.cancel_event)
        else:
            task = _evaluate_params
        evaluations = self.execution_strategy.map_tasks(
            task,
            self.fitness_function,
            [pop[i].params for i in pending],
            desc=f"Generation {gen_idx + 1}",
        )

        evaluated = list(pop)
        for i, evaluation in zip(pending, evaluations):
            evaluated[i] = Individual(pop[i].params, evaluation)
        return evaluated

    def select(self, pop: list[Individual]) -> list[Individual]:
        """Parent pool of len(pop) tournament winners.

        Each tournament draws tournament_size distinct individuals; the first
        drawn among the fittest wins.
        """
        size = len(pop)
        fitness = np.array([ind.fitness for ind in pop], dtype=float)
        parents = []
        for _ in range(size):
            group = self._rng.choice(size, size=self.cfg.tournament_size, replace=False)
            winner = group[int(np.argmax(fitness[group]))]
            parents.append(pop[winner])
        return parents

    def reproduce(self, parents: list[Individual]) -> list[Individual]:
        """Blend sequential parent pairs into a full set of unevaluated offspring."""
        size = len(parents)
        offspring: list[Individual] = []
        for i in range(0, size, 2):
            a = parents[i].params
            b = parents[(i + 1) % size].params
            for _ in range(2):
                child = self.mutate(self.crossover(a, b))
                offspring.append(Individual(child))
        return offspring[:size]

    def crossover(self, a: ParameterVector, b: ParameterVector) -> ParameterVector:
        """Per-gene arithmetic blend with a fresh alpha in [0, 1] for each gene."""
        alpha_h = float(self._rng.random())
        alpha_d = float(self._rng.random())
        child = ParameterVector(
            height=a.height + alpha_h * (b.height - a.height),
            dev=a.dev + alpha_d * (b.dev - a.dev),
        )
        return child.clamped(self._height_bounds, self._dev_bounds)

    def mutate(self, params: ParameterVector) -> ParameterVector:
        """Perturb each gene with probability mutation_rate by a bounded uniform delta."""
        height = params.height
        dev = params.dev
        if self._rng.random() < self.cfg.mutation_rate:
            height += self._delta(self._height_bounds.span)
        if self._rng.random() < self.cfg.mutation_rate:
            dev += self._delta(self._dev_bounds.span)
        return ParameterVector(height, dev).clamped(self._height_bounds, self._dev_bounds)

    # ------------- Helpers -------------

    def _delta(self, span: float) -> float:
        limit = self.cfg.mutation_scale * span
        return float(self._rng.uniform(-limit, limit)) if limit > 0 else 0.0

    @staticmethod
    def _best_index(pop: list[Individual]) -> int:
        # ties go to the lowest index
        return max(range(len(pop)), key=lambda i: (pop[i].fitness, -i))

    @staticmethod
    def _mean_fitness(pop: list[Individual]) -> float:
        scores = [ind.fitness for ind in pop if ind.fitness > WORST_FITNESS]
        if not scores:
            return WORST_FITNESS
        return float(np.mean(scores))

    def _cancel_requested(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()
