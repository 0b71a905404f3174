# optimization/ga_types.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cgnbench.errors import ConfigError
from cgnbench.evaluation.benchmark_data import BenchmarkResult, ToTake

# ------------ Fitness objective ------------

@dataclass(frozen=True)
class FitnessObjective:
    """Weights that reduce a benchmark result to a scalar (higher is better)."""
    size_weight: float = 1.0            # weight of the compression ratio
    time_weight: float = 0.0            # weight of mean compress + decompress seconds
    failure_weight: float = 1.0         # weight of the share of failed round trips

    def validate(self) -> None:
        weights = (self.size_weight, self.time_weight, self.failure_weight)
        if not all(math.isfinite(w) and w >= 0 for w in weights):
            raise ConfigError(f"Fitness weights must be finite and non-negative, got {weights}")
        if self.size_weight == 0 and self.time_weight == 0:
            raise ConfigError("At least one of size_weight and time_weight must be positive")

    def to_dict(self) -> dict[str, float]:
        return {
            "size_weight": self.size_weight,
            "time_weight": self.time_weight,
            "failure_weight": self.failure_weight,
        }


# ------------ Genes ------------

@dataclass(frozen=True)
class GeneBounds:
    """Closed interval a single gene must stay in."""
    minimum: float
    maximum: float

    @property
    def span(self) -> float:
        return self.maximum - self.minimum

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, float(value)))

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


@dataclass(frozen=True)
class ParameterVector:
    """Parameters of the dynamic Huffman coder."""
    height: float
    dev: float

    def clamped(self, height_bounds: GeneBounds, dev_bounds: GeneBounds) -> ParameterVector:
        return ParameterVector(height_bounds.clamp(self.height), dev_bounds.clamp(self.dev))

    def to_dict(self) -> dict[str, float]:
        return {"height": self.height, "dev": self.dev}


# ------------ Fitness containers ------------

@dataclass(frozen=True)
class FitnessEvaluation:
    """Scalar fitness and the benchmark run that produced it."""
    fitness: float
    result: BenchmarkResult


@dataclass
class Individual:
    """A parameter vector and, once evaluated, its fitness."""
    params: ParameterVector
    evaluation: FitnessEvaluation | None = None

    @property
    def fitness(self) -> float | None:
        return None if self.evaluation is None else self.evaluation.fitness

    @property
    def is_evaluated(self) -> bool:
        return self.evaluation is not None


@dataclass(frozen=True)
class GenerationSummary:
    generation: int
    best_fitness: float
    mean_fitness: float
    best_params: ParameterVector
    global_best_fitness: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "generation": self.generation,
            "best_fitness": self.best_fitness,
            "mean_fitness": self.mean_fitness,
            "best_params": self.best_params.to_dict(),
            "global_best_fitness": self.global_best_fitness,
        }


# ------------ GA run configuration ------------

@dataclass(frozen=True)
class GeneticAlgorithmConfig:
    """Immutable configuration for one genetic-algorithm run."""
    init_population: int
    number_of_games: ToTake
    generations: int
    mutation_rate: float
    tournament_size: int
    height_min: float
    height_max: float
    dev_min: float
    dev_max: float
    input_db_path: Path | str
    output_path: Path | str | None = None

    seed: int | None = None
    mutation_scale: float = 0.1         # max mutation delta as a fraction of the gene span
    objective: FitnessObjective = field(default_factory=FitnessObjective)
    use_ray: bool = False
    ray_num_cpus: int | None = None

    @property
    def height_bounds(self) -> GeneBounds:
        return GeneBounds(self.height_min, self.height_max)

    @property
    def dev_bounds(self) -> GeneBounds:
        return GeneBounds(self.dev_min, self.dev_max)

    def validate(self) -> None:
        bounds = (self.height_min, self.height_max, self.dev_min, self.dev_max)
        if not all(math.isfinite(b) for b in bounds):
            raise ConfigError(f"Gene bounds must be finite, got {bounds}")
        if self.height_min > self.height_max:
            raise ConfigError(
                f"height_min ({self.height_min}) must not exceed height_max ({self.height_max})"
            )
        if self.dev_min > self.dev_max:
            raise ConfigError(
                f"dev_min ({self.dev_min}) must not exceed dev_max ({self.dev_max})"
            )
        if self.init_population <= 0:
            raise ConfigError("Population size must be positive")
        if self.tournament_size <= 0:
            raise ConfigError("Tournament size must be positive")
        if self.tournament_size > self.init_population:
            raise ConfigError(
                f"Tournament size ({self.tournament_size}) cannot exceed "
                f"population size ({self.init_population})"
            )
        if self.generations < 1:
            raise ConfigError("At least one generation is required")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ConfigError(f"Mutation rate must be in [0, 1], got {self.mutation_rate}")
        if not (math.isfinite(self.mutation_scale) and self.mutation_scale >= 0):
            raise ConfigError(f"Mutation scale must be non-negative, got {self.mutation_scale}")
        for name, bounds in (("height", self.height_bounds), ("dev", self.dev_bounds)):
            # mutation draws from [-scale * span, +scale * span]
            if not math.isfinite(2.0 * max(1.0, self.mutation_scale) * bounds.span):
                raise ConfigError(
                    f"The {name} range [{bounds.minimum}, {bounds.maximum}] is too wide"
                )
        self.objective.validate()

    def to_dict(self) -> dict[str, Any]:
        return {
            "init_population": self.init_population,
            "number_of_games": str(self.number_of_games),
            "generations": self.generations,
            "mutation_rate": self.mutation_rate,
            "tournament_size": self.tournament_size,
            "height_min": self.height_min,
            "height_max": self.height_max,
            "dev_min": self.dev_min,
            "dev_max": self.dev_max,
            "input_db_path": str(self.input_db_path),
            "output_path": None if self.output_path is None else str(self.output_path),
            "seed": self.seed,
            "mutation_scale": self.mutation_scale,
            "objective": self.objective.to_dict(),
        }


# ------------ Run outcome ------------

@dataclass
class OptimizationOutcome:
    """Global best individual of a run, with the history that led to it."""
    best: Individual
    history: list[GenerationSummary]
    config: GeneticAlgorithmConfig
    cancelled: bool = False

    @property
    def best_params(self) -> ParameterVector:
        return self.best.params

    @property
    def best_fitness(self) -> float:
        return self.best.evaluation.fitness

    @property
    def best_result(self) -> BenchmarkResult:
        return self.best.evaluation.result

    def to_dict(self) -> dict[str, Any]:
        return {
            "best_params": self.best_params.to_dict(),
            "best_fitness": self.best_fitness,
            "best_result": self.best_result.to_dict(),
            "history": [summary.to_dict() for summary in self.history],
            "generations_completed": len(self.history),
            "cancelled": self.cancelled,
            "config": self.config.to_dict(),
        }
