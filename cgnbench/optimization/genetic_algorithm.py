"""End-to-end gen-algo run: sample, evolve, report."""

import logging
import threading

from cgnbench.errors import DataError
from cgnbench.evaluation.benchmark_execution_strategies import ExecutionStrategyFactory
from cgnbench.evaluation.dataset_sampler import DatasetSampler
from cgnbench.evaluation.result_reporter_factory import ResultReporterFactory
from cgnbench.optimization.fitness import FitnessFunction
from cgnbench.optimization.ga_types import GeneticAlgorithmConfig, OptimizationOutcome
from cgnbench.optimization.population_manager import PopulationManager

logger = logging.getLogger(__name__)


def genetic_algorithm(
    config: GeneticAlgorithmConfig,
    storage_type: str | None = None,
    cancel_event: threading.Event | None = None,
) -> OptimizationOutcome:
    """Find the best (height, dev) for the dynamic Huffman coder.

    The configuration is validated before the corpus is touched. The outcome
    is written to config.output_path when one is set.

    Raises:
        ConfigError: If the configuration is invalid
        DataError: If the corpus is missing or yields no records
    """
    config.validate()

    sample_set = DatasetSampler(config.input_db_path).sample(config.number_of_games)
    if len(sample_set) == 0:
        raise DataError("The genetic algorithm needs at least one game to evaluate")
    logger.info(
        "Evolving %d individuals for %d generations on %d games",
        config.init_population,
        config.generations,
        len(sample_set),
    )

    fitness_function = FitnessFunction(sample_set, config.objective)
    strategy = ExecutionStrategyFactory.create_strategy(config.use_ray, config.ray_num_cpus)
    try:
        manager = PopulationManager(
            config, fitness_function, execution_strategy=strategy, cancel_event=cancel_event
        )
        outcome = manager.run()
    finally:
        strategy.shutdown()

    if config.output_path is not None:
        reporter = ResultReporterFactory.create(config.output_path, storage_type)
        reporter.save_optimization(outcome)
        logger.info("Optimization results written to %s", config.output_path)

    return outcome
