"""
Bench-mode entry point.

Samples the corpus, runs every built-in algorithm over the sample and either
prints a comparison table or hands the report to a result reporter.
"""

import threading
from pathlib import Path

from cgnbench.evaluation.benchmark import Benchmark
from cgnbench.evaluation.benchmark_data import BenchmarkReport, ToTake
from cgnbench.evaluation.benchmark_execution_strategies import ExecutionStrategyFactory
from cgnbench.evaluation.dataset_sampler import DatasetSampler
from cgnbench.evaluation.result_reporter import format_benchmark_table
from cgnbench.evaluation.result_reporter_factory import ResultReporterFactory


def bench(
    number_of_games: ToTake,
    input_db_path: str | Path,
    output_path: str | Path | None = None,
    use_ray: bool = False,
    ray_num_cpus: int | None = None,
    storage_type: str | None = None,
    cancel_event: threading.Event | None = None,
) -> BenchmarkReport:
    """
    Benchmark all four algorithms against a PGN database.

    Args:
        number_of_games: How many games to take from the database
        input_db_path: PGN database (Lichess format)
        output_path: Optional destination for the report; printed when None
        use_ray: Run the algorithms in parallel with Ray when installed
        ray_num_cpus: CPU limit for Ray
        storage_type: Force "json", "pickle" or "database" output
        cancel_event: Stops evaluation between records when set

    Raises:
        DataError: If the database is missing or holds no well-formed game
    """
    sample_set = DatasetSampler(input_db_path).sample(number_of_games)

    print(f"Benchmarking {len(sample_set)} games from {input_db_path}")
    if sample_set.skipped_count:
        print(f"Skipped {sample_set.skipped_count} malformed record(s)")

    strategy = ExecutionStrategyFactory.create_strategy(use_ray, ray_num_cpus)
    try:
        benchmark = Benchmark(sample_set, strategy, cancel_event=cancel_event)
        results = benchmark.run()
    finally:
        strategy.shutdown()

    report = benchmark.report(results)
    if output_path is None:
        print()
        print(format_benchmark_table(results))
    else:
        ResultReporterFactory.create(output_path, storage_type).save_benchmark(report)
        print(f"Benchmark results written to {output_path}")

    return report
