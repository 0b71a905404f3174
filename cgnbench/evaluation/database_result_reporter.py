"""Database-backed result reporter."""

from typing import Any

from cgnbench.database import DatabaseConfig, DatabaseManager, DatabaseRepository
from cgnbench.evaluation.benchmark_data import BenchmarkReport
from cgnbench.evaluation.result_reporter_interface import ResultReporterInterface


class DatabaseResultReporter(ResultReporterInterface):
    """Stores every run as rows; loads return the most recent run."""

    def __init__(self, url: str | None = None, manager: DatabaseManager | None = None):
        """Initialize with a SQLAlchemy URL.

        Args:
            url: Database URL; defaults to CGNBENCH_DATABASE_URL from the
                environment (or .env), then a local SQLite file
            manager: Pre-built connection manager, mainly for tests
        """
        if manager is None:
            config = DatabaseConfig.from_env()
            if url is not None:
                config.url = url
            manager = DatabaseManager(config)
        self.manager = manager

    def save_benchmark(self, report: BenchmarkReport) -> None:
        data = report.to_dict()
        with DatabaseRepository(self.manager.get_session()) as repo:
            run = repo.benchmark_runs.create_run(
                source=data["source"],
                sample_size=data["sample_size"],
                skipped_records=data["skipped_records"],
            )
            for result in data["results"].values():
                repo.benchmark_runs.add_result(run, result)

    def load_benchmark(self) -> dict[str, Any] | None:
        with DatabaseRepository(self.manager.get_session()) as repo:
            run = repo.benchmark_runs.get_latest()
            if run is None:
                return None

            results = {}
            for row in run.results:
                ratio = (
                    row.total_output_bytes / row.total_input_bytes
                    if row.records_tested and row.total_input_bytes
                    else None
                )
                results[row.algorithm] = {
                    "algorithm": row.algorithm,
                    "records_tested": row.records_tested,
                    "failures": row.failures,
                    "total_input_bytes": row.total_input_bytes,
                    "total_output_bytes": row.total_output_bytes,
                    "compression_ratio": ratio,
                    "total_compress_time": row.total_compress_time,
                    "total_decompress_time": row.total_decompress_time,
                    "failure_details": row.failure_details,
                    "cancelled": row.cancelled,
                }
            return {
                "source": run.source,
                "sample_size": run.sample_size,
                "skipped_records": run.skipped_records,
                "results": results,
            }

    def save_optimization(self, outcome) -> None:
        with DatabaseRepository(self.manager.get_session()) as repo:
            repo.optimization_runs.create_run(outcome.to_dict())

    def load_optimization(self) -> dict[str, Any] | None:
        with DatabaseRepository(self.manager.get_session()) as repo:
            run = repo.optimization_runs.get_latest()
            if run is None:
                return None

            history = [
                {
                    "generation": g.generation,
                    "best_fitness": g.best_fitness,
                    "mean_fitness": g.mean_fitness,
                    "best_params": {"height": g.best_height, "dev": g.best_dev},
                    "global_best_fitness": g.global_best_fitness,
                }
                for g in run.generations
            ]
            return {
                "best_params": {"height": run.best_height, "dev": run.best_dev},
                "best_fitness": run.best_fitness,
                "best_result": run.best_result,
                "history": history,
                "generations_completed": len(history),
                "cancelled": run.cancelled,
                "config": run.config,
            }

    def exists(self) -> bool:
        with DatabaseRepository(self.manager.get_session()) as repo:
            return (
                repo.benchmark_runs.get_latest() is not None
                or repo.optimization_runs.get_latest() is not None
            )
