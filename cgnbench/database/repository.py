"""Repository pattern for database operations."""

from typing import Any, Optional

from sqlalchemy.orm import Session

from cgnbench.database.models import (
    AlgorithmResult,
    BenchmarkRun,
    GenerationRecord,
    OptimizationRun,
)


class BenchmarkRunRepository:
    def __init__(self, session: Session):
        self.session = session

    def create_run(self, source: str, sample_size: int, skipped_records: int) -> BenchmarkRun:
        """Create a new benchmark run."""
        run = BenchmarkRun(
            source=source, sample_size=sample_size, skipped_records=skipped_records
        )
        self.session.add(run)
        self.session.flush()  # Get ID without committing
        return run

    def add_result(self, run: BenchmarkRun, result: dict[str, Any]) -> AlgorithmResult:
        """Attach one algorithm's serialized BenchmarkResult to a run."""
        row = AlgorithmResult(
            run_id=run.id,
            algorithm=result["algorithm"],
            records_tested=result["records_tested"],
            failures=result["failures"],
            total_input_bytes=result["total_input_bytes"],
            total_output_bytes=result["total_output_bytes"],
            total_compress_time=result["total_compress_time"],
            total_decompress_time=result["total_decompress_time"],
            failure_details=result["failure_details"],
            cancelled=result["cancelled"],
        )
        self.session.add(row)
        self.session.flush()
        return row

    def get_latest(self) -> Optional[BenchmarkRun]:
        return self.session.query(BenchmarkRun).order_by(BenchmarkRun.id.desc()).first()


class OptimizationRunRepository:
    def __init__(self, session: Session):
        self.session = session

    def create_run(self, outcome: dict[str, Any]) -> OptimizationRun:
        """Store a serialized OptimizationOutcome with its generation history."""
        run = OptimizationRun(
            config=outcome["config"],
            best_height=outcome["best_params"]["height"],
            best_dev=outcome["best_params"]["dev"],
            best_fitness=outcome["best_fitness"],
            best_result=outcome["best_result"],
            cancelled=outcome["cancelled"],
        )
        self.session.add(run)
        self.session.flush()

        for summary in outcome["history"]:
            self.session.add(
                GenerationRecord(
                    run_id=run.id,
                    generation=summary["generation"],
                    best_fitness=summary["best_fitness"],
                    mean_fitness=summary["mean_fitness"],
                    best_height=summary["best_params"]["height"],
                    best_dev=summary["best_params"]["dev"],
                    global_best_fitness=summary["global_best_fitness"],
                )
            )
        self.session.flush()
        return run

    def get_latest(self) -> Optional[OptimizationRun]:
        return self.session.query(OptimizationRun).order_by(OptimizationRun.id.desc()).first()


class DatabaseRepository:
    """Main repository that provides access to all sub-repositories."""

    def __init__(self, session: Session):
        self.session = session
        self.benchmark_runs = BenchmarkRunRepository(self.session)
        self.optimization_runs = OptimizationRunRepository(self.session)

    def commit(self):
        """Commit the current transaction."""
        self.session.commit()

    def rollback(self):
        """Rollback the current transaction."""
        self.session.rollback()

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.rollback()
        else:
            self.commit()
        self.close()
