"""SQLAlchemy ORM models for cgnbench results."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(timezone.utc)


class BenchmarkRun(Base):
    __tablename__ = "benchmark_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source = Column(Text, nullable=False)
    sample_size = Column(Integer, nullable=False)
    skipped_records = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=_now)

    # Relationships
    results = relationship(
        "AlgorithmResult",
        back_populates="run",
        cascade="all, delete-orphan",
        order_by="AlgorithmResult.id",
    )

    def __repr__(self) -> str:
        return f"<BenchmarkRun({self.sample_size} records from {self.source})>"


class AlgorithmResult(Base):
    __tablename__ = "algorithm_results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(
        Integer, ForeignKey("benchmark_runs.id", ondelete="CASCADE"), nullable=False
    )
    algorithm = Column(String(100), nullable=False)
    records_tested = Column(Integer, nullable=False)
    failures = Column(Integer, nullable=False)
    total_input_bytes = Column(Integer, nullable=False)
    total_output_bytes = Column(Integer, nullable=False)
    total_compress_time = Column(Float, nullable=False)
    total_decompress_time = Column(Float, nullable=False)
    failure_details = Column(JSON, nullable=False, default=list)
    cancelled = Column(Boolean, nullable=False, default=False)

    # Relationships
    run = relationship("BenchmarkRun", back_populates="results")

    def __repr__(self) -> str:
        return f"<AlgorithmResult({self.algorithm}, tested={self.records_tested})>"


class OptimizationRun(Base):
    __tablename__ = "optimization_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    config = Column(JSON, nullable=False)
    best_height = Column(Float, nullable=False)
    best_dev = Column(Float, nullable=False)
    best_fitness = Column(Float, nullable=False)
    best_result = Column(JSON, nullable=False)
    cancelled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=_now)

    # Relationships
    generations = relationship(
        "GenerationRecord",
        back_populates="run",
        cascade="all, delete-orphan",
        order_by="GenerationRecord.generation",
    )

    def __repr__(self) -> str:
        return f"<OptimizationRun(height={self.best_height}, dev={self.best_dev})>"


class GenerationRecord(Base):
    __tablename__ = "generation_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(
        Integer, ForeignKey("optimization_runs.id", ondelete="CASCADE"), nullable=False
    )
    generation = Column(Integer, nullable=False)
    best_fitness = Column(Float, nullable=False)
    mean_fitness = Column(Float, nullable=False)
    best_height = Column(Float, nullable=False)
    best_dev = Column(Float, nullable=False)
    global_best_fitness = Column(Float, nullable=False)

    # Relationships
    run = relationship("OptimizationRun", back_populates="generations")

    def __repr__(self) -> str:
        return f"<GenerationRecord(run={self.run_id}, generation={self.generation})>"
