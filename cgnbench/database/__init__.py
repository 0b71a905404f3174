"""Database package for storing benchmark and tuning results."""

# Lazy imports to avoid requiring database dependencies unless needed
from cgnbench.database.availability import DATABASE_AVAILABLE

if DATABASE_AVAILABLE:
    from cgnbench.database.connection import DatabaseConfig, DatabaseManager
    from cgnbench.database.models import (
        AlgorithmResult,
        Base,
        BenchmarkRun,
        GenerationRecord,
        OptimizationRun,
    )
    from cgnbench.database.repository import DatabaseRepository

    __all__ = [
        "DatabaseConfig",
        "DatabaseManager",
        "DatabaseRepository",
        "Base",
        "BenchmarkRun",
        "AlgorithmResult",
        "OptimizationRun",
        "GenerationRecord",
        "DATABASE_AVAILABLE",
    ]
else:
    __all__ = ["DATABASE_AVAILABLE"]
