"""Abstract interface for result reporters."""

from abc import ABC, abstractmethod
from typing import Any

from cgnbench.evaluation.benchmark_data import BenchmarkReport


class ResultReporterInterface(ABC):
    """Abstract interface for persisting benchmark and optimization results."""

    @abstractmethod
    def save_benchmark(self, report: BenchmarkReport) -> None:
        """Save a bench-mode report."""
        pass

    @abstractmethod
    def load_benchmark(self) -> dict[str, Any] | None:
        """Load the most recent bench-mode report in serialized form."""
        pass

    @abstractmethod
    def save_optimization(self, outcome) -> None:
        """Save a gen-algo outcome (an OptimizationOutcome)."""
        pass

    @abstractmethod
    def load_optimization(self) -> dict[str, Any] | None:
        """Load the most recent gen-algo outcome in serialized form."""
        pass

    @abstractmethod
    def exists(self) -> bool:
        """Check if anything has been written to the destination."""
        pass
