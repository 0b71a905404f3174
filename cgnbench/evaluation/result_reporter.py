"""File-backed result reporters (JSON and pickle) and console formatting."""

import json
import pickle
from abc import abstractmethod
from pathlib import Path
from typing import Any

from cgnbench.evaluation.benchmark_data import BenchmarkReport, BenchmarkResult
from cgnbench.evaluation.result_reporter_interface import ResultReporterInterface

BENCHMARK_KIND = "benchmark"
OPTIMIZATION_KIND = "optimization"


class FileResultReporter(ResultReporterInterface):
    """Writes one serialized result per file, tagged with its kind."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def save_benchmark(self, report: BenchmarkReport) -> None:
        self._write({"kind": BENCHMARK_KIND, "data": report.to_dict()})

    def load_benchmark(self) -> dict[str, Any] | None:
        return self._load_kind(BENCHMARK_KIND)

    def save_optimization(self, outcome) -> None:
        self._write({"kind": OPTIMIZATION_KIND, "data": outcome.to_dict()})

    def load_optimization(self) -> dict[str, Any] | None:
        return self._load_kind(OPTIMIZATION_KIND)

    def exists(self) -> bool:
        return self.path.exists()

    def _load_kind(self, kind: str) -> dict[str, Any] | None:
        if not self.exists():
            return None
        payload = self._read()
        if payload.get("kind") != kind:
            return None
        return payload["data"]

    @abstractmethod
    def _write(self, payload: dict[str, Any]) -> None:
        """Serialize payload to self.path."""
        pass

    @abstractmethod
    def _read(self) -> dict[str, Any]:
        """Deserialize the payload stored at self.path."""
        pass


class JsonResultReporter(FileResultReporter):
    """Human-readable JSON output (the default destination format)."""

    def _write(self, payload: dict[str, Any]) -> None:
        # Ensure parent directory exists
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")

    def _read(self) -> dict[str, Any]:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)


class PickleResultReporter(FileResultReporter):
    """Binary pickle output, for results consumed from Python."""

    def _write(self, payload: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "wb") as f:
            pickle.dump(payload, f)

    def _read(self) -> dict[str, Any]:
        with open(self.path, "rb") as f:
            return pickle.load(f)


def _fmt(value: float | None, spec: str) -> str:
    return "n/a" if value is None else format(value, spec)


def format_benchmark_table(results: dict[str, BenchmarkResult]) -> str:
    """Render results as a fixed-width table; undefined figures print as n/a."""
    header = (
        f"{'Algorithm':<18} {'Tested':>7} {'Failed':>7} {'Input B':>11} "
        f"{'Output B':>11} {'Ratio':>8} {'Compress ms':>12} {'Decompress ms':>14}"
    )
    lines = [header, "-" * len(header)]
    for name, result in results.items():
        compress_ms = None if result.mean_compress_time is None else result.mean_compress_time * 1000
        decompress_ms = (
            None if result.mean_decompress_time is None else result.mean_decompress_time * 1000
        )
        lines.append(
            f"{name:<18} {result.records_tested:>7} {result.failures:>7} "
            f"{result.total_input_bytes:>11} {result.total_output_bytes:>11} "
            f"{_fmt(result.compression_ratio, '.4f'):>8} "
            f"{_fmt(compress_ms, '.3f'):>12} {_fmt(decompress_ms, '.3f'):>14}"
        )
    return "\n".join(lines)
