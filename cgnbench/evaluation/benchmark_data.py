"""Data classes for benchmark system."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from cgnbench.errors import RecordError


@dataclass(frozen=True)
class GameRecord:
    """Immutable text of a single game: tag pairs, a blank line, movetext"""

    text: str
    record_id: int
    first_line: int

    @property
    def size(self) -> int:
        return len(self.text.encode("utf-8"))


@dataclass(frozen=True)
class ToTake:
    """Size selector: a literal record count, or every record (count=None)"""

    count: int | None = None

    def __post_init__(self):
        if self.count is not None and self.count < 0:
            raise ValueError(f"Number of games must be non-negative, got {self.count}")

    @classmethod
    def all(cls) -> "ToTake":
        return cls(None)

    @classmethod
    def of(cls, count: int) -> "ToTake":
        return cls(count)

    @classmethod
    def parse(cls, token: str) -> "ToTake":
        """Parse the CLI form: 'all' or a non-negative integer."""
        token = token.strip()
        if token.lower() == "all":
            return cls.all()
        if not token.isdigit():
            raise ValueError(f"Expected 'all' or a non-negative integer, got {token!r}")
        return cls(int(token))

    @property
    def is_all(self) -> bool:
        return self.count is None

    def satisfied_by(self, taken: int) -> bool:
        return self.count is not None and taken >= self.count

    def __str__(self) -> str:
        return "all" if self.count is None else str(self.count)


@dataclass(frozen=True)
class SampleSet:
    """Ordered, read-only set of records shared by every evaluation of a run"""

    records: tuple[GameRecord, ...]
    skipped: tuple[RecordError, ...]
    source: Path
    selector: ToTake

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[GameRecord]:
        return iter(self.records)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def total_bytes(self) -> int:
        return sum(record.size for record in self.records)


@dataclass(frozen=True)
class CorrectnessFailure:
    """A round trip that did not reproduce the original record"""

    record_id: int
    algorithm: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"record_id": self.record_id, "algorithm": self.algorithm, "reason": self.reason}


@dataclass
class BenchmarkResult:
    """Aggregated size, time and correctness figures for one algorithm"""

    algorithm: str
    records_tested: int = 0
    failures: int = 0
    total_input_bytes: int = 0
    total_output_bytes: int = 0
    total_compress_time: float = 0.0
    total_decompress_time: float = 0.0
    failure_details: list[CorrectnessFailure] = field(default_factory=list)
    cancelled: bool = False

    @property
    def compression_ratio(self) -> float | None:
        """total_output_bytes / total_input_bytes, undefined without a successful record."""
        if self.records_tested == 0 or self.total_input_bytes == 0:
            return None
        return self.total_output_bytes / self.total_input_bytes

    @property
    def mean_compress_time(self) -> float | None:
        if self.records_tested == 0:
            return None
        return self.total_compress_time / self.records_tested

    @property
    def mean_decompress_time(self) -> float | None:
        if self.records_tested == 0:
            return None
        return self.total_decompress_time / self.records_tested

    @property
    def records_attempted(self) -> int:
        return self.records_tested + self.failures

    def record_success(
        self, input_bytes: int, output_bytes: int, compress_time: float, decompress_time: float
    ) -> None:
        self.records_tested += 1
        self.total_input_bytes += input_bytes
        self.total_output_bytes += output_bytes
        self.total_compress_time += compress_time
        self.total_decompress_time += decompress_time

    def record_failure(self, failure: CorrectnessFailure) -> None:
        self.failures += 1
        self.failure_details.append(failure)

    def to_dict(self) -> dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "records_tested": self.records_tested,
            "failures": self.failures,
            "total_input_bytes": self.total_input_bytes,
            "total_output_bytes": self.total_output_bytes,
            "compression_ratio": self.compression_ratio,
            "total_compress_time": self.total_compress_time,
            "total_decompress_time": self.total_decompress_time,
            "mean_compress_time": self.mean_compress_time,
            "mean_decompress_time": self.mean_decompress_time,
            "failure_details": [failure.to_dict() for failure in self.failure_details],
            "cancelled": self.cancelled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BenchmarkResult":
        return cls(
            algorithm=data["algorithm"],
            records_tested=data.get("records_tested", 0),
            failures=data.get("failures", 0),
            total_input_bytes=data.get("total_input_bytes", 0),
            total_output_bytes=data.get("total_output_bytes", 0),
            total_compress_time=data.get("total_compress_time", 0.0),
            total_decompress_time=data.get("total_decompress_time", 0.0),
            failure_details=[
                CorrectnessFailure(**failure) for failure in data.get("failure_details", [])
            ],
            cancelled=data.get("cancelled", False),
        )


@dataclass
class BenchmarkReport:
    """Complete bench-mode output: one result per algorithm plus sample details"""

    results: dict[str, BenchmarkResult]
    sample_size: int
    skipped_records: int
    source: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "sample_size": self.sample_size,
            "skipped_records": self.skipped_records,
            "results": {name: result.to_dict() for name, result in self.results.items()},
        }
