"""Error taxonomy for the benchmark and tuning harness.

Configuration and data errors abort a run. Record errors are collected by the
dataset sampler and never abort a multi-record run.
"""


class CgnBenchError(Exception):
    """Base class for all cgnbench errors."""


class ConfigError(CgnBenchError, ValueError):
    """Invalid bounds, counts or selections. Raised before any work starts."""


class DataError(CgnBenchError):
    """Corpus missing, unreadable, or without a single well-formed record."""


class RecordError(CgnBenchError):
    """A single malformed record in an otherwise valid corpus."""

    def __init__(self, message: str, line_number: int):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number
        self.reason = message

    def __reduce__(self):
        return (self.__class__, (self.reason, self.line_number))


class TransformFailure(CgnBenchError):
    """A compress or decompress call produced empty output."""

    def __init__(self, algorithm: str, operation: str):
        super().__init__(f"{algorithm} {operation} produced no output")
        self.algorithm = algorithm
        self.operation = operation

    def __reduce__(self):
        return (self.__class__, (self.algorithm, self.operation))
