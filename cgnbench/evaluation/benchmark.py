"""Benchmark system for comparing compression codecs on the same sample set."""

import logging
import threading
import time
from functools import partial
from typing import Callable, Iterable, Mapping

from cgnbench.codecs.algorithm import Algorithm
from cgnbench.codecs.codec_base import Codec, FunctionCodec
from cgnbench.evaluation.benchmark_data import (
    BenchmarkReport,
    BenchmarkResult,
    CorrectnessFailure,
    SampleSet,
)
from cgnbench.evaluation.benchmark_execution_strategies import (
    ExecutionStrategy,
    SequentialExecutionStrategy,
)

logger = logging.getLogger(__name__)

CodecTriple = tuple[str, Callable[[str], bytes], Callable[[bytes], str]]
CodecSpec = Mapping[str, Codec] | Iterable[Codec | CodecTriple]


def evaluate_codec(
    codec: Codec,
    sample_set: SampleSet,
    name: str | None = None,
    cancel_event: threading.Event | None = None,
) -> BenchmarkResult:
    """Round-trip every record of the sample set through one codec.

    Mismatches and failing transforms are recorded as correctness failures
    and excluded from the size and time totals; evaluation always continues.
    """
    name = name or codec.name
    result = BenchmarkResult(algorithm=name)

    for record in sample_set:
        if cancel_event is not None and cancel_event.is_set():
            logger.info("%s: cancelled after %d records", name, result.records_attempted)
            result.cancelled = True
            break

        start = time.perf_counter()
        try:
            compressed = codec.compress(record.text)
        except Exception as e:
            result.record_failure(
                CorrectnessFailure(record.record_id, name, f"compress raised {e!r}")
            )
            continue
        compress_time = time.perf_counter() - start

        if not compressed:
            result.record_failure(
                CorrectnessFailure(record.record_id, name, "compress produced no output")
            )
            continue

        start = time.perf_counter()
        try:
            restored = codec.decompress(compressed)
        except Exception as e:
            result.record_failure(
                CorrectnessFailure(record.record_id, name, f"decompress raised {e!r}")
            )
            continue
        decompress_time = time.perf_counter() - start

        if not restored:
            result.record_failure(
                CorrectnessFailure(record.record_id, name, "decompress produced no output")
            )
            continue
        if restored != record.text:
            result.record_failure(
                CorrectnessFailure(record.record_id, name, "round trip altered the record")
            )
            continue

        result.record_success(record.size, len(compressed), compress_time, decompress_time)

    if result.failures:
        logger.debug("%s: %d correctness failure(s)", name, result.failures)
    return result


def _codec_task(
    sample_set: SampleSet, named_codec: tuple[str, Codec], cancel_event=None
) -> BenchmarkResult:
    name, codec = named_codec
    return evaluate_codec(codec, sample_set, name=name, cancel_event=cancel_event)


def normalize_codecs(codecs: CodecSpec) -> list[tuple[str, Codec]]:
    """Accept a name->codec mapping, codec instances, or (name, compress, decompress) triples."""
    if isinstance(codecs, Mapping):
        return list(codecs.items())

    named = []
    for entry in codecs:
        if isinstance(entry, Codec):
            named.append((entry.name, entry))
        else:
            name, compress_fn, decompress_fn = entry
            named.append((name, FunctionCodec(name, compress_fn, decompress_fn)))
    return named


class Benchmark:
    """Runs compression codecs over a shared, read-only sample set.

    Main Interface:
    - run(): Evaluate several codecs, one independent task per codec
    - evaluate_codec(): Evaluate a single codec
    - report(): Bundle results with sample details for the result reporter

    Performs no file I/O.
    """

    def __init__(
        self,
        sample_set: SampleSet,
        execution_strategy: ExecutionStrategy | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self.sample_set = sample_set
        self.execution_strategy = execution_strategy or SequentialExecutionStrategy()
        self.cancel_event = cancel_event

    def run(self, codecs: CodecSpec | None = None) -> dict[str, BenchmarkResult]:
        """Evaluate every codec and return one BenchmarkResult per codec name.

        Uses all four built-in algorithms if codecs is None.
        """
        if codecs is None:
            codecs = Algorithm.all_codecs()
        named_codecs = normalize_codecs(codecs)

        names = [name for name, _ in named_codecs]
        if len(set(names)) != len(names):
            raise ValueError(f"Codec names must be unique, got {names}")

        # An in-process run can watch the cancel event; worker processes cannot.
        if isinstance(self.execution_strategy, SequentialExecutionStrategy):
            task = partial(_codec_task, cancel_event=self.cancel_event)
        else:
            task = _codec_task

        results = self.execution_strategy.map_tasks(
            task, self.sample_set, named_codecs, desc="Benchmarking codecs"
        )
        return dict(zip(names, results))

    def evaluate_codec(self, codec: Codec, name: str | None = None) -> BenchmarkResult:
        return evaluate_codec(codec, self.sample_set, name=name, cancel_event=self.cancel_event)

    def report(self, results: dict[str, BenchmarkResult]) -> BenchmarkReport:
        return BenchmarkReport(
            results=results,
            sample_size=len(self.sample_set),
            skipped_records=self.sample_set.skipped_count,
            source=str(self.sample_set.source),
        )

    def __len__(self) -> int:
        """Number of records in the sample set."""
        return len(self.sample_set)
