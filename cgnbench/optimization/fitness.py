"""Fitness function for tuning the dynamic Huffman coder."""

import math
import sys
import threading
from typing import Callable

from cgnbench.codecs.codec_base import Codec
from cgnbench.codecs.dynamic_huffman_codec import DynamicHuffmanCodec
from cgnbench.evaluation.benchmark import evaluate_codec
from cgnbench.evaluation.benchmark_data import BenchmarkResult, SampleSet
from cgnbench.optimization.ga_types import FitnessEvaluation, FitnessObjective, ParameterVector

# Finite so it still sorts and averages like any other score.
WORST_FITNESS = -sys.float_info.max


def score_result(result: BenchmarkResult, objective: FitnessObjective) -> float:
    """Reduce a benchmark result to a scalar; smaller output scores higher.

    Returns WORST_FITNESS when no record survived the round trip or the
    evaluation was cut short.
    """
    if result.cancelled or result.records_tested == 0 or result.compression_ratio is None:
        return WORST_FITNESS

    cost = objective.size_weight * result.compression_ratio
    cost += objective.time_weight * (result.mean_compress_time + result.mean_decompress_time)
    cost += objective.failure_weight * (result.failures / result.records_attempted)

    score = -cost
    if not math.isfinite(score):
        return WORST_FITNESS
    return score


class FitnessFunction:
    """Benchmarks the tunable codec with a candidate parameter vector.

    Holds only the read-only sample set and objective, so it can be shipped
    to worker processes and called for many individuals concurrently.
    """

    def __init__(
        self,
        sample_set: SampleSet,
        objective: FitnessObjective | None = None,
        codec_factory: Callable[[float, float], Codec] = DynamicHuffmanCodec,
    ):
        self.sample_set = sample_set
        self.objective = objective or FitnessObjective()
        self.codec_factory = codec_factory

    def __call__(
        self, params: ParameterVector, cancel_event: threading.Event | None = None
    ) -> FitnessEvaluation:
        codec = self.codec_factory(params.height, params.dev)
        result = evaluate_codec(codec, self.sample_set, name=codec.name, cancel_event=cancel_event)
        return FitnessEvaluation(fitness=score_result(result, self.objective), result=result)
