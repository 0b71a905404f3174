"""
Benchmark evaluation for compression codecs.

Samples game records from a PGN database, round-trips them through each codec
and reports size, time and correctness figures.
"""

from .benchmark import Benchmark, evaluate_codec
from .benchmark_data import (
    BenchmarkReport,
    BenchmarkResult,
    CorrectnessFailure,
    GameRecord,
    SampleSet,
    ToTake,
)
from .dataset_sampler import DatasetSampler

__all__ = [
    'Benchmark',
    'evaluate_codec',
    'BenchmarkReport',
    'BenchmarkResult',
    'CorrectnessFailure',
    'GameRecord',
    'SampleSet',
    'ToTake',
    'DatasetSampler',
]
