"""Genetic-algorithm tuning of the dynamic Huffman coder's (height, dev) parameters."""

from .fitness import WORST_FITNESS, FitnessFunction, score_result
from .ga_types import (
    FitnessEvaluation,
    FitnessObjective,
    GeneBounds,
    GenerationSummary,
    GeneticAlgorithmConfig,
    Individual,
    OptimizationOutcome,
    ParameterVector,
)
from .population_manager import PopulationManager

__all__ = [
    'WORST_FITNESS',
    'FitnessFunction',
    'score_result',
    'FitnessEvaluation',
    'FitnessObjective',
    'GeneBounds',
    'GenerationSummary',
    'GeneticAlgorithmConfig',
    'Individual',
    'OptimizationOutcome',
    'ParameterVector',
    'PopulationManager',
]
