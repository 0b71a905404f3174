"""Benchmarking and parameter tuning for compressed game notation codecs."""

__version__ = "0.1.0"
