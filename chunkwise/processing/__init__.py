"""Splitting, merging and statistics for chunked content."""

from .combiner import combine, failed_indices, merge_arrays, merge_objects, successful_values
from .splitter import DEFAULT_BOUNDARIES, ChunkSplitter
from .stats import generate_stats, suggest_optimizations

__all__ = [
    "ChunkSplitter",
    "DEFAULT_BOUNDARIES",
    "combine",
    "merge_arrays",
    "merge_objects",
    "successful_values",
    "failed_indices",
    "generate_stats",
    "suggest_optimizations",
]
