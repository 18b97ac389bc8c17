"""
chunkwise - bounded-concurrency processing of large text in chunks.

Example:
    >>> from chunkwise import ChunkProcessor, ProcessingOptions
    >>> processor = ChunkProcessor(ProcessingOptions(chunk_size=50_000))
    >>> report = await processor.run(text, extract_terms)
"""

from .config import ProcessingOptions, load_processing_options
from .core import ChunkProcessor, ChunkRunReport, run_sync
from .errors import ChunkProcessingError, ChunkwiseError, ConfigurationError
from .parallel import ChunkRunner, ParallelismEstimator, Semaphore
from .processing import (
    ChunkSplitter,
    combine,
    generate_stats,
    merge_arrays,
    merge_objects,
    suggest_optimizations,
)
from .types import Chunk, ChunkStats, ProcessingResult

__all__ = [
    "ChunkProcessor",
    "ChunkRunReport",
    "run_sync",
    "ProcessingOptions",
    "load_processing_options",
    "ChunkRunner",
    "ParallelismEstimator",
    "Semaphore",
    "ChunkSplitter",
    "combine",
    "merge_arrays",
    "merge_objects",
    "generate_stats",
    "suggest_optimizations",
    "Chunk",
    "ChunkStats",
    "ProcessingResult",
    "ChunkwiseError",
    "ChunkProcessingError",
    "ConfigurationError",
]
