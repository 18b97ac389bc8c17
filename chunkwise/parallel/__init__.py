"""
chunkwise Parallel Processing Module.

Concurrency primitives and executors for running a processor over chunks.

Key Components:
    - ChunkRunner: parallel, sequential, retry and streaming executors
    - Semaphore: FIFO counting semaphore bounding concurrent processor calls
    - ParallelismEstimator: advisory concurrency level from size and memory budget

Example:
    >>> from chunkwise.parallel import ChunkRunner
    >>> runner = ChunkRunner()
    >>> results = await runner.process_parallel(chunks, processor)
"""

from .estimator import ParallelismEstimator, categorize_chunk_size
from .runner import ChunkRunner
from .semaphore import Semaphore, SemaphoreStats

__all__ = [
    "ChunkRunner",
    "Semaphore",
    "SemaphoreStats",
    "ParallelismEstimator",
    "categorize_chunk_size",
]
