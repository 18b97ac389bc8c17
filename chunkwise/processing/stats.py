"""
Run statistics and tuning hints.

Pure arithmetic over a finished run. Used for diagnostics only; nothing in
the executors branches on these values.
"""

from __future__ import annotations

from typing import List

from ..config import ProcessingOptions
from ..types import ChunkStats

SMALL_AVERAGE_CHUNK = 1_000
LARGE_AVERAGE_CHUNK = 50_000
LOW_THROUGHPUT = 1_000


def generate_stats(
    original_size: int,
    chunk_count: int,
    processing_time_ms: float,
    options: ProcessingOptions | None = None,
) -> ChunkStats:
    """
    Build statistics for a completed run.

    Args:
        original_size: Size of the original content
        chunk_count: Number of chunks processed
        processing_time_ms: Wall-clock time in milliseconds
        options: Options the run used (decides the reported mode)

    Returns:
        ChunkStats with rounded average size and throughput (size per ms)
    """
    options = options or ProcessingOptions()
    average_chunk_size = round(original_size / chunk_count) if chunk_count > 0 else 0
    throughput = round(original_size / processing_time_ms) if processing_time_ms > 0 else 0

    return ChunkStats(
        original_size=original_size,
        chunk_count=chunk_count,
        average_chunk_size=average_chunk_size,
        processing_time_ms=processing_time_ms,
        throughput=throughput,
        processing_mode="parallel" if options.use_parallel_processing else "sequential",
    )


def suggest_optimizations(stats: ChunkStats) -> List[str]:
    suggestions: List[str] = []

    if stats.average_chunk_size < SMALL_AVERAGE_CHUNK:
        suggestions.append(
            "Chunks are very small; larger chunks would reduce per-chunk overhead."
        )
    elif stats.average_chunk_size > LARGE_AVERAGE_CHUNK:
        suggestions.append(
            "Chunks are very large; smaller chunks would lower peak memory use."
        )

    if stats.processing_mode == "sequential" and stats.chunk_count >= 4:
        suggestions.append("Enabling parallel processing may shorten the run.")
    elif stats.processing_mode == "parallel" and stats.chunk_count < 2:
        suggestions.append("Too few chunks to benefit from parallel processing; try sequential.")

    if stats.throughput < LOW_THROUGHPUT:
        suggestions.append("Throughput is low; consider tuning chunk_size or max_concurrency.")

    return suggestions
