"""
Parallelism estimation for chunk fan-out.

Trades a memory budget against a CPU-style concurrency cap and scales the
result by how large the average chunk is: many small chunks tolerate more
parallelism, few large chunks less.
"""

from __future__ import annotations

import logging
import math

from ..config import DEFAULT_MAX_CONCURRENCY, ProcessingOptions

logger = logging.getLogger(__name__)

SMALL_CHUNK_LIMIT = 5_000
MEDIUM_CHUNK_LIMIT = 20_000

SIZE_MULTIPLIERS = {
    "small": 1.5,
    "medium": 1.0,
    "large": 0.7,
}


def categorize_chunk_size(average_chunk_size: float) -> str:
    """Classify an average chunk size as small, medium or large."""
    if average_chunk_size < SMALL_CHUNK_LIMIT:
        return "small"
    if average_chunk_size < MEDIUM_CHUNK_LIMIT:
        return "medium"
    return "large"


class ParallelismEstimator:
    """
    Recommends a concurrency level for a chunked run.

    The value is advisory; callers may ignore it and set
    ``ProcessingOptions.max_concurrency`` themselves.

    Example:
        >>> estimator = ParallelismEstimator()
        >>> estimator.estimate(content_size=120_000, chunk_count=3)
        2
    """

    def estimate(
        self,
        content_size: int,
        chunk_count: int,
        options: ProcessingOptions | None = None,
    ) -> int:
        """
        Estimate a concurrency level.

        Args:
            content_size: Total content size (bytes)
            chunk_count: Number of chunks the content was split into
            options: Supplies max_concurrency and the memory budget

        Returns:
            Recommended concurrency, always >= 1
        """
        if chunk_count < 1:
            return 1

        options = options or ProcessingOptions()
        average_chunk_size = content_size / chunk_count

        if average_chunk_size > 0:
            memory_limit = math.floor(options.memory_budget_bytes / average_chunk_size)
        else:
            memory_limit = chunk_count

        max_concurrency = options.max_concurrency or DEFAULT_MAX_CONCURRENCY
        cpu_limit = min(chunk_count, max_concurrency)

        category = categorize_chunk_size(average_chunk_size)
        multiplier = SIZE_MULTIPLIERS[category]

        scaled = math.floor(min(memory_limit, cpu_limit) * multiplier)
        estimate = max(1, min(chunk_count, scaled))

        logger.info(
            "Estimated parallelism %d (chunks=%d, category=%s, memory_limit=%d, cpu_limit=%d)",
            estimate,
            chunk_count,
            category,
            memory_limit,
            cpu_limit,
        )
        return estimate

    def estimate_for_content(
        self,
        content: str,
        chunk_count: int,
        options: ProcessingOptions | None = None,
    ) -> int:
        """Estimate using the UTF-8 byte length of ``content``."""
        return self.estimate(len(content.encode("utf-8")), chunk_count, options)
