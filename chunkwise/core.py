from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncIterator,
    Callable,
    Dict,
    Generic,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    TypeVar,
)

from .config import ProcessingOptions
from .parallel.estimator import ParallelismEstimator
from .parallel.runner import ChunkInput, ChunkRunner, Processor
from .processing import combiner, stats as run_stats
from .processing.splitter import ChunkSplitter
from .types import Chunk, ChunkStats, ProcessingResult
from .utils import setup_logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ChunkRunReport(Generic[T]):
    """Results of an end-to-end run over a piece of content."""

    results: List[T]
    stats: ChunkStats
    chunks: List[Chunk] = field(default_factory=list)
    concurrency: int = 1


class ChunkProcessor:
    """
    High-level entry point for chunked processing.

    Pipeline:
        content -> ChunkSplitter -> ParallelismEstimator -> ChunkRunner -> stats
    """

    def __init__(
        self,
        options: ProcessingOptions | None = None,
        splitter: ChunkSplitter | None = None,
        estimator: ParallelismEstimator | None = None,
        log_level: Optional[str] = None,
    ) -> None:
        if log_level:
            setup_logging(log_level)
        self._options = options or ProcessingOptions()
        self._splitter = splitter or ChunkSplitter()
        self._estimator = estimator or ParallelismEstimator()
        self._runner = ChunkRunner(self._options)

    @property
    def options(self) -> ProcessingOptions:
        return self._options

    def split(self, content: str, chunk_size: int | None = None) -> List[Chunk]:
        size = chunk_size if chunk_size is not None else self._options.chunk_size
        return self._splitter.split(content, size)

    def estimate_parallelism(
        self,
        content: str,
        chunk_count: int,
        options: ProcessingOptions | None = None,
    ) -> int:
        return self._estimator.estimate_for_content(content, chunk_count, options or self._options)

    async def process_parallel(
        self,
        chunks: Sequence[ChunkInput],
        processor: Processor[T],
        options: ProcessingOptions | None = None,
    ) -> List[T]:
        return await self._runner.process_parallel(chunks, processor, options)

    async def process_sequential(
        self,
        chunks: Sequence[ChunkInput],
        processor: Processor[T],
        options: ProcessingOptions | None = None,
    ) -> List[T]:
        return await self._runner.process_sequential(chunks, processor, options)

    async def process_with_retry(
        self,
        chunks: Sequence[ChunkInput],
        processor: Processor[T],
        options: ProcessingOptions | None = None,
    ) -> List[ProcessingResult[T]]:
        return await self._runner.process_with_retry(chunks, processor, options)

    def process_streaming(
        self,
        chunks: Sequence[ChunkInput],
        processor: Processor[T],
        options: ProcessingOptions | None = None,
    ) -> AsyncIterator[ProcessingResult[T]]:
        return self._runner.process_streaming(chunks, processor, options)

    def combine(self, results: Sequence[T], combiner_fn: Callable[[T, T], T]) -> Optional[T]:
        return combiner.combine(results, combiner_fn)

    def merge_arrays(self, results: Iterable[Iterable[T]]) -> List[T]:
        return combiner.merge_arrays(results)

    def merge_objects(self, results: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
        return combiner.merge_objects(results)

    def generate_stats(
        self,
        original_size: int,
        chunk_count: int,
        processing_time_ms: float,
        options: ProcessingOptions | None = None,
    ) -> ChunkStats:
        return run_stats.generate_stats(
            original_size, chunk_count, processing_time_ms, options or self._options
        )

    def suggest_optimizations(self, chunk_stats: ChunkStats) -> List[str]:
        return run_stats.suggest_optimizations(chunk_stats)

    async def run(
        self,
        content: str,
        processor: Processor[T],
        options: ProcessingOptions | None = None,
    ) -> ChunkRunReport[T]:
        """
        Split ``content``, process every chunk and collect statistics.

        When ``max_concurrency`` is unset, the estimator's recommendation is
        used for parallel runs.
        """
        options = options or self._options
        chunks = self._splitter.split(content, options.chunk_size)
        concurrency = 1

        if options.use_parallel_processing and chunks:
            if options.max_concurrency is None:
                concurrency = self._estimator.estimate_for_content(content, len(chunks), options)
                options = options.with_overrides(max_concurrency=concurrency)
            else:
                concurrency = options.max_concurrency

        start_time = time.perf_counter()
        results = await self._runner.process(chunks, processor, options)
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        chunk_stats = run_stats.generate_stats(
            len(content.encode("utf-8")), len(chunks), elapsed_ms, options
        )
        logger.info(
            "Run complete: %d chunks, mode=%s, %.1f ms, throughput=%d",
            chunk_stats.chunk_count,
            chunk_stats.processing_mode,
            chunk_stats.processing_time_ms,
            chunk_stats.throughput,
        )
        return ChunkRunReport(
            results=results,
            stats=chunk_stats,
            chunks=chunks,
            concurrency=concurrency,
        )


def run_sync(
    content: str,
    processor: Processor[T],
    options: ProcessingOptions | None = None,
) -> ChunkRunReport[T]:
    """
    Synchronous wrapper around ChunkProcessor.run.

    Example:
        >>> from chunkwise import run_sync
        >>> report = run_sync(text, lambda chunk, index: len(chunk))
    """

    async def _run() -> ChunkRunReport[T]:
        return await ChunkProcessor(options).run(content, processor)

    return asyncio.run(_run())
