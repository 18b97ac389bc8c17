"""
Chunk Runner for chunkwise.

Executes a caller-supplied processor over a sequence of chunks using one of
four strategies.

Architecture:
    - Parallel: bounded fan-out over a FIFO Semaphore, fail-fast
    - Sequential: strictly in order on the calling task, fail-fast
    - Retry: bounded fan-out (or sequential) with exponential backoff and
      per-chunk failure isolation
    - Streaming: async generator, one chunk at a time, error tolerant

Ordering:
    Completion order is unconstrained, but every strategy returns results
    in input order. Fan-out strategies write into a pre-sized list by
    index, never by append.

Processors:
    ``processor(text, index)`` may return a value or an awaitable.
    Synchronous processors run in a per-run thread pool with one worker per
    permit in fan-out modes, and directly on the event loop in sequential
    and streaming modes.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

from ..config import ProcessingOptions
from ..errors import ChunkProcessingError
from ..types import Chunk, ProcessingResult
from ..utils import chunk_log_level
from .semaphore import Semaphore

logger = logging.getLogger(__name__)

T = TypeVar("T")

ChunkInput = Union[Chunk, str]
Processor = Callable[[str, int], Union[T, Awaitable[T]]]


def _chunk_text(chunk: ChunkInput) -> str:
    return chunk.text if isinstance(chunk, Chunk) else chunk


def _executor_for(processor: Processor[Any], workers: int) -> Optional[ThreadPoolExecutor]:
    """Thread pool for a synchronous processor, one worker per permit."""
    if inspect.iscoroutinefunction(processor):
        return None
    return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="chunkwise")


class ChunkRunner:
    """
    Concurrent chunk executor.

    Example:
        >>> runner = ChunkRunner()
        >>> async def count(text: str, index: int) -> int:
        ...     return len(text)
        >>> lengths = await runner.process_parallel(chunks, count)

    Resilient processing:
        >>> results = await runner.process_with_retry(
        ...     chunks,
        ...     call_model,
        ...     ProcessingOptions(max_concurrency=8, max_retries=5),
        ... )
        >>> failed = [r.index for r in results if not r.ok]

    Thread Safety:
        A runner holds no per-run state; each call creates its own
        Semaphore and result list, so concurrent calls are independent.
    """

    def __init__(self, default_options: ProcessingOptions | None = None) -> None:
        """
        Initialize the runner.

        Args:
            default_options: Options used when a call does not pass its own
        """
        self._default_options = default_options or ProcessingOptions()

    @property
    def default_options(self) -> ProcessingOptions:
        return self._default_options

    async def process(
        self,
        chunks: Sequence[ChunkInput],
        processor: Processor[T],
        options: ProcessingOptions | None = None,
    ) -> List[T]:
        """Run in parallel or sequentially depending on ``use_parallel_processing``."""
        options = options or self._default_options
        if options.use_parallel_processing:
            return await self.process_parallel(chunks, processor, options)
        return await self.process_sequential(chunks, processor, options)

    async def process_parallel(
        self,
        chunks: Sequence[ChunkInput],
        processor: Processor[T],
        options: ProcessingOptions | None = None,
    ) -> List[T]:
        """
        Process chunks concurrently, bounded by a Semaphore.

        Args:
            chunks: Chunks (or plain strings) in input order
            processor: Callable invoked as processor(text, index)
            options: Processing options (max_concurrency, logging)

        Returns:
            Processor results in input order

        Raises:
            ChunkProcessingError: If any chunk fails. Chunks still waiting for
                a permit are skipped, in-flight chunks finish, and the error
                for the lowest failing index is raised.
        """
        options = options or self._default_options
        texts = [_chunk_text(chunk) for chunk in chunks]
        total = len(texts)
        if total == 0:
            return []

        concurrency = options.resolve_concurrency(total)
        semaphore = Semaphore(concurrency)
        executor = _executor_for(processor, concurrency)
        results: List[Any] = [None] * total
        failures: Dict[int, Exception] = {}
        level = chunk_log_level(options.enable_detailed_logging)

        async def run_chunk(index: int, text: str) -> None:
            async with semaphore:
                if failures:
                    logger.debug(
                        "Skipping chunk %d/%d after earlier failure", index + 1, total
                    )
                    return
                logger.log(level, "Chunk %d/%d started", index + 1, total)
                try:
                    results[index] = await self._invoke(processor, text, index, executor)
                except Exception as e:
                    failures[index] = e
                    logger.error(
                        "Chunk %d/%d failed: %s",
                        index + 1,
                        total,
                        str(e)[:200],
                    )
                    return
                logger.log(level, "Chunk %d/%d completed", index + 1, total)

        start_time = time.perf_counter()
        logger.info(
            "Starting parallel processing: %d chunks, %d concurrent",
            total,
            concurrency,
        )

        try:
            await asyncio.gather(*(run_chunk(index, text) for index, text in enumerate(texts)))
        finally:
            if executor is not None:
                executor.shutdown(wait=False)

        if failures:
            first = min(failures)
            raise ChunkProcessingError(first, failures[first]) from failures[first]

        logger.info(
            "Parallel processing complete: %d chunks in %.1f ms",
            total,
            (time.perf_counter() - start_time) * 1000,
        )
        return results

    async def process_sequential(
        self,
        chunks: Sequence[ChunkInput],
        processor: Processor[T],
        options: ProcessingOptions | None = None,
    ) -> List[T]:
        """
        Process chunks one by one in input order.

        Raises:
            ChunkProcessingError: On the first failure; later chunks are not run
        """
        options = options or self._default_options
        texts = [_chunk_text(chunk) for chunk in chunks]
        total = len(texts)
        level = chunk_log_level(options.enable_detailed_logging)
        results: List[T] = []

        for index, text in enumerate(texts):
            logger.log(level, "Chunk %d/%d processing sequentially", index + 1, total)
            try:
                value = await self._invoke(processor, text, index)
            except Exception as e:
                logger.error("Chunk %d/%d failed: %s", index + 1, total, str(e)[:200])
                raise ChunkProcessingError(index, e) from e
            results.append(value)
            logger.log(level, "Chunk %d/%d completed", index + 1, total)

        return results

    async def process_with_retry(
        self,
        chunks: Sequence[ChunkInput],
        processor: Processor[T],
        options: ProcessingOptions | None = None,
    ) -> List[ProcessingResult[T]]:
        """
        Process chunks with per-chunk retry and exponential backoff.

        Each chunk gets up to ``max_retries`` attempts. Attempt ``n`` that
        fails is followed by a wait of ``retry_delay_base * 2 ** n`` seconds.
        The permit is released while waiting. A chunk whose attempts are all
        exhausted yields a failed ProcessingResult; nothing is raised.

        Returns:
            One ProcessingResult per chunk, in input order
        """
        options = options or self._default_options
        texts = [_chunk_text(chunk) for chunk in chunks]
        total = len(texts)
        if total == 0:
            return []

        if not options.use_parallel_processing:
            sequential: List[ProcessingResult[T]] = []
            for index, text in enumerate(texts):
                sequential.append(
                    await self._run_with_retry(processor, text, index, total, options, None, None)
                )
            return sequential

        concurrency = options.resolve_concurrency(total)
        semaphore = Semaphore(concurrency)
        executor = _executor_for(processor, concurrency)
        try:
            results = await asyncio.gather(
                *(
                    self._run_with_retry(
                        processor, text, index, total, options, semaphore, executor
                    )
                    for index, text in enumerate(texts)
                )
            )
        finally:
            if executor is not None:
                executor.shutdown(wait=False)

        failure_count = sum(1 for result in results if not result.ok)
        logger.info(
            "Retry processing complete: %d/%d success, %d failed",
            total - failure_count,
            total,
            failure_count,
        )
        return list(results)

    async def process_streaming(
        self,
        chunks: Sequence[ChunkInput],
        processor: Processor[T],
        options: ProcessingOptions | None = None,
    ) -> AsyncIterator[ProcessingResult[T]]:
        """
        Process chunks lazily, yielding one result per chunk in input order.

        Failures are yielded with ``error`` set and ``value`` None; the
        stream continues with the next chunk. Each call starts again from
        chunk 0.

        Example:
            >>> async for item in runner.process_streaming(chunks, processor):
            ...     if item.ok:
            ...         save(item.index, item.value)
        """
        options = options or self._default_options
        total = len(chunks)
        level = chunk_log_level(options.enable_detailed_logging)

        for index, chunk in enumerate(chunks):
            logger.log(level, "Streaming chunk %d/%d", index + 1, total)
            try:
                value = await self._invoke(processor, _chunk_text(chunk), index)
            except Exception as e:
                logger.error(
                    "Streaming chunk %d/%d failed: %s", index + 1, total, str(e)[:200]
                )
                yield ProcessingResult(index=index, error=e)
                continue
            yield ProcessingResult(index=index, value=value)

    async def _run_with_retry(
        self,
        processor: Processor[T],
        text: str,
        index: int,
        total: int,
        options: ProcessingOptions,
        semaphore: Optional[Semaphore],
        executor: Optional[ThreadPoolExecutor],
    ) -> ProcessingResult[T]:
        last_error: Optional[Exception] = None

        for attempt in range(1, options.max_retries + 1):
            try:
                if semaphore is None:
                    value = await self._invoke(processor, text, index)
                else:
                    async with semaphore:
                        value = await self._invoke(processor, text, index, executor)
                return ProcessingResult(index=index, value=value, attempts_made=attempt)
            except Exception as e:
                last_error = e
                if attempt == options.max_retries:
                    break
                delay = options.retry_delay_base * (2**attempt)
                logger.warning(
                    "Chunk %d/%d attempt %d/%d failed, retrying in %.1fs: %s",
                    index + 1,
                    total,
                    attempt,
                    options.max_retries,
                    delay,
                    str(e)[:100],
                )
                await asyncio.sleep(delay)

        logger.error(
            "Chunk %d/%d failed after %d attempts, skipping: %s",
            index + 1,
            total,
            options.max_retries,
            str(last_error)[:200],
        )
        return ProcessingResult(
            index=index,
            error=last_error,
            attempts_made=options.max_retries,
        )

    async def _invoke(
        self,
        processor: Processor[T],
        text: str,
        index: int,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> T:
        if executor is not None:
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(executor, functools.partial(processor, text, index))
        else:
            result = processor(text, index)

        if inspect.isawaitable(result):
            return await result
        return result
