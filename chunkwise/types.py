from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Chunk:
    """
    An indexed segment of a larger text payload.
    """

    index: int
    text: str

    @property
    def size(self) -> int:
        """UTF-8 byte length of the chunk text."""
        return len(self.text.encode("utf-8"))

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass
class ProcessingResult(Generic[T]):
    """Outcome of processing a single chunk.

    Attributes:
        index: Position of the chunk in the input sequence
        value: Processor return value (None on failure)
        error: Last exception raised by the processor (None on success)
        attempts_made: Number of processor invocations for this chunk
    """

    index: int
    value: Optional[T] = None
    error: Optional[BaseException] = None
    attempts_made: int = 1

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ChunkStats:
    """Diagnostic statistics for a completed run.

    Attributes:
        original_size: Size of the original content
        chunk_count: Number of chunks processed
        average_chunk_size: Rounded average chunk size
        processing_time_ms: Wall-clock processing time in milliseconds
        throughput: Rounded size units processed per millisecond
        processing_mode: "parallel" or "sequential"
    """

    original_size: int
    chunk_count: int
    average_chunk_size: int
    processing_time_ms: float
    throughput: int
    processing_mode: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
