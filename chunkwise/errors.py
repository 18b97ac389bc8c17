from __future__ import annotations


class ChunkwiseError(Exception):
    """Base class for all chunkwise errors."""


class ChunkProcessingError(ChunkwiseError):
    """
    Raised when the processor fails for a chunk in a fail-fast mode.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, index: int, cause: BaseException) -> None:
        self.index = index
        self.cause = cause
        super().__init__(f"Chunk {index} failed: {type(cause).__name__}: {cause}")


class ConfigurationError(ChunkwiseError, ValueError):
    """Raised for invalid processing options."""
