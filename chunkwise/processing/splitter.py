from __future__ import annotations

from typing import List, Optional, Sequence

from ..config import DEFAULT_CHUNK_SIZE
from ..errors import ConfigurationError
from ..types import Chunk

DEFAULT_BOUNDARIES = ("。", ".", "!", "?", "！", "？", "\n")


class ChunkSplitter:
    """
    Splits large text into bounded chunks, preferring sentence or line breaks.

    Each window of ``chunk_size`` characters is cut just after the last
    boundary character inside it, unless that would leave the chunk less
    than ``min_fill_ratio`` full, in which case the raw window end is used.
    """

    def __init__(
        self,
        boundaries: Sequence[str] = DEFAULT_BOUNDARIES,
        min_fill_ratio: float = 0.5,
    ) -> None:
        if not 0 <= min_fill_ratio <= 1:
            raise ConfigurationError(f"min_fill_ratio must be in [0, 1], got {min_fill_ratio}")
        self._boundaries = tuple(boundaries)
        self._min_fill_ratio = min_fill_ratio

    def split(self, content: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[Chunk]:
        if chunk_size < 1:
            raise ConfigurationError(f"chunk_size must be >= 1, got {chunk_size}")

        texts = [piece for piece in self._cut(content, chunk_size) if piece.strip()]
        return [Chunk(index=index, text=text) for index, text in enumerate(texts)]

    def split_text(self, content: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[str]:
        return [chunk.text for chunk in self.split(content, chunk_size)]

    def _cut(self, content: str, chunk_size: int) -> List[str]:
        if len(content) <= chunk_size:
            return [content]

        pieces: List[str] = []
        length = len(content)
        position = 0

        while position < length:
            end = min(position + chunk_size, length)
            if end < length:
                boundary = self._last_boundary(content, position, end)
                if boundary is not None and boundary - position >= chunk_size * self._min_fill_ratio:
                    end = boundary
            pieces.append(content[position:end])
            position = end

        return pieces

    def _last_boundary(self, content: str, start: int, end: int) -> Optional[int]:
        """Offset just after the last boundary character in [start, end)."""
        last = max((content.rfind(mark, start, end) for mark in self._boundaries), default=-1)
        if last < 0:
            return None
        return last + 1
