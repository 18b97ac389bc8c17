"""Order-preserving helpers for merging per-chunk results."""

from __future__ import annotations

from functools import reduce
from itertools import chain
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar

from ..types import ProcessingResult

T = TypeVar("T")


def combine(results: Sequence[T], combiner: Callable[[T, T], T]) -> Optional[T]:
    """Left-fold ``results`` with ``combiner``; None for an empty sequence."""
    if not results:
        return None
    if len(results) == 1:
        return results[0]
    return reduce(combiner, results)


def merge_arrays(results: Iterable[Iterable[T]]) -> List[T]:
    return list(chain.from_iterable(results))


def merge_objects(results: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Shallow merge; later chunks win on key collisions."""
    merged: Dict[str, Any] = {}
    for result in results:
        merged.update(result)
    return merged


def successful_values(results: Iterable[ProcessingResult[T]]) -> List[T]:
    return [result.value for result in results if result.ok]


def failed_indices(results: Iterable[ProcessingResult[Any]]) -> List[int]:
    return [result.index for result in results if not result.ok]
