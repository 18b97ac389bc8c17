from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .errors import ConfigurationError

DEFAULT_CHUNK_SIZE = 10_000
DEFAULT_MAX_CONCURRENCY = 4
DEFAULT_MEMORY_BUDGET_BYTES = 1024 * 1024 * 1024

# camelCase names used by callers of the JavaScript-era API
_ALIASES = {
    "useParallelProcessing": "use_parallel_processing",
    "maxConcurrency": "max_concurrency",
    "chunkSize": "chunk_size",
    "enableDetailedLogging": "enable_detailed_logging",
    "preserveOriginalOrder": "preserve_original_order",
    "maxRetries": "max_retries",
    "retryDelayBase": "retry_delay_base",
    "memoryBudgetBytes": "memory_budget_bytes",
}


def _require_int(name: str, value: Any) -> None:
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class ProcessingOptions:
    """Configuration for a single processing invocation.

    Attributes:
        use_parallel_processing: Fan chunks out concurrently (False = sequential)
        max_concurrency: Permit count; None means min(4, chunk count)
        chunk_size: Target chunk size in characters
        enable_detailed_logging: Log per-chunk progress at INFO instead of DEBUG
        preserve_original_order: Results follow input order (always honoured)
        max_retries: Attempts per chunk in retry mode
        retry_delay_base: Backoff base in seconds; attempt n waits base * 2**n
        memory_budget_bytes: Memory budget assumed by the parallelism estimator
    """

    use_parallel_processing: bool = True
    max_concurrency: int | None = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    enable_detailed_logging: bool = False
    preserve_original_order: bool = True
    max_retries: int = 3
    retry_delay_base: float = 1.0
    memory_budget_bytes: int = DEFAULT_MEMORY_BUDGET_BYTES

    def __post_init__(self) -> None:
        for name in ("chunk_size", "max_retries", "memory_budget_bytes"):
            _require_int(name, getattr(self, name))
        if self.max_concurrency is not None:
            _require_int("max_concurrency", self.max_concurrency)
        if isinstance(self.retry_delay_base, bool) or not isinstance(
            self.retry_delay_base, (int, float)
        ):
            raise ConfigurationError(
                f"retry_delay_base must be a number, got {self.retry_delay_base!r}"
            )

        if self.max_concurrency is not None and self.max_concurrency < 1:
            object.__setattr__(self, "max_concurrency", 1)
        if self.chunk_size < 1:
            raise ConfigurationError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.max_retries < 1:
            raise ConfigurationError(f"max_retries must be >= 1, got {self.max_retries}")
        if self.retry_delay_base < 0:
            raise ConfigurationError(
                f"retry_delay_base must be >= 0, got {self.retry_delay_base}"
            )
        if self.memory_budget_bytes < 1:
            raise ConfigurationError(
                f"memory_budget_bytes must be >= 1, got {self.memory_budget_bytes}"
            )

    def resolve_concurrency(self, chunk_count: int) -> int:
        """Effective permit count for a run over ``chunk_count`` chunks."""
        if self.max_concurrency is not None:
            return self.max_concurrency
        return max(1, min(DEFAULT_MAX_CONCURRENCY, chunk_count))

    def with_overrides(self, **changes: Any) -> "ProcessingOptions":
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ProcessingOptions":
        """
        Build options from a plain mapping.

        Accepts snake_case field names or their camelCase equivalents.
        Unknown keys raise ConfigurationError.
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown processing option: {key}")
            kwargs[name] = value
        return cls(**kwargs)


def load_processing_options(path: str | Path) -> ProcessingOptions:
    """
    Load processing options from a YAML file.

    The file may either hold the options at the top level or under a
    ``processing`` key.
    """
    data = yaml.safe_load(Path(path).read_text()) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping in {path}, got {type(data).__name__}")
    section = data.get("processing", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"'processing' section in {path} must be a mapping")
    return ProcessingOptions.from_mapping(section)
