"""Utility helpers for chunkwise."""

from .logging_config import chunk_log_level, setup_logging

__all__ = [
    "setup_logging",
    "chunk_log_level",
]
