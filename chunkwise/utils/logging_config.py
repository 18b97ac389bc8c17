import logging
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = "[%(levelname)s] %(name)s - %(message)s"


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    fmt: str = DEFAULT_FORMAT,
) -> None:
    """
    Configure logging for chunkwise and its callers.

    Parameters
    ----------
    level:
        Logging level name (e.g., "INFO", "DEBUG") or numeric level.
    log_file:
        Optional path to log output. When not provided, logs go to stderr.
    fmt:
        Record format passed to ``logging.basicConfig``.
    """

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    log_kwargs = {"level": level, "format": fmt}
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        log_kwargs["filename"] = log_file

    logging.basicConfig(**log_kwargs)
    logging.getLogger("chunkwise").setLevel(level)


def chunk_log_level(detailed: bool) -> int:
    """Level for per-chunk progress messages: INFO when detailed, else DEBUG."""
    return logging.INFO if detailed else logging.DEBUG
