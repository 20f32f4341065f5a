"""Structured logging for websearch.

Logs never go to stdout: the CLI prints JSON results there. Console output is
rendered for humans on stderr; a log file, when configured, gets one JSON
object per line instead.
"""

import logging
import sys
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import structlog

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    level: str | None = "INFO",
    log_file: Path | None = None,
    show_timestamps: bool = True,
) -> None:
    """Configure structlog and the stdlib loggers it sits beside.

    Calling it again replaces the previous configuration; the old log file
    handler is closed.

    Args:
        level: Log level name, or None for INFO
        log_file: Append JSON lines here instead of rendering to stderr
        show_timestamps: Add a timestamp to every event
    """
    log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        if show_timestamps:
            processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
        processors.extend([
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ])
        # Events reach the file through the root logger handler
        logger_factory: Any = structlog.stdlib.LoggerFactory()
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        if show_timestamps:
            processors.append(structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False))
        processors.extend([
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ])
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    # force=True closes and removes the handlers of any earlier call
    logging.basicConfig(level=log_level, handlers=[handler], force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger bound to a component name.

    Args:
        name: Component name (e.g., "websearch.orchestrator")

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name, component=name)


@contextmanager
def request_context(**fields: Any) -> Iterator[str]:
    """Tag every log event inside the block with a request id and fields.

    Usage:
        with request_context(tool="web_search") as request_id:
            await service.search("python")

    Yields:
        str: Short request id
    """
    request_id = uuid.uuid4().hex[:8]
    with structlog.contextvars.bound_contextvars(request_id=request_id, **fields):
        yield request_id


class AsyncTimer:
    """Async context manager timing one upstream call.

    Completion is logged at debug level, or as a warning when the call took
    longer than ``slow_after`` seconds.

    Usage:
        async with AsyncTimer("DuckDuckGo search", logger, slow_after=5) as timer:
            html = await client.get(url)
        print(f"Took {timer.elapsed:.3f}s")
    """

    def __init__(self, name: str, logger: Any | None = None, slow_after: float | None = None):
        """Initialize the timer.

        Args:
            name: Operation name for logging
            logger: Logger instance (uses default if None)
            slow_after: Seconds after which completion is logged as a warning
        """
        self.name = name
        self.logger = logger or get_logger("websearch.timer")
        self.slow_after = slow_after
        self.start_time: float = 0
        self.elapsed: float = 0

    async def __aenter__(self) -> "AsyncTimer":
        self.start_time = time.perf_counter()
        return self

    async def __aexit__(self, exc_type: Any, *args: Any) -> None:
        self.elapsed = time.perf_counter() - self.start_time
        elapsed_s = round(self.elapsed, 3)
        if exc_type is not None:
            self.logger.debug(f"Failed: {self.name}", elapsed_s=elapsed_s)
        elif self.slow_after is not None and self.elapsed > self.slow_after:
            self.logger.warning(f"Slow: {self.name}", elapsed_s=elapsed_s)
        else:
            self.logger.debug(f"Completed: {self.name}", elapsed_s=elapsed_s)
