"""
Logging setup using structlog.
Provides structured logging with JSON or console output and a run-scoped helper.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Union
import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site details to every event
    """

    # Diagnostics go to stderr so stdout stays clean for scheduled jobs
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(logging.Formatter('%(message)s'))

        logging.getLogger().addHandler(file_handler)

    logger = structlog.get_logger(__name__)
    logger.debug(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class RunLogger:
    """
    Logger for a single watcher run with context management.
    """

    def __init__(self, name: str = "watcher"):
        self.logger = structlog.get_logger(name)
        self.context = {}

    def bind_context(self, **kwargs) -> 'RunLogger':
        """
        Bind context variables to the logger.

        Args:
            **kwargs: Context variables to bind

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def clear_context(self) -> 'RunLogger':
        """Clear all context variables."""
        self.context.clear()
        return self

    def log_run_start(self, source_url: str) -> None:
        """Log run start; delivery and run options come from the bound context."""
        self.logger.info(
            "Changelog check started",
            source_url=source_url,
            **self.context
        )

    def log_new_entries(self, versions: List[str], first_run: bool) -> None:
        """Log the outcome of the diff step."""
        if not versions:
            self.logger.info("No new changelog entries found", first_run=first_run, **self.context)
            return
        self.logger.info(
            "Found new changelog entries",
            count=len(versions),
            versions=versions,
            first_run=first_run,
            **self.context
        )

    def log_delivered(self, version: str, channel: str, message_id: Optional[str] = None) -> None:
        """Log a single delivered message."""
        self.logger.info(
            "Changelog entry delivered",
            version=version,
            channel=channel,
            message_id=message_id,
            **self.context
        )

    def log_cache_saved(self, path: str, size: int) -> None:
        """Log snapshot persistence."""
        self.logger.debug(
            "Changelog snapshot saved",
            path=path,
            bytes=size,
            **self.context
        )

    def log_run_complete(self, delivered: int, duration_seconds: float) -> None:
        """Log run completion."""
        self.logger.info(
            "Changelog check completed",
            messages_delivered=delivered,
            duration_seconds=round(duration_seconds, 3),
            **self.context
        )

    def log_error(self, error: str, stage: Optional[str] = None) -> None:
        """Log error with context."""
        self.logger.error(
            "Changelog check failed",
            error=error,
            stage=stage,
            **self.context
        )
