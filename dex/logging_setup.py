"""structlog setup shared by the API server and scripts."""

import logging

import structlog


def configure_logging(level: str | int = "INFO") -> None:
    """Configure structlog with level filtering and console rendering.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or a logging level int
    """
    if isinstance(level, str):
        log_level = logging.getLevelName(level.upper())
        if not isinstance(log_level, int):
            raise ValueError(f"Unknown log level: {level}")
    else:
        log_level = level

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
