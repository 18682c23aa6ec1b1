"""Logger configuration."""

import logging
import sys
from collections.abc import Mapping
from typing import Any

from loguru import logger
from loki_logger_handler.formatters.loguru_formatter import LoguruFormatter
from loki_logger_handler.loki_logger_handler import LokiLoggerHandler

from .config import settings

__all__ = ["config_logger"]


def config_logger() -> None:
    """Install loguru sinks for the current environment.

    Development writes a rotated log file plus colourised stdout. Production
    writes structured lines to stderr, routes stdlib logging (uvicorn,
    SQLAlchemy) through loguru, and ships to Loki when ``LOKI_URL`` is set.
    Testing only logs to stdout.
    """
    is_production = settings.app_env == "production"

    if is_production:
        _intercept_std_logging()

    logger.remove()

    if settings.app_env == "development":
        logger.add(
            settings.log_path,
            rotation=settings.rotation,
            format=_development_format,
            enqueue=True,
            backtrace=False,
            diagnose=False,
            compression="zip",
            colorize=False,
            level=logging.DEBUG,
        )

    logger.add(
        sys.stderr if is_production else sys.stdout,
        format=_production_format if is_production else _development_format,
        level=settings.log_level,
        colorize=not is_production,
        enqueue=settings.app_env != "testing",
        backtrace=not is_production,
        diagnose=not is_production,
    )

    if is_production and settings.loki_url:
        logger.add(
            LokiLoggerHandler(
                url=settings.loki_url,
                labels={
                    "application": "dlama",
                    "environment": settings.app_env,
                    "version": settings.version,
                },
                timeout=5,
                enable_structured_loki_metadata=True,
                default_formatter=LoguruFormatter(),  # type: ignore[arg-type]
            ),
            serialize=True,
            enqueue=True,
            level=settings.log_level,
        )


def _intercept_std_logging() -> None:
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(settings.log_level)

    for name in logging.root.manager.loggerDict:
        std_logger = logging.getLogger(name)
        std_logger.handlers = []
        std_logger.propagate = True


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        """Intercepts standard logging and sends it to Loguru."""
        if not self.filter(record):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_back and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _production_format(record: Mapping[str, Any]) -> str:
    """Structured single-line format for production."""
    line = (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} - {message}"
    )

    if record["extra"]:
        extras = " | ".join(f"{k}={{extra[{k}]}}" for k in record["extra"])
        line += f" | {extras}"

    return line + "\n{exception}"


def _development_format(record: Mapping[str, Any]) -> str:
    """Detailed format for development with colors and extras."""
    line = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}:{function}:{line}</cyan> - {message}"
    )

    if record["extra"]:
        extras = " | ".join(
            f"<yellow>{k}</yellow>=<cyan>{{extra[{k}]}}</cyan>" for k in record["extra"]
        )
        line += f" | {extras}"

    return line + "\n{exception}"
