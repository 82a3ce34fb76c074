"""Logging configuration for the bootstrap framework."""

import logging
import sys

from loguru import logger


class InterceptHandler(logging.Handler):
    """Intercept standard logging messages toward loguru."""

    def emit(self, record):
        # Get corresponding loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where the logged message originated
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(log_level: str):
    """Configure loguru logging for the entire application.

    Args:
        log_level: Log level to use (from settings, which handles properties, env vars and CLI args).
    """
    log_level = log_level.upper()

    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        level=log_level,
        colorize=True,
    )

    logger.info(f"Log level set to: {log_level}")

    # Redirect all standard logging to loguru
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # The pool and driver loggers follow the application level
    for library_logger in ("sqlalchemy", "tenacity", "app_bootstrap"):
        logging.getLogger(library_logger).setLevel(log_level)


def setup_sqlalchemy_logging():
    """Configure SQLAlchemy logging to use loguru."""
    for logger_name in ("sqlalchemy", "sqlalchemy.engine", "sqlalchemy.engine.base", "sqlalchemy.dialects", "sqlalchemy.pool"):
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False
