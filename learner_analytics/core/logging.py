"""
Logging configuration for the analytics engine
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from learner_analytics.core.config import settings


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging and redirect to loguru
    """

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(level: Optional[str] = None, log_dir: Optional[Path] = None):
    """
    Route analytics logging through loguru

    Args:
        level: Override for settings.LOG_LEVEL
        log_dir: Directory for the rotating file sink (production only)
    """
    level = (level or settings.LOG_LEVEL).upper()

    # Remove default logger
    logger.remove()

    logger.add(
        sys.stdout,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
    )

    # Add file logger for production
    if settings.ENVIRONMENT == "production":
        log_path = log_dir or Path("logs")
        log_path.mkdir(exist_ok=True)

        logger.add(
            log_path / "learner_analytics_{time:YYYY-MM-DD}.log",
            rotation="100 MB",
            retention="30 days",
            enqueue=True,
            serialize=False,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )

    # Intercept everything at the root logger
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(level)

    # Analytics modules log through stdlib loggers; let them reach the root
    for name in list(logging.root.manager.loggerDict.keys()):
        if name.startswith("learner_analytics"):
            logging.getLogger(name).handlers = []
            logging.getLogger(name).propagate = True

    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} logging configured ({level})")
