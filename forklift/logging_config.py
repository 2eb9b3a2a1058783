import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import config


def setup_logging() -> None:
    """Configure logging for scripts and test sessions driving the harness."""
    level = getattr(logging, config.LOGGING.LEVEL, logging.INFO)

    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if config.LOGGING.FILE:
        log_file = Path(config.LOGGING.FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=int(config.LOGGING.MAX_BYTES),
            backupCount=int(config.LOGGING.BACKUP_COUNT),
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(level)
