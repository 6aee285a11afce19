"""Logging configuration."""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_dir: Optional[str] = None, level: Union[int, str, None] = None) -> Path:
    """Set up logging configuration.

    Args:
        log_dir: Directory to store log files (defaults to Config.LOG_DIR)
        level: Logging level (defaults to Config.LOG_LEVEL)

    Returns:
        Path of the log file
    """
    from ..config import Config

    # Create logs directory
    log_path = Path(log_dir or Config.LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)

    # Create log filename with timestamp
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_path / f"citepay_{timestamp}.log"

    if level is None:
        level = Config.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    # Set up handlers
    handlers = [
        logging.FileHandler(log_file, encoding="utf-8"),
        logging.StreamHandler()  # Console output
    ]

    # Configure logging
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True
    )

    logging.info("Logging initialized")
    logging.info(f"Log file: {log_file}")
    return log_file


def log_operation(operation: str, details: str, level: int = logging.INFO) -> None:
    """Log an operation with details."""
    logging.log(level, f"{operation}: {details}")
