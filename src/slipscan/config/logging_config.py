"""
Simple logging configuration for the sample scanner.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(config: Dict[str, Any]) -> None:
    """Setup console and rotating file logging."""

    log_level = config.get("log_level", "INFO").upper()
    log_file = config.get("log_file", "logs/scanner.log")
    debug = config.get("debug", False)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    level = logging.DEBUG if debug else getattr(logging, log_level, logging.INFO)
    root_logger.setLevel(level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    try:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    except OSError as e:
        print(f"Warning: Could not setup file logging: {e}")

    # Configure third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
