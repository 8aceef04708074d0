"""
Logging setup for signing scripts.
Console output always; optional daily-rotated file under `log_dir`.
"""

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.INFO, log_dir: Optional[str] = None) -> None:
    """Configure the root logger; with `log_dir`, rotate daily and keep 7 files."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
               for h in root_logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root_logger.addHandler(console)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handler = TimedRotatingFileHandler(
            filename=os.path.join(log_dir, "signing.log"),
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8"
        )
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
        logger.info("Log rotation configured (daily, keep 7 days) in %s", log_dir)
