"""
solomon_draft/logger.py
Shared application logger.
"""

import logging
import os
from typing import Optional

LOGGER_NAME = "solomon_draft"
LOG_FILE_NAME = "solomon_draft.log"
LOG_FORMAT = "%(asctime)s,%(levelname)s,%(module)s,%(message)s"
LOG_DATE_FORMAT = "<%d%m%Y %H:%M:%S>"


def create_logger(log_folder: Optional[str] = None, level: int = logging.INFO):
    """Return the application logger, attaching its handlers on first use"""
    logger = logging.getLogger(LOGGER_NAME)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if not logger.handlers:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
        logger.setLevel(level)

    if log_folder and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        if not os.path.exists(log_folder):
            os.makedirs(log_folder)
        file_handler = logging.FileHandler(
            os.path.join(log_folder, LOG_FILE_NAME), delay=True
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
