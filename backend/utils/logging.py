import logging
import os
from typing import Optional

from pythonjsonlogger import json

LOG_FORMAT = "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s"


def setup_logger(level: Optional[str] = None) -> None:
    """
    Configure JSON logging on the root logger.

    Fields passed through ``extra=`` (event name, delivery id, ...) are
    emitted as top-level keys of the JSON record.

    :param level: Log level override. Falls back to ``LOG_LEVEL``, then WARNING.
    :return: None
    """
    log_level = level or os.environ.get("LOG_LEVEL", "WARNING")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler()
    formatter = json.JsonFormatter(LOG_FORMAT, rename_fields={"levelname": "level"})
    handler.setFormatter(formatter)

    if not root_logger.handlers:
        root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the application.
    :param name: The name of the logger.
    :return: Logger object.
    """
    return logging.getLogger(name)
