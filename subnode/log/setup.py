import sys
import logging
from pathlib import Path
from typing import Optional
from logging.handlers import RotatingFileHandler

from subnode.local import app_settings as config

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class MainFormatter(logging.Formatter):
    """
    Formats console output like the shell tooling operators are used to:
    `[date time] message`. Debug records also carry the level and logger name.
    """

    def __init__(self) -> None:
        super().__init__(datefmt=DATE_FORMAT)

    def format(self, record):
        # Temporarily change the format string for the superclass call.
        original_format = self._style._fmt
        if record.levelno == logging.INFO:
            self._style._fmt = '[%(asctime)s] %(message)s'
        else:
            self._style._fmt = '[%(asctime)s] %(levelname)s [%(name)s] %(message)s'
        formatted_message = super().format(record)
        self._style._fmt = original_format
        return formatted_message


def setup_logging(console_level: int = logging.INFO, log_path: Optional[Path] = None) -> None:
    """
    Configures the root logger for the manager.
    This sets up a console handler and a rotating audit file of manager actions,
    clearing any previously configured handlers to prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    :param log_path: The audit log file; defaults to MANAGER_LOG_PATH. The node's own output never goes here.
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to prevent re-adding them on re-runs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(MainFormatter())
    root_logger.addHandler(console_handler)

    # --- Audit File Handler (skipped when the node directory is unusable) ---
    log_path = Path(log_path or config.MANAGER_LOG_PATH)
    try:
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=config.MANAGER_LOG_MAX_BYTES,
            backupCount=config.MANAGER_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'))
        root_logger.addHandler(file_handler)
    except OSError as e:
        root_logger.debug(f"Manager audit log disabled, cannot open '{log_path}': {e}")
