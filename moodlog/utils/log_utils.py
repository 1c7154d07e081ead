# moodlog/utils/log_utils.py

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from typing import Optional, Union


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(level: Union[int, str] = logging.INFO, log_dir: Optional[Path] = None):
    """
    Configure root logger with:
     - RotatingFileHandler writing to ~/.moodlog/logs/moodlog.log
     - StreamHandler to console
    Idempotent: calling multiple times won’t add duplicate handlers.
    Optional `level` param can be numeric or string (e.g., logging.DEBUG or "DEBUG").
    """
    log_dir = log_dir or Path.home() / ".moodlog" / "logs"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        # If directory creation fails, log to console only
        print(f"WARNING: Could not create log directory {log_dir}: {e}")
        _configure_console_logging(level)
        return

    level = _resolve_level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    existing_handlers = list(root_logger.handlers)

    # 1) RotatingFileHandler: only add if not already present for our log file
    file_log_path = log_dir / "moodlog.log"
    add_file = True
    for h in existing_handlers:
        if isinstance(h, RotatingFileHandler):
            base = getattr(h, 'baseFilename', None)
            if base and os.path.abspath(base) == os.path.abspath(file_log_path):
                add_file = False
                break
    if add_file:
        try:
            file_handler = RotatingFileHandler(
                file_log_path,
                maxBytes=5 * 1024 * 1024,
                backupCount=3
            )
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}")

    # 2) Console handler: only add if not already present
    _add_console_handler(root_logger, level)


def _add_console_handler(root_logger: logging.Logger, level: int):
    for h in root_logger.handlers:
        # only a plain StreamHandler counts; file and capture handlers subclass it
        if type(h) is logging.StreamHandler:
            return
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)


def _configure_console_logging(level: Union[int, str] = logging.INFO):
    """
    Fallback: configure only console logging if file handler cannot be created.
    """
    level = _resolve_level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    _add_console_handler(root_logger, level)
