"""Root logger configuration shared by the bot and the report CLI."""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_file: Optional[str] = None, level: Optional[str] = None) -> logging.Logger:
	"""Attach stream (and optionally rotating file) handlers to the root logger.

	Safe to call more than once: handlers are only added if missing.
	"""
	level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
	log_file = log_file or os.getenv("LOG_FILE")

	root_logger = logging.getLogger()
	root_logger.setLevel(getattr(logging, level_name, logging.INFO))

	formatter = logging.Formatter(LOG_FORMAT)

	if not any(type(h) is logging.StreamHandler for h in root_logger.handlers):
		stream_handler = logging.StreamHandler()
		stream_handler.setFormatter(formatter)
		root_logger.addHandler(stream_handler)

	if log_file:
		log_path = Path(log_file).expanduser().resolve()
		log_path.parent.mkdir(parents=True, exist_ok=True)
		if not any(isinstance(h, RotatingFileHandler) and getattr(h, 'baseFilename', None) == str(log_path) for h in root_logger.handlers):
			file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
			file_handler.setFormatter(formatter)
			root_logger.addHandler(file_handler)

	return root_logger


__all__ = ["LOG_FORMAT", "setup_logging"]
