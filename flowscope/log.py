"""Logging helpers for the flowscope analyzer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

_LOGGER_NAME = "flowscope"


def get_logger(name: Optional[str] = None) -> logging.Logger:
	"""Return a logger under the flowscope hierarchy."""
	if name and not name.startswith(_LOGGER_NAME):
		name = f"{_LOGGER_NAME}.{name}"
	return logging.getLogger(name or _LOGGER_NAME)


def configure_logging(*, verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
	"""Attach a console handler and an optional file sink to the flowscope logger."""
	level = logging.DEBUG if verbose else logging.INFO
	logger = logging.getLogger(_LOGGER_NAME)
	logger.setLevel(level)
	logger.propagate = False

	# Repeated CLI invocations in one process would otherwise duplicate output.
	for handler in list(logger.handlers):
		logger.removeHandler(handler)

	stream_handler = logging.StreamHandler()
	stream_handler.setLevel(level)
	stream_handler.setFormatter(logging.Formatter("[flowscope] %(levelname)s %(message)s"))
	logger.addHandler(stream_handler)

	if log_file is not None:
		file_handler = logging.FileHandler(log_file, encoding="utf-8")
		file_handler.setLevel(level)
		file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
		logger.addHandler(file_handler)

	return logger


__all__ = ["configure_logging", "get_logger"]
