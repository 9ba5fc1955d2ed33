"""Logging for the memory benchmark harness.

Everything logs under the ``membench`` logger tree. Console output goes to
stderr so result tables on stdout stay clean.
"""

import logging
from pathlib import Path
from typing import Optional
from rich.logging import RichHandler
from rich.console import Console


LOGGER_NAMESPACE = "membench"

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(level: str) -> int:
    """Map a level name such as ``info`` to its numeric value.

    Raises:
        ValueError: Unknown level name
    """
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'")
    return value


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``membench`` logger tree.

    Args:
        level: Logging level name
        log_file: Optional file that receives the same records, unstyled

    Returns:
        The ``membench`` logger
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(resolve_level(level))
    logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True
    )
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


class LoggerMixin:
    """Gives a class a ``membench.<classname>`` logger."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._logger = None

    @property
    def logger(self) -> logging.Logger:
        if self._logger is None:
            self._logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{self.__class__.__name__.lower()}")
        return self._logger
