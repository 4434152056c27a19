""" Colored log output for the xorspace package, configured via XORSPACE_LOGLEVEL and XORSPACE_COLORS """
import logging
import os
import sys
import threading
from typing import Optional

PACKAGE_LOGGER = "xorspace"

logging.addLevelName(logging.WARNING, "WARN")

loglevel = os.getenv("XORSPACE_LOGLEVEL", "INFO")

_env_colors = os.getenv("XORSPACE_COLORS")
use_colors = sys.stderr.isatty() if _env_colors is None else _env_colors.lower() == "true"

_init_lock = threading.RLock()
_default_handler: Optional[logging.Handler] = None


class CustomFormatter(logging.Formatter):
    """
    Prefixes every level name with an ANSI color (when colors are enabled) and fills in a ``caller`` field.
    Both the caller and the log time can be overridden with
    ``logger.log(level, message, extra={"caller": ..., "origin_created": ...})``.
    """

    RESET, BOLD = "\033[0m", "\033[1m"
    _LEVEL_TO_COLOR = {
        logging.DEBUG: "\033[35m",
        logging.INFO: "\033[34m",
        logging.WARNING: "\033[38;5;208m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[31m",
    }

    def __init__(self, *args, colors: bool = use_colors, **kwargs):
        super().__init__(*args, **kwargs)
        self.colors = colors

    def format(self, record: logging.LogRecord) -> str:
        if hasattr(record, "origin_created"):
            record.created = record.origin_created
            record.msecs = (record.created - int(record.created)) * 1000
        if not hasattr(record, "caller"):
            record.caller = f"{record.name}.{record.funcName}:{record.lineno}"

        if self.colors:
            record.levelcolor, record.bold, record.reset = (
                self._LEVEL_TO_COLOR.get(record.levelno, ""),
                self.BOLD,
                self.RESET,
            )
        else:
            record.levelcolor = record.bold = record.reset = ""
        return super().format(record)


def _initialize_if_necessary():
    global _default_handler

    with _init_lock:
        if _default_handler is not None:
            return

        _default_handler = logging.StreamHandler()
        _default_handler.setFormatter(
            CustomFormatter(
                fmt="{asctime}.{msecs:03.0f} [{bold}{levelcolor}{levelname}{reset}] [{bold}{caller}{reset}] {message}",
                style="{",
                datefmt="%b %d %H:%M:%S",
            )
        )
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.addHandler(_default_handler)
        package_logger.propagate = False
        package_logger.setLevel(loglevel)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Same as ``logging.getLogger()`` but ensures that the xorspace log handler is installed.

    :note: the handler is attached to the ``xorspace`` logger only, so it formats messages of this package
      (at the ``XORSPACE_LOGLEVEL`` level) and leaves the loggers of your application alone.
    """
    _initialize_if_necessary()
    return logging.getLogger(name)
