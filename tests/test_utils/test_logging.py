import logging

from xorspace.utils import get_logger
from xorspace.utils.logging import PACKAGE_LOGGER, CustomFormatter


def _package_handlers(logger: logging.Logger):
    # other handlers (e.g. pytest's capture handlers) may be attached too, only count ours
    return [handler for handler in logger.handlers if isinstance(handler.formatter, CustomFormatter)]


def test_package_logger_has_default_handler():
    logger = get_logger(PACKAGE_LOGGER)
    assert len(_package_handlers(logger)) == 1
    assert not logger.propagate
    assert get_logger("xorspace.dht.identifier").parent is logger


def test_handler_is_installed_once():
    for _ in range(3):
        get_logger(__name__)
        get_logger("xorspace.utils.serializer")
    assert len(_package_handlers(logging.getLogger(PACKAGE_LOGGER))) == 1
    assert not _package_handlers(logging.getLogger())
    assert not _package_handlers(logging.getLogger(__name__))


def test_formatter_overrides_caller():
    formatter = CustomFormatter(fmt="[{levelname}] [{caller}] {message}", style="{")
    record = logging.LogRecord("xorspace.test", logging.WARNING, __file__, 1, "hello", None, None)
    assert formatter.format(record) == "[WARN] [xorspace.test.None:1] hello"

    record = logging.LogRecord("xorspace.test", logging.INFO, __file__, 1, "hello", None, None)
    record.caller = "remote_peer"
    assert formatter.format(record) == "[INFO] [remote_peer] hello"


def test_formatter_colors():
    fmt = "{levelcolor}{levelname}{reset} {message}"
    record = logging.LogRecord("xorspace.test", logging.ERROR, __file__, 1, "boom", None, None)
    assert CustomFormatter(fmt=fmt, style="{", colors=False).format(record) == "ERROR boom"
    assert CustomFormatter(fmt=fmt, style="{", colors=True).format(record) == "\033[31mERROR\033[0m boom"
