"""Logging helpers for the `structclass` logger hierarchy."""

import logging as py_logging
import os
import sys
import typing

LOGGER_NAME = "structclass"
DEFAULT_FORMAT = "[%(asctime)s] %(name)s %(levelname)s %(message)s"

_Level = typing.Union[int, str]

# Handlers installed by `setup_logging`, replaced on each call
_handlers: typing.List[py_logging.Handler] = []


def _to_level(level: _Level) -> int:
    if isinstance(level, int):
        return level
    return getattr(py_logging, level.upper(), py_logging.INFO)


def setup_logging(
    level: _Level = py_logging.INFO,
    stream: typing.Optional[typing.TextIO] = sys.stderr,
    log_file: typing.Optional[str] = None,
    format: typing.Optional[str] = None,
    datefmt: typing.Optional[str] = "%d/%b/%Y %H:%M:%S",
) -> py_logging.Logger:
    """
    Send the library's log records to a stream and/or a file.

    Only the `structclass` logger is configured; the root logger is left alone.
    Calling this again replaces the handlers added by the previous call.

    :param level: Level of the `structclass` logger.
    :param stream: Stream to log to. None disables stream logging.
    :param log_file: Path of a log file. Missing directories are created.
    :param format: Log record format.
    :param datefmt: Date format for log records.
    :return: The `structclass` logger.
    """
    logger = py_logging.getLogger(LOGGER_NAME)
    for handler in _handlers:
        logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    if stream is not None:
        _handlers.append(py_logging.StreamHandler(stream))
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        _handlers.append(py_logging.FileHandler(log_file))

    formatter = py_logging.Formatter(format or DEFAULT_FORMAT, datefmt)
    for handler in _handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(_to_level(level))
    return logger


def modify_log_level(level: _Level, logger_name: str = LOGGER_NAME) -> None:
    """Set the level of a `structclass` logger, e.g. "structclass.validation"."""
    py_logging.getLogger(logger_name).setLevel(_to_level(level))


def log_message(
    message: str,
    level: _Level = py_logging.INFO,
    logger: typing.Optional[py_logging.Logger] = None,
) -> None:
    """Log `message` on `logger`, the `structclass` logger by default."""
    (logger or py_logging.getLogger(LOGGER_NAME)).log(_to_level(level), message)
