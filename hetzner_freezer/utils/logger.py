"""
Hetzner Freezer - Logging

Everything logs through the 'hetzner_freezer' logger.

Levels:
- INFO: workflow progress (the default console output)
- DEBUG: API requests, action state changes and step timings
- WARNING: tolerated problems, e.g. a skipped network attachment
- ERROR: the failure that stopped a workflow
"""

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path

LOGGER_NAME = 'hetzner_freezer'

DETAILED_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Longest API payload written to the debug log
PAYLOAD_LIMIT = 200


class ConsoleFormatter(logging.Formatter):
    """Plain messages for INFO, a marker prefix for everything else."""

    LEVEL_PREFIXES = {
        logging.DEBUG: '[DEBUG] ',
        logging.WARNING: '[!]  WARNING: ',
        logging.ERROR: '[X] ERROR: ',
        logging.CRITICAL: '[!!] CRITICAL: ',
    }

    def format(self, record):
        return self.LEVEL_PREFIXES.get(record.levelno, '') + record.getMessage()


def _console_handler(level: int, debug: bool, stream) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    if debug:
        handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(ConsoleFormatter())
    return handler


def _file_handler(log_file: str, level: int) -> logging.Handler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level='INFO', log_file=None, debug=False, stream=None):
    """
    Configure the freezer logger.

    Console output goes to stdout unless another stream is given. With a
    log file every record is also written there in the detailed format.
    Calling this again replaces the previous handlers.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a log file
        debug: Force DEBUG and use the detailed console format
        stream: Console stream (default: stdout)

    Returns:
        logging.Logger: The configured logger
    """
    if debug:
        level = 'DEBUG'
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    logger.addHandler(_console_handler(numeric_level, debug, stream))
    if log_file:
        logger.addHandler(_file_handler(log_file, numeric_level))
        logger.debug(f"Logging to file: {log_file}")

    return logger


def log_api_call(logger, operation: str, *args, **kwargs):
    """Debug-log an outgoing SDK call, e.g. 'API call: servers.shutdown(Server(id=42))'."""
    if not logger:
        return
    params = [repr(arg) for arg in args]
    params += [f'{key}={value!r}' for key, value in kwargs.items()]
    logger.debug(f"API call: {operation}({', '.join(params)})")


def log_api_result(logger, operation: str, payload):
    """Debug-log a translated result, shortened to PAYLOAD_LIMIT characters."""
    if not logger:
        return
    text = str(payload)
    if len(text) > PAYLOAD_LIMIT:
        text = text[:PAYLOAD_LIMIT] + '...'
    logger.debug(f"API response: {operation}: {text}")


@contextmanager
def operation_timer(logger, operation_name: str):
    """
    Debug-log how long the enclosed block took.

    Example:
        with operation_timer(logger, 'Shutdown Server'):
            ...
        # Operation completed: Shutdown Server (took 10.50s)
    """
    if logger:
        logger.debug(f"Starting operation: {operation_name}")
    started = time.monotonic()
    yield
    if logger:
        logger.debug(f"Operation completed: {operation_name} "
                     f"(took {time.monotonic() - started:.2f}s)")


def log_state_change(logger, resource: str, old_state: str, new_state: str):
    """Debug-log a transition such as 'action 42: running -> success'."""
    if logger:
        logger.debug(f"State change: {resource}: {old_state} -> {new_state}")


def log_banner(logger, title: str, width: int = 60):
    """Log a title between two rules of '=' (INFO level)."""
    rule = '=' * width
    for line in (rule, title, rule):
        logger.info(line)
