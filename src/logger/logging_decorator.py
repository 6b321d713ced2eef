"""
Centralized logging setup and function decorator.

Every job writes to its own file under the log directory (LOG_DIR, default
"logs/"). Console output stays reserved for the run summaries printed by the
CLIs unless --verbose is passed.

Usage:
    from src.logger import setup_logging, log_function

    logger = setup_logging("sync_radio", verbose=True)

    @log_function(logger_name="sync_radio", log_args=True)
    def sync_radio_messages(client, store, year=None):
        ...
"""

import functools
import logging
import os
import time
from pathlib import Path
from typing import Optional, Callable, Any


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    logger_name: str,
    log_file: Optional[str] = None,
    verbose: bool = False,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Set up a logger with a file handler and an optional console handler.

    Args:
        logger_name: Name for the logger (e.g., "transcription")
        log_file: Path to log file (default: "<LOG_DIR>/<logger_name>.log")
        verbose: If True, also log DEBUG and above to the console
        level: Base logging level for the file handler

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    if verbose and not any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    ):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(console_handler)
        logger.setLevel(logging.DEBUG)

    # Avoid adding a second file handler on repeated setup
    if any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        return logger

    if not verbose:
        logger.setLevel(level)

    if log_file is None:
        log_file = os.path.join(os.getenv("LOG_DIR", "logs"), f"{logger_name}.log")

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)

    return logger


def log_function(
    logger_name: Optional[str] = None,
    level: int = logging.INFO,
    log_args: bool = False,
    log_result: bool = False,
    log_execution_time: bool = True,
) -> Callable:
    """
    Decorator logging entry, exit, execution time and exceptions of a job step.

    Args:
        logger_name: Logger to use (default: the decorated function's module)
        level: Log level for entry/exit messages
        log_args: If True, include the call arguments in the entry message
        log_result: If True, include the return value in the exit message
        log_execution_time: If True, include the duration in the exit message

    Returns:
        Decorated function. Exceptions are logged then re-raised unchanged.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            logger = logging.getLogger(logger_name or func.__module__)
            func_name = func.__name__

            log_msg = f"Calling {func_name}"
            if log_args and (args or kwargs):
                args_repr = [repr(a) for a in args]
                kwargs_repr = [f"{k}={v!r}" for k, v in kwargs.items()]
                log_msg += f" with args: {', '.join(args_repr + kwargs_repr)}"
            logger.log(level, log_msg)

            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                execution_time = time.perf_counter() - start_time
                logger.error(
                    f"Exception in {func_name} after {execution_time:.2f}s: "
                    f"{type(e).__name__}: {e}"
                )
                raise

            completion_msg = f"Completed {func_name}"
            if log_execution_time:
                completion_msg += f" in {time.perf_counter() - start_time:.2f}s"
            if log_result:
                completion_msg += f" with result: {result!r}"
            logger.log(level, completion_msg)

            return result

        return wrapper

    return decorator
