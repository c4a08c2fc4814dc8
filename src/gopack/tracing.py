"""
Timing decorator for top-level resolution operations.
"""

import time
import functools
from typing import Callable, Any
from gopack.logging_config import logger


def trace(func: Callable) -> Callable:
    """
    Decorator that logs function entry, exit, and execution time.

    Usage:
        @trace
        def install(...):
            ...
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        func_name = func.__qualname__

        logger.debug(f"TRACE_ENTER: {func_name}")

        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
            duration = time.perf_counter() - start_time

            logger.debug(f"TRACE_EXIT: {func_name} completed in {duration:.4f}s")

            return result

        except Exception as e:
            duration = time.perf_counter() - start_time

            logger.debug(
                f"TRACE_EXIT: {func_name} failed after {duration:.4f}s with {type(e).__name__}: {str(e)}"
            )

            raise

    return wrapper
