# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Client Decorators Module

Provides decorators for common patterns around outbound calls:
- Timed request/response logging
- Best-effort execution for non-critical commands

These decorators eliminate repetitive try/log blocks in the HTTP clients and
the playback synchronizer.
"""

import functools
import logging
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)


def with_request_logging(
    operation: str = "",
    log_level: int = logging.DEBUG,
) -> Callable:
    """
    Decorator to log outbound calls and their outcome.

    Usage:
    ```python
    @with_request_logging("submit_answer")
    async def submit_answer(self, ...):
        ...
    ```

    Failures are logged at WARNING and re-raised unchanged.

    Args:
        operation: Name used in log lines (defaults to the function name)
        log_level: Logging level for start/finish lines

    Returns:
        Decorated coroutine function
    """
    def decorator(func: Callable) -> Callable:
        name = operation or func.__name__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            started = time.monotonic()
            logger.log(log_level, f"→ {name}")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.monotonic() - started) * 1000
                logger.warning(f"✗ {name} failed after {elapsed_ms:.0f}ms: {e}")
                raise
            elapsed_ms = (time.monotonic() - started) * 1000
            logger.log(log_level, f"← {name} ok in {elapsed_ms:.0f}ms")
            return result

        return wrapper

    return decorator


def best_effort(operation: str = "", default: Any = False) -> Callable:
    """
    Decorator for commands whose failure must not disturb the caller.

    Any exception is logged with its traceback and replaced by `default`.

    Usage:
    ```python
    @best_effort("pause playback")
    async def _pause(self):
        return await self._device.pause()
    ```

    Args:
        operation: Name used in log lines (defaults to the function name)
        default: Value returned when the command fails

    Returns:
        Decorated coroutine function
    """
    def decorator(func: Callable) -> Callable:
        name = operation or func.__name__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"❌ {name} failed: {e}", exc_info=True)
                return default

        return wrapper

    return decorator

