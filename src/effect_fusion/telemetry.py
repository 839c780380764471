"""Tracing helpers.

``trace(name)`` wraps sync or async callables and records their wall time in
the ``effect_fusion.trace`` debug log, so stage timings can be switched on
with the log level alone.
"""

from __future__ import annotations

import functools
import inspect
import logging
import time
from typing import Callable

_trace_logger = logging.getLogger("effect_fusion.trace")


def trace(name: str) -> Callable:
    def _decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def _async_wrapper(*args, **kwargs):
                t0 = time.perf_counter()
                try:
                    return await func(*args, **kwargs)
                finally:
                    _trace_logger.debug("%s took %.2f ms", name, (time.perf_counter() - t0) * 1000)
            return _async_wrapper

        @functools.wraps(func)
        def _wrapper(*args, **kwargs):
            t0 = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                _trace_logger.debug("%s took %.2f ms", name, (time.perf_counter() - t0) * 1000)
        return _wrapper
    return _decorator


__all__ = ["trace"]
