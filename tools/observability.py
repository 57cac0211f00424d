"""Instrumentation for calls that leave the process (Gemini, Open-Meteo, ip-api)."""

from __future__ import annotations

import logging
import time
from functools import wraps
from itertools import islice
from typing import Callable, ParamSpec, TypeVar

from wardrobe_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

MAX_PREVIEW_KWARGS = 6


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def instrument_call(call_name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, completion (with duration) and failure of an external call.

    Exceptions are logged and re-raised unchanged; callers decide how to surface them.
    Keyword arguments are previewed after redaction, positional ones are not logged.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            preview = dict(islice(kwargs.items(), MAX_PREVIEW_KWARGS))
            log_event(
                LOGGER,
                logging.INFO,
                "call_started",
                call=call_name,
                correlation_id=correlation_id,
                kwargs=preview,
                kwargs_truncated=len(kwargs) > MAX_PREVIEW_KWARGS,
            )

            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "call_failed",
                    call=call_name,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(started),
                    error=type(exc).__name__,
                    exc_info=True,
                )
                raise

            log_event(
                LOGGER,
                logging.INFO,
                "call_completed",
                call=call_name,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(started),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_call"]
