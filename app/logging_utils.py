"""
Structured logging helpers for analytics requests.

Each line is one compact JSON object so report runs can be grepped by
``event`` and ``dataset``.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.
    """

    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))


@contextmanager
def timed_event(
    logger: logging.Logger,
    event: str,
    **fields: Any,
) -> Iterator[dict[str, Any]]:
    """
    Log *event* with ``elapsed_ms`` once the block finishes.

    The yielded dict may be filled with extra fields (e.g. row counts)
    inside the block. Failures are logged at WARNING and re-raised.
    """

    extra: dict[str, Any] = {}
    started = time.perf_counter()
    try:
        yield extra
    except Exception as exc:
        log_event(
            logger,
            logging.WARNING,
            f"{event}.failed",
            elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            error=type(exc).__name__,
            **fields,
            **extra,
        )
        raise
    log_event(
        logger,
        logging.INFO,
        event,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
        **fields,
        **extra,
    )
