"""Wall-clock timing of pipeline stages."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class StepTiming:
    """Timing record of one named stage.

    Attributes:
        name: Stage name
        started_at: UTC wall-clock start
        duration_ms: Elapsed monotonic time in milliseconds (None while running)
        failed: True if the stage exited with an exception
        meta: Caller-supplied context (symbol, bar count, ...)
    """

    name: str
    started_at: datetime
    duration_ms: float | None = None
    failed: bool = False
    meta: dict[str, Any] = field(default_factory=dict)


@contextmanager
def timed_step(
    name: str,
    timings: dict[str, StepTiming],
    logger_instance: logging.Logger | None = None,
    meta: dict[str, Any] | None = None,
) -> Iterator[StepTiming]:
    """Time the enclosed block and store a StepTiming under ``timings[name]``.

    The record is stored before the block runs and completed on exit, also
    when the block raises.

    Example:
        >>> timings = {}
        >>> with timed_step("walk_forward_loop", timings, meta={"bars": 100}):
        ...     run_loop()
        >>> timings["walk_forward_loop"].duration_ms
    """
    log = logger_instance or logger
    record = StepTiming(name=name, started_at=datetime.now(timezone.utc), meta=dict(meta or {}))
    timings[name] = record
    started = time.perf_counter()
    try:
        yield record
    except BaseException:
        record.failed = True
        raise
    finally:
        record.duration_ms = (time.perf_counter() - started) * 1000.0
        log.debug(
            f"Step '{name}' {'failed' if record.failed else 'finished'} "
            f"after {record.duration_ms:.1f}ms"
        )
