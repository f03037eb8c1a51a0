"""Timing helper that records elapsed time as a metric."""

import time
from collections.abc import Generator
from contextlib import contextmanager

from emfpy.core.embedded import DirectiveHandle
from emfpy.core.models import Unit

_TIME_SCALE = {
    Unit.SECONDS: 1.0,
    Unit.MILLISECONDS: 1_000.0,
    Unit.MICROSECONDS: 1_000_000.0,
}


@contextmanager
def timed_metric(
    handle: DirectiveHandle,
    name: str,
    unit: Unit | str = Unit.MILLISECONDS,
) -> Generator[DirectiveHandle]:
    """Context manager that records the block's elapsed time on a directive.

    The metric is recorded even if the block raises.

    Args:
        handle: Directive to record on.
        name: Metric name (e.g., "Latency")
        unit: Seconds, Milliseconds (default) or Microseconds

    Yields:
        The same handle, so the block can record further metrics.

    Raises:
        ValueError: If unit is not a time unit.
    """
    unit = Unit(unit)
    if unit not in _TIME_SCALE:
        raise ValueError(f"timed_metric requires a time unit, got {unit.value}")
    start = time.perf_counter()
    try:
        yield handle
    finally:
        elapsed = time.perf_counter() - start
        handle.put_metric(name, elapsed * _TIME_SCALE[unit], unit)
