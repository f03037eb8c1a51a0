"""Python logging handler adapter for emfpy.

This adapter bridges Python's standard library logging module to a
SinkPort, writing each log record as an embedded metric line whose
properties carry the record's fields.
"""

import logging
import traceback
from collections.abc import Callable, Mapping
from typing import Any

from emfpy.core.embedded import EmbeddedMetric
from emfpy.core.environment import EnvironmentSnapshot
from emfpy.core.ports import SinkPort

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# Default attributes to extract from LogRecord
_DEFAULT_INCLUDE_ATTRS = ["module", "funcName", "lineno", "pathname"]

# Diagnostics from the publish path itself; handling them here could loop
_DIAGNOSTIC_LOGGER = "emfpy"


class EmbeddedMetricHandler(logging.Handler):
    """Logging handler that publishes log records as embedded metric lines.

    The emitted lines carry no metric directives by default; pass a
    ``directive_factory`` to attach metrics (e.g. a per-level count) to
    every record.

    Example:
        ```python
        from emfpy import EmbeddedMetricHandler, StdoutSink

        handler = EmbeddedMetricHandler(StdoutSink())
        logging.getLogger().addHandler(handler)
        ```
    """

    def __init__(
        self,
        sink: SinkPort,
        include_attrs: list[str] | None = None,
        environment: EnvironmentSnapshot | None = None,
        directive_factory: Callable[[EmbeddedMetric, logging.LogRecord], None]
        | None = None,
    ) -> None:
        """Initialize the handler with a sink.

        Args:
            sink: Sink adapter implementing SinkPort.
            include_attrs: List of LogRecord attributes to include. Defaults to
                ["module", "funcName", "lineno", "pathname"].
            environment: Snapshot for the log group and stream fields.
            directive_factory: Optional callable adding directives to the
                record's EmbeddedMetric before it is published.
        """
        super().__init__()
        self._sink = sink
        self._include_attrs = include_attrs or _DEFAULT_INCLUDE_ATTRS
        self._environment = environment
        self._directive_factory = directive_factory

    def build_properties(self, record: logging.LogRecord) -> dict[str, Any]:
        """Map a LogRecord to the properties of its embedded metric line."""
        # Map of attribute names to their values from LogRecord
        attr_mapping: Mapping[str, str | int | float | bool] = {
            "module": record.name,
            "funcName": record.funcName or "",
            "lineno": record.lineno,
            "pathname": record.pathname,
        }

        properties: dict[str, Any] = {
            "timestamp": record.created,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        properties.update(
            {key: attr_mapping[key] for key in self._include_attrs if key in attr_mapping}
        )

        # Add any extra attributes passed via logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool)
            ):
                properties[key] = value

        # Extract exception info if present
        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                properties["exc_type"] = exc_type.__name__
            if exc_value is not None:
                properties["exc_message"] = str(exc_value)
            if exc_tb is not None:
                properties["exc_traceback"] = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )
        return properties

    def emit(self, record: logging.LogRecord) -> None:
        """Publish a log record to the sink.

        Args:
            record: The log record to emit.
        """
        if record.name == _DIAGNOSTIC_LOGGER or record.name.startswith(
            _DIAGNOSTIC_LOGGER + "."
        ):
            return
        try:
            metric = EmbeddedMetric(
                properties=self.build_properties(record),
                environment=self._environment,
            )
            if self._directive_factory is not None:
                self._directive_factory(metric, record)
        except Exception:
            self.handleError(record)
            return
        metric.publish_to_sink(None, self._sink)
