"""EmbeddedMetric builder and publisher.

Example:
    ```python
    from emfpy import EmbeddedMetric, Unit

    metric = EmbeddedMetric().with_property("requestId", "abc-123")
    handle = metric.new_metric_directive("MyService", {"Stage": "prod"})
    handle.put_metric("Latency", 42, Unit.MILLISECONDS)
    metric.publish()
    ```

Instances are not thread-safe; callers recording from several threads must
lock around the instance themselves.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from emfpy.core.encoding.emf import build_record, encode_record
from emfpy.core.environment import PROCESS_ENVIRONMENT, EnvironmentSnapshot
from emfpy.core.models import MAX_DIMENSIONS, MetricDirective, MetricValue, Unit
from emfpy.core.ports import SinkPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectiveHandle:
    """Reference to a directive owned by an EmbeddedMetric.

    The directive itself stays inside its owner; the handle only records
    which owner and which position, and routes every mutation through it.
    """

    owner: "EmbeddedMetric"
    index: int

    @property
    def namespace(self) -> str:
        return self.owner.directive(self).namespace

    @property
    def dimensions(self) -> Mapping[str, str]:
        """Read-only view of the directive's dimensions."""
        return MappingProxyType(self.owner.directive(self).dimensions)

    @property
    def metrics(self) -> Mapping[str, MetricValue]:
        """Read-only view of the directive's metrics."""
        return MappingProxyType(self.owner.directive(self).metrics)

    def put_metric(
        self, name: str, value: Any, unit: Unit | str = Unit.NONE
    ) -> "DirectiveHandle":
        """Record a metric on this directive, replacing any previous value."""
        self.owner.put_metric(self, name, value, unit)
        return self

    def put_dimension(self, name: str, value: str) -> "DirectiveHandle":
        """Set a dimension on this directive."""
        self.owner.put_dimension(self, name, value)
        return self


class EmbeddedMetric:
    """A single structured record: properties plus metric directives."""

    def __init__(
        self,
        properties: Mapping[str, Any] | None = None,
        environment: EnvironmentSnapshot | None = None,
    ) -> None:
        """Initialize an empty record.

        Args:
            properties: Optional properties to pre-seed the bag with.
            environment: Snapshot used for the log group and stream fields.
                Defaults to the snapshot captured at import.
        """
        self._directives: list[MetricDirective] = []
        self._properties: dict[str, Any] = dict(properties or {})
        self._environment = (
            PROCESS_ENVIRONMENT if environment is None else environment
        )

    @classmethod
    def with_properties(
        cls,
        properties: Mapping[str, Any] | None,
        environment: EnvironmentSnapshot | None = None,
    ) -> "EmbeddedMetric":
        """Create a record pre-seeded with properties."""
        return cls(properties=properties, environment=environment)

    @property
    def properties(self) -> Mapping[str, Any]:
        return MappingProxyType(self._properties)

    @property
    def environment(self) -> EnvironmentSnapshot:
        return self._environment

    def with_property(self, key: str, value: Any) -> "EmbeddedMetric":
        """Set a property, overwriting any existing value for key.

        Properties are for high-cardinality values that need to be
        searchable but are not metrics themselves.

        Returns:
            This instance, for chaining.
        """
        self._properties[key] = value
        return self

    def new_metric_directive(
        self,
        namespace: str,
        dimensions: Mapping[str, str] | None = None,
    ) -> DirectiveHandle:
        """Create a directive under namespace and return a handle to it.

        The namespace is not validated; an empty string is emitted as-is.
        """
        self._directives.append(
            MetricDirective(namespace=namespace, dimensions=dict(dimensions or {}))
        )
        return DirectiveHandle(owner=self, index=len(self._directives) - 1)

    def directive(self, handle: DirectiveHandle) -> MetricDirective:
        """Resolve a handle to the directive it refers to.

        Raises:
            ValueError: If the handle belongs to another EmbeddedMetric.
        """
        if handle.owner is not self:
            raise ValueError("directive handle belongs to another EmbeddedMetric")
        return self._directives[handle.index]

    @property
    def directives(self) -> tuple[MetricDirective, ...]:
        """Directives in creation order."""
        return tuple(self._directives)

    def put_metric(
        self,
        handle: DirectiveHandle,
        name: str,
        value: Any,
        unit: Unit | str = Unit.NONE,
    ) -> None:
        """Record a metric value on the directive behind handle."""
        self.directive(handle).metrics[name] = MetricValue(value=value, unit=unit)

    def put_dimension(self, handle: DirectiveHandle, name: str, value: str) -> None:
        """Set a dimension on the directive behind handle."""
        self.directive(handle).dimensions[name] = value

    def to_record(self, timestamp_ms: int | None = None) -> dict[str, Any]:
        """Return the record as an ordered dict, timestamped now by default."""
        return build_record(
            self._environment, self._properties, self._directives, timestamp_ms
        )

    def encode(self) -> str:
        """Encode the current state as one newline-terminated JSON line.

        Raises:
            TypeError: If a property or metric value is not JSON serializable.
            ValueError: If a value is NaN or infinite.
            RecursionError: If a value is nested too deeply.
        """
        return encode_record(self.to_record())

    def publish_to_sink(
        self,
        additional_properties: Mapping[str, Any] | None,
        sink: SinkPort,
    ) -> None:
        """Merge additional properties, encode, and write one line to sink.

        Additional properties are merged first (last write wins), then
        oversized dimension sets are logged as warnings and still emitted,
        then the record is encoded and written.

        Never raises. If encoding fails, an error line is written to the
        sink instead. Any exception from the sink is logged and not retried.
        """
        for key, value in (additional_properties or {}).items():
            self.with_property(key, value)

        self._warn_oversized_dimensions()

        try:
            line = self.encode()
        except (TypeError, ValueError, RecursionError) as exc:
            logger.error("Failed to encode embedded metric: %s", exc)
            line = f"Error publishing metric: {exc}\n"

        self._write(sink, line.encode("utf-8"))

    def publish(self, additional_properties: Mapping[str, Any] | None = None) -> None:
        """Publish to standard output."""
        from emfpy.adapters.sinks import StdoutSink

        self.publish_to_sink(additional_properties, StdoutSink())

    def _warn_oversized_dimensions(self) -> None:
        for directive in self._directives:
            if directive.exceeds_dimension_limit:
                logger.warning(
                    "DimensionSet for structured metric must not have more than "
                    "%d elements. Namespace: %r Count: %d",
                    MAX_DIMENSIONS,
                    directive.namespace,
                    len(directive.dimensions),
                )

    @staticmethod
    def _write(sink: SinkPort, data: bytes) -> None:
        try:
            written = sink.write(data)
        except Exception as exc:
            logger.error("Failed to write embedded metric to sink: %r", exc)
            return
        if written is not None and written < len(data):
            logger.error(
                "Partial write of embedded metric to sink: %d of %d bytes",
                written,
                len(data),
            )
