"""emfpy: encode in-process metrics as self-describing embedded metric log lines."""

from emfpy.adapters.logging import EmbeddedMetricHandler
from emfpy.adapters.sinks import FileSink, InMemorySink, StdoutSink, StreamSink
from emfpy.core.embedded import DirectiveHandle, EmbeddedMetric
from emfpy.core.environment import PROCESS_ENVIRONMENT, EnvironmentSnapshot
from emfpy.core.models import MAX_DIMENSIONS, MetricDirective, MetricValue, Unit
from emfpy.core.ports import SinkPort
from emfpy.core.timing import timed_metric

__all__ = [
    "DirectiveHandle",
    "EmbeddedMetric",
    "EmbeddedMetricHandler",
    "EnvironmentSnapshot",
    "FileSink",
    "InMemorySink",
    "MAX_DIMENSIONS",
    "MetricDirective",
    "MetricValue",
    "PROCESS_ENVIRONMENT",
    "SinkPort",
    "StdoutSink",
    "StreamSink",
    "Unit",
    "timed_metric",
]
