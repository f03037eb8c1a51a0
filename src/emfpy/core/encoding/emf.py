"""Embedded metric format encoder.

A record is a flat property bag that log search can index, plus an ``_aws``
object telling the metrics pipeline which of those flat keys are metrics,
which are dimensions, and in which namespace they belong.
"""

import json
import time
from collections.abc import Iterable, Mapping
from typing import Any

from emfpy.core.environment import EnvironmentSnapshot
from emfpy.core.models import (
    LOG_GROUP_FIELD,
    LOG_STREAM_FIELD,
    METADATA_FIELD,
    MetricDirective,
)


def current_timestamp_ms() -> int:
    """Return milliseconds since the epoch."""
    return int(time.time() * 1000)


def directive_metadata(directive: MetricDirective) -> dict[str, Any]:
    """Build the CloudWatchMetrics element describing one directive.

    Every dimension name becomes its own single-name dimension set; names
    are never grouped together.
    """
    return {
        "Namespace": directive.namespace,
        "Dimensions": [[name] for name in directive.dimensions],
        "Metrics": [
            {"Name": name, "Unit": metric.unit.value}
            for name, metric in directive.metrics.items()
        ],
    }


def merge_fields(
    environment: EnvironmentSnapshot,
    properties: Mapping[str, Any],
    directives: Iterable[MetricDirective],
) -> dict[str, Any]:
    """Flatten everything into one ordered dict.

    Writes happen in a fixed order and later writes overwrite earlier ones:
    reserved keys, properties, then for each directive its metric values
    followed by its dimension values.
    """
    fields: dict[str, Any] = {
        LOG_GROUP_FIELD: environment.log_group_name,
        LOG_STREAM_FIELD: environment.log_stream_name,
    }
    fields.update(properties)
    for directive in directives:
        for name, metric in directive.metrics.items():
            fields[name] = metric.value
        fields.update(directive.dimensions)
    return fields


def build_record(
    environment: EnvironmentSnapshot,
    properties: Mapping[str, Any],
    directives: list[MetricDirective],
    timestamp_ms: int | None = None,
) -> dict[str, Any]:
    """Build the complete record as an ordered dict.

    Args:
        environment: Source of the log group and log stream identity.
        properties: Searchable, non-metric fields.
        directives: Directives in creation order.
        timestamp_ms: Record timestamp; defaults to now.

    Returns:
        Dict ready for serialization, with ``_aws`` as the last key.
    """
    record = merge_fields(environment, properties, directives)
    record[METADATA_FIELD] = {
        "Timestamp": current_timestamp_ms() if timestamp_ms is None else timestamp_ms,
        "CloudWatchMetrics": [directive_metadata(d) for d in directives],
    }
    return record


def encode_record(record: Mapping[str, Any]) -> str:
    """Serialize a record to a single newline-terminated JSON line.

    Values are not scrubbed. The collector reads one event per line, so
    callers must keep line breaks out of keys and values.

    Raises:
        TypeError: If a value is not JSON serializable.
        ValueError: If a value is NaN or infinite, or the record is circular.
        RecursionError: If a value is nested too deeply to encode.
    """
    return json.dumps(record, separators=(",", ":"), allow_nan=False) + "\n"
