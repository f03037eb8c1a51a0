"""Core domain models for embedded metric directives."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Dimension sets above this size are accepted but flagged at publish time
MAX_DIMENSIONS = 9

LOG_GROUP_FIELD = "log_group_name"
# Key spelling is what the log collector parses today; do not correct it.
LOG_STREAM_FIELD = "log_steam_name"
METADATA_FIELD = "_aws"


class Unit(str, Enum):
    """Closed set of measurement units accepted by the metrics pipeline."""

    SECONDS = "Seconds"
    MICROSECONDS = "Microseconds"
    MILLISECONDS = "Milliseconds"
    BYTES = "Bytes"
    KILOBYTES = "Kilobytes"
    MEGABYTES = "Megabytes"
    GIGABYTES = "Gigabytes"
    TERABYTES = "Terabytes"
    BITS = "Bits"
    KILOBITS = "Kilobits"
    MEGABITS = "Megabits"
    GIGABITS = "Gigabits"
    TERABITS = "Terabits"
    PERCENT = "Percent"
    COUNT = "Count"
    BYTES_PER_SECOND = "Bytes/Second"
    KILOBYTES_PER_SECOND = "Kilobytes/Second"
    MEGABYTES_PER_SECOND = "Megabytes/Second"
    GIGABYTES_PER_SECOND = "Gigabytes/Second"
    TERABYTES_PER_SECOND = "Terabytes/Second"
    BITS_PER_SECOND = "Bits/Second"
    KILOBITS_PER_SECOND = "Kilobits/Second"
    MEGABITS_PER_SECOND = "Megabits/Second"
    GIGABITS_PER_SECOND = "Gigabits/Second"
    TERABITS_PER_SECOND = "Terabits/Second"
    COUNT_PER_SECOND = "Count/Second"
    NONE = "None"


@dataclass(frozen=True)
class MetricValue:
    """A single recorded metric observation.

    Attributes:
        value: Number or string, emitted as-is.
        unit: Unit token describing the value.
    """

    value: Any
    unit: Unit = Unit.NONE

    def __post_init__(self) -> None:
        # Accept raw tokens like "Milliseconds"; unknown tokens raise ValueError
        object.__setattr__(self, "unit", Unit(self.unit))


@dataclass
class MetricDirective:
    """One namespace worth of dimensions and metrics.

    Attributes:
        namespace: Logical metric namespace (e.g. a service name).
        dimensions: Dimension name to dimension value.
        metrics: Metric name to recorded MetricValue.
    """

    namespace: str
    dimensions: dict[str, str] = field(default_factory=dict)
    metrics: dict[str, MetricValue] = field(default_factory=dict)

    @property
    def exceeds_dimension_limit(self) -> bool:
        """Return True if the dimension set is larger than MAX_DIMENSIONS."""
        return len(self.dimensions) > MAX_DIMENSIONS
