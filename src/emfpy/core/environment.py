"""Read-only snapshot of the process environment.

The snapshot resolves the log group and log stream identity written into
every record. It is captured once at import as ``PROCESS_ENVIRONMENT``;
tests and callers can build their own from any mapping and pass it to
``EmbeddedMetric``.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

LOG_GROUP_ENV_VAR = "AWS_LAMBDA_LOG_GROUP_NAME"
LOG_STREAM_ENV_VAR = "AWS_LAMBDA_LOG_STREAM_NAME"


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Immutable copy of environment variables.

    Attributes:
        variables: Read-only mapping of variable name to value.
    """

    variables: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def capture(cls, environ: Mapping[str, str] | None = None) -> "EnvironmentSnapshot":
        """Copy the given mapping (default: os.environ) into a snapshot."""
        source = os.environ if environ is None else environ
        return cls(variables=MappingProxyType(dict(source)))

    def get(self, name: str, default: str = "") -> str:
        """Return a variable's value, or default if unset."""
        return self.variables.get(name, default)

    @property
    def log_group_name(self) -> str:
        return self.get(LOG_GROUP_ENV_VAR)

    @property
    def log_stream_name(self) -> str:
        return self.get(LOG_STREAM_ENV_VAR)


PROCESS_ENVIRONMENT = EnvironmentSnapshot.capture()
