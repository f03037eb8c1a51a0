"""Shared test fixtures for all test modules."""

import json
from typing import Any

import pytest

from emfpy.adapters.sinks import InMemorySink
from emfpy.core.embedded import EmbeddedMetric
from emfpy.core.environment import (
    LOG_GROUP_ENV_VAR,
    LOG_STREAM_ENV_VAR,
    EnvironmentSnapshot,
)


@pytest.fixture
def environment() -> EnvironmentSnapshot:
    """Snapshot with both log identity variables set."""
    return EnvironmentSnapshot.capture(
        {
            LOG_GROUP_ENV_VAR: "/aws/lambda/my-function",
            LOG_STREAM_ENV_VAR: "2023/12/11/[$LATEST]abcdef",
            "UNRELATED": "ignored",
        }
    )


@pytest.fixture
def empty_environment() -> EnvironmentSnapshot:
    """Snapshot with no variables at all."""
    return EnvironmentSnapshot.capture({})


@pytest.fixture
def sink() -> InMemorySink:
    """Fixture providing an empty in-memory sink."""
    return InMemorySink()


@pytest.fixture
def embedded_metric(environment: EnvironmentSnapshot) -> EmbeddedMetric:
    """Empty EmbeddedMetric bound to the test environment."""
    return EmbeddedMetric(environment=environment)


@pytest.fixture
def published_record():
    """Factory fixture that publishes to a fresh sink and parses the line.

    Returns a callable accepting an EmbeddedMetric and optional additional
    properties, returning the decoded JSON object.
    """

    def _publish(
        metric: EmbeddedMetric, additional: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        target = InMemorySink()
        metric.publish_to_sink(additional, target)
        lines = target.lines()
        assert len(lines) == 1
        return json.loads(lines[0])

    return _publish
