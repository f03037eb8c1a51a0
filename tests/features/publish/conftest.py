"""BDD step definitions for publishing features."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from emfpy.adapters.sinks import InMemorySink
from emfpy.core.embedded import DirectiveHandle, EmbeddedMetric
from emfpy.core.environment import EnvironmentSnapshot


@dataclass
class PublishScenarioContext:
    """State shared between the steps of one scenario."""

    metric: EmbeddedMetric | None = None
    handle: DirectiveHandle | None = None
    sink: InMemorySink = field(default_factory=InMemorySink)

    @property
    def record(self) -> dict[str, Any]:
        return json.loads(self.sink.lines()[0])

    def directive(self, index: int) -> dict[str, Any]:
        return self.record["_aws"]["CloudWatchMetrics"][index]


@pytest.fixture
def ctx() -> PublishScenarioContext:
    """Fresh scenario context for each test."""
    return PublishScenarioContext()


# === Given ===
@given("an embedded metric with an empty environment")
def step_empty_metric(ctx: PublishScenarioContext) -> None:
    ctx.metric = EmbeddedMetric(environment=EnvironmentSnapshot.capture({}))


@given(parsers.parse('the property "{key}" set to "{value}"'))
def step_property(ctx: PublishScenarioContext, key: str, value: str) -> None:
    ctx.metric.with_property(key, value)


@given(parsers.parse('a directive "{namespace}" with dimension "{name}" set to "{value}"'))
def step_directive(
    ctx: PublishScenarioContext, namespace: str, name: str, value: str
) -> None:
    ctx.handle = ctx.metric.new_metric_directive(namespace, {name: value})


@given(parsers.parse('a directive "{namespace}" with {count:d} dimensions'))
def step_wide_directive(ctx: PublishScenarioContext, namespace: str, count: int) -> None:
    ctx.handle = ctx.metric.new_metric_directive(
        namespace, {f"Dim{i}": f"v{i}" for i in range(count)}
    )


@given(parsers.parse('the metric "{name}" with value {value:d} in "{unit}"'))
def step_metric(ctx: PublishScenarioContext, name: str, value: int, unit: str) -> None:
    ctx.handle.put_metric(name, value, unit)


# === When ===
@when("the metric is published to a buffer")
def step_publish(ctx: PublishScenarioContext, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="emfpy"):
        ctx.metric.publish_to_sink(None, ctx.sink)


# === Then ===
@then("the buffer holds exactly one line")
def step_one_line(ctx: PublishScenarioContext) -> None:
    assert ctx.sink.getvalue().count(b"\n") == 1


@then(parsers.parse('the top-level field "{key}" is "{value}"'))
def step_string_field(ctx: PublishScenarioContext, key: str, value: str) -> None:
    assert ctx.record[key] == value


@then(parsers.parse('the top-level field "{key}" is empty'))
def step_empty_field(ctx: PublishScenarioContext, key: str) -> None:
    assert ctx.record[key] == ""


@then(parsers.parse('the top-level field "{key}" is the number {value:d}'))
def step_number_field(ctx: PublishScenarioContext, key: str, value: int) -> None:
    assert ctx.record[key] == value


@then(parsers.parse('directive {index:d} has namespace "{namespace}"'))
def step_namespace(ctx: PublishScenarioContext, index: int, namespace: str) -> None:
    assert ctx.directive(index)["Namespace"] == namespace


@then(parsers.parse("directive {index:d} has dimension sets {expected}"))
def step_dimension_sets(ctx: PublishScenarioContext, index: int, expected: str) -> None:
    assert ctx.directive(index)["Dimensions"] == json.loads(expected)


@then(parsers.parse("directive {index:d} has metrics {expected}"))
def step_metrics(ctx: PublishScenarioContext, index: int, expected: str) -> None:
    assert ctx.directive(index)["Metrics"] == json.loads(expected)


@then(parsers.parse("directive {index:d} has {count:d} dimension sets"))
def step_dimension_count(ctx: PublishScenarioContext, index: int, count: int) -> None:
    dimensions = ctx.directive(index)["Dimensions"]
    assert len(dimensions) == count
    assert len({group[0] for group in dimensions}) == count


@then(parsers.parse('the directive namespaces are "{namespaces}"'))
def step_namespaces(ctx: PublishScenarioContext, namespaces: str) -> None:
    actual = [d["Namespace"] for d in ctx.record["_aws"]["CloudWatchMetrics"]]
    assert actual == namespaces.split(",")


@then("there are no directives")
def step_no_directives(ctx: PublishScenarioContext) -> None:
    assert ctx.record["_aws"]["CloudWatchMetrics"] == []


@then("a dimension warning was logged")
def step_warning_logged(caplog: pytest.LogCaptureFixture) -> None:
    assert any(
        r.levelno == logging.WARNING and "DimensionSet" in r.getMessage()
        for r in caplog.records
    )
