"""Example AWS Lambda handler emitting embedded metric records.

Run locally with:
    python examples/lambda_handler.py

Each invocation writes one line to stdout. In Lambda, the log pipeline
turns the ``_aws`` directive into CloudWatch metrics.
"""

import logging
import uuid

from emfpy import EmbeddedMetric, EmbeddedMetricHandler, StdoutSink, Unit, timed_metric

logging.basicConfig(level=logging.WARNING)
logging.getLogger("orders").addHandler(EmbeddedMetricHandler(StdoutSink()))


def handler(event: dict, context: object = None) -> dict:
    metric = EmbeddedMetric().with_property("requestId", str(uuid.uuid4()))
    orders = metric.new_metric_directive("OrderService", {"Stage": "prod"})

    with timed_metric(orders, "Latency"):
        items = event.get("items", [])
        orders.put_metric("ItemCount", len(items), Unit.COUNT)

    metric.publish({"customer": event.get("customer", "anonymous")})
    if not items:
        logging.getLogger("orders").warning("empty order", extra={"customer": "?"})
    return {"statusCode": 200}


if __name__ == "__main__":
    handler({"items": ["book", "pen"], "customer": "c-42"})
    handler({})
