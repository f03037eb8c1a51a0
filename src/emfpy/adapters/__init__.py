"""Adapters for sinks and the standard library logging module."""

from emfpy.adapters.sinks import FileSink, InMemorySink, StdoutSink, StreamSink

__all__ = [
    "FileSink",
    "InMemorySink",
    "StdoutSink",
    "StreamSink",
]
