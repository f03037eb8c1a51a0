"""Port interfaces for sink adapters.

The encoder depends only on this protocol, not on concrete outputs.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SinkPort(Protocol):
    """Port for writing encoded records.

    Adapters implementing this protocol accept one encoded line per call.
    Examples: StdoutSink, StreamSink, FileSink, InMemorySink.
    """

    def write(self, data: bytes) -> int | None:
        """Write bytes to the sink.

        Returns:
            Number of bytes written, or None if the sink does not report it.
            A count smaller than len(data) is treated as a partial write.

        Raises:
            OSError: If the underlying write is rejected.
        """
        ...
