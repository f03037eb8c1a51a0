"""Sink adapters for encoded records."""

import io
import sys
import threading
from pathlib import Path
from typing import BinaryIO, TextIO


class StdoutSink:
    """Writes to the current ``sys.stdout``.

    ``sys.stdout`` is looked up on every write so redirection and capture
    made after construction are honoured.
    """

    def write(self, data: bytes) -> int | None:
        stream = sys.stdout
        buffer = getattr(stream, "buffer", None)
        if buffer is None:
            stream.write(data.decode("utf-8"))
            stream.flush()
            return None
        stream.flush()
        written = buffer.write(data)
        buffer.flush()
        return written


class StreamSink:
    """Writes to any binary or text stream."""

    def __init__(self, stream: BinaryIO | TextIO) -> None:
        self._stream = stream

    def write(self, data: bytes) -> int | None:
        if isinstance(self._stream, io.TextIOBase):
            self._stream.write(data.decode("utf-8"))  # type: ignore[arg-type]
            return None
        return self._stream.write(data)  # type: ignore[arg-type]


class FileSink:
    """Appends each record to a file, opening it per write."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def write(self, data: bytes) -> int:
        with self._lock, self._path.open("ab") as fh:
            return fh.write(data)


class InMemorySink:
    """Collects written records in a list.

    Suitable for testing and for callers that forward records themselves.
    """

    def __init__(self) -> None:
        self._chunks: list[bytes] = []

    def write(self, data: bytes) -> int:
        self._chunks.append(data)
        return len(data)

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return b"".join(self._chunks)

    def lines(self) -> list[str]:
        """Return written records decoded, without line terminators."""
        return self.getvalue().decode("utf-8").splitlines()

    def clear(self) -> None:
        self._chunks.clear()
