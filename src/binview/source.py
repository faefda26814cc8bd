"""Record sources: the dataset the viewer walks over.

A record is at most :data:`RECORD_SIZE` bytes and is displayed as one row.
The whole input is split into records before the interactive loop starts;
:class:`MemorySource` then exposes a forward-only window over that dataset.
"""

from __future__ import annotations

import logging
import sys
from contextlib import ExitStack, contextmanager
from typing import BinaryIO, Iterator, Protocol, Sequence

from binview.errors import EmptyInputError, InputReadError

logger = logging.getLogger(__name__)

RECORD_SIZE = 16

STDIN_NAME = "-"


class RecordSource(Protocol):
    """Forward-only sequence of records."""

    def read(self) -> bytes | None:
        """Return the next record, or ``None`` at end of stream."""
        ...

    def home_address(self) -> int:
        """Return the index of the next record to be read."""
        ...


class MemorySource:
    """Window over an in-memory dataset, starting at record *start_row*."""

    def __init__(self, records: Sequence[bytes], start_row: int = 0) -> None:
        self._records = records
        self._next = start_row

    def read(self) -> bytes | None:
        if self._next >= len(self._records):
            return None
        record = self._records[self._next]
        self._next += 1
        return record

    def home_address(self) -> int:
        return self._next


class ChainedReader:
    """Reads several named binary streams back to back as one stream.

    Reads fill across stream boundaries, so records keep a fixed width and
    addresses stay continuous over concatenated files.
    """

    def __init__(self, streams: Sequence[tuple[str, BinaryIO]]) -> None:
        self._streams = list(streams)
        self._index = 0

    @property
    def name(self) -> str:
        """Name of the stream currently being read."""
        if self._index < len(self._streams):
            return self._streams[self._index][0]
        return self._streams[-1][0] if self._streams else STDIN_NAME

    def read(self, size: int) -> bytes:
        chunks: list[bytes] = []
        wanted = size
        while wanted > 0 and self._index < len(self._streams):
            name, stream = self._streams[self._index]
            try:
                chunk = stream.read(wanted)
            except OSError as e:
                raise InputReadError(f"{name}: {e.strerror or e}") from e
            if not chunk:
                self._index += 1
                continue
            chunks.append(chunk)
            wanted -= len(chunk)
        return b"".join(chunks)


@contextmanager
def open_inputs(paths: Sequence[str]) -> Iterator[ChainedReader]:
    """Open the named files (``-`` or none at all means stdin) as one reader."""
    names = list(paths) or [STDIN_NAME]
    with ExitStack() as stack:
        streams: list[tuple[str, BinaryIO]] = []
        for name in names:
            if name == STDIN_NAME:
                streams.append((name, sys.stdin.buffer))
                continue
            try:
                stream = stack.enter_context(open(name, "rb"))
            except OSError as e:
                raise InputReadError(f"{name}: {e.strerror or e}") from e
            streams.append((name, stream))
        yield ChainedReader(streams)


def load_records(stream: BinaryIO | ChainedReader, record_size: int = RECORD_SIZE) -> list[bytes]:
    """Read *stream* to the end and split it into records.

    Raises :class:`EmptyInputError` when the stream holds no data.
    """
    records: list[bytes] = []
    while True:
        try:
            record = stream.read(record_size)
        except OSError as e:
            raise InputReadError(f"{getattr(stream, 'name', STDIN_NAME)}: {e.strerror or e}") from e
        if not record:
            break
        records.append(bytes(record))

    if not records:
        raise EmptyInputError()
    logger.info("loaded %d records (%d bytes)", len(records), sum(len(r) for r in records))
    return records
