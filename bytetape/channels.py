from __future__ import annotations

import sys
from typing import BinaryIO, Iterable, Iterator, Optional, Protocol, Union

from .errors import IoError


InputData = Union[bytes, bytearray, Iterable[int]]


class IoChannel(Protocol):
    def read_byte(self) -> Optional[int]:
        ...

    def write_byte(self, value: int) -> None:
        ...

    def flush(self) -> None:
        ...


class BufferChannel:
    """In-memory channel: input from a byte sequence, output into a buffer."""

    def __init__(self, input_data: Optional[InputData] = None) -> None:
        self._input: Iterator[int] = iter(bytes(input_data or b""))
        self._output = bytearray()

    def read_byte(self) -> Optional[int]:
        return next(self._input, None)

    def write_byte(self, value: int) -> None:
        self._output.append(value)

    def flush(self) -> None:
        pass

    @property
    def output(self) -> bytes:
        return bytes(self._output)


class StreamChannel:
    def __init__(
        self,
        reader: Optional[BinaryIO] = None,
        writer: Optional[BinaryIO] = None,
    ) -> None:
        self.reader = reader if reader is not None else sys.stdin.buffer
        self.writer = writer if writer is not None else sys.stdout.buffer

    def read_byte(self) -> Optional[int]:
        try:
            data = self.reader.read(1)
        except OSError as exc:
            raise IoError(f"Failed to read input: {exc}") from exc
        if not data:
            return None
        return data[0]

    def write_byte(self, value: int) -> None:
        try:
            self.writer.write(bytes((value,)))
        except OSError as exc:
            raise IoError(f"Failed to write output: {exc}") from exc

    def flush(self) -> None:
        try:
            self.writer.flush()
        except OSError as exc:
            raise IoError(f"Failed to flush output: {exc}") from exc


__all__ = ["BufferChannel", "InputData", "IoChannel", "StreamChannel"]
