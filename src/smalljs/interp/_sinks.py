"""Output sinks for ``print``.

The interpreter never opens files itself; callers hand it anything with
a ``write_line`` method.
"""

from __future__ import annotations

from typing import Protocol, TextIO, runtime_checkable


@runtime_checkable
class LineWriter(Protocol):
    """Receives one line of program output per call (no trailing newline)."""

    def write_line(self, line: str) -> None: ...


class StreamWriter:
    """Write lines to a text stream such as ``sys.stdout``."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def write_line(self, line: str) -> None:
        self.stream.write(line + "\n")


class ListWriter:
    """Collect lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write_line(self, line: str) -> None:
        self.lines.append(line)
