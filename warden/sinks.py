"""
Byte sinks the store reads its snapshot from and writes it to.

A sink only moves whole snapshots: read() returns the last written bytes
(or None if nothing was ever written), write() replaces them.
"""

import os
from pathlib import Path
from typing import Protocol


class ByteSink(Protocol):
    def read(self) -> bytes | None: ...

    def write(self, data: bytes) -> None: ...


class FileSink:
    """Snapshot file on local disk. Writes go to a temp file then replace the target."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> bytes | None:
        if not self.path.exists():
            return None
        return self.path.read_bytes()

    def write(self, data: bytes) -> None:
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_bytes(data)
        os.replace(tmp, self.path)

    def __repr__(self) -> str:
        return f"FileSink({str(self.path)!r})"


class MemorySink:
    """In-process sink, used by tests and by throwaway stores."""

    def __init__(self, data: bytes | None = None):
        self.data = data
        self.writes = 0

    def read(self) -> bytes | None:
        return self.data

    def write(self, data: bytes) -> None:
        self.data = data
        self.writes += 1
