"""Audio capture interface (port)."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class AudioRecorder(Protocol):
    """Port: captures audio for one session into an output file.

    ``start`` and ``stop`` raise RuntimeError when the recorder is in the
    wrong state or received nothing to save; OSError when the output file
    cannot be written.
    """

    def start(self, output_path: Path) -> None: ...

    def write(self, chunk: bytes) -> int: ...

    def stop(self) -> int: ...

    def reset(self) -> None: ...
