"""Audio recorder fed by uploaded audio chunks.

The device encodes audio itself (AAC in an MPEG-4 container) and uploads
the bytes while recording; this recorder only appends them to the output
file of the session.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

import structlog

log = structlog.get_logger()


class FileAudioRecorder:
    """AudioRecorder writing uploaded chunks to disk."""

    def __init__(self) -> None:
        self._file: BinaryIO | None = None
        self._path: Path | None = None
        self._bytes_written = 0

    @property
    def recording(self) -> bool:
        return self._file is not None

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    def start(self, output_path: Path) -> None:
        if self._file is not None:
            raise RuntimeError("recorder already started")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(output_path, "wb")
        self._path = output_path
        self._bytes_written = 0
        log.debug("audio_capture_started", path=str(output_path))

    def write(self, chunk: bytes) -> int:
        if self._file is None:
            raise RuntimeError("recorder not started")
        self._file.write(chunk)
        self._bytes_written += len(chunk)
        return self._bytes_written

    def stop(self) -> int:
        """Close the output file. Fails if no audio was received."""
        if self._file is None:
            raise RuntimeError("recorder not started")
        if self._bytes_written == 0:
            raise RuntimeError("stop called before any audio was received")
        self._file.close()
        self._file = None
        log.debug("audio_capture_stopped", path=str(self._path),
                  bytes=self._bytes_written)
        return self._bytes_written

    def reset(self) -> None:
        """Drop the current capture, removing the partial file."""
        if self._file is not None:
            self._file.close()
            self._file = None
        if self._path is not None:
            self._path.unlink(missing_ok=True)
            self._path = None
        self._bytes_written = 0
