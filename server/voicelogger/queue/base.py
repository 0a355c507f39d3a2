"""Queue interface (port) for location fixes of the active session."""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from voicelogger.core.models import Sample


class SampleQueue(Protocol):
    """Port: buffers location fixes between the location source and the session."""

    async def put(self, sample: Sample) -> None: ...

    async def get(self) -> Sample: ...

    def get_nowait(self) -> Sample | None: ...

    def qsize(self) -> int: ...
