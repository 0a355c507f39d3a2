"""In-process asyncio queue implementation of SampleQueue."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from voicelogger.core.models import Sample


class AsyncioSampleQueue:
    """SampleQueue backed by asyncio.Queue. Producers wait when it is full."""

    def __init__(self, max_size: int = 20) -> None:
        self._queue: asyncio.Queue[Sample] = asyncio.Queue(maxsize=max_size)

    async def put(self, sample: Sample) -> None:
        await self._queue.put(sample)

    async def get(self) -> Sample:
        return await self._queue.get()

    def get_nowait(self) -> Sample | None:
        """Return the next queued fix, or None when the queue is empty."""
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def qsize(self) -> int:
        return self._queue.qsize()
