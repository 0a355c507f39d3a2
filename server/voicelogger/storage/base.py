"""Storage interface (port) for persisting recordings."""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from voicelogger.core.models import Recording


class RecordingStorage(Protocol):
    """Port: persists recordings and the audio file counter."""

    async def insert(self, recording: Recording) -> Recording: ...

    async def insert_batch(self, recordings: list[Recording]) -> list[Recording]: ...

    async def get(self, record_id: int) -> Recording | None: ...

    async def search(self, title: str | None = None) -> list[Recording]: ...

    async def delete(self, record_id: int) -> Recording | None: ...

    async def delete_all(self) -> list[Recording]: ...

    async def delete_all_samples(self) -> int: ...

    async def read_audio_id(self) -> int: ...

    async def increment_audio_id(self) -> None: ...
