"""Recording sessions: audio capture, location collection and track saving.

This is the core business logic. It depends on the storage, recorder, roads
and queue protocols, not concrete implementations.

A session owns the ordered buffer of location fixes. Fixes go through a
bounded queue and are appended by a single collector task; stopping a
session stops that task before the buffer is read, so reconciliation never
races with appends.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable, TYPE_CHECKING

import structlog

from voicelogger.core.errors import (
    CannotCollectGpsLocationError,
    CannotSaveAudioError,
    CannotStartRecordingError,
    RecordingNotFoundError,
    SessionAlreadyActiveError,
    SessionNotActiveError,
)
from voicelogger.core.models import Recording, Sample
from voicelogger.core.reconcile import build_path_query, reconcile
from voicelogger.core.samples import SAMPLE_COUNT, build_sample_recordings
from voicelogger.roads.base import Error, Success

if TYPE_CHECKING:
    from voicelogger.audio.base import AudioRecorder
    from voicelogger.core.models import CorrectedPoint
    from voicelogger.core.stats import ServiceStats
    from voicelogger.queue.base import SampleQueue
    from voicelogger.roads.base import ConnectivityCheck, NetworkResult, RoadsClient
    from voicelogger.storage.base import RecordingStorage

log = structlog.get_logger()

AUDIO_FILE_SUFFIX = "_recorded_audio.mp4"


def _now_ms() -> int:
    return int(time.time() * 1000)


class RecordingSession:
    """State of one recording, from start to stop."""

    def __init__(self, audio_id: int, audio_path: Path, location_granted: bool) -> None:
        self.audio_id = audio_id
        self.audio_path = audio_path
        self.location_granted = location_granted
        self.started_at_ms = _now_ms()
        self.samples: list[Sample] = []

        self._queue: SampleQueue | None = None
        self._collector: asyncio.Task | None = None
        self.stopping = False
        self._accepting = False
        self._pending_puts = 0
        self._idle = asyncio.Event()

    @property
    def accepting(self) -> bool:
        return self._accepting

    def start_location_updates(self, queue: SampleQueue) -> None:
        self._queue = queue
        self._accepting = True
        self._collector = asyncio.create_task(self._collect())

    async def _collect(self) -> None:
        assert self._queue is not None
        while True:
            sample = await self._queue.get()
            self._append(sample)

    def _append(self, sample: Sample) -> None:
        # Sequence index is the position in the buffer.
        self.samples.append(replace(sample, index=len(self.samples)))

    async def enqueue(self, sample: Sample) -> None:
        assert self._queue is not None
        self._pending_puts += 1
        try:
            await self._queue.put(sample)
        finally:
            self._pending_puts -= 1
            if self._pending_puts == 0:
                self._idle.set()

    async def stop_location_updates(self) -> None:
        """Stop accepting fixes and move every queued fix into the buffer."""
        self._accepting = False
        if self._queue is None:
            return
        if self._pending_puts:
            self._idle.clear()
            await self._idle.wait()

        if self._collector is not None:
            self._collector.cancel()
            try:
                await self._collector
            except asyncio.CancelledError:
                pass
            self._collector = None

        while True:
            sample = self._queue.get_nowait()
            if sample is None:
                break
            self._append(sample)

    def snapshot(self) -> dict:
        return {
            "audio_id": self.audio_id,
            "audio_path": str(self.audio_path),
            "started_at_ms": self.started_at_ms,
            "location_granted": self.location_granted,
            "samples": len(self.samples),
        }


class RecorderService:
    """Owns at most one active recording session and the recording library."""

    def __init__(
        self,
        storage: RecordingStorage,
        recorder: AudioRecorder,
        roads: RoadsClient,
        connectivity: ConnectivityCheck,
        stats: ServiceStats,
        audio_dir: str | Path,
        queue_factory: Callable[[], SampleQueue],
    ) -> None:
        self._storage = storage
        self._recorder = recorder
        self._roads = roads
        self._connectivity = connectivity
        self._stats = stats
        self._audio_dir = Path(audio_dir)
        self._queue_factory = queue_factory
        self._session: RecordingSession | None = None
        self._lock = asyncio.Lock()

    @property
    def session(self) -> RecordingSession | None:
        return self._session

    def _require_session(self) -> RecordingSession:
        if self._session is None:
            raise SessionNotActiveError("no recording session is active")
        return self._session

    # -- session lifecycle --------------------------------------------------

    async def start_session(self, location_granted: bool = True) -> RecordingSession:
        """Start audio capture and, when permitted, location collection."""
        async with self._lock:
            if self._session is not None:
                raise SessionAlreadyActiveError("a recording session is already active")

            audio_id = await self._storage.read_audio_id()
            audio_path = self._audio_dir / f"{audio_id:x}{AUDIO_FILE_SUFFIX}"
            try:
                self._recorder.start(audio_path)
            except (RuntimeError, OSError) as exc:
                log.error("recorder_start_failed", path=str(audio_path), exc_info=True)
                raise CannotStartRecordingError(f"{type(exc).__name__} occurred") from exc
            await self._storage.increment_audio_id()

            session = RecordingSession(audio_id, audio_path, location_granted)
            if location_granted:
                session.start_location_updates(self._queue_factory())
            else:
                log.warning("location_not_granted", audio_id=audio_id)
            self._session = session
            self._stats.record_session_started(location_granted)

        log.info("session_started", audio_id=audio_id,
                 location_granted=location_granted)
        return session

    async def add_location(
        self,
        latitude: float,
        longitude: float,
        altitude: float = 0.0,
        bearing: float = 0.0,
        speed: float = 0.0,
        time_ms: int | None = None,
    ) -> None:
        """Queue one location fix for the active session."""
        session = self._require_session()
        if not session.location_granted:
            self._stats.record_sample_rejected()
            raise CannotCollectGpsLocationError(
                "FineLocation and CoarseLocation are not granted.")
        if not session.accepting:
            self._stats.record_sample_rejected()
            raise SessionNotActiveError("location updates are stopped")

        sample = Sample(
            latitude=latitude,
            longitude=longitude,
            altitude=altitude,
            bearing=bearing,
            speed=speed,
            time_ms=_now_ms() if time_ms is None else time_ms,
            index=-1,
        )
        await session.enqueue(sample)
        self._stats.record_sample()

    def write_audio(self, chunk: bytes) -> int:
        """Append encoded audio to the active capture."""
        session = self._require_session()
        if session.stopping:
            raise SessionNotActiveError("recording is stopping")
        try:
            return self._recorder.write(chunk)
        except RuntimeError as exc:
            raise SessionNotActiveError("audio capture is not running") from exc
        except OSError as exc:
            raise CannotSaveAudioError("IOException occurred") from exc

    async def stop_session(self, title: str, duration_ms: int | None = None) -> Recording:
        """Stop capture, reconcile the track and persist one recording."""
        async with self._lock:
            session = self._require_session()
            session.stopping = True
            try:
                await session.stop_location_updates()
                try:
                    self._recorder.stop()
                except (RuntimeError, OSError) as exc:
                    log.error("recorder_stop_failed", audio_id=session.audio_id,
                              exc_info=True)
                    self._recorder.reset()
                    raise CannotSaveAudioError(f"{type(exc).__name__} occurred") from exc

                samples = list(session.samples)
                corrected = await self._correct_points(samples)
                points = reconcile(samples, corrected)

                recording = Recording(
                    audio_path=str(session.audio_path),
                    title=title,
                    duration_ms=duration_ms or 0,
                    created_at_ms=session.started_at_ms,
                    points=tuple(points),
                )
                try:
                    recording = await self._storage.insert(recording)
                except OSError as exc:
                    log.error("recording_save_failed", audio_id=session.audio_id,
                              exc_info=True)
                    self._stats.record_save_error()
                    try:
                        session.audio_path.unlink(missing_ok=True)
                    except OSError:
                        log.warning("audio_delete_failed", path=str(session.audio_path),
                                    exc_info=True)
                    raise CannotSaveAudioError("recording could not be stored") from exc
            finally:
                self._session = None
                self._stats.record_session_ended()

        self._stats.record_saved()
        log.info("recording_saved", record_id=recording.record_id,
                 samples=len(samples), points=len(recording.points),
                 snapped=corrected is not None)
        return recording

    async def cancel_session(self) -> None:
        """Abort the active session without saving anything."""
        async with self._lock:
            session = self._require_session()
            session.stopping = True
            try:
                await session.stop_location_updates()
                self._recorder.reset()
            finally:
                self._session = None
                self._stats.record_session_ended(cancelled=True)
        log.info("session_cancelled", audio_id=session.audio_id)

    async def _correct_points(self, samples: list[Sample]) -> list[CorrectedPoint] | None:
        """Ask the roads service once for snapped points; None means fall back."""
        if not samples:
            log.info("roads_skipped", reason="no_samples")
            self._stats.record_fallback()
            return None
        if not await self._connectivity.is_connected():
            log.info("roads_skipped", reason="offline", samples=len(samples))
            self._stats.record_fallback()
            return None

        self._stats.record_roads_request()
        result: NetworkResult
        try:
            result = await self._roads.snap_to_roads(build_path_query(samples))
        except Exception as exc:
            log.error("roads_request_crashed", exc_info=True)
            result = Error(str(exc) or type(exc).__name__)

        if isinstance(result, Success):
            self._stats.record_roads_success()
            return result.data

        log.warning("roads_request_failed", reason=result.message, samples=len(samples))
        self._stats.record_roads_failure(result.message)
        self._stats.record_fallback()
        return None

    # -- recording library --------------------------------------------------

    async def list_recordings(self, title: str | None = None) -> list[Recording]:
        return await self._storage.search(title)

    async def get_recording(self, record_id: int) -> Recording:
        recording = await self._storage.get(record_id)
        if recording is None:
            raise RecordingNotFoundError(record_id)
        return recording

    async def delete_recording(self, record_id: int) -> Recording:
        """Delete one recording and its audio file."""
        recording = await self._storage.delete(record_id)
        if recording is None:
            raise RecordingNotFoundError(record_id)
        self._remove_audio(recording)
        self._stats.record_deleted(1)
        log.info("recording_deleted", record_id=record_id)
        return recording

    async def delete_all_recordings(self) -> int:
        deleted = await self._storage.delete_all()
        for recording in deleted:
            self._remove_audio(recording)
        self._stats.record_deleted(len(deleted))
        log.info("recordings_deleted", count=len(deleted))
        return len(deleted)

    async def insert_sample_recordings(self, count: int = SAMPLE_COUNT) -> list[Recording]:
        recordings = await self._storage.insert_batch(build_sample_recordings(count))
        self._stats.record_saved(len(recordings))
        log.info("sample_recordings_inserted", count=len(recordings))
        return recordings

    async def delete_all_sample_recordings(self) -> int:
        deleted = await self._storage.delete_all_samples()
        self._stats.record_deleted(deleted)
        log.info("sample_recordings_deleted", count=deleted)
        return deleted

    def _remove_audio(self, recording: Recording) -> None:
        if recording.is_sample:
            return
        try:
            Path(recording.audio_path).unlink(missing_ok=True)
        except OSError:
            log.warning("audio_delete_failed", path=recording.audio_path, exc_info=True)
