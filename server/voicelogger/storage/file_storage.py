"""File-based storage implementation.

Stores recordings as:
- One JSON document per recording in recordings/<record_id>.json
- A state.json holding the next record id and the next audio file id

Writes go to a temporary file first and are then moved into place.
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from voicelogger.core.models import Recording

log = structlog.get_logger()


class FileRecordingStorage:
    """RecordingStorage backed by JSON files on disk."""

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = Path(base_dir)
        self._records_dir = self._base_dir / "recordings"
        self._records_dir.mkdir(parents=True, exist_ok=True)
        self._state_path = self._base_dir / "state.json"

    def _record_path(self, record_id: int) -> Path:
        return self._records_dir / f"{record_id:08d}.json"

    @staticmethod
    def _write_json(path: Path, data: dict) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, separators=(",", ":")), encoding="utf-8")
        tmp.replace(path)

    def _read_state(self) -> dict:
        state = {"next_record_id": 1, "next_audio_id": 0}
        if self._state_path.exists():
            try:
                state.update(json.loads(self._state_path.read_text(encoding="utf-8")))
            except json.JSONDecodeError:
                log.warning("state_file_corrupt", path=str(self._state_path))
        return state

    def _read_record(self, path: Path) -> Recording | None:
        try:
            return Recording.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, OSError):
            log.warning("recording_unreadable", path=str(path), exc_info=True)
            return None

    def _all_records(self) -> list[Recording]:
        records = []
        for path in sorted(self._records_dir.glob("*.json")):
            record = self._read_record(path)
            if record is not None:
                records.append(record)
        return records

    async def insert(self, recording: Recording) -> Recording:
        """Assign the next record id and write the recording to disk."""
        state = self._read_state()
        recording.record_id = state["next_record_id"]
        state["next_record_id"] += 1

        self._write_json(self._record_path(recording.record_id), recording.to_dict())
        self._write_json(self._state_path, state)

        log.debug("recording_written", record_id=recording.record_id,
                  points=len(recording.points))
        return recording

    async def insert_batch(self, recordings: list[Recording]) -> list[Recording]:
        return [await self.insert(r) for r in recordings]

    async def get(self, record_id: int) -> Recording | None:
        path = self._record_path(record_id)
        if not path.exists():
            return None
        return self._read_record(path)

    async def search(self, title: str | None = None) -> list[Recording]:
        """Return recordings whose title contains ``title`` (all if None)."""
        records = self._all_records()
        if title:
            needle = title.casefold()
            records = [r for r in records if needle in r.title.casefold()]
        return records

    async def delete(self, record_id: int) -> Recording | None:
        """Remove a recording. Returns the removed recording, if any."""
        record = await self.get(record_id)
        if record is None:
            return None
        self._record_path(record_id).unlink(missing_ok=True)
        return record

    async def delete_all(self) -> list[Recording]:
        records = self._all_records()
        for record in records:
            self._record_path(record.record_id).unlink(missing_ok=True)
        return records

    async def delete_all_samples(self) -> int:
        deleted = 0
        for record in self._all_records():
            if record.is_sample:
                self._record_path(record.record_id).unlink(missing_ok=True)
                deleted += 1
        return deleted

    async def read_audio_id(self) -> int:
        return self._read_state()["next_audio_id"]

    async def increment_audio_id(self) -> None:
        state = self._read_state()
        state["next_audio_id"] += 1
        self._write_json(self._state_path, state)
