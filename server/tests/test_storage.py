"""Tests for the file-based recording storage."""

from __future__ import annotations

import pytest

from voicelogger.core.models import ReconciledPoint, Recording
from voicelogger.storage.file_storage import FileRecordingStorage


def make_recording(title: str, *, is_sample: bool = False) -> Recording:
    return Recording(
        audio_path=f"/tmp/{title}.mp4",
        title=title,
        duration_ms=1200,
        created_at_ms=1_700_000_000_000,
        points=(
            ReconciledPoint(latitude=35.0, longitude=139.0, altitude=3.0, bearing=1.0,
                            speed=0.5, time_ms=10, original_index=0),
            ReconciledPoint(latitude=35.1, longitude=139.1),
        ),
        is_sample=is_sample,
    )


@pytest.mark.asyncio
async def test_insert_assigns_increasing_ids(storage):
    first = await storage.insert(make_recording("a"))
    second = await storage.insert(make_recording("b"))

    assert (first.record_id, second.record_id) == (1, 2)
    assert await storage.get(2) == second
    assert await storage.get(99) is None


@pytest.mark.asyncio
async def test_records_survive_reopen(tmp_path):
    base = tmp_path / "store"
    storage = FileRecordingStorage(base)
    saved = await storage.insert(make_recording("kept"))
    await storage.increment_audio_id()

    reopened = FileRecordingStorage(base)

    assert await reopened.get(saved.record_id) == saved
    assert await reopened.read_audio_id() == 1
    assert (await reopened.insert(make_recording("next"))).record_id == 2


@pytest.mark.asyncio
async def test_search_by_title(storage):
    await storage.insert_batch([
        make_recording("Morning walk"),
        make_recording("Evening WALK"),
        make_recording("Meeting"),
    ])

    assert [r.title for r in await storage.search("walk")] == ["Morning walk", "Evening WALK"]
    assert len(await storage.search()) == 3
    assert await storage.search("bus") == []


@pytest.mark.asyncio
async def test_delete(storage):
    saved = await storage.insert(make_recording("gone"))

    deleted = await storage.delete(saved.record_id)

    assert deleted == saved
    assert await storage.get(saved.record_id) is None
    assert await storage.delete(saved.record_id) is None


@pytest.mark.asyncio
async def test_delete_all_samples_keeps_own_recordings(storage):
    own = await storage.insert(make_recording("own"))
    await storage.insert_batch([make_recording(f"s{i}", is_sample=True) for i in range(3)])

    assert await storage.delete_all_samples() == 3
    assert await storage.search() == [own]


@pytest.mark.asyncio
async def test_delete_all_returns_removed(storage):
    await storage.insert_batch([make_recording("x"), make_recording("y")])

    removed = await storage.delete_all()

    assert [r.title for r in removed] == ["x", "y"]
    assert await storage.search() == []


@pytest.mark.asyncio
async def test_corrupt_record_skipped(storage, tmp_path):
    await storage.insert(make_recording("fine"))
    (tmp_path / "data" / "recordings" / "00000042.json").write_text("{broken")

    assert [r.title for r in await storage.search()] == ["fine"]
