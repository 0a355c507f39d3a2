"""Recording library endpoints: listing, search, deletion and samples."""

from __future__ import annotations

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from voicelogger.api.errors import recorder_error_response
from voicelogger.core.errors import RecorderError
from voicelogger.core.samples import SAMPLE_COUNT

router = APIRouter(prefix="/api/v1")


def _summary(recording) -> dict:
    """List entry for a recording: everything but the track itself."""
    return {
        "record_id": recording.record_id,
        "title": recording.title,
        "audio_path": recording.audio_path,
        "duration_ms": recording.duration_ms,
        "created_at_ms": recording.created_at_ms,
        "is_sample": recording.is_sample,
        "points": len(recording.points),
    }


@router.get("/recordings")
async def list_recordings(title: str | None = Query(default=None)) -> JSONResponse:
    """List recordings, optionally filtered by a title substring."""
    from voicelogger.main import get_service

    recordings = await get_service().list_recordings(title)
    return JSONResponse(content={
        "recordings": [_summary(r) for r in recordings],
        "total": len(recordings),
    })


@router.delete("/recordings")
async def delete_all_recordings() -> JSONResponse:
    from voicelogger.main import get_service

    deleted = await get_service().delete_all_recordings()
    return JSONResponse(content={"deleted": deleted})


@router.post("/recordings/samples")
async def insert_sample_recordings(
    count: int = Query(default=SAMPLE_COUNT, ge=1, le=100),
) -> JSONResponse:
    """Load sample recordings built from the bundled fixture track."""
    from voicelogger.main import get_service

    recordings = await get_service().insert_sample_recordings(count)
    return JSONResponse(content={
        "inserted": len(recordings),
        "record_ids": [r.record_id for r in recordings],
    })


@router.delete("/recordings/samples")
async def delete_sample_recordings() -> JSONResponse:
    from voicelogger.main import get_service

    deleted = await get_service().delete_all_sample_recordings()
    return JSONResponse(content={"deleted": deleted})


@router.get("/recordings/{record_id:int}")
async def get_recording(record_id: int) -> JSONResponse:
    """Return one recording with its full GPS track."""
    from voicelogger.main import get_service

    try:
        recording = await get_service().get_recording(record_id)
    except RecorderError as exc:
        return recorder_error_response(exc)
    return JSONResponse(content=recording.to_dict())


@router.delete("/recordings/{record_id:int}")
async def delete_recording(record_id: int) -> JSONResponse:
    """Delete one recording and its audio file."""
    from voicelogger.main import get_service

    try:
        await get_service().delete_recording(record_id)
    except RecorderError as exc:
        return recorder_error_response(exc)
    return JSONResponse(content={"deleted": 1})
