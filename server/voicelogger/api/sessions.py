"""Recording session endpoints.

This is the thin FastAPI adapter for the device: it starts and stops the
session, forwards location fixes and audio bytes, and returns the saved
recording.
"""

from __future__ import annotations

import json
import math

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from voicelogger.api.errors import error_response, recorder_error_response
from voicelogger.core.errors import RecorderError

router = APIRouter(prefix="/api/v1")


async def _json_body(request: Request) -> dict | None:
    """Parse a JSON object body. Empty body is an empty object."""
    body_bytes = await request.body()
    if not body_bytes:
        return {}
    try:
        body = json.loads(body_bytes)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


def _parse_fix(data: dict) -> dict:
    """Validate one location fix from the device. Raises ValueError."""
    if "latitude" not in data or "longitude" not in data:
        raise ValueError("latitude and longitude are required")
    time_ms = data.get("time_ms")
    fix = {
        "latitude": float(data["latitude"]),
        "longitude": float(data["longitude"]),
        "altitude": float(data.get("altitude", 0.0)),
        "bearing": float(data.get("bearing", 0.0)),
        "speed": float(data.get("speed", 0.0)),
    }
    for name, value in fix.items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number")
    if not -90.0 <= fix["latitude"] <= 90.0:
        raise ValueError("latitude must be within [-90, 90]")
    if not -180.0 <= fix["longitude"] <= 180.0:
        raise ValueError("longitude must be within [-180, 180]")
    fix["time_ms"] = int(time_ms) if time_ms is not None else None
    return fix


@router.post("/sessions")
async def start_session(request: Request) -> JSONResponse:
    """Start recording.

    Body: {"location_granted": true}. The device reports whether location
    permission was granted; without it only audio is recorded.
    """
    from voicelogger.main import get_service

    body = await _json_body(request)
    if body is None:
        return error_response("invalid JSON", 400)

    location_granted = body.get("location_granted", True)
    if not isinstance(location_granted, bool):
        return error_response("location_granted must be a boolean", 422)

    try:
        session = await get_service().start_session(location_granted=location_granted)
    except RecorderError as exc:
        return recorder_error_response(exc)
    return JSONResponse(content={"active": True, **session.snapshot()})


@router.get("/sessions/current")
async def current_session() -> JSONResponse:
    from voicelogger.main import get_service

    session = get_service().session
    if session is None:
        return JSONResponse(content={"active": False})
    return JSONResponse(content={"active": True, **session.snapshot()})


@router.delete("/sessions/current")
async def cancel_session() -> JSONResponse:
    from voicelogger.main import get_service

    try:
        await get_service().cancel_session()
    except RecorderError as exc:
        return recorder_error_response(exc)
    return JSONResponse(content={"cancelled": True})


@router.post("/sessions/current/locations")
async def add_locations(request: Request) -> JSONResponse:
    """Receive location fixes.

    Accepts a single fix ({"latitude": ..., "longitude": ...}) or a batch
    ({"locations": [...]}), in capture order.
    """
    from voicelogger.main import get_service

    body = await _json_body(request)
    if body is None:
        return error_response("invalid JSON", 400)

    raw_fixes = body["locations"] if "locations" in body else [body]
    try:
        fixes = [_parse_fix(f) for f in raw_fixes]
    except (TypeError, ValueError, OverflowError) as exc:
        return error_response(f"invalid location: {exc}", 422)

    service = get_service()
    accepted = 0
    try:
        for fix in fixes:
            await service.add_location(**fix)
            accepted += 1
    except RecorderError as exc:
        response = recorder_error_response(exc)
        if accepted == 0:
            return response
        return JSONResponse(
            content={"accepted": accepted, "error": str(exc)},
            status_code=response.status_code,
        )
    return JSONResponse(content={"accepted": accepted})


@router.post("/sessions/current/audio")
async def upload_audio(request: Request) -> JSONResponse:
    """Append encoded audio bytes to the current recording."""
    from voicelogger.main import get_service

    chunk = await request.body()
    try:
        total = get_service().write_audio(chunk)
    except RecorderError as exc:
        return recorder_error_response(exc)
    return JSONResponse(content={"bytes_written": total})


@router.post("/sessions/current/stop")
async def stop_session(request: Request) -> JSONResponse:
    """Stop recording and save it.

    Body: {"title": "...", "duration_ms": 12345}. The GPS track is snapped
    to roads when the roads service is reachable; otherwise the raw fixes
    are saved.
    """
    from voicelogger.main import get_service

    body = await _json_body(request)
    if body is None:
        return error_response("invalid JSON", 400)

    duration_ms = body.get("duration_ms")
    if duration_ms is not None:
        try:
            duration_ms = int(duration_ms)
        except (TypeError, ValueError, OverflowError):
            return error_response("duration_ms must be an integer", 422)

    try:
        recording = await get_service().stop_session(
            title=str(body.get("title", "")),
            duration_ms=duration_ms,
        )
    except RecorderError as exc:
        return recorder_error_response(exc)
    return JSONResponse(content=recording.to_dict())
