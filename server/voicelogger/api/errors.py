"""Mapping of recorder errors to JSON error responses."""

from __future__ import annotations

from fastapi.responses import JSONResponse

from voicelogger.core.errors import (
    CannotCollectGpsLocationError,
    CannotSaveAudioError,
    CannotStartRecordingError,
    RecorderError,
    RecordingNotFoundError,
    SessionAlreadyActiveError,
    SessionNotActiveError,
)

_STATUS = {
    SessionAlreadyActiveError: 409,
    SessionNotActiveError: 409,
    CannotCollectGpsLocationError: 422,
    RecordingNotFoundError: 404,
    CannotStartRecordingError: 503,
    CannotSaveAudioError: 500,
}


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


def recorder_error_response(exc: RecorderError) -> JSONResponse:
    return error_response(str(exc), _STATUS.get(type(exc), 500))
