"""Recorder errors raised by the core and mapped to HTTP statuses by the API."""

from __future__ import annotations


class RecorderError(Exception):
    """Base class for recording-session failures."""


class CannotStartRecordingError(RecorderError):
    pass


class CannotSaveAudioError(RecorderError):
    pass


class CannotCollectGpsLocationError(RecorderError):
    pass


class SessionAlreadyActiveError(RecorderError):
    pass


class SessionNotActiveError(RecorderError):
    pass


class RecordingNotFoundError(RecorderError):
    def __init__(self, record_id: int) -> None:
        super().__init__(f"recording {record_id} not found")
        self.record_id = record_id
