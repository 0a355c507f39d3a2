"""Service statistics.

Tracks in-memory counters for sessions, location fixes, roads-correction
calls and the recording library. No framework dependencies.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass


@dataclass
class ActiveSession:
    """Tracks the session currently recording, if any."""
    started_at: float         # time.monotonic() timestamp
    location_granted: bool
    samples: int = 0


class ServiceStats:
    """Thread-safe service statistics.

    Roads failures are counted per reason (``"Timeout"``,
    ``"API Key Limited."``, ...). Every failure and every skipped call
    ends in a fallback to the raw fixes, counted in ``fallbacks``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._started_at = time.time()

        # Counters
        self.sessions_started: int = 0
        self.sessions_cancelled: int = 0
        self.samples_received: int = 0
        self.samples_rejected: int = 0
        self.roads_requests: int = 0
        self.roads_successes: int = 0
        self.fallbacks: int = 0
        self.recordings_saved: int = 0
        self.recordings_deleted: int = 0
        self.save_errors: int = 0

        self._roads_failures: dict[str, int] = {}
        self._active: ActiveSession | None = None

    def record_session_started(self, location_granted: bool) -> None:
        with self._lock:
            self.sessions_started += 1
            self._active = ActiveSession(
                started_at=time.monotonic(), location_granted=location_granted,
            )

    def record_session_ended(self, *, cancelled: bool = False) -> None:
        with self._lock:
            if cancelled:
                self.sessions_cancelled += 1
            self._active = None

    def record_sample(self) -> None:
        with self._lock:
            self.samples_received += 1
            if self._active is not None:
                self._active.samples += 1

    def record_sample_rejected(self, count: int = 1) -> None:
        with self._lock:
            self.samples_rejected += count

    def record_roads_request(self) -> None:
        with self._lock:
            self.roads_requests += 1

    def record_roads_success(self) -> None:
        with self._lock:
            self.roads_successes += 1

    def record_roads_failure(self, reason: str) -> None:
        with self._lock:
            self._roads_failures[reason] = self._roads_failures.get(reason, 0) + 1

    def record_fallback(self) -> None:
        with self._lock:
            self.fallbacks += 1

    def record_saved(self, count: int = 1) -> None:
        with self._lock:
            self.recordings_saved += count

    def record_deleted(self, count: int) -> None:
        with self._lock:
            self.recordings_deleted += count

    def record_save_error(self) -> None:
        with self._lock:
            self.save_errors += 1

    def snapshot(self) -> dict:
        """Return a JSON-serializable snapshot of all stats."""
        now_mono = time.monotonic()
        with self._lock:
            active = None
            if self._active is not None:
                active = {
                    "elapsed_seconds": round(now_mono - self._active.started_at, 1),
                    "location_granted": self._active.location_granted,
                    "samples": self._active.samples,
                }

            return {
                "uptime_seconds": round(time.time() - self._started_at, 1),
                "sessions_started": self.sessions_started,
                "sessions_cancelled": self.sessions_cancelled,
                "samples_received": self.samples_received,
                "samples_rejected": self.samples_rejected,
                "roads": {
                    "requests": self.roads_requests,
                    "successes": self.roads_successes,
                    "failures": dict(self._roads_failures),
                    "fallbacks": self.fallbacks,
                },
                "recordings_saved": self.recordings_saved,
                "recordings_deleted": self.recordings_deleted,
                "save_errors": self.save_errors,
                "active_session": active,
            }
