"""Voice logger: core internal data models.

These are plain dataclasses with no framework dependencies.
JSON documents are converted to/from these at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Sample:
    """One raw GPS fix, in capture order."""
    latitude: float
    longitude: float
    altitude: float
    bearing: float
    speed: float
    time_ms: int
    index: int


@dataclass(frozen=True)
class CorrectedPoint:
    """One point returned by the roads-correction service."""
    latitude: float
    longitude: float
    original_index: int | None = None
    place_id: str = ""


@dataclass(frozen=True)
class ReconciledPoint:
    latitude: float
    longitude: float
    altitude: float | None = None
    bearing: float | None = None
    speed: float | None = None
    time_ms: int | None = None
    original_index: int | None = None

    def to_dict(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "altitude": self.altitude,
            "bearing": self.bearing,
            "speed": self.speed,
            "time_ms": self.time_ms,
            "original_index": self.original_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ReconciledPoint:
        return cls(
            latitude=data.get("latitude", 0.0),
            longitude=data.get("longitude", 0.0),
            altitude=data.get("altitude"),
            bearing=data.get("bearing"),
            speed=data.get("speed"),
            time_ms=data.get("time_ms"),
            original_index=data.get("original_index"),
        )


@dataclass
class Recording:
    audio_path: str
    title: str
    duration_ms: int
    created_at_ms: int
    points: tuple[ReconciledPoint, ...] = ()
    is_sample: bool = False
    record_id: int = 0

    def to_dict(self) -> dict:
        return {
            "record_id": self.record_id,
            "audio_path": self.audio_path,
            "title": self.title,
            "duration_ms": self.duration_ms,
            "created_at_ms": self.created_at_ms,
            "is_sample": self.is_sample,
            "points": [p.to_dict() for p in self.points],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Recording:
        return cls(
            record_id=data.get("record_id", 0),
            audio_path=data.get("audio_path", ""),
            title=data.get("title", ""),
            duration_ms=data.get("duration_ms", 0),
            created_at_ms=data.get("created_at_ms", 0),
            is_sample=data.get("is_sample", False),
            points=tuple(ReconciledPoint.from_dict(p) for p in data.get("points", [])),
        )
