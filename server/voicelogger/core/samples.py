"""Sample recordings built from a bundled roads response."""

from __future__ import annotations

import json
from pathlib import Path

from voicelogger.core.models import CorrectedPoint, Recording
from voicelogger.core.reconcile import fixture_to_points
from voicelogger.roads.client import parse_snapped_points

_DATA_DIR = Path(__file__).parent.parent / "data"
SAMPLE_FIXTURE_PATH = _DATA_DIR / "sample_snapped_points.json"

# Sample recordings do not own an audio file of their own.
SAMPLE_AUDIO_PATH = "sample://sample_audio"
SAMPLE_DURATION_MS = 30_000
SAMPLE_COUNT = 10


def load_sample_fixture(path: str | Path = SAMPLE_FIXTURE_PATH) -> list[CorrectedPoint]:
    """Read a Roads API response body from disk."""
    body = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_snapped_points(body)


def build_sample_recordings(
    count: int = SAMPLE_COUNT,
    fixture_path: str | Path = SAMPLE_FIXTURE_PATH,
) -> list[Recording]:
    """Build ``count`` sample recordings sharing one fixture track.

    Sample recordings are dated at the epoch so they sort before real ones.
    """
    points = tuple(fixture_to_points(load_sample_fixture(fixture_path)))
    return [
        Recording(
            audio_path=SAMPLE_AUDIO_PATH,
            title=f"Sample recording {i}",
            duration_ms=SAMPLE_DURATION_MS,
            created_at_ms=0,
            points=points,
            is_sample=True,
        )
        for i in range(count)
    ]
