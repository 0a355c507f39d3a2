"""GPS point reconciliation: merges road-snapped points with raw fixes.

The roads-correction service returns points in its own order, each with an
optional back-reference (``original_index``) to the fix it was derived from.
Interpolated points carry no back-reference and keep only their position.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from voicelogger.core.models import ReconciledPoint

if TYPE_CHECKING:
    from voicelogger.core.models import CorrectedPoint, Sample

# Separator between coordinates in a roads path query.
PATH_DELIMITER = "|"

# Cadence used to synthesize timestamps for fixture tracks.
FIXTURE_STEP_MS = 1000


def _from_sample(sample: Sample) -> ReconciledPoint:
    return ReconciledPoint(
        latitude=sample.latitude,
        longitude=sample.longitude,
        altitude=sample.altitude,
        bearing=sample.bearing,
        speed=sample.speed,
        time_ms=sample.time_ms,
        original_index=sample.index,
    )


def _valid_index(index: int | None, size: int) -> bool:
    return index is not None and 0 <= index < size


def reconcile(
    samples: Sequence[Sample],
    corrected: Sequence[CorrectedPoint] | None,
) -> list[ReconciledPoint]:
    """Build the track to persist with a recording.

    With no corrected points, every sample is kept as-is, in capture order.
    Otherwise one point is produced per corrected point, in service order:
    the corrected position plus the sensor fields of the originating sample.
    An originating index outside ``samples`` is treated as absent.
    """
    if corrected is None:
        return [_from_sample(s) for s in samples]

    points: list[ReconciledPoint] = []
    for cp in corrected:
        if _valid_index(cp.original_index, len(samples)):
            origin = samples[cp.original_index]
            points.append(ReconciledPoint(
                latitude=cp.latitude,
                longitude=cp.longitude,
                altitude=origin.altitude,
                bearing=origin.bearing,
                speed=origin.speed,
                time_ms=origin.time_ms,
                original_index=cp.original_index,
            ))
        else:
            points.append(ReconciledPoint(latitude=cp.latitude, longitude=cp.longitude))
    return points


def build_path_query(samples: Sequence[Sample]) -> str:
    """Encode all fixes as ``lat,lng|lat,lng|...`` in capture order."""
    return PATH_DELIMITER.join(f"{s.latitude},{s.longitude}" for s in samples)


def fixture_to_points(corrected: Sequence[CorrectedPoint]) -> list[ReconciledPoint]:
    """Convert a canned roads response into a track for sample recordings.

    There are no real fixes behind a fixture, so indexed points get a
    timestamp advancing by ``FIXTURE_STEP_MS`` from zero.
    """
    points: list[ReconciledPoint] = []
    time_ms = 0
    for cp in corrected:
        if cp.original_index is not None:
            points.append(ReconciledPoint(
                latitude=cp.latitude,
                longitude=cp.longitude,
                time_ms=time_ms,
                original_index=cp.original_index,
            ))
            time_ms += FIXTURE_STEP_MS
        else:
            points.append(ReconciledPoint(latitude=cp.latitude, longitude=cp.longitude))
    return points
