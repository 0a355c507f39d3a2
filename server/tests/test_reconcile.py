"""Tests for GPS point reconciliation."""

from __future__ import annotations

from voicelogger.core.models import CorrectedPoint, ReconciledPoint, Sample
from voicelogger.core.reconcile import build_path_query, fixture_to_points, reconcile


def make_samples(n: int) -> list[Sample]:
    return [
        Sample(
            latitude=35.0 + i * 0.001,
            longitude=139.0 + i * 0.001,
            altitude=10.0 + i,
            bearing=float(i * 10),
            speed=1.5 + i,
            time_ms=1_700_000_000_000 + i * 3000,
            index=i,
        )
        for i in range(n)
    ]


def test_no_correction_keeps_samples():
    samples = make_samples(5)
    points = reconcile(samples, None)

    assert len(points) == 5
    for sample, point in zip(samples, points):
        assert point == ReconciledPoint(
            latitude=sample.latitude,
            longitude=sample.longitude,
            altitude=sample.altitude,
            bearing=sample.bearing,
            speed=sample.speed,
            time_ms=sample.time_ms,
            original_index=sample.index,
        )


def test_no_samples_no_correction():
    assert reconcile([], None) == []


def test_corrected_points_take_sensor_fields_from_origin():
    samples = make_samples(3)
    corrected = [
        CorrectedPoint(latitude=35.1, longitude=139.1, original_index=2),
        CorrectedPoint(latitude=35.2, longitude=139.2, original_index=0),
    ]

    points = reconcile(samples, corrected)

    assert len(points) == 2
    assert (points[0].latitude, points[0].longitude) == (35.1, 139.1)
    assert points[0].altitude == samples[2].altitude
    assert points[0].bearing == samples[2].bearing
    assert points[0].speed == samples[2].speed
    assert points[0].time_ms == samples[2].time_ms
    assert points[0].original_index == 2

    assert (points[1].latitude, points[1].longitude) == (35.2, 139.2)
    assert points[1].time_ms == samples[0].time_ms
    assert points[1].original_index == 0


def test_interpolated_point_has_position_only():
    samples = make_samples(2)
    corrected = [
        CorrectedPoint(latitude=35.0, longitude=139.0, original_index=0),
        CorrectedPoint(latitude=35.0005, longitude=139.0005),
        CorrectedPoint(latitude=35.001, longitude=139.001, original_index=1),
    ]

    points = reconcile(samples, corrected)

    assert len(points) == 3
    middle = points[1]
    assert (middle.latitude, middle.longitude) == (35.0005, 139.0005)
    assert middle.altitude is None
    assert middle.bearing is None
    assert middle.speed is None
    assert middle.time_ms is None
    assert middle.original_index is None


def test_out_of_range_index_treated_as_absent():
    samples = make_samples(2)
    corrected = [
        CorrectedPoint(latitude=1.0, longitude=2.0, original_index=7),
        CorrectedPoint(latitude=3.0, longitude=4.0, original_index=-1),
    ]

    points = reconcile(samples, corrected)

    assert points == [
        ReconciledPoint(latitude=1.0, longitude=2.0),
        ReconciledPoint(latitude=3.0, longitude=4.0),
    ]


def test_corrected_order_is_kept():
    samples = make_samples(4)
    order = [3, 1, 2, 0]
    corrected = [CorrectedPoint(latitude=float(i), longitude=float(i), original_index=i) for i in order]

    points = reconcile(samples, corrected)

    assert [p.original_index for p in points] == order


def test_reconcile_is_pure():
    samples = make_samples(3)
    corrected = [CorrectedPoint(latitude=9.0, longitude=9.0, original_index=1)]
    samples_before = list(samples)
    corrected_before = list(corrected)

    first = reconcile(samples, corrected)
    second = reconcile(samples, corrected)

    assert first == second
    assert samples == samples_before
    assert corrected == corrected_before


def test_empty_correction_list_yields_empty_track():
    assert reconcile(make_samples(3), []) == []


def test_path_query_keeps_every_fix_in_order():
    coords = [(35.68, 139.76), (35.681, 139.761), (-33.8, 151.2)]
    samples = [
        Sample(latitude=lat, longitude=lng, altitude=0.0, bearing=0.0, speed=0.0, time_ms=0, index=i)
        for i, (lat, lng) in enumerate(coords)
    ]

    query = build_path_query(samples)

    assert query == "35.68,139.76|35.681,139.761|-33.8,151.2"
    assert build_path_query([]) == ""


def test_fixture_points_get_one_second_timestamps():
    corrected = [
        CorrectedPoint(latitude=1.0, longitude=1.0, original_index=0),
        CorrectedPoint(latitude=1.5, longitude=1.5),
        CorrectedPoint(latitude=2.0, longitude=2.0, original_index=1),
        CorrectedPoint(latitude=3.0, longitude=3.0, original_index=2),
    ]

    points = fixture_to_points(corrected)

    assert [p.time_ms for p in points] == [0, None, 1000, 2000]
    assert [p.original_index for p in points] == [0, None, 1, 2]
    assert all(p.altitude is None for p in points)
