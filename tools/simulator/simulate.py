#!/usr/bin/env python3
"""Voice logger device simulator.

Drives recording sessions against a running service: starts a session,
sends location fixes while moving along a random route, uploads audio
bytes, then stops and prints the saved recording.

Usage:
    # One 60 s recording around Tokyo station, fixes every 3 s
    python -m tools.simulator.simulate --server http://localhost:8000 --duration 60

    # Three recordings, no waiting between fixes
    python -m tools.simulator.simulate --recordings 3 --no-sleep

    # Device without location permission (audio only)
    python -m tools.simulator.simulate --no-location
"""

from __future__ import annotations

import argparse
import asyncio
import math
import os
import random
import time
from dataclasses import dataclass

import httpx


@dataclass
class SimDevice:
    lat: float
    lon: float
    bearing: float
    speed_mps: float
    altitude: float = 40.0
    fixes_sent: int = 0
    errors: int = 0


def move_device(device: SimDevice, dt_seconds: float) -> None:
    """Move a device along its current bearing, with random turns."""
    # Random bearing change (simulates turns)
    device.bearing = (device.bearing + random.uniform(-15, 15)) % 360

    # Walking to slow driving: 1-12 m/s
    device.speed_mps = max(1.0, min(12.0, device.speed_mps + random.uniform(-0.5, 0.5)))
    device.altitude += random.uniform(-0.5, 0.5)

    distance_m = device.speed_mps * dt_seconds
    bearing_rad = math.radians(device.bearing)

    # Approximate: 1 degree latitude ~ 111,000 m
    dlat = (distance_m * math.cos(bearing_rad)) / 111_000
    dlon = (distance_m * math.sin(bearing_rad)) / (111_000 * math.cos(math.radians(device.lat)))

    device.lat += dlat
    device.lon += dlon


def make_fix(device: SimDevice) -> dict:
    return {
        "latitude": round(device.lat, 7),
        "longitude": round(device.lon, 7),
        "altitude": round(device.altitude, 1),
        "bearing": round(device.bearing, 1),
        "speed": round(device.speed_mps, 2),
        "time_ms": int(time.time() * 1000),
    }


async def run_recording(
    client: httpx.AsyncClient,
    device: SimDevice,
    server_url: str,
    title: str,
    duration_seconds: float,
    interval_seconds: float,
    location_granted: bool,
    sleep: bool,
) -> dict | None:
    """Record one session and return the saved recording."""
    resp = await client.post(
        f"{server_url}/api/v1/sessions",
        json={"location_granted": location_granted},
    )
    if resp.status_code != 200:
        print(f"  start failed: {resp.status_code} {resp.text}")
        return None

    n_fixes = max(1, int(duration_seconds / interval_seconds))
    for _ in range(n_fixes):
        move_device(device, interval_seconds)
        if location_granted:
            try:
                r = await client.post(
                    f"{server_url}/api/v1/sessions/current/locations",
                    json=make_fix(device),
                )
                if r.status_code == 200:
                    device.fixes_sent += 1
                else:
                    device.errors += 1
            except httpx.RequestError:
                device.errors += 1

        # Roughly 16 kB/s of AAC
        chunk = os.urandom(int(16_000 * interval_seconds))
        await client.post(f"{server_url}/api/v1/sessions/current/audio", content=chunk)

        if sleep:
            await asyncio.sleep(interval_seconds)

    resp = await client.post(
        f"{server_url}/api/v1/sessions/current/stop",
        json={"title": title, "duration_ms": int(n_fixes * interval_seconds * 1000)},
    )
    if resp.status_code != 200:
        print(f"  stop failed: {resp.status_code} {resp.text}")
        return None
    return resp.json()


async def run_simulation(args: argparse.Namespace) -> None:
    """Run the full simulation."""
    center_lat, center_lon = args.center
    device = SimDevice(
        lat=center_lat,
        lon=center_lon,
        bearing=random.uniform(0, 360),
        speed_mps=random.uniform(1, 8),
    )

    print(f"Starting simulation: {args.recordings} recording(s) of {args.duration}s")
    print(f"  Center: {center_lat:.4f}, {center_lon:.4f}")
    print(f"  Fix interval: {args.interval}s")
    print(f"  Location granted: {not args.no_location}")
    print(f"  Server: {args.server}")
    print()

    start = time.monotonic()

    async with httpx.AsyncClient(timeout=30.0) as client:
        for i in range(args.recordings):
            recording = await run_recording(
                client, device, args.server, f"Simulated recording {i}",
                args.duration, args.interval, not args.no_location, not args.no_sleep,
            )
            if recording is None:
                continue
            snapped = sum(1 for p in recording["points"] if p["original_index"] is None)
            print(f"Saved recording {recording['record_id']}: "
                  f"{len(recording['points'])} points ({snapped} interpolated)")

        elapsed = time.monotonic() - start
        print(f"\nSimulation complete in {elapsed:.1f}s")
        print(f"  Fixes sent: {device.fixes_sent}")
        print(f"  Errors: {device.errors}")

        # Check service stats
        try:
            resp = await client.get(f"{args.server}/api/v1/stats")
            if resp.status_code == 200:
                stats = resp.json()
                print(f"\nService stats:")
                print(f"  Recordings saved: {stats['recordings_saved']}")
                print(f"  Roads requests: {stats['roads']['requests']}")
                print(f"  Roads failures: {stats['roads']['failures']}")
                print(f"  Fallbacks: {stats['roads']['fallbacks']}")
        except httpx.RequestError as exc:
            print(f"\nCould not fetch stats: {exc}")


def main():
    parser = argparse.ArgumentParser(description="Voice logger device simulator")
    parser.add_argument("--server", default="http://localhost:8000", help="Service URL")
    parser.add_argument("--recordings", type=int, default=1, help="Number of recordings")
    parser.add_argument("--duration", type=float, default=30, help="Recording duration in seconds")
    parser.add_argument("--interval", type=float, default=3.0, help="Seconds between fixes")
    parser.add_argument("--center", type=str, default="35.6812,139.7671",
                        help="Start lat,lon (default: Tokyo station)")
    parser.add_argument("--no-location", action="store_true",
                        help="Simulate a device without location permission")
    parser.add_argument("--no-sleep", action="store_true",
                        help="Send fixes as fast as possible")

    args = parser.parse_args()

    # Parse center
    lat, lon = args.center.split(",")
    args.center = (float(lat), float(lon))

    asyncio.run(run_simulation(args))


if __name__ == "__main__":
    main()
