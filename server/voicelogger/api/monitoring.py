"""Health check and monitoring endpoints."""

from __future__ import annotations

import shutil
from pathlib import Path

from fastapi import APIRouter

router = APIRouter(prefix="/api/v1")


@router.get("/health")
async def health() -> dict:
    """Basic health check."""
    from voicelogger.main import get_config, get_service, get_stats

    config = get_config()
    snapshot = get_stats().snapshot()

    storage_path = Path(config.storage.base_dir)
    try:
        disk = shutil.disk_usage(storage_path if storage_path.exists() else ".")
        disk_free_gb = round(disk.free / (1024 ** 3), 1)
        storage_writable = True
    except OSError:
        disk_free_gb = -1
        storage_writable = False

    return {
        "status": "ok",
        "version": "0.1.0",
        "uptime_seconds": snapshot["uptime_seconds"],
        "session_active": get_service().session is not None,
        "roads_key_set": bool(config.roads.api_key),
        "storage_writable": storage_writable,
        "disk_free_gb": disk_free_gb,
    }


@router.get("/stats")
async def stats() -> dict:
    """Service statistics.

    The ``roads`` section counts correction requests, successes, failures
    by reason, and fallbacks to the raw GPS fixes.
    """
    from voicelogger.main import get_stats

    return get_stats().snapshot()


@router.get("/config")
async def get_client_config() -> dict:
    """Configuration endpoint for the device.

    The device calls this before recording to set up its location requests.
    """
    from voicelogger.main import get_config

    config = get_config()
    return {
        "location_interval_ms": config.location.interval_ms,
        "location_fastest_interval_ms": config.location.fastest_interval_ms,
        "location_priority": config.location.priority,
        "audio_format": "mpeg4/aac",
    }
