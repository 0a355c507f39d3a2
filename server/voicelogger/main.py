"""Voice logger service: main entry point.

This is the only file that knows about concrete implementations.
It wires together the core, queue, storage, audio, roads and API layers.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI

from voicelogger.api.monitoring import router as monitoring_router
from voicelogger.api.recordings import router as recordings_router
from voicelogger.api.sessions import router as sessions_router
from voicelogger.audio.file_recorder import FileAudioRecorder
from voicelogger.config import AppConfig, load_config
from voicelogger.core.session import RecorderService
from voicelogger.core.stats import ServiceStats
from voicelogger.queue.asyncio_queue import AsyncioSampleQueue
from voicelogger.roads.client import HttpRoadsClient
from voicelogger.roads.connectivity import SocketConnectivityCheck
from voicelogger.storage.file_storage import FileRecordingStorage

log = structlog.get_logger()

# Module-level singletons (set during startup)
_service: RecorderService | None = None
_stats: ServiceStats | None = None
_config: AppConfig | None = None


def get_service() -> RecorderService:
    assert _service is not None, "Service not initialized"
    return _service


def get_stats() -> ServiceStats:
    assert _stats is not None, "Service not initialized"
    return _stats


def get_config() -> AppConfig:
    assert _config is not None, "Service not initialized"
    return _config


def _setup_logging(config: AppConfig) -> None:
    """Configure structlog based on the logging config."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.logging.format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.logging.level.upper()),
        ),
    )


def build_service(config: AppConfig, stats: ServiceStats) -> tuple[RecorderService, HttpRoadsClient]:
    """Create the recorder service and its concrete collaborators."""
    storage = FileRecordingStorage(base_dir=config.storage.base_dir)
    roads = HttpRoadsClient(config.roads)
    connectivity = SocketConnectivityCheck(
        host=config.roads.probe_host,
        port=config.roads.probe_port,
        timeout_seconds=config.roads.probe_timeout_seconds,
    )
    service = RecorderService(
        storage=storage,
        recorder=FileAudioRecorder(),
        roads=roads,
        connectivity=connectivity,
        stats=stats,
        audio_dir=Path(config.storage.base_dir) / config.storage.audio_subdir,
        queue_factory=lambda: AsyncioSampleQueue(max_size=config.location.queue_size),
    )
    return service, roads


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    global _service, _stats, _config

    _config = load_config()
    _setup_logging(_config)

    log.info("service_starting",
             env=_config.server.env,
             storage_dir=_config.storage.base_dir,
             roads_key_set=bool(_config.roads.api_key))

    _stats = ServiceStats()
    _service, roads = build_service(_config, _stats)

    log.info("service_started",
             host=_config.server.host,
             port=_config.server.port)

    yield

    # Shutdown
    if _service.session is not None:
        await _service.cancel_session()
    await roads.aclose()
    log.info("service_stopped")


app = FastAPI(
    title="Voice Logger",
    description="Voice recordings tagged with road-snapped GPS tracks",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(sessions_router)
app.include_router(recordings_router)
app.include_router(monitoring_router)
