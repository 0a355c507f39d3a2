"""Shared test fixtures."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

import voicelogger.main as main_module
from voicelogger.audio.file_recorder import FileAudioRecorder
from voicelogger.config import AppConfig
from voicelogger.core.models import CorrectedPoint
from voicelogger.core.session import RecorderService
from voicelogger.core.stats import ServiceStats
from voicelogger.queue.asyncio_queue import AsyncioSampleQueue
from voicelogger.roads.base import Error, Success
from voicelogger.storage.file_storage import FileRecordingStorage


class FakeRoadsClient:
    """RoadsClient returning a canned result and recording the paths asked."""

    def __init__(self, result=None, exc: Exception | None = None) -> None:
        self.result = result if result is not None else Error("Points not found.")
        self.exc = exc
        self.paths: list[str] = []

    async def snap_to_roads(self, path: str):
        self.paths.append(path)
        if self.exc is not None:
            raise self.exc
        return self.result


class FakeConnectivity:
    def __init__(self, connected: bool = True) -> None:
        self.connected = connected
        self.checks = 0

    async def is_connected(self) -> bool:
        self.checks += 1
        return self.connected


def snapped(*points: tuple[float, float, int | None]) -> Success:
    return Success([
        CorrectedPoint(latitude=lat, longitude=lng, original_index=idx, place_id=f"place-{n}")
        for n, (lat, lng, idx) in enumerate(points)
    ])


@pytest.fixture
def storage(tmp_path):
    return FileRecordingStorage(base_dir=tmp_path / "data")


@pytest.fixture
def roads():
    return FakeRoadsClient()


@pytest.fixture
def connectivity():
    return FakeConnectivity()


@pytest.fixture
def stats():
    return ServiceStats()


@pytest.fixture
def service(tmp_path, storage, roads, connectivity, stats):
    return RecorderService(
        storage=storage,
        recorder=FileAudioRecorder(),
        roads=roads,
        connectivity=connectivity,
        stats=stats,
        audio_dir=tmp_path / "data" / "audio",
        queue_factory=lambda: AsyncioSampleQueue(max_size=20),
    )


@pytest.fixture(autouse=True)
def _init_service(tmp_path, service, stats):
    """Initialize service singletons for every test, using a temp directory."""
    config = AppConfig()
    config.storage.base_dir = str(tmp_path / "data")
    config.logging.level = "warning"

    # Patch module-level singletons
    main_module._config = config
    main_module._stats = stats
    main_module._service = service

    yield

    # Cleanup
    main_module._config = None
    main_module._stats = None
    main_module._service = None


@pytest.fixture
async def client():
    from voicelogger.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
