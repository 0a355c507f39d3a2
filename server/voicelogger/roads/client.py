"""HTTP client for the Google Roads API ``snapToRoads`` endpoint.

Every outcome of a request is classified into a NetworkResult; nothing
raised by the transport escapes ``snap_to_roads``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from voicelogger.core.models import CorrectedPoint
from voicelogger.roads.base import Error, NetworkResult, Success

if TYPE_CHECKING:
    from voicelogger.config import RoadsConfig

log = structlog.get_logger()

# Status the Roads API answers with once the key's quota is exhausted.
API_KEY_LIMITED_STATUS = 402

_TIMEOUT_STATUSES = {408, 504}


def parse_snapped_points(body: dict) -> list[CorrectedPoint]:
    """Parse the ``snappedPoints`` list of a Roads API response body."""
    points = []
    for sp in body.get("snappedPoints") or []:
        loc = sp.get("location", {})
        points.append(CorrectedPoint(
            latitude=loc.get("latitude", 0.0),
            longitude=loc.get("longitude", 0.0),
            original_index=sp.get("originalIndex"),
            place_id=sp.get("placeId", ""),
        ))
    return points


def classify_response(response: httpx.Response) -> NetworkResult[list[CorrectedPoint]]:
    """Turn an HTTP response into Success or Error."""
    if response.status_code in _TIMEOUT_STATUSES:
        return Error("Timeout")
    if response.status_code == API_KEY_LIMITED_STATUS:
        return Error("API Key Limited.")

    try:
        body = response.json() if response.content else None
    except ValueError:
        body = None
    points = parse_snapped_points(body) if isinstance(body, dict) else []
    if not points:
        log.warning("roads_points_not_found", status=response.status_code,
                    body=response.text[:500])
        return Error("Points not found.")

    if response.is_success:
        return Success(points)
    return Error(response.reason_phrase or f"HTTP {response.status_code}")


class HttpRoadsClient:
    """RoadsClient backed by httpx, with a bounded timeout per request."""

    def __init__(self, config: RoadsConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def snap_to_roads(self, path: str) -> NetworkResult[list[CorrectedPoint]]:
        params = {
            "path": path,
            "interpolate": "true" if self._config.interpolate else "false",
            "key": self._config.api_key,
        }
        try:
            response = await self._client.get(
                self._config.base_url,
                params=params,
                timeout=self._config.timeout_seconds,
            )
        except httpx.TimeoutException:
            return Error("Timeout")
        except httpx.RequestError as exc:
            return Error(str(exc) or type(exc).__name__)
        return classify_response(response)

    async def aclose(self) -> None:
        await self._client.aclose()
