"""Roads-correction interfaces (ports) and the network result type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from voicelogger.core.models import CorrectedPoint

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T


@dataclass(frozen=True)
class Error:
    message: str


NetworkResult = Union[Success[T], Error]


class RoadsClient(Protocol):
    """Port: snaps an encoded path to the road network."""

    async def snap_to_roads(self, path: str) -> NetworkResult[list[CorrectedPoint]]: ...


class ConnectivityCheck(Protocol):
    """Port: tells whether the roads service is reachable right now."""

    async def is_connected(self) -> bool: ...
