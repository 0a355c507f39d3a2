"""Network reachability check for the roads service."""

from __future__ import annotations

import asyncio

import structlog

log = structlog.get_logger()


class SocketConnectivityCheck:
    """ConnectivityCheck that opens a TCP connection to a probe host."""

    def __init__(self, host: str, port: int = 443, timeout_seconds: float = 2.0) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout_seconds

    async def is_connected(self) -> bool:
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(self._host, self._port),
                timeout=self._timeout,
            )
        except (OSError, asyncio.TimeoutError):
            log.info("roads_unreachable", host=self._host, port=self._port)
            return False
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return True
