"""Tests for the TCP reachability check."""

from __future__ import annotations

import asyncio

import pytest

from voicelogger.roads.connectivity import SocketConnectivityCheck


async def _close_immediately(reader, writer):
    writer.close()


@pytest.mark.asyncio
async def test_reachable_listener():
    server = await asyncio.start_server(_close_immediately, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        check = SocketConnectivityCheck("127.0.0.1", port, timeout_seconds=1.0)
        assert await check.is_connected() is True
    finally:
        server.close()
        await server.wait_closed()


@pytest.mark.asyncio
async def test_closed_port_unreachable():
    server = await asyncio.start_server(_close_immediately, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    server.close()
    await server.wait_closed()

    check = SocketConnectivityCheck("127.0.0.1", port, timeout_seconds=1.0)
    assert await check.is_connected() is False


@pytest.mark.asyncio
async def test_unresolvable_host_unreachable():
    check = SocketConnectivityCheck("roads.invalid", 443, timeout_seconds=1.0)
    assert await check.is_connected() is False
