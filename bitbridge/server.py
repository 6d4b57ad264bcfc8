"""WebSocket listener that the game's Remote API connects to."""

from __future__ import annotations

import asyncio
import errno
import socket
from typing import Any, Callable

from loguru import logger
from websockets.asyncio.server import ServerConnection, serve

from bitbridge.bridge.session import BridgeSession
from bitbridge.config.schema import ServerConfig

# "Try again later": the single session slot is taken.
CLOSE_BUSY = 1013

SessionFactory = Callable[[ServerConnection, Any], BridgeSession]


def is_port_in_use(host: str, port: int) -> bool:
    """Return True if host:port is already bound by another process."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                return True
            raise
    return False


class BridgeServer:
    """Accepts one connection at a time and runs a fresh session for it."""

    def __init__(self, config: ServerConfig, session_factory: SessionFactory):
        self.config = config
        self.session_factory = session_factory
        self.sessions_served = 0
        self._active: ServerConnection | None = None
        self._stop = asyncio.Event()

    @property
    def busy(self) -> bool:
        return self._active is not None

    def stop(self) -> None:
        self._stop.set()

    async def handle(self, connection: ServerConnection) -> None:
        peer = connection.remote_address
        if self._active is not None:
            logger.warning(f"Rejecting {peer}: another session is active")
            await connection.close(code=CLOSE_BUSY, reason="bridge busy")
            return

        logger.info(f"New websocket connection with {peer}")
        self._active = connection
        try:
            quit_requested = await self.session_factory(connection, peer).run()
        finally:
            self._active = None
            self.sessions_served += 1

        if quit_requested:
            self.stop()
        elif self.config.single_shot:
            logger.info("Single-shot mode: not accepting further connections")
            self.stop()

    async def serve_forever(self) -> None:
        host, port = self.config.host, self.config.port
        async with serve(self.handle, host, port):
            logger.info(f"Listening on ws://{host}:{port}")
            await self._stop.wait()
        logger.info("Server stopped")
