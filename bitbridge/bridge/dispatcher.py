"""Outbound path: expand queued actions into requests and send them."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable

from loguru import logger

from bitbridge.bridge.actions import Action
from bitbridge.bridge.pending import PendingRequestTable
from bitbridge.bridge.resume import ResumeSignal
from bitbridge.protocol.builder import RequestBuilder
from bitbridge.protocol.models import Request
from bitbridge.utils.exceptions import BridgeError, FilesystemError
from bitbridge.workspace.scanner import DEFAULT_BRIDGE_DIR, DEFAULT_EXTENSION, collect_scripts

Sender = Callable[[str], Awaitable[None]]


class ActionDispatcher:
    """Consumes actions in FIFO order from an unbounded queue.

    ``submit`` is safe to call from the interaction thread. Every request of
    an expansion is registered before the first one is written.
    """

    def __init__(
        self,
        *,
        table: PendingRequestTable,
        builder: RequestBuilder,
        send: Sender,
        resume: ResumeSignal,
        project_root: Path,
        bridge_dir_name: str = DEFAULT_BRIDGE_DIR,
        extension: str = DEFAULT_EXTENSION,
        on_quit: Callable[[], None] | None = None,
        on_error: Callable[[BridgeError], None] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.table = table
        self.builder = builder
        self.send = send
        self.resume = resume
        self.project_root = Path(project_root)
        self.bridge_dir_name = bridge_dir_name
        self.extension = extension
        self.on_quit = on_quit
        self.on_error = on_error
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[Action | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, action: Action) -> bool:
        """Enqueue an action from any thread; False once the queue is closed."""
        if self._closed:
            logger.warning(f"Dropping '{action.value}': connection is closed")
            return False
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, action)
        except RuntimeError:
            logger.warning(f"Dropping '{action.value}': event loop is gone")
            return False
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, None)
        except RuntimeError:
            pass

    def expand(self, action: Action) -> list[Request]:
        if action is Action.GET_ALL_FILE_NAMES:
            return [self.builder.get_file_names()]
        if action is Action.GET_DEFINITIONS:
            return [self.builder.get_definition_file()]
        if action is Action.PUSH_ALL_FILES:
            scripts = collect_scripts(
                self.project_root,
                bridge_dir_name=self.bridge_dir_name,
                extension=self.extension,
            )
            return [self.builder.push_file(s.filename, s.content) for s in scripts]
        return []

    async def dispatch(self, action: Action) -> int:
        """Expand, register and send one action; returns the number of requests sent."""
        try:
            # Reading scripts is blocking file I/O; keep it off the event loop.
            requests = await asyncio.to_thread(self.expand, action)
        except FilesystemError as e:
            logger.error(f"Push aborted, nothing was sent: {e}")
            if self.on_error is not None:
                self.on_error(e)
            requests = []

        if not requests:
            logger.info(f"'{action.value}' produced no requests")
            if self.table.is_empty():
                self.resume.wake()
            return 0

        self.table.register_all(requests)
        logger.info(f"'{action.value}': sending {len(requests)} request(s)")
        for request in requests:
            logger.debug(f"Sending request {request.id} ({request.method.value})")
            await self.send(request.to_wire())
        return len(requests)

    async def run(self) -> None:
        while True:
            action = await self._queue.get()
            if action is None:
                break
            if action is Action.QUIT:
                logger.info("Quit requested")
                self._closed = True
                if self.on_quit is not None:
                    self.on_quit()
                break
            await self.dispatch(action)
