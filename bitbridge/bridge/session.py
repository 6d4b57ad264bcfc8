"""One remote connection: its table, its reader, its writer and its menu."""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Callable, Protocol

from loguru import logger
from websockets.exceptions import ConnectionClosed

from bitbridge.bridge.dispatcher import ActionDispatcher
from bitbridge.bridge.interaction import InteractionDriver, PromptSelect
from bitbridge.bridge.pending import PendingRequestTable
from bitbridge.bridge.processor import Reporter, ResponseProcessor
from bitbridge.bridge.resume import ResumeSignal
from bitbridge.config.schema import SyncConfig
from bitbridge.protocol.builder import RequestBuilder, RequestIdAllocator
from bitbridge.utils.exceptions import BridgeError, TransportError, classify_exception


class DuplexConnection(Protocol):
    """What a session needs from the transport (websockets connections fit)."""

    def __aiter__(self) -> AsyncIterator[str | bytes]: ...

    async def send(self, message: str) -> None: ...


class BridgeSession:
    """Runs the inbound and outbound flows plus the interaction thread.

    Everything stateful is created fresh in ``run`` so each connection starts
    with an empty table and ids counting from 1.
    """

    def __init__(
        self,
        connection: DuplexConnection,
        *,
        sync: SyncConfig,
        prompt_select: PromptSelect,
        reporter: Reporter | None = None,
        on_error: Callable[[BridgeError], None] | None = None,
        peer: Any = None,
    ):
        self.connection = connection
        self.sync = sync
        self.prompt_select = prompt_select
        self.reporter = reporter
        self.on_error = on_error
        self.peer = str(peer) if peer is not None else "remote host"
        self.quit_requested = False
        self.table: PendingRequestTable | None = None
        self.processor: ResponseProcessor | None = None
        self.dispatcher: ActionDispatcher | None = None
        self.driver: InteractionDriver | None = None

    def _quit(self) -> None:
        self.quit_requested = True

    async def _send(self, message: str) -> None:
        try:
            await self.connection.send(message)
        except ConnectionClosed as e:
            raise TransportError(f"Connection closed while sending: {e}", peer=self.peer) from e

    async def _read(self, processor: ResponseProcessor) -> None:
        try:
            async for message in self.connection:
                processor.process(message)
        except ConnectionClosed as e:
            raise TransportError(f"Connection closed: {e}", peer=self.peer) from e
        logger.info(f"{self.peer} closed the connection")

    async def run(self) -> bool:
        """Serve the connection until it closes or the user quits.

        Returns True when the user chose Quit.
        """
        loop = asyncio.get_running_loop()
        resume = ResumeSignal()
        self.table = PendingRequestTable()
        builder = RequestBuilder(RequestIdAllocator(), server=self.sync.remote_server)
        self.processor = ResponseProcessor(self.table, resume, self.reporter)
        self.dispatcher = ActionDispatcher(
            table=self.table,
            builder=builder,
            send=self._send,
            resume=resume,
            project_root=self.sync.root_path,
            bridge_dir_name=self.sync.bridge_dir_name,
            extension=self.sync.script_extension,
            on_quit=self._quit,
            on_error=self.on_error,
            loop=loop,
        )
        self.driver = InteractionDriver(
            prompt_select=self.prompt_select,
            submit=self.dispatcher.submit,
            resume=resume,
        )

        reader = asyncio.create_task(self._read(self.processor), name="bitbridge-reader")
        writer = asyncio.create_task(self.dispatcher.run(), name="bitbridge-writer")
        self.driver.start()
        logger.info(f"Session with {self.peer} started")
        try:
            await asyncio.wait({reader, writer}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            self.driver.stop()
            self.dispatcher.close()
            for task in (reader, writer):
                task.cancel()
            results = await asyncio.gather(reader, writer, return_exceptions=True)

        for result in results:
            if isinstance(result, TransportError):
                logger.warning(str(result))
                if self.on_error is not None:
                    self.on_error(result)
            elif isinstance(result, Exception):
                code, category = classify_exception(result)
                logger.opt(exception=result).error(
                    f"Session with {self.peer} failed ({code}, {category.value}): {result}"
                )

        unanswered = self.table.pending_ids()
        if unanswered and not self.quit_requested:
            logger.warning(f"{len(unanswered)} request(s) left unanswered: {unanswered}")
        logger.info(f"Session with {self.peer} ended")
        return self.quit_requested
