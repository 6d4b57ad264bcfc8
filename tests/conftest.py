"""Pytest hooks and fixtures."""

import asyncio
import json
from pathlib import Path

import pytest


class FakeConnection:
    """In-memory stand-in for a websockets connection.

    Inbound messages are queued with ``feed``; ``None`` ends the stream.
    ``responder`` (if set) is called with each decoded outbound request and
    may return a reply dict that is fed back in.
    """

    def __init__(self, responder=None):
        self.inbound: asyncio.Queue = asyncio.Queue()
        self.sent: list[str] = []
        self.responder = responder

    def feed(self, message) -> None:
        if isinstance(message, dict):
            message = json.dumps(message)
        self.inbound.put_nowait(message)

    def end(self) -> None:
        self.inbound.put_nowait(None)

    def __aiter__(self):
        return self

    async def __anext__(self):
        message = await self.inbound.get()
        if message is None:
            raise StopAsyncIteration
        return message

    async def send(self, message: str) -> None:
        self.sent.append(message)
        if self.responder is not None:
            reply = self.responder(json.loads(message))
            if reply is not None:
                self.feed(reply)

    @property
    def sent_requests(self) -> list[dict]:
        return [json.loads(m) for m in self.sent]


def make_tree(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def script_tree(tmp_path: Path) -> Path:
    """Project root one level above the bridge's own ``file-manager`` directory."""
    return make_tree(
        tmp_path,
        {
            "a.js": "export async function main(ns) {}",
            "sub/b.js": "export function b() {}",
            "file-manager/ignored.js": "// bridge sources",
            "readme.txt": "not a script",
        },
    )


@pytest.fixture
def fake_connection_cls():
    return FakeConnection


@pytest.fixture
def tree():
    """Build a file tree: ``tree(root, {"rel/path.js": "content"})``."""
    return make_tree
