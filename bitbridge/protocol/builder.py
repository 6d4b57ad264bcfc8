"""Request construction with per-session id allocation."""

from __future__ import annotations

import itertools
import threading
from typing import Any

from bitbridge.protocol.models import DEFAULT_SERVER, OperationKind, Request


class RequestIdAllocator:
    """Strictly increasing request ids, safe to call from any thread."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()
        self._last: int | None = None

    def next_id(self) -> int:
        with self._lock:
            self._last = next(self._counter)
            return self._last

    @property
    def last(self) -> int | None:
        return self._last


class RequestBuilder:
    """Builds one Request per call; the only side effect is the id increment."""

    def __init__(self, allocator: RequestIdAllocator | None = None, *, server: str = DEFAULT_SERVER):
        self.allocator = allocator or RequestIdAllocator()
        self.server = server

    def _build(self, method: OperationKind, params: dict[str, Any] | None = None) -> Request:
        return Request(id=self.allocator.next_id(), method=method, params=params)

    def push_file(self, filename: str, content: str) -> Request:
        """Create or update a file on the server."""
        return self._build(
            OperationKind.PUSH_FILE,
            {"server": self.server, "filename": filename, "content": content},
        )

    def get_file(self, filename: str) -> Request:
        return self._build(OperationKind.GET_FILE, {"server": self.server, "filename": filename})

    def delete_file(self, filename: str) -> Request:
        return self._build(OperationKind.DELETE_FILE, {"server": self.server, "filename": filename})

    def get_file_names(self) -> Request:
        """List all file names on the server; answered with a list result."""
        return self._build(OperationKind.GET_FILE_NAMES, {"server": self.server})

    def get_all_files(self) -> Request:
        return self._build(OperationKind.GET_ALL_FILES, {"server": self.server})

    def calculate_ram(self, filename: str) -> Request:
        return self._build(OperationKind.CALCULATE_RAM, {"server": self.server, "filename": filename})

    def get_definition_file(self) -> Request:
        """Fetch the NetscriptDefinitions.d.ts source; takes no params."""
        return self._build(OperationKind.GET_DEFINITION_FILE)
