"""In-memory table of requests sent to the remote host and not yet answered."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable

from bitbridge.protocol.models import OperationKind, Request


@dataclass(frozen=True)
class PendingEntry:
    operation: OperationKind
    request: Request


class PendingRequestTable:
    """Correlates response ids with the requests that produced them.

    Every operation runs under one lock; the mapping itself is never exposed.
    """

    def __init__(self):
        self._entries: dict[int, PendingEntry] = {}
        self._lock = threading.Lock()

    def _insert(self, request: Request, operation: OperationKind | None) -> None:
        if request.id in self._entries:
            raise ValueError(f"Request id {request.id} is already pending")
        self._entries[request.id] = PendingEntry(operation=operation or request.method, request=request)

    def register(self, request: Request, operation: OperationKind | None = None) -> None:
        """Track a request; call before the request is handed to the transport."""
        with self._lock:
            self._insert(request, operation)

    def register_all(self, requests: Iterable[Request]) -> int:
        """Track one expansion atomically; returns how many were registered."""
        batch = list(requests)
        with self._lock:
            clashes = [r.id for r in batch if r.id in self._entries]
            if clashes:
                raise ValueError(f"Request ids already pending: {clashes}")
            for request in batch:
                self._insert(request, None)
        return len(batch)

    def resolve(self, request_id: int) -> PendingEntry | None:
        """Remove and return the entry, or None for an unknown or answered id."""
        with self._lock:
            return self._entries.pop(request_id, None)

    def is_empty(self) -> bool:
        with self._lock:
            return not self._entries

    def pending_ids(self) -> list[int]:
        with self._lock:
            return sorted(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
