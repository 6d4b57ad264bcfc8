"""Inbound path: decode a reply, correlate it, render it, maybe resume the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from loguru import logger

from bitbridge.bridge.pending import PendingEntry, PendingRequestTable
from bitbridge.bridge.resume import ResumeSignal
from bitbridge.protocol.models import ListResult, OperationKind, Response, decode_response
from bitbridge.utils.exceptions import (
    BridgeError,
    CorrelationError,
    DecodeError,
    ErrorCategory,
    RemoteError,
)


@dataclass(frozen=True)
class Outcome:
    """Rendered result of one answered request."""

    request_id: int
    operation: OperationKind
    ok: bool
    text: str
    filename: str | None = None
    result: str | list[str] | None = None
    error: BridgeError | None = None


Reporter = Callable[[Outcome], None]


def render(entry: PendingEntry, response: Response) -> Outcome:
    """Turn a correlated response into an Outcome for the user."""
    operation = entry.operation
    filename = entry.request.filename if operation is OperationKind.PUSH_FILE else None

    if response.error is not None:
        err = RemoteError(operation.value, response.error, filename=filename)
        return Outcome(response.id, operation, False, err.message, filename=filename, error=err)

    if response.result is None:
        target = f"{operation.value} {filename}" if filename else operation.value
        err = BridgeError(
            f"{target}: response carried neither result nor error",
            code="EMPTY_RESPONSE",
            category=ErrorCategory.RECOVERABLE,
            details={"request_id": response.id},
        )
        return Outcome(response.id, operation, False, err.message, filename=filename, error=err)

    if isinstance(response, ListResult):
        text = "\n".join(response.result)
    elif operation is OperationKind.PUSH_FILE:
        text = f"{filename}: {response.result}"
    else:
        text = response.result
    return Outcome(response.id, operation, True, text, filename=filename, result=response.result)


class ResponseProcessor:
    """Consumes inbound messages one at a time.

    Decode and correlation failures are logged and dropped; the caller's read
    loop keeps going. The resume signal fires only after a successful resolve
    leaves the table empty.
    """

    def __init__(
        self,
        table: PendingRequestTable,
        resume: ResumeSignal,
        reporter: Reporter | None = None,
    ):
        self.table = table
        self.resume = resume
        self.reporter = reporter
        self.decode_errors = 0
        self.correlation_errors = 0

    def process(self, message: str | bytes) -> Outcome | None:
        try:
            response = decode_response(message)
        except DecodeError as e:
            self.decode_errors += 1
            logger.warning(f"Discarding inbound message: {e}")
            return None

        entry = self.table.resolve(response.id)
        if entry is None:
            self.correlation_errors += 1
            logger.warning(f"Protocol anomaly: {CorrelationError(response.id)}")
            return None

        if entry.operation.expects_list != isinstance(response, ListResult) and response.result is not None:
            logger.warning(
                f"Response {response.id} to {entry.operation.value} has an unexpected result shape"
            )

        outcome = render(entry, response)
        if outcome.ok:
            logger.debug(f"Request {outcome.request_id} ({outcome.operation.value}) succeeded")
        else:
            logger.error(f"Request {outcome.request_id}: {outcome.text}")
        self._report(outcome)

        if self.table.is_empty():
            self.resume.wake()
        return outcome

    def _report(self, outcome: Outcome) -> None:
        if self.reporter is None:
            return
        try:
            self.reporter(outcome)
        except Exception as e:
            logger.exception(f"Reporter failed for request {outcome.request_id}: {e}")
