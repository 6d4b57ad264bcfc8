"""
Exception hierarchy for bitbridge.

Provides:
- A base error class carrying an error code and a category
- One subclass per failure the bridge distinguishes (decode, correlation,
  remote, transport, filesystem)
- Classification of arbitrary exceptions raised inside the bridge flows
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RECOVERABLE = "recoverable"
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"


class BridgeError(Exception):
    """Base exception for all bitbridge errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class DecodeError(BridgeError):
    """Inbound message matches neither response shape."""

    def __init__(self, message: str, raw: str | None = None):
        details = {"raw": raw[:200]} if raw else {}
        super().__init__(message, code="DECODE_ERROR", category=ErrorCategory.RECOVERABLE, details=details)


class CorrelationError(BridgeError):
    """Response id has no pending request (unknown or already answered)."""

    def __init__(self, request_id: int):
        super().__init__(
            f"No pending request with id {request_id}",
            code="CORRELATION_ERROR",
            category=ErrorCategory.RECOVERABLE,
            details={"request_id": request_id},
        )
        self.request_id = request_id


class RemoteError(BridgeError):
    """The remote host answered a request with an error."""

    def __init__(self, operation: str, message: str, filename: str | None = None):
        target = f"{operation} {filename}" if filename else operation
        super().__init__(
            f"{target} failed: {message}",
            code="REMOTE_ERROR",
            category=ErrorCategory.RECOVERABLE,
            details={"operation": operation, "filename": filename, "remote_message": message},
        )
        self.operation = operation
        self.filename = filename
        self.remote_message = message


class TransportError(BridgeError):
    """The connection closed or the socket layer failed."""

    def __init__(self, message: str, peer: str | None = None):
        details = {"peer": peer} if peer else {}
        super().__init__(message, code="TRANSPORT_ERROR", category=ErrorCategory.RETRYABLE, details=details)


class FilesystemError(BridgeError):
    """Enumerating or reading local scripts failed; the batch is aborted."""

    def __init__(self, path: str, message: str):
        super().__init__(
            f"Cannot read {path}: {message}",
            code="FILESYSTEM_ERROR",
            category=ErrorCategory.RECOVERABLE,
            details={"path": path},
        )
        self.path = path


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory]:
    """Return (error_code, category) for any exception seen in the bridge flows."""
    if isinstance(exc, BridgeError):
        return exc.code, exc.category

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.VALIDATION

    if isinstance(exc, ConnectionError):
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE

    if isinstance(exc, OSError):
        return "OS_ERROR", ErrorCategory.RECOVERABLE

    if isinstance(exc, (ValueError, TypeError, KeyError)):
        return "INVALID_VALUE", ErrorCategory.VALIDATION

    return "INTERNAL_ERROR", ErrorCategory.FATAL
