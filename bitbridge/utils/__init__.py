"""Shared utilities for bitbridge."""

from bitbridge.utils.exceptions import (
    BridgeError,
    CorrelationError,
    DecodeError,
    ErrorCategory,
    FilesystemError,
    RemoteError,
    TransportError,
    classify_exception,
)

__all__ = [
    "BridgeError",
    "CorrelationError",
    "DecodeError",
    "ErrorCategory",
    "FilesystemError",
    "RemoteError",
    "TransportError",
    "classify_exception",
]
