"""Remote API wire protocol: request/response models and request builder."""

from bitbridge.protocol.builder import RequestBuilder, RequestIdAllocator
from bitbridge.protocol.models import (
    JSONRPC_VERSION,
    ListResult,
    OperationKind,
    Request,
    Response,
    StringResult,
    decode_response,
)

__all__ = [
    "JSONRPC_VERSION",
    "ListResult",
    "OperationKind",
    "Request",
    "RequestBuilder",
    "RequestIdAllocator",
    "Response",
    "StringResult",
    "decode_response",
]
