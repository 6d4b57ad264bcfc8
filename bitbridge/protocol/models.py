"""JSON-RPC message models for the Bitburner Remote API."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from bitbridge.utils.exceptions import DecodeError

JSONRPC_VERSION = "2.0"
DEFAULT_SERVER = "home"


class OperationKind(str, Enum):
    """Remote API methods, serialized in camelCase."""

    PUSH_FILE = "pushFile"
    GET_FILE = "getFile"
    DELETE_FILE = "deleteFile"
    GET_FILE_NAMES = "getFileNames"
    GET_ALL_FILES = "getAllFiles"
    CALCULATE_RAM = "calculateRam"
    GET_DEFINITION_FILE = "getDefinitionFile"

    @property
    def expects_list(self) -> bool:
        return self is OperationKind.GET_FILE_NAMES


class Request(BaseModel):
    """Request for any method to execute on the remote API."""

    model_config = ConfigDict(frozen=True)

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: StrictInt = Field(ge=0)
    method: OperationKind
    params: dict[str, Any] | None = None

    @property
    def filename(self) -> str | None:
        if not self.params:
            return None
        value = self.params.get("filename")
        return value if isinstance(value, str) else None

    def to_wire(self) -> str:
        """Serialize for the socket; absent params are omitted."""
        return self.model_dump_json(exclude_none=True)


class _ResponseBase(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: StrictInt = Field(ge=0)
    error: str | None = None

    @field_validator("error", mode="before")
    @classmethod
    def _flatten_error(cls, value: Any) -> Any:
        # Generic JSON-RPC peers send {"code", "message"}; Bitburner sends a string.
        if isinstance(value, dict):
            value = value.get("message") or json.dumps(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_empty(self) -> bool:
        return getattr(self, "result") is None and self.error is None


class StringResult(_ResponseBase):
    """Response whose result is a single value (confirmation, content, ram cost)."""

    result: str | None = None

    @field_validator("result", mode="before")
    @classmethod
    def _stringify_number(cls, value: Any) -> Any:
        # calculateRam answers with a bare number.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ListResult(_ResponseBase):
    """Response whose result is a sequence of names."""

    result: list[str] | None = None


Response = Union[StringResult, ListResult]


def decode_response(raw: str | bytes) -> Response:
    """Decode one inbound message into one of the two response shapes.

    The shape is picked from the raw JSON before validation: a JSON array under
    ``result`` selects ListResult, anything else StringResult.
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Binary frame is not valid UTF-8: {e}", raw=repr(raw)) from e
    else:
        text = raw
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}", raw=text) from e
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}", raw=text)

    shape: type[_ResponseBase] = ListResult if isinstance(data.get("result"), list) else StringResult
    try:
        return shape.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Not a valid {shape.__name__}: {e.errors()[0].get('msg')}", raw=text) from e
