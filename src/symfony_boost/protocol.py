import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

PROTOCOL_VERSION = "2024-11-05"
JSONRPC_VERSION = "2.0"

# JSON-RPC error codes
PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Raised when a message cannot be parsed or is invalid."""

    def __init__(self, message: str, code: int = PARSE_ERROR) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class Request:
    method: Any
    params: Any = field(default_factory=dict)
    id: Any = None
    jsonrpc: Any = JSONRPC_VERSION


def scalar_id(value: Any) -> Any:
    """Request ids are echoed only as a string, a finite number or null."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (str, int, float)):
        return value
    return None


def parse_message(line: str) -> Request:
    """Parse a single NDJSON line into a JSON-RPC request.

    Only malformed JSON and non-object documents are codec failures. A missing
    or non-string method is left for the dispatcher to reject.
    """
    try:
        message = json.loads(line)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"Parse error: {exc.msg}", code=PARSE_ERROR) from exc
    if not isinstance(message, dict):
        raise ProtocolError("Request must be a JSON object", code=INTERNAL_ERROR)
    params = message.get("params")
    return Request(
        method=message.get("method"),
        params={} if params is None else params,
        id=scalar_id(message.get("id")),
        jsonrpc=message.get("jsonrpc", JSONRPC_VERSION),
    )


def serialize_message(message: Dict[str, Any]) -> str:
    """Serialize a JSON-RPC message as a compact JSON line.

    NaN and infinities raise ValueError instead of producing invalid JSON.
    """
    return json.dumps(message, separators=(",", ":"), ensure_ascii=False, allow_nan=False) + "\n"


def make_result(request_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def make_error(request_id: Any, code: int, message: str, data: Optional[Any] = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}
