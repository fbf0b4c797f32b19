"""Symfony Boost: an MCP stdio server for Symfony projects."""

from .dispatcher import Dispatcher, ServerInfo, normalize_tool_result
from .lazy import Lazy
from .protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    PROTOCOL_VERSION,
    ProtocolError,
    Request,
    make_error,
    make_result,
    parse_message,
    scalar_id,
    serialize_message,
)
from .registry import Tool, ToolError, ToolRegistry, validate_arguments
from .server import StdioServer

__all__ = [
    "Dispatcher",
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "Lazy",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "PROTOCOL_VERSION",
    "ProtocolError",
    "Request",
    "ServerInfo",
    "StdioServer",
    "Tool",
    "ToolError",
    "ToolRegistry",
    "make_error",
    "make_result",
    "normalize_tool_result",
    "parse_message",
    "scalar_id",
    "serialize_message",
    "validate_arguments",
]
