from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List

from .protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PROTOCOL_VERSION,
    Request,
    make_error,
    make_result,
)
from .registry import ToolError, ToolRegistry
from .shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ServerInfo:
    name: str
    version: str
    protocol_version: str = PROTOCOL_VERSION


def normalize_tool_result(value: Any) -> List[Any]:
    """Turn a tool's return value into a list of content items.

    - ``str``: one text item
    - mapping with a ``content`` list: that list, untouched
    - anything else: pretty-printed JSON in one text item
    """
    if isinstance(value, str):
        return [{"type": "text", "text": value}]
    if isinstance(value, Mapping) and isinstance(value.get("content"), list):
        return value["content"]
    text = json.dumps(value, indent=4, ensure_ascii=False, default=str)
    return [{"type": "text", "text": text}]


class Dispatcher:
    """Routes one decoded request to a protocol method and builds its response envelope.

    Keeps no state between calls apart from the registry it was given.
    """

    def __init__(self, registry: ToolRegistry, server_info: ServerInfo) -> None:
        self.registry = registry
        self.server_info = server_info
        self._methods = {
            "initialize": self._initialize,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "ping": self._ping,
        }

    def dispatch(self, request: Request) -> Dict[str, Any]:
        method = request.method
        handler = self._methods.get(method) if isinstance(method, str) else None
        if handler is None:
            return make_error(request.id, METHOD_NOT_FOUND, f"Method not found: {_display(method)}")
        return handler(request)

    def _initialize(self, request: Request) -> Dict[str, Any]:
        return make_result(
            request.id,
            {
                "protocolVersion": self.server_info.protocol_version,
                "serverInfo": {"name": self.server_info.name, "version": self.server_info.version},
                "capabilities": {"tools": {}},
            },
        )

    def _tools_list(self, request: Request) -> Dict[str, Any]:
        return make_result(request.id, {"tools": self.registry.list_tools()})

    def _ping(self, request: Request) -> Dict[str, Any]:
        return make_result(request.id, {})

    def _tools_call(self, request: Request) -> Dict[str, Any]:
        params = request.params
        if not isinstance(params, dict):
            return make_error(request.id, INVALID_PARAMS, "Invalid params")

        name = params.get("name")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return make_error(request.id, INVALID_PARAMS, "Invalid arguments")

        tool = self.registry.lookup(name)
        if tool is None:
            return make_error(request.id, INVALID_PARAMS, f"Tool not found: {_display(name)}")

        try:
            value = tool.handler(arguments)
        except ToolError as exc:
            logger.warning("Tool %s failed: %s", tool.name, exc)
            return make_error(request.id, INTERNAL_ERROR, str(exc), data=exc.data)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Tool %s crashed", tool.name)
            return make_error(request.id, INTERNAL_ERROR, str(exc) or type(exc).__name__)

        return make_result(request.id, {"content": normalize_tool_result(value)})


def _display(value: Any) -> str:
    return "" if value is None else str(value)
