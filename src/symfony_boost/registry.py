from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

from jsonschema import Draft7Validator

ToolHandler = Callable[[Dict[str, Any]], Any]


class ToolError(Exception):
    """Failure raised by a tool handler; ``data`` is echoed as ``error.data``."""

    def __init__(self, message: str, data: Optional[Any] = None) -> None:
        super().__init__(message)
        self.data = data


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: ToolHandler

    def describe(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}


class ToolRegistry:
    """Ordered name -> Tool mapping, filled once before the server loop starts.

    Registering an existing name replaces the previous tool but keeps its
    position in the listing.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, Tool] = {}

    def register(self, name: str, description: str, input_schema: Dict[str, Any], handler: ToolHandler) -> None:
        self._tools[name] = Tool(name=name, description=description, input_schema=input_schema, handler=handler)

    def list_tools(self) -> List[Dict[str, Any]]:
        return [tool.describe() for tool in self]

    def lookup(self, name: Any) -> Optional[Tool]:
        if not isinstance(name, str):
            return None
        return self._tools.get(name)

    def names(self) -> List[str]:
        return [tool.name for tool in self]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())


def validate_arguments(schema: Mapping[str, Any], arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Check ``arguments`` against a tool's input schema, raising ToolError on the first problem."""
    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(arguments), key=lambda e: [str(p) for p in e.path])
    if errors:
        first = errors[0]
        path = ".".join(str(p) for p in first.path) or "<root>"
        raise ToolError(f"{path}: {first.message}")
    return dict(arguments)
