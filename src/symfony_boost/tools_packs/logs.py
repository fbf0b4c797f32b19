from __future__ import annotations

import re
from collections import deque
from pathlib import Path
from typing import Any, Dict, List

from ..context import BoostContext
from ..registry import ToolRegistry, validate_arguments

ERROR_LEVELS = re.compile(r"ERROR|CRITICAL|EMERGENCY", re.IGNORECASE)
ERROR_SCAN_LINES = 200
ERROR_KEEP_LINES = 10

ENV_PROPERTY = {
    "type": "string",
    "description": "Environment (dev/prod)",
    "default": "dev",
    "pattern": r"^[A-Za-z0-9_-]+$",
}

READ_LOGS_SCHEMA = {
    "type": "object",
    "properties": {
        "entries": {"type": "integer", "description": "Number of entries", "default": 50, "minimum": 0},
        "env": ENV_PROPERTY,
    },
    "required": ["entries"],
}

LAST_ERROR_SCHEMA = {
    "type": "object",
    "properties": {"env": ENV_PROPERTY},
}


def log_path(ctx: BoostContext, env: str) -> Path:
    return ctx.project_path / "var" / "log" / f"{env}.log"


def tail(path: Path, count: int) -> List[str]:
    if count <= 0:
        return []
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        return list(deque(handle, maxlen=count))


def read_logs(ctx: BoostContext, args: Dict[str, Any]) -> str:
    args = validate_arguments(READ_LOGS_SCHEMA, args)
    path = log_path(ctx, args.get("env", "dev"))
    if not path.is_file():
        return f"Log file not found: {path}"
    return "".join(tail(path, args["entries"])) or "No log entries"


def last_error(ctx: BoostContext, args: Dict[str, Any]) -> str:
    args = validate_arguments(LAST_ERROR_SCHEMA, args)
    path = log_path(ctx, args.get("env", "dev"))
    if not path.is_file():
        return f"Log file not found: {path}"
    errors = [line for line in tail(path, ERROR_SCAN_LINES) if ERROR_LEVELS.search(line)]
    if not errors:
        return "No errors found in recent logs"
    return "".join(errors[-ERROR_KEEP_LINES:])


def register(registry: ToolRegistry, ctx: BoostContext) -> None:
    reg = registry.register

    reg("read_logs", "Reads the last N log entries", READ_LOGS_SCHEMA, lambda args: read_logs(ctx, args))
    reg(
        "last_error",
        "Reads the last error from application logs",
        LAST_ERROR_SCHEMA,
        lambda args: last_error(ctx, args),
    )
