from __future__ import annotations

import json
import platform
import shlex
from typing import Any, Dict

from ..context import BoostContext
from ..registry import ToolError, ToolRegistry, validate_arguments
from ..shared.errors import ConfigError
from ..shared.logging import get_logger

logger = get_logger(__name__)

FRAMEWORK_PACKAGE = "symfony/framework-bundle"

NO_ARGS = {"type": "object", "properties": {}}

COMMAND_SCHEMA = {
    "type": "object",
    "properties": {"command": {"type": "string", "description": "Command (without php bin/console)"}},
    "required": ["command"],
}

CONFIG_KEY_SCHEMA = {
    "type": "object",
    "properties": {"key": {"type": "string", "description": "Configuration key in dot notation"}},
    "required": ["key"],
}


def symfony_version(ctx: BoostContext) -> str:
    lock_path = ctx.project_path / "composer.lock"
    if not lock_path.is_file():
        return "unknown"
    try:
        lock = json.loads(lock_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read %s: %s", lock_path, exc)
        return "unknown"
    for package in lock.get("packages") or []:
        if isinstance(package, dict) and package.get("name") == FRAMEWORK_PACKAGE:
            return str(package.get("version", "unknown"))
    return "unknown"


def application_info(ctx: BoostContext, _: Dict[str, Any]) -> Dict[str, Any]:
    try:
        database_platform = ctx.engine.get().dialect.name
    except ConfigError as exc:
        logger.info("No database platform: %s", exc)
        database_platform = "unknown"
    return {
        "python_version": platform.python_version(),
        "php_version": ctx.php_version(),
        "symfony_version": symfony_version(ctx),
        "project_path": str(ctx.project_path),
        "database_platform": database_platform,
    }


def list_routes(ctx: BoostContext, _: Dict[str, Any]) -> str:
    output = ctx.run_console(["debug:router", "--format=json"])
    return output or "Could not retrieve routes"


def console_command(ctx: BoostContext, args: Dict[str, Any]) -> str:
    args = validate_arguments(COMMAND_SCHEMA, args)
    try:
        command = shlex.split(args["command"])
    except ValueError as exc:
        raise ToolError(f"Could not parse command: {exc}") from exc
    return ctx.run_console(command) or "No output"


def get_config(ctx: BoostContext, args: Dict[str, Any]) -> str:
    args = validate_arguments(CONFIG_KEY_SCHEMA, args)
    key = args["key"]
    return ctx.run_console(["debug:config", key]) or f"Configuration key '{key}' not found"


def register(registry: ToolRegistry, ctx: BoostContext) -> None:
    reg = registry.register

    reg(
        "application_info",
        "Returns information about the Symfony application",
        NO_ARGS,
        lambda args: application_info(ctx, args),
    )
    reg("list_routes", "Lists all Symfony routes", NO_ARGS, lambda args: list_routes(ctx, args))
    reg(
        "console_command",
        "Executes Symfony console commands",
        COMMAND_SCHEMA,
        lambda args: console_command(ctx, args),
    )
    reg(
        "get_config",
        'Get configuration value using dot notation (e.g., "app.secret")',
        CONFIG_KEY_SCHEMA,
        lambda args: get_config(ctx, args),
    )
