from __future__ import annotations

from typing import Optional, TextIO, Tuple

from .context import BoostContext
from .dispatcher import ServerInfo
from .registry import ToolRegistry
from .server import StdioServer
from .shared.config import BoostConfig
from .tools_packs import register_all


def build_registry(config: BoostConfig) -> Tuple[ToolRegistry, BoostContext]:
    """Register every Symfony tool. Nothing here touches the database."""
    ctx = BoostContext.from_config(config)
    registry = ToolRegistry()
    register_all(registry, ctx)
    return registry, ctx


def build_server(config: BoostConfig, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> StdioServer:
    registry, _ = build_registry(config)
    info = ServerInfo(name=config.server_name, version=config.server_version)
    return StdioServer(registry, info, stdin=stdin, stdout=stdout)
