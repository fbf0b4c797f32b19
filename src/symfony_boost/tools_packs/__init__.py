from ..context import BoostContext
from ..registry import ToolRegistry
from . import application, database, logs, project_files


def register_all(registry: ToolRegistry, ctx: BoostContext) -> None:
    # Order is the order clients see in tools/list.
    application.register(registry, ctx)
    database.register(registry, ctx)
    project_files.register(registry, ctx)
    logs.register(registry, ctx)
