from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import func, inspect, select, table
from sqlalchemy.exc import NoSuchTableError

from ..context import BoostContext
from ..registry import ToolError, ToolRegistry, validate_arguments

READ_ONLY_KEYWORDS = ("SELECT", "SHOW", "EXPLAIN", "DESCRIBE", "DESC")
DEFAULT_QUERY_LIMIT = 100

NO_ARGS = {"type": "object", "properties": {}}

QUERY_SCHEMA = {
    "type": "object",
    "properties": {
        "query": {"type": "string", "description": "SQL Query"},
        "limit": {"type": "integer", "description": "Max rows", "default": DEFAULT_QUERY_LIMIT, "minimum": 1},
    },
    "required": ["query"],
}

TABLE_SCHEMA = {
    "type": "object",
    "properties": {"table_name": {"type": "string", "description": "Table name"}},
    "required": ["table_name"],
}

OPTIONAL_TABLE_SCHEMA = {
    "type": "object",
    "properties": {"table_name": {"type": "string", "description": "Optional: Table name"}},
}


def database_query(ctx: BoostContext, args: Dict[str, Any]) -> Dict[str, Any]:
    args = validate_arguments(QUERY_SCHEMA, args)
    query = args["query"].strip()
    limit = args.get("limit", DEFAULT_QUERY_LIMIT)

    words = query.split(None, 1)
    first_word = words[0].upper() if words else ""
    if first_word not in READ_ONLY_KEYWORDS:
        raise ToolError("Only READ-ONLY queries allowed")

    if first_word == "SELECT" and "limit" not in query.lower():
        query = f"{query.rstrip(';')} LIMIT {limit}"

    with ctx.engine.get().connect() as conn:
        rows = [dict(row) for row in conn.exec_driver_sql(query).mappings()]
    return {"rows": rows, "count": len(rows)}


def list_tables(ctx: BoostContext, _: Dict[str, Any]) -> Dict[str, Any]:
    tables = inspect(ctx.engine.get()).get_table_names()
    return {"tables": tables, "count": len(tables)}


def describe_table(ctx: BoostContext, args: Dict[str, Any]) -> Dict[str, Any]:
    args = validate_arguments(TABLE_SCHEMA, args)
    name = args["table_name"]
    inspector = inspect(ctx.engine.get())
    try:
        columns = inspector.get_columns(name)
        pk = inspector.get_pk_constraint(name)
        indexes = inspector.get_indexes(name)
    except NoSuchTableError as exc:
        raise ToolError(f"Table not found: {name}") from exc

    result: Dict[str, Any] = {"table": name, "columns": [], "indexes": []}
    for column in columns:
        result["columns"].append(
            {
                "name": column["name"],
                "type": type(column["type"]).__name__,
                "nullable": bool(column.get("nullable", True)),
                "default": column.get("default"),
            }
        )
    if pk and pk.get("constrained_columns"):
        result["indexes"].append(
            {
                "name": pk.get("name") or "PRIMARY",
                "columns": list(pk["constrained_columns"]),
                "unique": True,
                "primary": True,
            }
        )
    for index in indexes:
        result["indexes"].append(
            {
                "name": index.get("name"),
                "columns": [c for c in index.get("column_names", []) if c is not None],
                "unique": bool(index.get("unique")),
                "primary": False,
            }
        )
    return result


def get_table_sizes(ctx: BoostContext, _: Dict[str, Any]) -> List[Dict[str, Any]]:
    engine = ctx.engine.get()
    sizes = []
    with engine.connect() as conn:
        for name in inspect(engine).get_table_names():
            count = conn.execute(select(func.count()).select_from(table(name))).scalar_one()
            sizes.append({"table": name, "rows": int(count)})
    sizes.sort(key=lambda item: item["rows"], reverse=True)
    return sizes


def show_foreign_keys(ctx: BoostContext, args: Dict[str, Any]) -> List[Dict[str, Any]]:
    args = validate_arguments(OPTIONAL_TABLE_SCHEMA, args)
    inspector = inspect(ctx.engine.get())
    tables = [args["table_name"]] if args.get("table_name") else inspector.get_table_names()

    result = []
    for name in tables:
        try:
            foreign_keys = inspector.get_foreign_keys(name)
        except NoSuchTableError as exc:
            raise ToolError(f"Table not found: {name}") from exc
        for fk in foreign_keys:
            result.append(
                {
                    "table": name,
                    "name": fk.get("name"),
                    "local_columns": list(fk.get("constrained_columns", [])),
                    "foreign_table": fk.get("referred_table"),
                    "foreign_columns": list(fk.get("referred_columns", [])),
                }
            )
    return result


def register(registry: ToolRegistry, ctx: BoostContext) -> None:
    reg = registry.register

    reg(
        "database_query",
        "Executes READ-ONLY SQL queries (SELECT, SHOW, EXPLAIN, DESCRIBE)",
        QUERY_SCHEMA,
        lambda args: database_query(ctx, args),
    )
    reg("list_tables", "Lists all database tables", NO_ARGS, lambda args: list_tables(ctx, args))
    reg("describe_table", "Shows the structure of a table", TABLE_SCHEMA, lambda args: describe_table(ctx, args))
    reg("get_table_sizes", "Shows number of rows per table", NO_ARGS, lambda args: get_table_sizes(ctx, args))
    reg(
        "show_foreign_keys",
        "Shows all foreign keys",
        OPTIONAL_TABLE_SCHEMA,
        lambda args: show_foreign_keys(ctx, args),
    )
