"""Tools that read the Symfony project tree directly: entities, .env files, bundles."""

from __future__ import annotations

import re
from typing import Any, Dict, List

from dotenv import dotenv_values

from ..context import BoostContext
from ..registry import ToolRegistry

NO_ARGS = {"type": "object", "properties": {}}

ENV_FILES = (".env", ".env.local")
ENV_NAME = re.compile(r"^[A-Z_][A-Z0-9_]*$")

ENTITY_MARKER = re.compile(r"#\[ORM\\Entity\b|@ORM\\Entity\b")
TABLE_ATTRIBUTE = re.compile(r"""#\[ORM\\Table\(\s*name:\s*["']([^"']+)["']""")
TABLE_ANNOTATION = re.compile(r"""@ORM\\Table\(\s*name\s*=\s*["']([^"']+)["']""")

# Foo\BarBundle::class => ['all' => true, 'dev' => false],
BUNDLE_ENTRY = re.compile(r"""\\?([\w\\]+)::class\s*=>\s*\[([^\]]*)\]""")
BUNDLE_ENV = re.compile(r"""["'](\w+)["']\s*=>\s*true\b""", re.IGNORECASE)


def list_entities(ctx: BoostContext, _: Dict[str, Any]) -> Dict[str, Any]:
    entity_dir = ctx.project_path / "src" / "Entity"
    if not entity_dir.is_dir():
        return {"error": "Entity directory not found"}

    entities: List[Dict[str, Any]] = []
    for path in sorted(entity_dir.glob("*.php")):
        source = path.read_text(encoding="utf-8", errors="replace")
        if not ENTITY_MARKER.search(source):
            continue
        match = TABLE_ATTRIBUTE.search(source) or TABLE_ANNOTATION.search(source)
        entities.append({"class": path.stem, "table": match.group(1) if match else None, "file": path.name})
    return {"entities": entities, "count": len(entities)}


def list_env_vars(ctx: BoostContext, _: Dict[str, Any]) -> Dict[str, Any]:
    names = set()
    for filename in ENV_FILES:
        path = ctx.project_path / filename
        if not path.is_file():
            continue
        for key, value in dotenv_values(path).items():
            if value is not None and ENV_NAME.match(key):
                names.add(key)
    env_vars = sorted(names)
    return {"env_vars": env_vars, "count": len(env_vars)}


def parse_bundles(source: str) -> List[Dict[str, Any]]:
    bundles = []
    for match in BUNDLE_ENTRY.finditer(source):
        class_name = match.group(1)
        bundles.append(
            {
                "name": class_name.rsplit("\\", 1)[-1],
                "class": class_name,
                "environments": BUNDLE_ENV.findall(match.group(2)),
            }
        )
    return bundles


def list_bundles(ctx: BoostContext, _: Dict[str, Any]) -> Dict[str, Any]:
    bundles_file = ctx.project_path / "config" / "bundles.php"
    if not bundles_file.is_file():
        return {"error": "bundles.php not found"}
    bundles = parse_bundles(bundles_file.read_text(encoding="utf-8", errors="replace"))
    return {"bundles": bundles, "count": len(bundles)}


def register(registry: ToolRegistry, ctx: BoostContext) -> None:
    reg = registry.register

    reg("list_entities", "Lists all Doctrine entities", NO_ARGS, lambda args: list_entities(ctx, args))
    reg(
        "list_env_vars",
        "Lists all available environment variables from .env files",
        NO_ARGS,
        lambda args: list_env_vars(ctx, args),
    )
    reg("list_bundles", "Lists all installed Symfony bundles", NO_ARGS, lambda args: list_bundles(ctx, args))
