"""``symfony-boost install``: write the MCP client configuration for a Symfony project."""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from dotenv import dotenv_values

from .boost import build_registry
from .shared.config import DEFAULT_SERVER_NAME, BoostConfig
from .shared.logging import get_logger

logger = get_logger(__name__)

BINARY_NAME = "symfony-boost"
LOCAL_BINARY = Path("vendor") / "bin" / BINARY_NAME
CONSOLE_PERMISSIONS = [
    "Bash(php bin/console:*)",
    "Bash(php bin/console cache:clear:*)",
    "Bash(php bin/console debug:*)",
]
GITIGNORE_ENTRIES = (".mcp.json", ".claude/")

Confirm = Callable[[str, bool], bool]


def ask(question: str, default: bool) -> bool:
    suffix = " [Y/n] " if default else " [y/N] "
    try:
        answer = input(question + suffix).strip().lower()
    except EOFError:
        return default
    if not answer:
        return default
    return answer in ("y", "yes")


def _write_json(path: Path, data: Dict[str, Any]) -> str:
    text = json.dumps(data, indent=4, ensure_ascii=False)
    path.write_text(text + "\n", encoding="utf-8")
    return text


def candidate_binaries(project_path: Path) -> List[Path]:
    home = Path.home()
    candidates = [
        project_path / LOCAL_BINARY,
        home / ".local" / "bin" / BINARY_NAME,
        Path("/usr/local/bin") / BINARY_NAME,
    ]
    on_path = shutil.which(BINARY_NAME)
    if on_path:
        candidates.append(Path(on_path))
    return candidates


def find_binary(project_path: Path, explicit: Optional[str]) -> Optional[Path]:
    if explicit:
        path = Path(explicit)
        return path if path.is_absolute() else (Path.cwd() / path).resolve()
    for candidate in candidate_binaries(project_path):
        if candidate.exists():
            return candidate
    return None


def read_database_url(env_file: Path) -> Optional[str]:
    if not env_file.is_file():
        return None
    return dotenv_values(env_file).get("DATABASE_URL") or None


def mcp_config(project_path: Path, command: str, database_url: Optional[str]) -> Dict[str, Any]:
    server: Dict[str, Any] = {"command": command, "args": ["serve"], "cwd": str(project_path)}
    if database_url:
        server["env"] = {"DATABASE_URL": database_url, "APP_ENV": "dev"}
    return {"mcpServers": {DEFAULT_SERVER_NAME: server}}


def settings_config(tool_names: List[str]) -> Dict[str, Any]:
    allow = [f"mcp__{DEFAULT_SERVER_NAME}__{name}" for name in tool_names] + CONSOLE_PERMISSIONS
    return {
        "permissions": {"allow": allow},
        "enableAllProjectMcpServers": True,
        "enabledMcpjsonServers": [DEFAULT_SERVER_NAME],
    }


def update_gitignore(project_path: Path, confirm: Confirm) -> bool:
    gitignore = project_path / ".gitignore"
    if not gitignore.is_file():
        return False
    content = gitignore.read_text(encoding="utf-8")
    missing = [entry for entry in GITIGNORE_ENTRIES if entry not in content]
    if not missing or not confirm("Add .mcp.json and .claude/ to .gitignore?", True):
        return False
    addition = "\n# MCP client config\n" + "\n".join(missing) + "\n"
    gitignore.write_text(content + addition, encoding="utf-8")
    return True


def run_install(
    binary_path: Optional[str] = None,
    force: bool = False,
    project_path: Optional[Path] = None,
    confirm: Confirm = ask,
) -> int:
    root = (project_path or Path.cwd()).resolve()
    print("Symfony Boost installation")

    if not (root / "bin" / "console").exists():
        print("This does not appear to be a Symfony project: bin/console not found.")
        print("Run this command in the root directory of your Symfony project.")
        return 1
    print(f"Symfony project detected: {root.name}")

    env_file = root / ".env"
    database_url = read_database_url(env_file)
    if not env_file.is_file():
        print("Warning: .env file not found. Make sure DATABASE_URL is configured.")
    elif not database_url:
        print("Warning: DATABASE_URL not found in .env. Add this variable.")
    else:
        print("DATABASE_URL found in .env")

    binary = find_binary(root, binary_path)
    if binary is None:
        print(f"{BINARY_NAME} executable not found. Install it into the project or pass --path.")
        return 1
    print(f"Symfony Boost executable found: {binary}")

    command = str(binary)
    if binary.is_relative_to(root / "vendor"):
        command = str(binary.relative_to(root))
        print(f"Using relative path for local installation: {command}")

    claude_dir = root / ".claude"
    mcp_json_path = root / ".mcp.json"
    settings_path = claude_dir / "settings.local.json"

    if (mcp_json_path.exists() or settings_path.exists()) and not force:
        print("Configuration files already exist.")
        if not confirm("Overwrite the existing files?", False):
            print("Installation cancelled. Use --force to overwrite.")
            return 0

    claude_dir.mkdir(exist_ok=True)

    registry, _ = build_registry(BoostConfig(project_path=root))
    try:
        mcp_json = _write_json(mcp_json_path, mcp_config(root, command, database_url))
        settings_json = _write_json(settings_path, settings_config(registry.names()))
    except OSError as exc:
        logger.error("Could not write configuration: %s", exc)
        print(f"Could not write configuration: {exc}")
        return 1

    if update_gitignore(root, confirm):
        print("Entries added to .gitignore")

    print(".mcp.json:")
    print(mcp_json)
    print(".claude/settings.local.json:")
    print(settings_json)
    print("Installation complete. Restart your MCP client to pick up the server.")
    return 0
