from __future__ import annotations

import argparse
import sys

from .boost import build_server
from .install import run_install
from .shared.config import load_config
from .shared.errors import ConfigError
from .shared.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="symfony-boost",
        description="MCP stdio server exposing Symfony project introspection tools",
    )
    sub = parser.add_subparsers(dest="cmd")

    serve = sub.add_parser("serve", help="Serve MCP over stdin/stdout (default)")
    serve.add_argument("--once", action="store_true", help="Answer one request and exit")
    serve.add_argument("--project", help="Symfony project directory (default: current directory)")

    install = sub.add_parser("install", help="Write .mcp.json and .claude/settings.local.json for this project")
    install.add_argument("--path", help="Path to the symfony-boost executable (if not on PATH)")
    install.add_argument("-f", "--force", action="store_true", help="Overwrite existing configuration")
    return parser


def serve(project: str | None = None, once: bool = False) -> int:
    try:
        config = load_config(project)
        configure_logging(config.logging)
    except (ConfigError, OSError) as exc:
        print(f"symfony-boost: {exc}", file=sys.stderr)
        return 1
    logger.info("Starting %s %s for %s", config.server_name, config.server_version, config.project_path)

    server = build_server(config)
    if once:
        server.serve_once()
    else:
        server.run()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(sys.argv[1:] if argv is None else argv)
    if args.cmd == "install":
        return run_install(binary_path=args.path, force=args.force)
    return serve(getattr(args, "project", None), once=getattr(args, "once", False))


if __name__ == "__main__":
    sys.exit(main())
