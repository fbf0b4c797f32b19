from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import parse_qs, unquote, urlsplit

from dotenv import dotenv_values
from sqlalchemy.engine import URL, make_url

from .errors import ConfigError

DEFAULT_SERVER_NAME = "symfony-boost"
DEFAULT_SERVER_VERSION = "1.0.0-beta.5"
PROJECT_DIR_PLACEHOLDER = "%kernel.project_dir%"

# Doctrine DATABASE_URL scheme -> SQLAlchemy drivername
_DIALECTS = {
    "mysql": "mysql+pymysql",
    "mysqli": "mysql+pymysql",
    "pgsql": "postgresql+psycopg2",
    "postgres": "postgresql+psycopg2",
    "postgresql": "postgresql+psycopg2",
    "sqlite": "sqlite",
    "sqlite3": "sqlite",
}


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    file: str | None = None


@dataclass(frozen=True)
class BoostConfig:
    project_path: Path = field(default_factory=Path.cwd)
    database_url: str | None = None
    server_name: str = DEFAULT_SERVER_NAME
    server_version: str = DEFAULT_SERVER_VERSION
    logging: LoggingConfig = LoggingConfig()


def _load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def read_env_files(project_path: Path) -> dict[str, str]:
    """Merge the project's .env and .env.local (local wins), skipping valueless keys."""
    merged: dict[str, str] = {}
    for name in (".env", ".env.local"):
        path = project_path / name
        if not path.is_file():
            continue
        for key, value in dotenv_values(path).items():
            if value is not None:
                merged[key] = value
    return merged


def load_config(project_path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> BoostConfig:
    env = dict(os.environ if environ is None else environ)

    root = Path(project_path or env.get("SYMFONY_BOOST_PROJECT_PATH") or Path.cwd()).resolve()
    if not root.is_dir():
        raise ConfigError(f"Project path is not a directory: {root}")

    # real environment beats .env files, as in Symfony's Dotenv component
    merged = {**read_env_files(root), **env}

    raw: dict[str, Any] = {}
    config_path = env.get("SYMFONY_BOOST_CONFIG")
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            raw = _load_json(path)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid config file {path}: {exc}") from exc

    server_raw = raw.get("server", {})
    logging_raw = raw.get("logging", {})
    return BoostConfig(
        project_path=root,
        database_url=merged.get("DATABASE_URL") or None,
        server_name=str(server_raw.get("name", DEFAULT_SERVER_NAME)),
        server_version=str(server_raw.get("version", DEFAULT_SERVER_VERSION)),
        logging=LoggingConfig(
            level=str(env.get("SYMFONY_BOOST_LOG_LEVEL") or logging_raw.get("level", "INFO")),
            file=env.get("SYMFONY_BOOST_LOG_FILE") or logging_raw.get("file"),
        ),
    )


def to_sqlalchemy_url(database_url: str | None, project_path: Path) -> URL:
    """Translate a Doctrine-style DATABASE_URL into a SQLAlchemy URL."""
    if not database_url:
        raise ConfigError("DATABASE_URL is not configured")

    parts = urlsplit(database_url)
    scheme = parts.scheme.lower()
    if "+" in scheme:
        # already a SQLAlchemy URL with an explicit driver
        return make_url(database_url)

    dialect = _DIALECTS.get(scheme, "mysql+pymysql")
    if dialect == "sqlite":
        return URL.create("sqlite", database=_sqlite_path(parts.path, parts.netloc, project_path))

    query = parse_qs(parts.query)
    options: dict[str, str] = {}
    if dialect.startswith("mysql") and query.get("charset"):
        options["charset"] = query["charset"][0]

    try:
        port = parts.port
    except ValueError as exc:
        raise ConfigError(f"Invalid port in DATABASE_URL: {exc}") from exc

    return URL.create(
        dialect,
        username=unquote(parts.username) if parts.username else None,
        password=unquote(parts.password) if parts.password else None,
        host=parts.hostname or "localhost",
        port=port,
        database=parts.path.lstrip("/") or None,
        query=options,
    )


def _sqlite_path(path: str, netloc: str, project_path: Path) -> str | None:
    raw = unquote(netloc + path)
    if raw.startswith("/"):
        raw = raw[1:]
    if raw in ("", ":memory:"):
        return None
    raw = raw.replace(PROJECT_DIR_PLACEHOLDER, str(project_path))
    candidate = Path(raw)
    if not candidate.is_absolute():
        candidate = project_path / candidate
    return str(candidate)
