from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from .lazy import Lazy
from .registry import ToolError
from .shared.config import BoostConfig, to_sqlalchemy_url
from .shared.logging import get_logger

logger = get_logger(__name__)


def _engine_factory(config: BoostConfig):
    def _create() -> Engine:
        url = to_sqlalchemy_url(config.database_url, config.project_path)
        logger.info("Opening database engine for %s", url.render_as_string(hide_password=True))
        return create_engine(url)

    return _create


@dataclass
class BoostContext:
    """What the Symfony tools share: the project root, the database engine and a PHP runner."""

    project_path: Path
    engine: Lazy[Engine]
    php_binary: str = "php"
    console_path: Path = field(default=Path("bin") / "console")

    @classmethod
    def from_config(cls, config: BoostConfig) -> "BoostContext":
        return cls(project_path=config.project_path, engine=Lazy(_engine_factory(config)))

    def _run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        cmd = [self.php_binary, *args]
        logger.debug("Running %s", cmd)
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(self.project_path),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except FileNotFoundError as exc:
            raise ToolError(f"PHP executable not found: {self.php_binary}") from exc
        if proc.returncode != 0:
            logger.info("%s exited with code %s", cmd, proc.returncode)
        return proc

    def run_php(self, args: Sequence[str]) -> str:
        """Run php in the project directory and return stdout with stderr folded in."""
        return self._run(args).stdout or ""

    def run_console(self, args: Sequence[str]) -> str:
        return self.run_php([str(self.console_path), *args])

    def php_version(self) -> str:
        try:
            proc = self._run(["-r", "echo PHP_VERSION;"])
        except ToolError:
            return "unknown"
        version = (proc.stdout or "").strip()
        return version if proc.returncode == 0 and version else "unknown"
